import pytest

from publisher.context.host import resolve_host
from publisher.context.types import Host
from publisher.errors import UnknownHostError


class TestResolveHost:
    @pytest.mark.parametrize(
        "label,expected",
        [
            ("ubuntu-20.04", Host.LINUX),
            ("ubuntu-latest", Host.LINUX),
            ("Linux", Host.LINUX),
            ("windows-latest", Host.WINDOWS),
            ("windows-2022", Host.WINDOWS),
            ("Windows", Host.WINDOWS),
            ("macos-latest", Host.MACOS),
            ("macOS", Host.MACOS),
            ("macos-14", Host.MACOS),
            ("darwin", Host.MACOS),
        ],
    )
    def test_known_labels(self, label, expected):
        assert resolve_host(label) == expected

    def test_strips_whitespace(self):
        assert resolve_host("  ubuntu-22.04\n") == Host.LINUX

    @pytest.mark.parametrize("label", ["", "freebsd-13", "self-hosted"])
    def test_unknown_labels_raise(self, label):
        with pytest.raises(UnknownHostError):
            resolve_host(label)
