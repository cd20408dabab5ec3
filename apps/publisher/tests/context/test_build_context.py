import dataclasses

import pytest

from publisher.context.types import BuildContext, Host, Profile


def _ctx(**overrides):
    values = dict(
        target="x86_64-pc-windows-msvc",
        profile=Profile.RELEASE,
        commit_sha="abc1234def5678901234567890abcdef12345678",
        host=Host.WINDOWS,
    )
    values.update(overrides)
    return BuildContext(**values)


class TestBuildContext:
    def test_is_immutable(self):
        ctx = _ctx()
        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.target = "other"

    def test_to_dict(self):
        assert _ctx().to_dict() == {
            "target": "x86_64-pc-windows-msvc",
            "profile": "release",
            "commit_sha": "abc1234def5678901234567890abcdef12345678",
            "host": "windows",
        }

    @pytest.mark.parametrize("target", ["", "../etc", "x86_64/../../", "/abs", "bad\x00target"])
    def test_rejects_unsafe_targets(self, target):
        with pytest.raises(ValueError):
            _ctx(target=target)

    def test_rejects_empty_sha(self):
        with pytest.raises(ValueError):
            _ctx(commit_sha="")

    def test_enums_compare_to_strings(self):
        assert Host.LINUX == "linux"
        assert Profile("debug") is Profile.DEBUG
