"""Types describing the build that produced the artifacts."""

from dataclasses import dataclass
from enum import Enum


class Host(str, Enum):
    """Build-runner platform supplied by the CI matrix."""

    LINUX = "linux"
    WINDOWS = "windows"
    MACOS = "macos"


class Profile(str, Enum):
    """Cargo build profile; also the directory name under the target triple."""

    DEBUG = "debug"
    RELEASE = "release"


@dataclass(frozen=True)
class BuildContext:
    """Everything the publisher needs to know about one matrix entry.

    target is spliced into glob patterns, so it is rejected if it could
    escape the artifact root.
    """

    target: str
    profile: Profile
    commit_sha: str
    host: Host

    def __post_init__(self) -> None:
        _validate_target(self.target)
        if not self.commit_sha:
            raise ValueError("commit_sha must not be empty")

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "profile": self.profile.value,
            "commit_sha": self.commit_sha,
            "host": self.host.value,
        }


def _validate_target(target: str) -> None:
    """Reject target triples that could traverse outside the artifact root.

    Raises:
        ValueError: If the target is empty or contains unsafe components.
    """
    if not target:
        raise ValueError("Target triple must not be empty")
    if ".." in target:
        raise ValueError(f"Invalid target triple — path traversal detected: {target!r}")
    if "\x00" in target:
        raise ValueError(f"Invalid target triple — null byte detected: {target!r}")
    if target.startswith(("/", "\\")):
        raise ValueError(f"Invalid target triple — absolute path: {target!r}")
