"""Shared fixtures for the publisher test suite.

Build trees are laid out under tmp_path the way a Tauri/Cargo build
leaves them: <root>/<target>/<profile>/bundle/<format>/<file>.
"""

import logging
from pathlib import Path

import pytest
import structlog

from publisher.context.types import BuildContext, Host, Profile

FULL_SHA = "abc1234def5678901234567890abcdef12345678"
WINDOWS_TARGET = "x86_64-pc-windows-msvc"
LINUX_TARGET = "x86_64-unknown-linux-gnu"
MACOS_TARGET = "aarch64-apple-darwin"


def _make_files(root: Path, *relative_paths: str) -> list[Path]:
    created = []
    for rel in relative_paths:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"artifact:" + rel.encode())
        created.append(path)
    return created


@pytest.fixture(autouse=True)
def _restore_logging():
    """configure_structlog() replaces the root handlers; undo it per test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def make_files():
    """Create small placeholder files under a root and return their paths."""
    return _make_files


@pytest.fixture
def artifact_root(tmp_path: Path) -> Path:
    root = tmp_path / "target"
    root.mkdir()
    return root


@pytest.fixture
def windows_ctx() -> BuildContext:
    return BuildContext(
        target=WINDOWS_TARGET,
        profile=Profile.RELEASE,
        commit_sha=FULL_SHA,
        host=Host.WINDOWS,
    )


@pytest.fixture
def linux_ctx() -> BuildContext:
    return BuildContext(
        target=LINUX_TARGET,
        profile=Profile.RELEASE,
        commit_sha=FULL_SHA,
        host=Host.LINUX,
    )


@pytest.fixture
def macos_ctx() -> BuildContext:
    return BuildContext(
        target=MACOS_TARGET,
        profile=Profile.DEBUG,
        commit_sha=FULL_SHA,
        host=Host.MACOS,
    )
