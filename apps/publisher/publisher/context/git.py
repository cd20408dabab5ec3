"""Commit identifier helpers.

compute_short_sha() asks git for the abbreviated SHA, which honours the
repository's uniqueness rules (git may return more than the requested
length when a prefix is ambiguous). shorten_sha() is the pure variant for
callers without a repository checkout.
"""

import logging
import re
import subprocess
from pathlib import Path
from typing import Optional

from publisher.errors import InvalidReferenceError

logger = logging.getLogger(__name__)

DEFAULT_SHORT_LENGTH = 7

# SHA-1 is 40 hex chars, SHA-256 object format is 64.
_HEX_SHA_RE = re.compile(r"^[0-9a-fA-F]{4,64}$")


def shorten_sha(commit_sha: str, length: int = DEFAULT_SHORT_LENGTH) -> str:
    """Return the first `length` characters of a hex commit SHA.

    Raises:
        InvalidReferenceError: If the input is not a hex object name.
    """
    sha = commit_sha.strip()
    if not _HEX_SHA_RE.match(sha):
        raise InvalidReferenceError(f"Not a commit SHA: {commit_sha!r}")
    return sha[:length].lower()


def compute_short_sha(
    commit_sha: str,
    repo_dir: Optional[Path] = None,
    length: Optional[int] = None,
) -> str:
    """Resolve a commit reference and return its abbreviated SHA.

    Equivalent to ``git rev-parse --verify --short <ref>^{commit}``.

    Raises:
        InvalidReferenceError: If the reference is empty, git is not
            available, or the reference does not name a commit.
    """
    ref = commit_sha.strip()
    if not ref:
        raise InvalidReferenceError("Commit reference must not be empty")
    if ref.startswith("-"):
        raise InvalidReferenceError(f"Commit reference must not start with '-': {ref!r}")

    short_flag = f"--short={length}" if length else "--short"
    cmd = ["git", "rev-parse", "--verify", "--quiet", short_flag, f"{ref}^{{commit}}"]

    try:
        result = subprocess.run(
            cmd,
            cwd=str(repo_dir) if repo_dir else None,
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise InvalidReferenceError(f"Cannot run git to resolve {ref!r}: {exc}") from exc

    short = result.stdout.strip()
    if result.returncode != 0 or not short:
        raise InvalidReferenceError(
            f"Cannot resolve commit {ref!r}: {result.stderr.strip() or 'unknown revision'}"
        )

    logger.info("Resolved commit %s to short SHA %s", ref, short)
    return short


def export_short_sha(short_sha: str, env_file: Optional[Path]) -> bool:
    """Append ``GITHUB_SHA_SHORT=<short>`` to the workflow environment file.

    Later workflow steps read the value back from their environment.
    Returns False (and writes nothing) when no env file is configured.
    """
    if env_file is None:
        return False

    with env_file.open("a", encoding="utf-8") as fh:
        fh.write(f"GITHUB_SHA_SHORT={short_sha}\n")

    logger.debug("Exported GITHUB_SHA_SHORT=%s to %s", short_sha, env_file)
    return True
