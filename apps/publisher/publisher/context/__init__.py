"""Build context: host platform, profile, and commit identifiers.

Public API:
    BuildContext, Host, Profile
    resolve_host(label) -> Host
    compute_short_sha(commit_sha, repo_dir, length) -> str
    shorten_sha(commit_sha, length) -> str
    export_short_sha(short_sha, env_file) -> bool
"""

from publisher.context.git import compute_short_sha, export_short_sha, shorten_sha
from publisher.context.host import resolve_host
from publisher.context.types import BuildContext, Host, Profile

__all__ = [
    "BuildContext",
    "Host",
    "Profile",
    "resolve_host",
    "compute_short_sha",
    "shorten_sha",
    "export_short_sha",
]
