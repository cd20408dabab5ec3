"""Glob resolution for artifact bundles.

Inclusion patterns are expanded with Path.glob() under the artifact root.
Exclusion patterns are matched against each candidate's root-relative
POSIX path instead of being globbed themselves, so an exclusion like
``**/deb/**/*.tar.gz`` never walks the whole build tree.

Exclusion semantics follow the upload action's glob rules: ``**`` spans
zero or more directories, ``*`` and ``?`` never cross a ``/``.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path

from publisher.bundles.types import ArtifactBundle

logger = logging.getLogger(__name__)


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate a path glob into an anchored regular expression."""
    parts = pattern.strip("/").split("/")
    regex = ""
    for i, part in enumerate(parts):
        last = i == len(parts) - 1
        if part == "**":
            regex += ".*" if last else "(?:.*/)?"
            continue
        regex += _translate_segment(part)
        if not last:
            regex += "/"
    return re.compile(f"^{regex}$")


def _translate_segment(segment: str) -> str:
    out = []
    i = 0
    while i < len(segment):
        ch = segment[i]
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        elif ch == "[":
            end = segment.find("]", i + 1)
            body = segment[i + 1:end] if end != -1 else ""
            if body in ("", "!"):
                out.append(re.escape(ch))
            else:
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


def is_excluded(relative_path: str, exclusion_patterns: tuple[str, ...]) -> bool:
    return any(compile_pattern(p).match(relative_path) for p in exclusion_patterns)


def resolve_files(bundle: ArtifactBundle, root: Path) -> list[Path]:
    """Return the files a bundle uploads, sorted and de-duplicated.

    Directories matched by a pattern are skipped; only regular files are
    uploaded.
    """
    matched: set[Path] = set()
    for pattern in bundle.path_patterns:
        for path in root.glob(pattern):
            if path.is_file():
                matched.add(path)

    files = sorted(
        p for p in matched
        if not is_excluded(p.relative_to(root).as_posix(), bundle.exclusion_patterns)
    )

    excluded = len(matched) - len(files)
    logger.debug(
        "Bundle %s: %d files matched, %d excluded",
        bundle.name, len(files), excluded,
    )
    return files
