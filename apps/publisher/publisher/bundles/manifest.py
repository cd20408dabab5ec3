"""YAML bundle manifest parser.

Lets a repository replace the built-in selection table with its own, e.g.

    bundles:
      - kind: appimage
        hosts: [linux]
        paths:
          - "{target}/{profile}/bundle/appimage/*.AppImage"
      - kind: updater
        hosts: [any]
        paths:
          - "{target}/{profile}/bundle/**/*.tar.gz*"
        exclude:
          - "**/deb/**/*.tar.gz"
        required: false

Only ``{target}`` and ``{profile}`` placeholders are allowed in patterns.
"""

import logging
import re
import string
from pathlib import Path

import yaml

from publisher.bundles.types import BundleKind, BundleSpec
from publisher.context.types import Host
from publisher.errors import ManifestError
from publisher.packaging.matcher import compile_pattern

logger = logging.getLogger(__name__)

ALLOWED_PLACEHOLDERS = {"target", "profile"}
ANY_HOST = "any"

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def load_bundle_manifest(path: Path) -> list[BundleSpec]:
    """Parse a bundle manifest file into selection-table rows.

    Raises:
        ManifestError: If the file is unreadable or malformed.
    """
    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except (OSError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Cannot read bundle manifest {path}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("bundles"), list):
        raise ManifestError(f"{path.name}: expected a top-level 'bundles' list")

    specs = [
        _parse_entry(entry, index, path.name)
        for index, entry in enumerate(data["bundles"])
    ]
    if not specs:
        raise ManifestError(f"{path.name}: 'bundles' must not be empty")

    logger.info("Loaded %d bundle specs from %s", len(specs), path)
    return specs


def _parse_entry(entry: object, index: int, source: str) -> BundleSpec:
    where = f"{source}: bundles[{index}]"
    if not isinstance(entry, dict):
        raise ManifestError(f"{where}: expected a mapping")

    try:
        kind = BundleKind(str(entry.get("kind", "")).lower())
    except ValueError:
        valid = ", ".join(k.value for k in BundleKind)
        raise ManifestError(f"{where}: unknown kind {entry.get('kind')!r} (expected one of {valid})")

    paths = _string_list(entry.get("paths"), f"{where}.paths")
    if not paths:
        raise ManifestError(f"{where}: 'paths' must list at least one pattern")
    exclude = _string_list(entry.get("exclude", []), f"{where}.exclude")

    required = entry.get("required", True)
    if not isinstance(required, bool):
        raise ManifestError(f"{where}: 'required' must be true or false")

    return BundleSpec(
        kind=kind,
        paths=tuple(paths),
        exclude=tuple(exclude),
        hosts=_parse_hosts(entry.get("hosts", [ANY_HOST]), where),
        required=required,
    )


def _string_list(value: object, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(f"{where}: expected a list of strings")
    for pattern in value:
        _check_placeholders(pattern, where)
        _check_relative(pattern, where)
        _check_compiles(pattern, where)
    return value


def _check_relative(pattern: str, where: str) -> None:
    """Patterns are globbed under the artifact root and must stay inside it."""
    if not pattern:
        raise ManifestError(f"{where}: empty pattern")
    if pattern.startswith(("/", "\\")) or _DRIVE_RE.match(pattern):
        raise ManifestError(f"{where}: absolute pattern {pattern!r}; patterns are relative to the artifact root")
    if ".." in pattern.replace("\\", "/").split("/"):
        raise ManifestError(f"{where}: pattern {pattern!r} escapes the artifact root")
    if "\x00" in pattern:
        raise ManifestError(f"{where}: null byte in pattern {pattern!r}")


def _check_compiles(pattern: str, where: str) -> None:
    try:
        compile_pattern(pattern)
    except re.error as exc:
        raise ManifestError(f"{where}: invalid glob {pattern!r}: {exc}") from exc


def _check_placeholders(pattern: str, where: str) -> None:
    try:
        fields = {name for _, name, _, _ in string.Formatter().parse(pattern) if name is not None}
    except ValueError as exc:
        raise ManifestError(f"{where}: malformed pattern {pattern!r}: {exc}") from exc

    unknown = fields - ALLOWED_PLACEHOLDERS
    if unknown:
        raise ManifestError(
            f"{where}: unknown placeholder(s) {sorted(unknown)} in {pattern!r}"
        )


def _parse_hosts(value: object, where: str) -> frozenset[Host] | None:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not value:
        raise ManifestError(f"{where}.hosts: expected a non-empty list")

    names = [str(v).lower() for v in value]
    if ANY_HOST in names:
        return None

    try:
        return frozenset(Host(n) for n in names)
    except ValueError:
        valid = ", ".join([h.value for h in Host] + [ANY_HOST])
        raise ManifestError(f"{where}.hosts: expected values from {valid}, got {value!r}")
