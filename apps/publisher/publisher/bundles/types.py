"""Types for bundle selection.

A BundleSpec is a row of the selection table: which hosts it applies to
and which patterns (with {target}/{profile} placeholders) it uploads.
An ArtifactBundle is a BundleSpec rendered for one BuildContext.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from publisher.context.types import BuildContext, Host


class BundleKind(str, Enum):
    APPIMAGE = "appimage"
    DEB = "deb"
    MSI = "msi"
    DMG = "dmg"
    UPDATER = "updater"

    @property
    def tag(self) -> str:
        """Display tag used in the uploaded artifact name."""
        return _KIND_TAGS[self]


_KIND_TAGS: dict[BundleKind, str] = {
    BundleKind.APPIMAGE: "AppImage",
    BundleKind.DEB: "deb",
    BundleKind.MSI: "Windows-msi",
    BundleKind.DMG: "macOS-dmg",
    BundleKind.UPDATER: "Updaters",
}


@dataclass(frozen=True)
class BundleSpec:
    """One row of the bundle-selection table.

    hosts=None means the bundle applies to every host.
    """

    kind: BundleKind
    paths: tuple[str, ...]
    exclude: tuple[str, ...] = ()
    hosts: Optional[frozenset[Host]] = None
    required: bool = True

    def applies_to(self, host: Host) -> bool:
        return self.hosts is None or host in self.hosts

    def render(
        self,
        ctx: BuildContext,
        short_sha: str,
        app_name: str,
        retention_days: int,
    ) -> "ArtifactBundle":
        values = {"target": ctx.target, "profile": ctx.profile.value}
        return ArtifactBundle(
            kind=self.kind,
            name=bundle_name(app_name, self.kind, ctx.target, short_sha),
            path_patterns=tuple(p.format(**values) for p in self.paths),
            exclusion_patterns=tuple(p.format(**values) for p in self.exclude),
            required=self.required,
            retention_days=retention_days,
        )


@dataclass(frozen=True)
class ArtifactBundle:
    """A named group of build outputs uploaded as one artifact.

    Patterns are globs relative to the artifact root.
    """

    kind: BundleKind
    name: str
    path_patterns: tuple[str, ...]
    exclusion_patterns: tuple[str, ...] = field(default_factory=tuple)
    required: bool = True
    retention_days: int = 1

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "path_patterns": list(self.path_patterns),
            "exclusion_patterns": list(self.exclusion_patterns),
            "required": self.required,
            "retention_days": self.retention_days,
        }


def bundle_name(app_name: str, kind: BundleKind, target: str, short_sha: str) -> str:
    """Build the artifact name: ``{app}-{kind tag}-{target}-{short sha}``."""
    return f"{app_name}-{kind.tag}-{target}-{short_sha}"
