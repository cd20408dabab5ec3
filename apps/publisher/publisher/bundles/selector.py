"""Bundle selection — decides which artifacts a matrix entry uploads.

Each host uploads its native installer plus the updater archives. The
updater globs overlap the Debian bundle directory, whose tarballs are not
updater payloads, so those are excluded.
"""

import logging
from typing import Optional, Sequence

from publisher.bundles.types import ArtifactBundle, BundleKind, BundleSpec
from publisher.context.types import BuildContext, Host

logger = logging.getLogger(__name__)

_BUNDLE_DIR = "{target}/{profile}/bundle"

APPIMAGE_SPEC = BundleSpec(
    kind=BundleKind.APPIMAGE,
    paths=(f"{_BUNDLE_DIR}/appimage/*.AppImage",),
    hosts=frozenset({Host.LINUX}),
)

DEB_SPEC = BundleSpec(
    kind=BundleKind.DEB,
    paths=(f"{_BUNDLE_DIR}/deb/*.deb",),
    hosts=frozenset({Host.LINUX}),
)

MSI_SPEC = BundleSpec(
    kind=BundleKind.MSI,
    paths=(f"{_BUNDLE_DIR}/msi/*.msi",),
    hosts=frozenset({Host.WINDOWS}),
)

DMG_SPEC = BundleSpec(
    kind=BundleKind.DMG,
    paths=(f"{_BUNDLE_DIR}/dmg/*.dmg",),
    hosts=frozenset({Host.MACOS}),
)

UPDATER_SPEC = BundleSpec(
    kind=BundleKind.UPDATER,
    paths=(
        f"{_BUNDLE_DIR}/**/*.tar.gz*",
        f"{_BUNDLE_DIR}/**/*.zip*",
    ),
    exclude=("**/deb/**/*.tar.gz",),
)


def default_specs(include_deb: bool = False) -> list[BundleSpec]:
    """Return the built-in selection table, platform bundles first."""
    specs = [APPIMAGE_SPEC]
    if include_deb:
        specs.append(DEB_SPEC)
    specs.extend([MSI_SPEC, DMG_SPEC, UPDATER_SPEC])
    return specs


def select_bundles(
    ctx: BuildContext,
    short_sha: str,
    app_name: str = "Publisher",
    retention_days: int = 1,
    include_deb: bool = False,
    specs: Optional[Sequence[BundleSpec]] = None,
) -> list[ArtifactBundle]:
    """Render the bundles that apply to ctx.host.

    Args:
        ctx: The build being published.
        short_sha: Abbreviated commit SHA used in every bundle name.
        app_name: Fixed prefix of every bundle name.
        retention_days: Passed through to the artifact store.
        include_deb: Add the Debian package bundle on Linux hosts.
        specs: Replacement selection table (e.g. from a manifest).

    Raises:
        ValueError: If two selected bundles would share a name.
    """
    table = list(specs) if specs is not None else default_specs(include_deb)

    bundles = [
        spec.render(ctx, short_sha, app_name, retention_days)
        for spec in table
        if spec.applies_to(ctx.host)
    ]

    names = [b.name for b in bundles]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Bundle names collide: {', '.join(duplicates)}")

    logger.info(
        "Selected %d bundles for %s (%s, %s)",
        len(bundles), ctx.target, ctx.host.value, ctx.profile.value,
    )
    return bundles
