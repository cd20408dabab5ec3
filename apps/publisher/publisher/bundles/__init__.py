"""Bundle selection: which artifacts a build uploads, under which names.

Public API:
    select_bundles(ctx, short_sha, ...) -> list[ArtifactBundle]
    load_bundle_manifest(path) -> list[BundleSpec]
"""

from publisher.bundles.manifest import load_bundle_manifest
from publisher.bundles.selector import default_specs, select_bundles
from publisher.bundles.types import ArtifactBundle, BundleKind, BundleSpec, bundle_name

__all__ = [
    "select_bundles",
    "default_specs",
    "load_bundle_manifest",
    "ArtifactBundle",
    "BundleKind",
    "BundleSpec",
    "bundle_name",
]
