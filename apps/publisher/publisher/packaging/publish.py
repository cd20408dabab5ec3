"""Publishing — resolve each bundle's files and hand them to the store.

Bundles are independent: publish_all() runs them concurrently and a
failure in one never cancels or rolls back another.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

import httpx

from publisher.bundles.types import ArtifactBundle
from publisher.core.logging import bind_bundle_name
from publisher.errors import NoFilesMatchedError, PublishError
from publisher.packaging.matcher import resolve_files
from publisher.packaging.types import PublishOutcome, UploadReceipt
from publisher.packaging.uploader import upload_bundle

logger = logging.getLogger(__name__)


async def publish(
    bundle: ArtifactBundle,
    root: Path,
    client: httpx.AsyncClient,
) -> Optional[UploadReceipt]:
    """Upload one bundle.

    Returns None, without uploading, when an optional bundle matches
    nothing.

    Raises:
        NoFilesMatchedError: If a required bundle matches zero files.
        UploadError: If the store rejects the upload.
    """
    files = resolve_files(bundle, root)

    if not files:
        if bundle.required:
            raise NoFilesMatchedError(bundle.name, bundle.path_patterns)
        logger.warning(
            "No files found for optional bundle %s; skipping upload", bundle.name
        )
        return None

    receipt = await upload_bundle(client, bundle, files, root)
    logger.info(
        "Published %s (%d files, artifact id %s)",
        receipt.name, receipt.file_count, receipt.artifact_id or "-",
    )
    return receipt


async def _publish_one(
    bundle: ArtifactBundle,
    root: Path,
    client: httpx.AsyncClient,
) -> PublishOutcome:
    bind_bundle_name(bundle.name)
    try:
        receipt = await publish(bundle, root, client)
    except PublishError as exc:
        logger.error("Failed to publish %s: %s", bundle.name, exc)
        return PublishOutcome(bundle=bundle, error=exc)
    return PublishOutcome(bundle=bundle, receipt=receipt)


async def publish_all(
    bundles: Sequence[ArtifactBundle],
    root: Path,
    client: httpx.AsyncClient,
) -> list[PublishOutcome]:
    """Publish every bundle concurrently, one outcome per bundle in order."""
    outcomes = await asyncio.gather(
        *(_publish_one(b, root, client) for b in bundles)
    )

    logger.info(
        "Published %d/%d bundles",
        sum(1 for o in outcomes if o.ok), len(bundles),
    )
    return list(outcomes)
