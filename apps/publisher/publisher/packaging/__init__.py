"""Packaging module for artifact file resolution and upload.

Public API:
    resolve_files(bundle, root) -> list[Path]
    publish(bundle, root, client) -> UploadReceipt | None
    publish_all(bundles, root, client) -> list[PublishOutcome]
    create_store_client(store_url, token, timeout) -> httpx.AsyncClient
"""

from publisher.packaging.matcher import resolve_files
from publisher.packaging.publish import publish, publish_all
from publisher.packaging.types import PublishOutcome, UploadReceipt
from publisher.packaging.uploader import create_store_client, upload_bundle

__all__ = [
    "resolve_files",
    "publish",
    "publish_all",
    "create_store_client",
    "upload_bundle",
    "PublishOutcome",
    "UploadReceipt",
]
