"""Artifact uploader — sends bundle files to the artifact store.

The store is an opaque HTTP collaborator. Each bundle becomes a single
multipart POST to ``/artifacts`` carrying the artifact name, its retention
window, and one ``files`` part per file. Overwrite-by-name and expiry are
enforced by the store, not here.

The upload flow:
1. Open a shared AsyncClient (create_store_client)
2. POST each bundle's files (upload_bundle)
3. Translate the store's JSON response into an UploadReceipt
"""

import logging
from contextlib import ExitStack
from pathlib import Path

import httpx

from publisher.bundles.types import ArtifactBundle
from publisher.errors import UploadError
from publisher.packaging.types import UploadReceipt

logger = logging.getLogger(__name__)

# Default timeout for store requests; large installers need headroom.
API_TIMEOUT = 300


def create_store_client(
    store_url: str,
    token: str = "",
    timeout: float = API_TIMEOUT,
) -> httpx.AsyncClient:
    """Build the AsyncClient shared by every upload in one publish run."""
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    return httpx.AsyncClient(
        base_url=store_url,
        headers=headers,
        timeout=timeout,
    )


async def upload_bundle(
    client: httpx.AsyncClient,
    bundle: ArtifactBundle,
    files: list[Path],
    root: Path,
) -> UploadReceipt:
    """Upload one bundle's files as a single named artifact.

    Raises:
        UploadError: On a transport failure, a 4xx/5xx response, a response
            body that is not a JSON object, or a file that vanished or
            became unreadable after matching.
    """
    relative_names = [f.relative_to(root).as_posix() for f in files]
    try:
        total_bytes = sum(f.stat().st_size for f in files)
    except OSError as exc:
        raise UploadError(bundle.name, f"cannot read matched file: {exc}") from exc

    logger.info(
        "Uploading %s: %d files, %d bytes",
        bundle.name, len(files), total_bytes,
    )

    data = {
        "name": bundle.name,
        "retention_days": str(bundle.retention_days),
    }

    with ExitStack() as stack:
        try:
            parts = [
                ("files", (name, stack.enter_context(path.open("rb")), "application/octet-stream"))
                for name, path in zip(relative_names, files)
            ]
        except OSError as exc:
            raise UploadError(bundle.name, f"cannot open matched file: {exc}") from exc
        try:
            response = await client.post("/artifacts", data=data, files=parts)
        except httpx.HTTPError as exc:
            raise UploadError(bundle.name, str(exc)) from exc

    if response.status_code >= 400:
        raise UploadError(
            bundle.name,
            f"store returned {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )

    try:
        body = response.json()
    except ValueError as exc:
        raise UploadError(
            bundle.name,
            f"store returned {response.status_code} without a JSON body",
            status_code=response.status_code,
        ) from exc
    if not isinstance(body, dict):
        raise UploadError(
            bundle.name,
            f"store returned {type(body).__name__} instead of a JSON object",
            status_code=response.status_code,
        )

    try:
        return UploadReceipt(
            name=body.get("name", bundle.name),
            artifact_id=str(body.get("id", "")),
            file_count=int(body.get("file_count", len(files))),
            total_bytes=int(body.get("size", total_bytes)),
            files=relative_names,
        )
    except (TypeError, ValueError) as exc:
        raise UploadError(bundle.name, f"malformed store receipt: {exc}") from exc
