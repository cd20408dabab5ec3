"""Tests for publish() and publish_all().

The artifact store is an httpx.MockTransport that records every request.
"""

import httpx
import pytest

from publisher.bundles.selector import select_bundles
from publisher.bundles.types import ArtifactBundle, BundleKind
from publisher.errors import NoFilesMatchedError, UploadError
from publisher.packaging.publish import publish, publish_all

SHORT_SHA = "abc1234"
WIN_BUNDLE_DIR = "x86_64-pc-windows-msvc/release/bundle"


class RecordingStore:
    """Accepts every upload unless the artifact name is in fail_names."""

    def __init__(self, fail_names=()):
        self.fail_names = set(fail_names)
        self.uploaded: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = request.content
        name = next(n for n in self._candidates if n.encode() in body)
        if name in self.fail_names:
            return httpx.Response(500, text="boom")
        self.uploaded.append(name)
        return httpx.Response(201, json={"id": f"id-{name}", "name": name})

    def expect(self, bundles):
        self._candidates = [b.name for b in bundles]
        return self

    def client(self):
        return httpx.AsyncClient(
            base_url="http://store.test",
            transport=httpx.MockTransport(self),
        )


class TestPublish:
    @pytest.mark.asyncio
    async def test_required_with_no_files_uploads_nothing(self, windows_ctx, artifact_root):
        bundles = select_bundles(windows_ctx, SHORT_SHA)
        store = RecordingStore().expect(bundles)

        async with store.client() as client:
            with pytest.raises(NoFilesMatchedError) as exc_info:
                await publish(bundles[0], artifact_root, client)

        assert store.uploaded == []
        assert exc_info.value.bundle_name == bundles[0].name
        assert exc_info.value.patterns == bundles[0].path_patterns

    @pytest.mark.asyncio
    async def test_optional_with_no_files_is_skipped(self, artifact_root):
        bundle = ArtifactBundle(
            kind=BundleKind.UPDATER,
            name="Publisher-Updaters-t-abc1234",
            path_patterns=("t/**/*.zip",),
            required=False,
        )
        store = RecordingStore().expect([bundle])

        async with store.client() as client:
            assert await publish(bundle, artifact_root, client) is None

        assert store.uploaded == []

    @pytest.mark.asyncio
    async def test_uploads_matched_files(self, windows_ctx, artifact_root, make_files):
        make_files(artifact_root, f"{WIN_BUNDLE_DIR}/msi/app.msi")
        bundles = select_bundles(windows_ctx, SHORT_SHA)
        store = RecordingStore().expect(bundles)

        async with store.client() as client:
            receipt = await publish(bundles[0], artifact_root, client)

        assert receipt.name == "Publisher-Windows-msi-x86_64-pc-windows-msvc-abc1234"
        assert receipt.files == [f"{WIN_BUNDLE_DIR}/msi/app.msi"]
        assert store.uploaded == [receipt.name]


class TestPublishAll:
    @pytest.mark.asyncio
    async def test_empty_store_response_is_independent(self, windows_ctx, artifact_root, make_files):
        make_files(
            artifact_root,
            f"{WIN_BUNDLE_DIR}/msi/app.msi",
            f"{WIN_BUNDLE_DIR}/msi/app.msi.zip",
        )
        bundles = select_bundles(windows_ctx, SHORT_SHA)
        msi_name, updater_name = (b.name for b in bundles)

        def handler(request: httpx.Request) -> httpx.Response:
            if msi_name.encode() in request.content:
                return httpx.Response(204)
            return httpx.Response(201, json={"id": "u1", "name": updater_name})

        client = httpx.AsyncClient(base_url="http://store.test", transport=httpx.MockTransport(handler))
        async with client:
            outcomes = await publish_all(bundles, artifact_root, client)

        assert len(outcomes) == 2
        assert isinstance(outcomes[0].error, UploadError)
        assert outcomes[1].ok
        assert outcomes[1].receipt.artifact_id == "u1"

    @pytest.mark.asyncio
    async def test_all_bundles_published(self, windows_ctx, artifact_root, make_files):
        make_files(
            artifact_root,
            f"{WIN_BUNDLE_DIR}/msi/app.msi",
            f"{WIN_BUNDLE_DIR}/msi/app.msi.zip",
            f"{WIN_BUNDLE_DIR}/msi/app.msi.zip.sig",
        )
        bundles = select_bundles(windows_ctx, SHORT_SHA)
        store = RecordingStore().expect(bundles)

        async with store.client() as client:
            outcomes = await publish_all(bundles, artifact_root, client)

        assert [o.bundle for o in outcomes] == bundles
        assert all(o.ok for o in outcomes)
        assert sorted(store.uploaded) == sorted(b.name for b in bundles)
        assert outcomes[1].receipt.files == [
            f"{WIN_BUNDLE_DIR}/msi/app.msi.zip",
            f"{WIN_BUNDLE_DIR}/msi/app.msi.zip.sig",
        ]

    @pytest.mark.asyncio
    async def test_missing_files_fail_only_that_bundle(self, windows_ctx, artifact_root, make_files):
        # Updater archives exist, the msi itself does not.
        make_files(artifact_root, f"{WIN_BUNDLE_DIR}/msi/app.msi.zip")
        bundles = select_bundles(windows_ctx, SHORT_SHA)
        store = RecordingStore().expect(bundles)

        async with store.client() as client:
            outcomes = await publish_all(bundles, artifact_root, client)

        msi, updater = outcomes
        assert not msi.ok
        assert isinstance(msi.error, NoFilesMatchedError)
        assert updater.ok
        assert store.uploaded == [updater.bundle.name]

    @pytest.mark.asyncio
    async def test_upload_failure_is_independent(self, linux_ctx, artifact_root, make_files):
        linux_dir = "x86_64-unknown-linux-gnu/release/bundle"
        make_files(
            artifact_root,
            f"{linux_dir}/appimage/app.AppImage",
            f"{linux_dir}/appimage/app.AppImage.tar.gz",
        )
        bundles = select_bundles(linux_ctx, SHORT_SHA)
        store = RecordingStore(fail_names=[bundles[0].name]).expect(bundles)

        async with store.client() as client:
            outcomes = await publish_all(bundles, artifact_root, client)

        assert isinstance(outcomes[0].error, UploadError)
        assert outcomes[1].ok
        assert store.uploaded == [bundles[1].name]

    @pytest.mark.asyncio
    async def test_outcome_to_dict(self, windows_ctx, artifact_root):
        bundles = select_bundles(windows_ctx, SHORT_SHA)
        store = RecordingStore().expect(bundles)

        async with store.client() as client:
            outcomes = await publish_all(bundles, artifact_root, client)

        data = outcomes[0].to_dict()
        assert data["bundle"] == bundles[0].name
        assert data["ok"] is False
        assert data["receipt"] is None
        assert "No files were found" in data["error"]
