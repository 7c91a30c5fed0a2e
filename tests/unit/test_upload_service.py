"""Tests for UploadService (ingest pipeline, then notify and account)."""

import io
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from stash.application.dtos.upload import UploadRequest
from stash.application.services import IdGenerator, UrlBuilder
from stash.application.use_cases import UploadService
from stash.domain.entities.resource import OpenGraphOverrides
from stash.domain.enums import IdStrategy
from stash.domain.exceptions import (
    ExhaustedIdSpaceException,
    NotifyFailedException,
    PostProcessFailedException,
    UnauthorizedException,
)
from stash.infrastructure.external.notifications import WebhookTarget
from stash.infrastructure.external.storage.local_storage import LocalStorageService
from stash.infrastructure.persistence import CredentialStore, ResourceStore


def _processor(name: str, result=None, error: Exception | None = None) -> MagicMock:
    processor = MagicMock(return_value=result, side_effect=error)
    processor.name = name
    return processor


def _request(token: str | None = "t1", name: str = "cat.png", **overrides) -> UploadRequest:
    values = dict(
        file_data=io.BytesIO(b"payload"),
        original_name=name,
        mime_type="image/png",
        token=token,
        strategy=IdStrategy.RANDOM,
        length=8,
        alt_length=2,
    )
    values.update(overrides)
    return UploadRequest(**values)


@pytest.fixture
def resources(tmp_path) -> ResourceStore:
    store = ResourceStore(tmp_path / "data.json")
    store.load()
    return store


@pytest.fixture
def credentials(tmp_path) -> CredentialStore:
    path = tmp_path / "auth.json"
    path.write_text(json.dumps({"users": {"t1": {"username": "alice", "count": 0}}}))
    store = CredentialStore(path, IdGenerator())
    store.load()
    return store


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(str(tmp_path / "uploads"))


@pytest.fixture
def thumbnailer() -> MagicMock:
    thumb = _processor("thumbnail", result="thumb.jpg")
    thumb.remove = MagicMock()
    return thumb


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()


def _service(storage, resources, credentials, thumbnailer, notifier, **kwargs) -> UploadService:
    return UploadService(
        storage=storage,
        resources=resources,
        credentials=credentials,
        id_generator=kwargs.pop("id_generator", IdGenerator()),
        thumbnailer=thumbnailer,
        color_extractor=kwargs.pop("color_extractor", _processor("dominant_color", "#112233")),
        notifier=notifier,
        urls=UrlBuilder("stash.test", 40115),
        **kwargs,
    )


def _stored_files(storage: LocalStorageService) -> list:
    return [p for p in storage.storage_root.rglob("*") if p.is_file()]


class TestIngest:
    """Received -> StoredBytes -> PostProcessed -> Committed."""

    async def test_commits_resource_and_returns_urls(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        result = await svc.ingest(_request(opengraph=OpenGraphOverrides(title="Hi")))

        resource = result.resource
        assert resources.get(resource.key) == resource
        assert resource.resource_id.endswith(".png")
        assert len(resource.resource_id) == 8 + len(".png")
        assert resource.size == len(b"payload")
        assert resource.thumbnail == "thumb.jpg"
        assert resource.dominant_color == "#112233"
        assert resource.opengraph.title == "Hi"
        assert len(resource.stored_filename) == 32
        assert result.resource_url == f"http://stash.test:40115/{resource.resource_id}"
        assert result.thumbnail_url.endswith(f"/{resource.resource_id}/thumbnail")
        assert result.delete_url == f"http://stash.test:40115/delete/{resource.stored_filename}"

    async def test_domain_override_changes_urls(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        result = await svc.ingest(_request(domain="cdn.example"))
        assert result.resource_url.startswith("http://cdn.example:40115/")

    async def test_missing_token_stores_nothing(
        self, resources, credentials, thumbnailer, notifier
    ) -> None:
        storage = AsyncMock()
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        with pytest.raises(UnauthorizedException):
            await svc.ingest(_request(token=None))
        storage.upload.assert_not_awaited()
        assert len(resources) == 0

    async def test_unknown_token_rejected_without_auto_register(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        with pytest.raises(UnauthorizedException):
            await svc.ingest(_request(token="stranger"))
        assert _stored_files(storage) == []

    async def test_unknown_token_accepted_with_auto_register(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        svc = _service(
            storage, resources, credentials, thumbnailer, notifier, auto_register_tokens=True
        )
        result = await svc.ingest(_request(token="stranger"))
        assert resources.contains(result.resource.key)

    async def test_token_revoked_before_commit_discards_bytes(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        """Authorization is re-checked at commit; the stored bytes do not outlive a rejection."""

        def revoke_then_thumbnail(*_args):
            credentials._users.clear()
            return "thumb.jpg"

        thumbnailer.side_effect = revoke_then_thumbnail
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        with pytest.raises(UnauthorizedException):
            await svc.ingest(_request())
        assert _stored_files(storage) == []
        thumbnailer.remove.assert_called_once_with("thumb.jpg")

    async def test_exhausted_ids_discard_bytes(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        svc = _service(
            storage,
            resources,
            credentials,
            thumbnailer,
            notifier,
            id_generator=IdGenerator(max_attempts=1),
        )
        await svc.ingest(_request(strategy=IdStrategy.ORIGINAL))
        with pytest.raises(ExhaustedIdSpaceException):
            await svc.ingest(_request(strategy=IdStrategy.ORIGINAL))
        assert len(resources) == 1
        assert len(_stored_files(storage)) == 1

    async def test_post_process_failure_is_not_fatal(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        thumbnailer.side_effect = PostProcessFailedException("thumbnail", "corrupt")
        svc = _service(
            storage,
            resources,
            credentials,
            thumbnailer,
            notifier,
            color_extractor=_processor("dominant_color", error=RuntimeError("boom")),
        )
        result = await svc.ingest(_request())
        assert result.resource.thumbnail is None
        assert result.resource.dominant_color is None
        assert resources.contains(result.resource.key)

    async def test_save_with_date_partitions_storage(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        svc = _service(
            storage, resources, credentials, thumbnailer, notifier, save_with_date=True
        )
        result = await svc.ingest(_request())
        partition, filename = result.resource.storage_ref.split("/")
        assert len(partition) == len("2024-01")
        assert filename == result.resource.stored_filename

    async def test_save_as_original_keeps_filename(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        svc = _service(
            storage, resources, credentials, thumbnailer, notifier, save_as_original=True
        )
        result = await svc.ingest(_request(name="holiday.png"))
        assert result.resource.stored_filename == "holiday.png"


class TestNotifyAndAccount:
    """Committed -> Notified -> Accounted -> Done."""

    async def test_notifies_then_counts(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        target = WebhookTarget(client_id="1", token="abc", username="stash")
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        result = await svc.ingest(_request(webhook=target))

        await svc.notify_and_account(result)

        notifier.send.assert_awaited_once()
        sent_target, payload = notifier.send.await_args.args
        assert sent_target == target
        assert payload["embeds"][0]["url"] == result.resource_url
        assert credentials.authenticate("t1").count == 1

    async def test_notify_failure_still_counts(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        notifier.send.side_effect = NotifyFailedException("webhook 1", "status 500")
        target = WebhookTarget(client_id="1", token="abc", username="stash")
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        result = await svc.ingest(_request(webhook=target))

        await svc.notify_and_account(result)
        assert credentials.authenticate("t1").count == 1

    async def test_no_webhook_skips_notify(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        result = await svc.ingest(_request())
        await svc.notify_and_account(result)
        notifier.send.assert_not_awaited()


class RemoteStorage:
    """In-memory stand-in for a remote backend: no local path, bytes via download()."""

    is_remote = True

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    async def upload(self, file_data, storage_ref, content_type, metadata=None):
        self.objects[storage_ref] = file_data.read()
        return {"storage_ref": storage_ref, "size": len(self.objects[storage_ref])}

    async def download(self, storage_ref, start=0, end=None):
        data = self.objects[storage_ref]
        yield data[: len(data) // 2]
        yield data[len(data) // 2 :]

    async def delete(self, storage_ref):
        return self.objects.pop(storage_ref, None) is not None

    async def exists(self, storage_ref):
        return storage_ref in self.objects

    def local_path(self, storage_ref):
        return None


class TestRemotePostProcessing:
    """Remote bytes are copied to a scoped temp file for the post-processors."""

    async def test_processors_read_temp_copy_which_is_removed(
        self, tmp_path, resources, credentials, thumbnailer, notifier
    ) -> None:
        seen: dict[str, object] = {}

        def read_source(source, mime_type, stem):
            seen["path"] = source
            seen["bytes"] = source.read_bytes()
            return "thumb.jpg"

        thumbnailer.side_effect = read_source
        temp_dir = tmp_path / "tmp"
        temp_dir.mkdir()
        svc = _service(RemoteStorage(), resources, credentials, thumbnailer, notifier, temp_dir=temp_dir)

        result = await svc.ingest(_request())

        assert seen["bytes"] == b"payload"
        assert seen["path"].parent == temp_dir
        assert list(temp_dir.iterdir()) == []
        assert result.resource.thumbnail == "thumb.jpg"

    async def test_temp_copy_removed_when_processor_fails(
        self, tmp_path, resources, credentials, thumbnailer, notifier
    ) -> None:
        thumbnailer.side_effect = PostProcessFailedException("thumbnail", "corrupt")
        temp_dir = tmp_path / "tmp"
        temp_dir.mkdir()
        svc = _service(
            RemoteStorage(),
            resources,
            credentials,
            thumbnailer,
            notifier,
            temp_dir=temp_dir,
            color_extractor=_processor("dominant_color", error=RuntimeError("boom")),
        )

        result = await svc.ingest(_request())

        assert result.resource.thumbnail is None
        assert resources.contains(result.resource.key)
        assert list(temp_dir.iterdir()) == []


class TestFailureRecovery:
    async def test_unexpected_notifier_error_still_counts(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        """Accounting happens whatever the notifier raises."""
        notifier.send.side_effect = RuntimeError("Cannot send a request, as the client has been closed.")
        target = WebhookTarget(client_id="1", token="abc", username="stash")
        svc = _service(storage, resources, credentials, thumbnailer, notifier)
        result = await svc.ingest(_request(webhook=target))

        await svc.notify_and_account(result)

        assert credentials.authenticate("t1").count == 1

    async def test_failed_snapshot_discards_bytes_and_entry(
        self, storage, resources, credentials, thumbnailer, notifier
    ) -> None:
        resources.path.unlink()
        resources.path.mkdir()
        svc = _service(storage, resources, credentials, thumbnailer, notifier)

        with pytest.raises(OSError):
            await svc.ingest(_request())

        assert len(resources) == 0
        assert _stored_files(storage) == []
        thumbnailer.remove.assert_called_once_with("thumb.jpg")
