"""Tests for DeletionService."""

import io
from unittest.mock import MagicMock

import pytest

from stash.application.use_cases import DeletionService
from stash.domain.entities.resource import Resource
from stash.domain.exceptions import UnknownResourceException
from stash.infrastructure.external.storage.local_storage import LocalStorageService
from stash.infrastructure.persistence import ResourceStore


@pytest.fixture
async def setup(tmp_path):
    storage = LocalStorageService(str(tmp_path / "uploads"))
    await storage.upload(io.BytesIO(b"bytes"), "f00d", "image/png")
    store = ResourceStore(tmp_path / "data.json")
    store.load()
    store.put(
        "abc",
        Resource(
            resource_id="abc.png",
            original_name="cat.png",
            stored_filename="f00d",
            storage_ref="f00d",
            mime_type="image/png",
            size=5,
            timestamp=0,
            token="t1",
            thumbnail="thumb.jpg",
        ),
    )
    thumbnailer = MagicMock()
    return DeletionService(storage, store, thumbnailer), storage, store, thumbnailer


async def test_delete_removes_everything(setup) -> None:
    svc, storage, store, thumbnailer = setup
    deleted = await svc.delete_by_filename("f00d")
    assert deleted.resource_id == "abc.png"
    assert not await storage.exists("f00d")
    assert not store.contains("abc")
    thumbnailer.remove.assert_called_once_with("thumb.jpg")


async def test_second_delete_is_unknown(setup) -> None:
    """A delete link works exactly once."""
    svc, *_ = setup
    await svc.delete_by_filename("f00d")
    with pytest.raises(UnknownResourceException):
        await svc.delete_by_filename("f00d")


async def test_missing_bytes_still_removes_entry(setup) -> None:
    svc, storage, store, _ = setup
    await storage.delete("f00d")
    await svc.delete_by_filename("f00d")
    assert len(store) == 0


async def test_public_id_is_not_a_delete_key(setup) -> None:
    svc, *_ = setup
    with pytest.raises(UnknownResourceException):
        await svc.delete_by_filename("abc.png")
