from __future__ import annotations

import hashlib
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from domain import PersistentResource
from domain.services import ResourceStorage, WritableResourceStorage
from infrastructure.storage import (
    FileSystemResourceStorage,
    LocalFileSystemStorageClient,
    StorageError,
    WritableFileSystemResourceStorage,
)


def _resource_for(content: bytes, filename: str = "file.bin") -> PersistentResource:
    return PersistentResource(
        content_hash=hashlib.sha1(content).hexdigest(),
        filename=filename,
        collection_name="persistent",
    )


def test_import_then_read(tmp_path: Path) -> None:
    storage = WritableFileSystemResourceStorage("persistentStorage", tmp_path)
    content = b"hello resource"
    resource = _resource_for(content)

    assert storage.get_stream(resource) is None

    stored = storage.import_resource_from_content(content, "persistent")

    assert stored.content_hash == resource.content_hash
    assert stored.collection_name == "persistent"
    assert stored.file_size == len(content)
    expected_path = tmp_path.joinpath(*resource.content_hash[:4], resource.content_hash)
    assert storage.resource_path(resource.content_hash) == expected_path
    assert expected_path.read_bytes() == content

    stream = storage.get_stream(resource)
    assert stream is not None
    with stream:
        assert stream.read() == content


def test_repeated_import_is_idempotent(tmp_path: Path) -> None:
    storage = WritableFileSystemResourceStorage("persistentStorage", tmp_path)
    content = b"same bytes"

    first = storage.import_resource_from_content(content, "persistent")
    second = storage.import_resource_from_content(content, "persistent")

    assert first == second
    stored_files = [path for path in tmp_path.rglob("*") if path.is_file() and ".tmp" not in path.parts]
    assert len(stored_files) == 1


def test_concurrent_imports_converge(tmp_path: Path) -> None:
    storage = WritableFileSystemResourceStorage("persistentStorage", tmp_path)
    content = b"x" * 256 * 1024

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(lambda _: storage.import_resource_from_content(content, "persistent"), range(16)))

    assert {result.content_hash for result in results} == {hashlib.sha1(content).hexdigest()}
    stored_files = [path for path in tmp_path.rglob("*") if path.is_file() and ".tmp" not in path.parts]
    assert len(stored_files) == 1
    assert stored_files[0].read_bytes() == content
    assert not any((tmp_path / ".tmp").iterdir())


def test_read_only_storage_capabilities(tmp_path: Path) -> None:
    read_only = FileSystemResourceStorage("readOnlyStorage", tmp_path)
    writable = WritableFileSystemResourceStorage("writableStorage", tmp_path)

    assert isinstance(read_only, ResourceStorage)
    assert not isinstance(read_only, WritableResourceStorage)
    assert isinstance(writable, WritableResourceStorage)


def test_read_only_storage_serves_existing_files(tmp_path: Path) -> None:
    content = b"published earlier"
    resource = _resource_for(content)
    WritableFileSystemResourceStorage("seed", tmp_path).import_resource_from_content(content, "persistent")

    storage = FileSystemResourceStorage("readOnlyStorage", tmp_path)
    stream = storage.get_stream(resource)

    assert stream is not None
    with stream:
        assert stream.read() == content


class _FailingMoveClient(LocalFileSystemStorageClient):
    def move(self, source: Path, destination: Path) -> None:
        raise StorageError(f"move failed: {source} -> {destination}")


def test_failed_import_leaves_no_temporary_files(tmp_path: Path) -> None:
    storage = WritableFileSystemResourceStorage("persistentStorage", tmp_path, storage_client=_FailingMoveClient())
    content = b"never placed"

    with pytest.raises(StorageError):
        storage.import_resource_from_content(content, "persistent")
    with pytest.raises(StorageError):
        storage.import_resource_from_content(content, "persistent")

    assert not any((tmp_path / ".tmp").iterdir())
    assert storage.get_stream(_resource_for(content)) is None
