from __future__ import annotations

import hashlib
import logging
from io import BytesIO
from typing import BinaryIO

import httpx
import pytest

from application.services import (
    CollectionNotFoundError,
    ProxyingPublicUriTarget,
    ProxyingResourceStorage,
    ProxyingWritableResourceStorage,
    RemoteResourceImporter,
    ResourceImportWriter,
    proxy_storage,
)
from domain import PersistentResource, StoredResource
from domain.services import WritableResourceStorage
from infrastructure.configs import ResourceProxySettings, StorageProxySettings
from infrastructure.remote import HttpRemoteResourceFetcher
from infrastructure.resources import ResourceCollectionRegistry, StaticBaseUriTarget, StorageCollection

REMOTE_CONTENT = b"remote picture bytes"
REMOTE_SHA1 = hashlib.sha1(REMOTE_CONTENT).hexdigest()
ORIGIN = "https://origin.example/_Resources/Persistent"


class _InMemoryStorage:
    def __init__(self, name: str) -> None:
        self._name = name
        self.objects: dict[str, bytes] = {}
        self.stream_requests = 0

    @property
    def name(self) -> str:
        return self._name

    def get_stream(self, resource: PersistentResource) -> BinaryIO | None:
        self.stream_requests += 1
        content = self.objects.get(resource.content_hash)
        return BytesIO(content) if content is not None else None


class _InMemoryWritableStorage(_InMemoryStorage):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.imports: list[tuple[bytes, str]] = []

    def import_resource_from_content(self, content: bytes, collection_name: str) -> StoredResource:
        self.imports.append((content, collection_name))
        content_hash = hashlib.sha1(content).hexdigest()
        self.objects[content_hash] = content
        return StoredResource(content_hash=content_hash, collection_name=collection_name, file_size=len(content))


class _Origin:
    def __init__(self, status_code: int = 200, content: bytes = REMOTE_CONTENT) -> None:
        self.status_code = status_code
        self.content = content
        self.requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        return httpx.Response(self.status_code, content=self.content)


def _resource(filename: str = "MyPicture.jpg", collection_name: str = "persistent") -> PersistentResource:
    return PersistentResource(content_hash=REMOTE_SHA1, filename=filename, collection_name=collection_name)


def _importer(origin: _Origin, settings: ResourceProxySettings) -> RemoteResourceImporter:
    client = httpx.Client(transport=httpx.MockTransport(origin.handler))
    return RemoteResourceImporter(HttpRemoteResourceFetcher(settings, client=client))


def _managed(*storage_names: str) -> ResourceProxySettings:
    return ResourceProxySettings(storages={name: StorageProxySettings(ORIGIN) for name in storage_names})


def test_existing_stream_is_returned_without_fetching() -> None:
    origin = _Origin()
    storage = _InMemoryWritableStorage("persistentStorage")
    storage.objects[REMOTE_SHA1] = b"local copy"
    proxied = proxy_storage(storage, proxy_settings=_managed("persistentStorage"), importer=_importer(origin, _managed("persistentStorage")))

    stream = proxied.get_stream(_resource())

    assert stream is not None
    assert stream.read() == b"local copy"
    assert origin.requests == []


def test_unmanaged_storage_passes_through_without_network() -> None:
    origin = _Origin()
    storage = _InMemoryWritableStorage("otherStorage")
    settings = _managed("persistentStorage")
    proxied = proxy_storage(storage, proxy_settings=settings, importer=_importer(origin, settings))

    assert proxied.get_stream(_resource()) is None
    assert origin.requests == []
    assert storage.imports == []


def test_non_writable_storage_passes_through(caplog: pytest.LogCaptureFixture) -> None:
    origin = _Origin()
    storage = _InMemoryStorage("persistentStorage")
    settings = _managed("persistentStorage")
    proxied = proxy_storage(storage, proxy_settings=settings, importer=_importer(origin, settings))

    with caplog.at_level(logging.INFO, logger="resource_proxy"):
        assert proxied.get_stream(_resource()) is None

    assert origin.requests == []
    assert "is not writable" in caplog.text


def test_remote_404_leaves_storage_untouched(caplog: pytest.LogCaptureFixture) -> None:
    origin = _Origin(status_code=404)
    storage = _InMemoryWritableStorage("persistentStorage")
    settings = _managed("persistentStorage")
    proxied = proxy_storage(storage, proxy_settings=settings, importer=_importer(origin, settings))

    with caplog.at_level(logging.DEBUG, logger="resource_proxy"):
        assert proxied.get_stream(_resource()) is None

    assert origin.requests == [f"{ORIGIN}/{REMOTE_SHA1}/MyPicture.jpg"]
    assert storage.imports == []
    notices = [record for record in caplog.records if record.levelno == logging.INFO]
    assert any("Could not fetch resource data" in record.getMessage() for record in notices)


def test_remote_200_imports_once_and_read_succeeds() -> None:
    origin = _Origin()
    storage = _InMemoryWritableStorage("persistentStorage")
    settings = _managed("persistentStorage")
    proxied = proxy_storage(storage, proxy_settings=settings, importer=_importer(origin, settings))

    stream = proxied.get_stream(_resource())

    assert stream is not None
    assert stream.read() == REMOTE_CONTENT
    assert storage.imports == [(REMOTE_CONTENT, "persistent")]

    again = proxied.get_stream(_resource())
    assert again is not None
    assert len(origin.requests) == 1
    assert len(storage.imports) == 1


def test_every_miss_repeats_the_fetch() -> None:
    origin = _Origin(status_code=404)
    storage = _InMemoryWritableStorage("persistentStorage")
    settings = _managed("persistentStorage")
    proxied = proxy_storage(storage, proxy_settings=settings, importer=_importer(origin, settings))

    for _ in range(3):
        assert proxied.get_stream(_resource()) is None

    assert len(origin.requests) == 3


def test_failed_import_returns_storage_result_not_fetched_bytes() -> None:
    # Remote content does not match the identity, so the storage keeps missing it.
    origin = _Origin(content=b"unexpected bytes")
    storage = _InMemoryWritableStorage("persistentStorage")
    settings = _managed("persistentStorage")
    proxied = proxy_storage(storage, proxy_settings=settings, importer=_importer(origin, settings))

    assert proxied.get_stream(_resource()) is None
    assert storage.imports == [(b"unexpected bytes", "persistent")]


def test_proxy_storage_preserves_capabilities() -> None:
    settings = _managed()
    importer = _importer(_Origin(), settings)

    writable = proxy_storage(_InMemoryWritableStorage("w"), proxy_settings=settings, importer=importer)
    read_only = proxy_storage(_InMemoryStorage("r"), proxy_settings=settings, importer=importer)

    assert isinstance(writable, ProxyingWritableResourceStorage)
    assert isinstance(writable, WritableResourceStorage)
    assert type(read_only) is ProxyingResourceStorage
    assert not isinstance(read_only, WritableResourceStorage)
    assert writable.name == "w"
    assert read_only.name == "r"

    stored = writable.import_resource_from_content(REMOTE_CONTENT, "persistent")
    assert stored.content_hash == REMOTE_SHA1


def test_import_writer_skips_read_only_storage(caplog: pytest.LogCaptureFixture) -> None:
    writer = ResourceImportWriter()

    with caplog.at_level(logging.INFO, logger="resource_proxy"):
        result = writer.write(REMOTE_CONTENT, _resource(), _InMemoryStorage("readOnly"))

    assert result is None
    assert "is not supported" in caplog.text


def test_import_writer_logs_imported_resource(caplog: pytest.LogCaptureFixture) -> None:
    writer = ResourceImportWriter()
    storage = _InMemoryWritableStorage("persistentStorage")

    with caplog.at_level(logging.INFO, logger="resource_proxy"):
        result = writer.write(REMOTE_CONTENT, _resource(), storage)

    assert result == StoredResource(REMOTE_SHA1, "persistent", len(REMOTE_CONTENT))
    assert f'Imported resource data "MyPicture.jpg" ({REMOTE_SHA1}) into storage "persistentStorage"' in caplog.text


def _uri_fixture(
    storage: _InMemoryStorage, settings: ResourceProxySettings, origin: _Origin
) -> tuple[ProxyingPublicUriTarget, ResourceCollectionRegistry]:
    importer = _importer(origin, settings)
    registry = ResourceCollectionRegistry()
    target = ProxyingPublicUriTarget(
        StaticBaseUriTarget(name="persistentTarget", base_uri="https://cdn.example/_Resources/Persistent/"),
        collection_resolver=registry,
        proxy_settings=settings,
        importer=importer,
    )
    registry.register(
        StorageCollection(
            name="persistent",
            storage=proxy_storage(storage, proxy_settings=settings, importer=importer),
            target=target,
        )
    )
    return target, registry


def test_public_uri_imports_missing_resource_once() -> None:
    origin = _Origin()
    storage = _InMemoryWritableStorage("persistentStorage")
    target, _ = _uri_fixture(storage, _managed("persistentStorage"), origin)

    uri = target.get_public_persistent_resource_uri(_resource("My Picture.jpg"))

    assert uri == f"https://cdn.example/_Resources/Persistent/{REMOTE_SHA1}/My%20Picture.jpg"
    assert len(origin.requests) == 1
    assert storage.imports == [(REMOTE_CONTENT, "persistent")]


def test_public_uri_passes_through_when_resource_exists() -> None:
    origin = _Origin()
    storage = _InMemoryWritableStorage("persistentStorage")
    storage.objects[REMOTE_SHA1] = REMOTE_CONTENT
    target, _ = _uri_fixture(storage, _managed("persistentStorage"), origin)

    target.get_public_persistent_resource_uri(_resource())

    assert origin.requests == []


def test_public_uri_for_unmanaged_storage_skips_lookup() -> None:
    origin = _Origin()
    storage = _InMemoryWritableStorage("persistentStorage")
    target, _ = _uri_fixture(storage, _managed(), origin)

    target.get_public_persistent_resource_uri(_resource())

    assert origin.requests == []
    assert storage.stream_requests == 0


def test_public_uri_for_read_only_storage_still_returns_uri(caplog: pytest.LogCaptureFixture) -> None:
    origin = _Origin()
    storage = _InMemoryStorage("persistentStorage")
    target, _ = _uri_fixture(storage, _managed("persistentStorage"), origin)

    with caplog.at_level(logging.INFO, logger="resource_proxy"):
        uri = target.get_public_persistent_resource_uri(_resource())

    assert uri.endswith(f"/{REMOTE_SHA1}/MyPicture.jpg")
    assert origin.requests == []
    assert "is not writable" in caplog.text


def test_public_uri_survives_remote_failure() -> None:
    origin = _Origin(status_code=500)
    storage = _InMemoryWritableStorage("persistentStorage")
    target, _ = _uri_fixture(storage, _managed("persistentStorage"), origin)

    uri = target.get_public_persistent_resource_uri(_resource())

    assert uri == f"https://cdn.example/_Resources/Persistent/{REMOTE_SHA1}/MyPicture.jpg"
    assert storage.imports == []


def test_public_uri_for_unknown_collection_fails() -> None:
    origin = _Origin()
    target, _ = _uri_fixture(_InMemoryWritableStorage("persistentStorage"), _managed("persistentStorage"), origin)

    with pytest.raises(CollectionNotFoundError):
        target.get_public_persistent_resource_uri(_resource(collection_name="missing"))
    assert origin.requests == []
