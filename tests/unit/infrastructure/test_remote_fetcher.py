from __future__ import annotations

import logging

import httpx
import pytest

from domain import PersistentResource
from infrastructure.configs import RemoteFetchSettings, ResourceProxySettings, StorageProxySettings
from infrastructure.remote import HttpRemoteResourceFetcher, build_remote_uri

SHA1 = "c828d0f88ce197be1aff7cc2e5e86b1244241ac6"


def _settings(base_uri: str = "https://origin.example/_Resources/Persistent/", subdivide: bool = False) -> ResourceProxySettings:
    return ResourceProxySettings(
        storages={"persistentStorage": StorageProxySettings(base_uri, subdivide_hash_path_segment=subdivide)}
    )


def _resource(filename: str = "My Picture.jpg") -> PersistentResource:
    return PersistentResource(content_hash=SHA1, filename=filename, collection_name="persistent")


def test_build_remote_uri_trims_trailing_slash() -> None:
    uri = build_remote_uri(_resource(), StorageProxySettings("https://origin.example/base///", True))

    assert uri == f"https://origin.example/base/c/8/2/8/{SHA1}/My%20Picture.jpg"


def test_fetch_returns_body_on_200() -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        assert request.method == "GET"
        return httpx.Response(200, content=b"picture-bytes")

    fetcher = HttpRemoteResourceFetcher(_settings(), client=httpx.Client(transport=httpx.MockTransport(handler)))
    try:
        content = fetcher.fetch(_resource(), "persistentStorage")
    finally:
        fetcher.close()

    assert content == b"picture-bytes"
    assert requested == [f"https://origin.example/_Resources/Persistent/{SHA1}/My%20Picture.jpg"]


@pytest.mark.parametrize("status_code", [301, 403, 404, 500, 503])
def test_fetch_non_200_is_soft_failure(status_code: int, caplog: pytest.LogCaptureFixture) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(status_code, content=b"error page"))
    fetcher = HttpRemoteResourceFetcher(_settings(), client=httpx.Client(transport=transport))

    with caplog.at_level(logging.DEBUG, logger="resource_proxy"):
        assert fetcher.fetch(_resource(), "persistentStorage") is None

    assert any(str(status_code) in record.getMessage() for record in caplog.records)


def test_fetch_transport_error_is_soft_failure() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    fetcher = HttpRemoteResourceFetcher(_settings(), client=httpx.Client(transport=httpx.MockTransport(handler)))

    assert fetcher.fetch(_resource(), "persistentStorage") is None


def test_fetch_issues_single_request_without_retry() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502)

    fetcher = HttpRemoteResourceFetcher(_settings(), client=httpx.Client(transport=httpx.MockTransport(handler)))
    fetcher.fetch(_resource(), "persistentStorage")

    assert len(calls) == 1


def test_fetch_for_unmanaged_storage_does_not_touch_network() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    fetcher = HttpRemoteResourceFetcher(_settings(), client=httpx.Client(transport=httpx.MockTransport(handler)))

    assert fetcher.fetch(_resource(), "otherStorage") is None


def test_default_client_factory_receives_settings() -> None:
    received: list[RemoteFetchSettings] = []

    def factory(settings: RemoteFetchSettings) -> httpx.Client:
        received.append(settings)
        return httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, content=b"x")))

    fetch_settings = RemoteFetchSettings(timeout_seconds=3.0)
    fetcher = HttpRemoteResourceFetcher(_settings(), fetch_settings, client_factory=factory)

    assert fetcher.fetch(_resource("a.jpg"), "persistentStorage") == b"x"
    assert received == [fetch_settings]


def test_fetch_with_oversized_url_is_soft_failure(caplog: pytest.LogCaptureFixture) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    fetcher = HttpRemoteResourceFetcher(_settings(), client=httpx.Client(transport=httpx.MockTransport(handler)))

    with caplog.at_level(logging.DEBUG, logger="resource_proxy"):
        assert fetcher.fetch(_resource("a" * 70000 + ".jpg"), "persistentStorage") is None

    assert any("Error fetching remote resource" in record.getMessage() for record in caplog.records)
