"""
httpx を用いたリモートリソース取得クライアント。
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from application import observability
from domain import PersistentResource
from domain.services import RemoteResourceFetcher, resolve_encoded_publication_path

from ..configs import RemoteFetchSettings, ResourceProxySettings, StorageProxySettings

LOGGER = logging.getLogger("resource_proxy.remote.fetcher")


def build_remote_uri(resource: PersistentResource, settings: StorageProxySettings) -> str:
    """
    ベース URI とエンコード済み相対パスから取得先の絶対 URI を組み立てる。
    """

    encoded_path = resolve_encoded_publication_path(resource, settings.subdivide_hash_path_segment)
    return f"{settings.remote_source_base_uri.rstrip('/')}/{encoded_path}"


class HttpRemoteResourceFetcher(RemoteResourceFetcher):
    """
    設定済みのリモートオリジンに対して 1 回だけ GET を発行する RemoteResourceFetcher 実装。

    200 以外の応答や通信エラーはソフトフェイルとして扱い、None を返す。
    リトライは行わない。タイムアウトは HTTP クライアントの設定に従う。
    """

    def __init__(
        self,
        proxy_settings: ResourceProxySettings,
        fetch_settings: RemoteFetchSettings | None = None,
        *,
        client: httpx.Client | None = None,
        client_factory: Callable[[RemoteFetchSettings], httpx.Client] | None = None,
    ) -> None:
        self._proxy_settings = proxy_settings
        self._fetch_settings = fetch_settings or RemoteFetchSettings()
        if client is None:
            factory = client_factory or _default_client_factory
            client = factory(self._fetch_settings)
        self._client = client

    def fetch(self, resource: PersistentResource, storage_name: str) -> bytes | None:
        storage_settings = self._proxy_settings.get(storage_name)
        if storage_settings is None:
            LOGGER.debug('The storage "%s" is not configured for proxying, nothing to fetch.', storage_name)
            return None

        remote_uri = build_remote_uri(resource, storage_settings)
        LOGGER.debug('Fetching remote resource "%s"', remote_uri)

        start = time.perf_counter()
        try:
            response = self._client.get(remote_uri)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            LOGGER.debug('Error fetching remote resource "%s": %s', remote_uri, exc)
            observability.metrics_recorder.increment_remote_fetch(storage_name, "error")
            return None
        finally:
            observability.metrics_recorder.observe_remote_fetch_duration(storage_name, time.perf_counter() - start)

        if response.status_code != 200:
            LOGGER.debug('Error fetching remote resource "%s": %s', remote_uri, response.status_code)
            observability.metrics_recorder.increment_remote_fetch(storage_name, "miss")
            return None

        observability.metrics_recorder.increment_remote_fetch(storage_name, "hit")
        return response.content

    def close(self) -> None:
        """
        保持している HTTP クライアントをクローズする。
        """

        self._client.close()


def _default_client_factory(settings: RemoteFetchSettings) -> httpx.Client:
    return httpx.Client(
        timeout=settings.timeout_seconds,
        verify=settings.verify_ssl,
        follow_redirects=settings.follow_redirects,
    )
