"""
アプリケーションサービスの公開API。
"""

from .import_writer import ResourceImportWriter
from .resource_import import RemoteResourceImporter
from .resource_proxy import (
    CollectionNotFoundError,
    ProxyingPublicUriTarget,
    ProxyingResourceStorage,
    ProxyingWritableResourceStorage,
    proxy_storage,
    unwrap_storage,
)

__all__ = [
    "CollectionNotFoundError",
    "ProxyingPublicUriTarget",
    "ProxyingResourceStorage",
    "ProxyingWritableResourceStorage",
    "RemoteResourceImporter",
    "ResourceImportWriter",
    "proxy_storage",
    "unwrap_storage",
]
