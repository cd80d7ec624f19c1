"""
アプリケーション層パッケージ初期化。
"""

from .services import (
    CollectionNotFoundError,
    ProxyingPublicUriTarget,
    ProxyingResourceStorage,
    ProxyingWritableResourceStorage,
    RemoteResourceImporter,
    ResourceImportWriter,
    proxy_storage,
)

__all__ = [
    "CollectionNotFoundError",
    "ProxyingPublicUriTarget",
    "ProxyingResourceStorage",
    "ProxyingWritableResourceStorage",
    "RemoteResourceImporter",
    "ResourceImportWriter",
    "proxy_storage",
]
