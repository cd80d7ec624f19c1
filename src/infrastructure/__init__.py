"""
インフラ層のパッケージ初期化。
"""

from .configs import (
    ConfigNotFoundError,
    ConfigRepository,
    JsonSchemaRegistry,
    RemoteFetchSettings,
    ResourceProxySettings,
    SchemaRegistry,
    SchemaValidationError,
    StorageProxySettings,
)
from .storage import (
    ChecksumCalculator,
    FileSystemResourceStorage,
    LocalFileSystemStorageClient,
    StorageError,
    WritableFileSystemResourceStorage,
)
from .resources import ResourceCollectionRegistry, StaticBaseUriTarget, StorageCollection
from .remote import HttpRemoteResourceFetcher, build_remote_uri

__all__ = [
    "ConfigRepository",
    "ConfigNotFoundError",
    "SchemaRegistry",
    "JsonSchemaRegistry",
    "SchemaValidationError",
    "RemoteFetchSettings",
    "ResourceProxySettings",
    "StorageProxySettings",
    "ChecksumCalculator",
    "FileSystemResourceStorage",
    "LocalFileSystemStorageClient",
    "StorageError",
    "WritableFileSystemResourceStorage",
    "ResourceCollectionRegistry",
    "StaticBaseUriTarget",
    "StorageCollection",
    "HttpRemoteResourceFetcher",
    "build_remote_uri",
]
