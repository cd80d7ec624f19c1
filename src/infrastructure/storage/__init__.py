"""
ストレージアクセス層の公開API。
"""

from .checksum import ChecksumCalculator
from .filesystem import LocalFileSystemStorageClient
from .resource_storage import FileSystemResourceStorage, WritableFileSystemResourceStorage
from .storage_client import ObjectStorageClient, StorageError

__all__ = [
    "ChecksumCalculator",
    "FileSystemResourceStorage",
    "LocalFileSystemStorageClient",
    "ObjectStorageClient",
    "StorageError",
    "WritableFileSystemResourceStorage",
]
