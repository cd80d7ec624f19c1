"""
ドメインサービスの公開API。
"""

from .interfaces import (
    CollectionResolver,
    PublicUriTarget,
    RemoteResourceFetcher,
    ResourceCollection,
    ResourceStorage,
    WritableResourceStorage,
)
from .publication_path import (
    encode_path_for_uri,
    resolve_encoded_publication_path,
    resolve_relative_publication_path,
)

__all__ = [
    "CollectionResolver",
    "PublicUriTarget",
    "RemoteResourceFetcher",
    "ResourceCollection",
    "ResourceStorage",
    "WritableResourceStorage",
    "encode_path_for_uri",
    "resolve_encoded_publication_path",
    "resolve_relative_publication_path",
]
