"""
コレクションと公開ターゲットの実装。
"""

from .collection_registry import ResourceCollectionRegistry, StorageCollection
from .targets import StaticBaseUriTarget

__all__ = [
    "ResourceCollectionRegistry",
    "StaticBaseUriTarget",
    "StorageCollection",
]
