"""
ドメインエンティティの公開API。
"""

from .resource import PersistentResource, StoredResource

__all__ = [
    "PersistentResource",
    "StoredResource",
]
