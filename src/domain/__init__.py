"""
ドメイン層のパッケージ初期化。
"""

from .models import PersistentResource, StoredResource

__all__ = [
    "PersistentResource",
    "StoredResource",
]
