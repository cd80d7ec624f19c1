"""
コレクション定義とコレクション名による解決。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from domain.services import CollectionResolver, PublicUriTarget, ResourceStorage


@dataclass(frozen=True)
class StorageCollection:
    """
    ストレージと公開ターゲットの組。
    """

    name: str
    storage: ResourceStorage
    target: PublicUriTarget

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("collection name は必須です。")


class ResourceCollectionRegistry(CollectionResolver):
    """
    起動時に構築され、以後は読み取り専用となるコレクションの一覧。
    """

    def __init__(self, collections: Iterable[StorageCollection] = ()) -> None:
        self._collections: dict[str, StorageCollection] = {}
        for collection in collections:
            self.register(collection)

    def register(self, collection: StorageCollection) -> None:
        if collection.name in self._collections:
            raise ValueError(f"コレクション '{collection.name}' が重複しています。")
        self._collections[collection.name] = collection

    def get_collection(self, name: str) -> StorageCollection | None:
        return self._collections.get(name)

    def __iter__(self) -> Iterator[StorageCollection]:
        return iter(self._collections.values())

    def __len__(self) -> int:
        return len(self._collections)
