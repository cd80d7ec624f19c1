"""
ベース URI の配下にリソースを公開するターゲット。
"""

from __future__ import annotations

from dataclasses import dataclass

from domain import PersistentResource
from domain.services import PublicUriTarget, resolve_encoded_publication_path


@dataclass(frozen=True)
class StaticBaseUriTarget(PublicUriTarget):
    """
    `<base_uri>/<エンコード済み相対公開パス>` を公開 URI として返す。

    リソースの実体が存在するかは確認しない。
    """

    name: str
    base_uri: str
    subdivide_hash_path_segment: bool = False

    def __post_init__(self) -> None:
        if not self.base_uri:
            raise ValueError(f"target '{self.name}' の base_uri は必須です。")

    def get_public_persistent_resource_uri(self, resource: PersistentResource) -> str:
        encoded_path = resolve_encoded_publication_path(resource, self.subdivide_hash_path_segment)
        return f"{self.base_uri.rstrip('/')}/{encoded_path}"
