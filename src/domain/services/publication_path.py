"""
リソース識別情報から相対公開パスを導出する純粋関数群。
"""

from __future__ import annotations

from urllib.parse import quote

from ..models import PersistentResource

_HASH_SUBDIVISION_DEPTH = 4


def resolve_relative_publication_path(resource: PersistentResource, subdivide_hash_path_segment: bool) -> str:
    """
    リソースの相対パスとファイル名を返す。

    静的リソース（relative_publication_path を持つ）はハッシュ方式を無視して
    そのまま連結する。永続リソースはハッシュをパスセグメントとして用いる。

    Returns:
        str: 例として ``c/8/2/8/c828d0f88ce197be1aff7cc2e5e86b1244241ac6/MyPicture.jpg``
        （subdivide 有効時）または ``c828d0f88ce197be1aff7cc2e5e86b1244241ac6/MyPicture.jpg``。
    """

    if resource.relative_publication_path != "":
        return resource.relative_publication_path + resource.filename

    content_hash = resource.content_hash
    if subdivide_hash_path_segment:
        segments = [*content_hash[:_HASH_SUBDIVISION_DEPTH], content_hash, resource.filename]
        return "/".join(segments)
    return f"{content_hash}/{resource.filename}"


def encode_path_for_uri(relative_path: str) -> str:
    """
    パスセグメントごとにパーセントエンコードする。区切りの ``/`` はエンコードしない。
    """

    return "/".join(quote(segment, safe="") for segment in relative_path.split("/"))


def resolve_encoded_publication_path(resource: PersistentResource, subdivide_hash_path_segment: bool) -> str:
    return encode_path_for_uri(resolve_relative_publication_path(resource, subdivide_hash_path_segment))
