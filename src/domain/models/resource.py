"""
永続リソースの識別情報を表すドメインエンティティ。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_SHA1_HEX_PATTERN = re.compile(r"[0-9a-fA-F]{40}")


@dataclass(frozen=True)
class PersistentResource:
    """
    コンテンツハッシュで識別される永続リソース。

    Attributes:
        content_hash: コンテンツの SHA1 ダイジェスト（40 桁の16進文字列）。正規のアドレスキー。
        filename: 公開時のファイル名。
        collection_name: リソースが属するコレクション名。
        relative_publication_path: 静的リソースの場合のみ設定される相対公開パス。
            永続リソースでは空文字列。
    """

    content_hash: str
    filename: str
    collection_name: str
    relative_publication_path: str = ""

    def __post_init__(self) -> None:
        if not _SHA1_HEX_PATTERN.fullmatch(self.content_hash):
            raise ValueError("content_hash は 40 桁の16進文字列である必要があります。")
        if not self.filename:
            raise ValueError("filename は必須です。")
        if not self.collection_name:
            raise ValueError("collection_name は必須です。")


@dataclass(frozen=True)
class StoredResource:
    """
    ストレージへのインポート結果。コンテンツ自身のハッシュでキー付けされる。
    """

    content_hash: str
    collection_name: str
    file_size: int
