"""
コンテンツアドレス用のチェックサム計算。
"""

from __future__ import annotations

import hashlib


class ChecksumCalculator:
    """
    hashlib のアルゴリズムでコンテンツのダイジェストを計算するユーティリティ。既定は SHA1。
    """

    def __init__(self, algorithm: str = "sha1") -> None:
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"未対応のハッシュアルゴリズムです: {algorithm}")
        self._algorithm = algorithm

    def from_bytes(self, content: bytes) -> str:
        return hashlib.new(self._algorithm, content).hexdigest()
