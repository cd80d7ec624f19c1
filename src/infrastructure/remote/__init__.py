"""
リモートオリジンとの通信アダプタ。
"""

from .fetcher import HttpRemoteResourceFetcher, build_remote_uri

__all__ = [
    "HttpRemoteResourceFetcher",
    "build_remote_uri",
]
