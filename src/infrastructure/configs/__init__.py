"""
設定管理関連モジュールの公開API。
"""

from .config_repository import ConfigRepository
from .exceptions import ConfigNotFoundError, ConfigRepositoryError, SchemaValidationError
from .proxy_settings import (
    PROXY_CONFIG_NAME,
    RemoteFetchSettings,
    ResourceProxySettings,
    StorageProxySettings,
    load_proxy_configuration,
)
from .schema_registry import JsonSchemaRegistry, SchemaRegistry, StaticSchemaRegistry

__all__ = [
    "ConfigRepository",
    "ConfigRepositoryError",
    "ConfigNotFoundError",
    "SchemaValidationError",
    "SchemaRegistry",
    "JsonSchemaRegistry",
    "StaticSchemaRegistry",
    "PROXY_CONFIG_NAME",
    "RemoteFetchSettings",
    "ResourceProxySettings",
    "StorageProxySettings",
    "load_proxy_configuration",
]
