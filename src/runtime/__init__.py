"""
runtime パッケージ公開 API。
"""

from .dependencies import (
    ResourceManager,
    bootstrap_application,
    build_config_repository,
    build_resource_manager,
    build_runtime,
    default_environment,
    default_project_root,
)

__all__ = [
    "ResourceManager",
    "bootstrap_application",
    "build_config_repository",
    "build_resource_manager",
    "build_runtime",
    "default_environment",
    "default_project_root",
]
