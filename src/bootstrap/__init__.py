"""
ブートストラップ関連の公開API。
"""

from .container import (
    BootstrapContainer,
    BootstrapContext,
    BootstrapError,
    ConfigBundle,
    InvalidConfigurationError,
    LoggingConfigurator,
    MetricsConfigurator,
    MissingConfigurationError,
)
from .config_loader import AppConfigModel, ResourceManagementConfigModel, YamlConfigLoader
from .logging_setup import DictConfigLoggingConfigurator
from .metrics_setup import (
    MetricsConfiguratorRegistry,
    NoopMetricsConfigurator,
    PrometheusMetricsConfigurator,
    default_metrics_configurator,
)

__all__ = [
    "BootstrapContainer",
    "BootstrapContext",
    "BootstrapError",
    "ConfigBundle",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "LoggingConfigurator",
    "MetricsConfigurator",
    "DictConfigLoggingConfigurator",
    "MetricsConfiguratorRegistry",
    "NoopMetricsConfigurator",
    "PrometheusMetricsConfigurator",
    "default_metrics_configurator",
    "YamlConfigLoader",
    "AppConfigModel",
    "ResourceManagementConfigModel",
]
