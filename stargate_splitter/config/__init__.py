"""Configuration utilities for the bridge splitter."""

from .loader import (
    MODES,
    ApiUrlsConfig,
    ConfigError,
    ContractsConfig,
    DefaultsConfig,
    NetworkConfig,
    RouteRequestConfig,
    SplitterConfig,
    load_config,
    parse_config,
)

__all__ = [
    "ApiUrlsConfig",
    "ConfigError",
    "ContractsConfig",
    "DefaultsConfig",
    "MODES",
    "NetworkConfig",
    "RouteRequestConfig",
    "SplitterConfig",
    "load_config",
    "parse_config",
]
