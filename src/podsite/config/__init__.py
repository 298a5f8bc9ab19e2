"""Configuration loading for podsite."""

from podsite.config.manager import DEFAULT_CONFIG_FILENAME, ConfigManager
from podsite.config.schema import (
    AudioConfig,
    CompressionConfig,
    HtmlMinifyConfig,
    ScriptsConfig,
    SiteConfig,
    StylesConfig,
)

__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_FILENAME",
    "SiteConfig",
    "StylesConfig",
    "ScriptsConfig",
    "HtmlMinifyConfig",
    "CompressionConfig",
    "AudioConfig",
]
