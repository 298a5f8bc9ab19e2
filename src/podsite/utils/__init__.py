"""Utility functions and helpers for podsite."""

from podsite.utils.display import format_bytes
from podsite.utils.errors import (
    AudioMetadataError,
    BuildError,
    BundleError,
    CompressionError,
    ConfigError,
    InvalidConfigError,
    MinifyError,
    MirrorError,
    PodsiteError,
    TemplateRenderError,
)

__all__ = [
    # Errors
    "PodsiteError",
    "ConfigError",
    "InvalidConfigError",
    "BuildError",
    "TemplateRenderError",
    "BundleError",
    "MinifyError",
    "CompressionError",
    "AudioMetadataError",
    "MirrorError",
    # Display
    "format_bytes",
]
