"""Custom exceptions for podsite."""


class PodsiteError(Exception):
    """Base exception for all podsite errors."""

    pass


class ConfigError(PodsiteError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class BuildError(PodsiteError):
    """Site build errors."""

    pass


class TemplateRenderError(BuildError):
    """A template or markdown document failed to render."""

    def __init__(self, message: str, input_path: str | None = None) -> None:
        super().__init__(message)
        self.input_path = input_path


class BundleError(BuildError):
    """CSS or JavaScript bundling failed."""

    pass


class MinifyError(BuildError):
    """HTML or XML minification failed."""

    pass


class CompressionError(PodsiteError):
    """Brotli precompression failed."""

    pass


class AudioMetadataError(PodsiteError):
    """Audio metadata could not be read."""

    pass


class MirrorError(PodsiteError):
    """Audio mirroring failed."""

    pass
