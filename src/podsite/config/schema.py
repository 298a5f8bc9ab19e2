"""Configuration schema models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


def _normalize_extensions(values: list[str]) -> list[str]:
    return [v.lower() if v.startswith(".") else f".{v.lower()}" for v in values]


class StylesConfig(BaseModel):
    """Stylesheet bundle configuration."""

    entry: str = "styles/index.css"  # Relative to input_dir


class ScriptsConfig(BaseModel):
    """JavaScript bundle configuration."""

    entry: str = "scripts/index.js"  # Relative to input_dir


class HtmlMinifyConfig(BaseModel):
    """HTML minification options."""

    remove_comments: bool = True
    collapse_whitespace: bool = True
    collapse_boolean_attributes: bool = True
    sort_class_name: bool = True
    decode_entities: bool = True


class CompressionConfig(BaseModel):
    """Brotli precompression configuration."""

    extensions: list[str] = Field(
        default_factory=lambda: [".css", ".js", ".html", ".xml", ".svg"]
    )
    quality: int = Field(default=11, ge=0, le=11)

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        return _normalize_extensions(v)


class AudioConfig(BaseModel):
    """Episode audio configuration."""

    episodes_dir: str = "episodes"  # Relative to input_dir, mirrored into output_dir
    extensions: list[str] = Field(default_factory=lambda: [".mp3"])

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        return _normalize_extensions(v)


class SiteConfig(BaseModel):
    """Site build configuration."""

    version: str = "1"
    log_level: LogLevel = "INFO"

    # Directories
    input_dir: Path = Field(default=Path("src"))
    output_dir: Path = Field(default=Path("dist"))
    includes_dir: str = "includes"  # Relative to input_dir
    layouts_dir: str = "layouts"  # Relative to input_dir
    data_dir: str = "data"  # Relative to input_dir

    template_formats: list[str] = Field(default_factory=lambda: ["md", "jinja"])
    passthrough: list[str] = Field(
        default_factory=lambda: [
            "favicon.ico",
            "fonts",
            "images",
            "episodes/**/*.jpg",
        ]
    )

    # Asset and post-build configurations
    styles: StylesConfig = Field(default_factory=StylesConfig)
    scripts: ScriptsConfig = Field(default_factory=ScriptsConfig)
    html_minify: HtmlMinifyConfig = Field(default_factory=HtmlMinifyConfig)
    compression: CompressionConfig = Field(default_factory=CompressionConfig)
    audio: AudioConfig = Field(default_factory=AudioConfig)

    # Directory holding the config file; set by ConfigManager
    root: Path = Field(default=Path("."), exclude=True)

    @field_validator("template_formats")
    @classmethod
    def strip_dots(cls, v: list[str]) -> list[str]:
        return [fmt.lstrip(".").lower() for fmt in v]

    @property
    def input_path(self) -> Path:
        return self.root / self.input_dir

    @property
    def output_path(self) -> Path:
        return self.root / self.output_dir

    @property
    def includes_path(self) -> Path:
        return self.input_path / self.includes_dir

    @property
    def layouts_path(self) -> Path:
        return self.input_path / self.layouts_dir

    @property
    def data_path(self) -> Path:
        return self.input_path / self.data_dir

    @property
    def episodes_source_path(self) -> Path:
        return self.input_path / self.audio.episodes_dir

    @property
    def episodes_output_path(self) -> Path:
        return self.output_path / self.audio.episodes_dir
