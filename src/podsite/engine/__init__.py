"""Static site engine: source reading, rendering, transforms and output."""

from podsite.engine.builder import SiteBuilder
from podsite.engine.models import BuildReport, Page
from podsite.engine.renderer import Renderer, build_collections, create_environment
from podsite.engine.source import SourceReader, output_path_for, url_for
from podsite.engine.transforms import (
    TransformPipeline,
    default_transforms,
    minify_html,
    minify_xml,
)

__all__ = [
    "BuildReport",
    "Page",
    "Renderer",
    "SiteBuilder",
    "SourceReader",
    "TransformPipeline",
    "build_collections",
    "create_environment",
    "default_transforms",
    "minify_html",
    "minify_xml",
    "output_path_for",
    "url_for",
]
