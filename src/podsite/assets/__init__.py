"""CSS and JavaScript bundling for podsite."""

from podsite.assets.base import Bundler
from podsite.assets.scripts import ScriptBundler
from podsite.assets.styles import StyleBundler

__all__ = [
    "Bundler",
    "ScriptBundler",
    "StyleBundler",
]
