"""Custom template filters.

Filters that take a file path resolve relative paths against the input
directory, so templates can write `"episodes/001/episode.mp3" | duration`.
"""

import asyncio
import logging
import os
from datetime import date, datetime, time, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import Any

import markdown
from jinja2 import Environment
from markupsafe import Markup

from podsite.assets.styles import StyleBundler
from podsite.audio.metadata import format_duration, get_duration_seconds
from podsite.config.schema import HtmlMinifyConfig, SiteConfig
from podsite.engine.transforms import minify_html
from podsite.utils.errors import AudioMetadataError

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["extra"]


def render_markdown(text: str) -> Markup:
    """Render markdown to HTML; raw HTML in the source passes through."""
    return Markup(markdown.markdown(str(text), extensions=MARKDOWN_EXTENSIONS))


def file_length(path: Path) -> int:
    """Size of a file in bytes."""
    return os.stat(path).st_size


async def audio_duration(path: Path) -> str | None:
    """Duration of an audio file as HH:MM:SS, or None if it cannot be read.

    Metadata failures are logged and never fail the build.
    """
    try:
        seconds = await asyncio.to_thread(get_duration_seconds, path)
    except AudioMetadataError as e:
        logger.warning("No duration for %s: %s", path, e)
        return None
    return format_duration(seconds)


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=timezone.utc)
    if isinstance(value, str):
        return _as_datetime(datetime.fromisoformat(value))
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def rfc822(value: Any) -> str:
    """Format a date as RFC-822, e.g. `Fri, 05 Jan 2024 00:00:00 +0000`."""
    return format_datetime(_as_datetime(value))


def format_date(value: Any, fmt: str = "%Y-%m-%d") -> str:
    return _as_datetime(value).strftime(fmt)


def register_filters(
    env: Environment,
    config: SiteConfig,
    html_options: HtmlMinifyConfig | None = None,
) -> None:
    """Install the site filters on a Jinja environment."""
    input_dir = config.input_path

    def resolve(path: str | Path) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else input_dir / candidate

    def length(path: str | Path) -> int:
        return file_length(resolve(path))

    async def duration(path: str | Path | None) -> str | None:
        # Undefined template variables are falsy, like None and ""
        if not path:
            logger.warning("No audio path given to the duration filter")
            return None
        return await audio_duration(resolve(path))

    def css(path: str | Path) -> Markup:
        stylesheet = resolve(path)
        return Markup(StyleBundler(stylesheet).bundle(stylesheet))

    def htmlmin(value: str) -> Markup:
        return Markup(minify_html(str(value), html_options or config.html_minify))

    env.filters.update(
        {
            "length": length,
            "duration": duration,
            "markdown": render_markdown,
            "rfc822": rfc822,
            "date": format_date,
            "css": css,
            "htmlmin": htmlmin,
        }
    )
