"""Template and markdown rendering.

Documents are rendered as Jinja templates first; markdown documents are
then converted to HTML. The result is wrapped in the page's layout chain.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Any

import frontmatter
import jinja2
import yaml
from markupsafe import Markup

from podsite.config.schema import SiteConfig
from podsite.engine.filters import register_filters, render_markdown
from podsite.engine.models import Page
from podsite.utils.errors import TemplateRenderError

logger = logging.getLogger(__name__)


def create_environment(config: SiteConfig) -> jinja2.Environment:
    """Async Jinja environment with the site filters installed.

    Templates are looked up in the includes dir, the layouts dir and then
    the input dir. `None` renders as an empty string.
    """
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(
            [
                str(config.includes_path),
                str(config.layouts_path),
                str(config.input_path),
            ]
        ),
        autoescape=jinja2.select_autoescape(default=True, default_for_string=True),
        enable_async=True,
        finalize=lambda value: "" if value is None else value,
        keep_trailing_newline=True,
    )
    register_filters(env, config)
    return env


def build_collections(pages: list[Page]) -> dict[str, list[Page]]:
    """Group pages into `all` plus one collection per tag, sorted by date."""
    collections: dict[str, list[Page]] = defaultdict(list)
    for page in pages:
        collections["all"].append(page)
        for tag in page.tags:
            collections[tag].append(page)

    return {
        name: sorted(items, key=lambda p: (p.date, str(p.relative_path)))
        for name, items in collections.items()
    }


class Renderer:
    """Renders pages to their final markup."""

    def __init__(self, config: SiteConfig, env: jinja2.Environment | None = None) -> None:
        self.config = config
        self.env = env or create_environment(config)
        self._layouts: dict[str, tuple[jinja2.Template, dict[str, Any]]] = {}

    async def render(self, page: Page, global_data: dict[str, Any]) -> str:
        """Render a page, storing its pre-layout content on `page.content`.

        Args:
            page: Page to render
            global_data: Data files plus `collections`

        Returns:
            Fully rendered output including layouts

        Raises:
            TemplateRenderError: If the page or one of its layouts fails to render
        """
        context = {**global_data, **page.data, "page": page.as_context()}

        try:
            template = self.env.from_string(page.body)
            content = await template.render_async(context)
            page.content = render_markdown(content) if page.is_markdown else Markup(content)
            return await self._apply_layouts(page, context)
        except TemplateRenderError:
            raise
        except (jinja2.TemplateError, OSError, TypeError, ValueError) as e:
            raise TemplateRenderError(
                f"Failed to render {page.relative_path}: {e}",
                input_path=str(page.relative_path),
            ) from e

    async def _apply_layouts(self, page: Page, context: dict[str, Any]) -> str:
        content = page.content
        layout = page.data.get("layout")
        seen: set[str] = set()
        inherited: dict[str, Any] = {}

        while layout:
            if layout in seen:
                raise TemplateRenderError(
                    f"Layout cycle in {page.relative_path}: {layout}",
                    input_path=str(page.relative_path),
                )
            seen.add(layout)

            template, layout_data = self._load_layout(layout, page)
            # Page data wins, then the nearest layout's data
            inherited = {**layout_data, **inherited}
            layout_context = {**inherited, **context, "content": Markup(content)}
            content = await template.render_async(layout_context)
            layout = layout_data.get("layout")

        return str(content)

    def _load_layout(self, name: str, page: Page) -> tuple[jinja2.Template, dict[str, Any]]:
        if name not in self._layouts:
            path = self.config.layouts_path / name
            try:
                post = frontmatter.loads(path.read_text(encoding="utf-8"))
            except (OSError, yaml.YAMLError) as e:
                raise TemplateRenderError(
                    f"Layout '{name}' used by {page.relative_path} cannot be loaded: {e}",
                    input_path=str(page.relative_path),
                ) from e
            self._layouts[name] = (self.env.from_string(post.content), dict(post.metadata))
            logger.debug("Loaded layout %s", name)

        return self._layouts[name]
