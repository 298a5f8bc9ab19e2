"""Site builder: render pages, emit asset bundles and copy static files."""

import asyncio
import logging
from pathlib import Path
from typing import Any

import aiofiles

from podsite.assets.base import Bundler
from podsite.assets.scripts import ScriptBundler
from podsite.assets.styles import StyleBundler
from podsite.config.schema import SiteConfig
from podsite.engine.models import BuildReport, Page
from podsite.engine.passthrough import copy_passthrough
from podsite.engine.renderer import Renderer, build_collections
from podsite.engine.source import SourceReader
from podsite.engine.transforms import TransformPipeline, default_transforms
from podsite.utils.errors import BuildError

logger = logging.getLogger(__name__)


class SiteBuilder:
    """Build a site from a SiteConfig.

    Example:
        >>> builder = SiteBuilder(config)
        >>> report = asyncio.run(builder.build())
        >>> report.pages
        7
    """

    def __init__(
        self,
        config: SiteConfig,
        transforms: TransformPipeline | None = None,
    ) -> None:
        """Initialize builder.

        Args:
            config: Site configuration
            transforms: Output transforms (default: htmlmin then xmlmin)
        """
        self.config = config
        self.reader = SourceReader(config)
        self.renderer = Renderer(config)
        self.transforms = transforms or default_transforms(config.html_minify)
        self.bundlers: dict[str, Bundler] = {
            ".css": StyleBundler(config.input_path / config.styles.entry),
            ".js": ScriptBundler(config.input_path / config.scripts.entry),
        }

    async def build(self) -> BuildReport:
        """Run the build.

        Pages that belong to a tag collection render first so listing pages
        (index, feed) can embed their rendered content.

        Returns:
            BuildReport with page, asset and copy counts

        Raises:
            BuildError: On any render, bundle, minify or filesystem failure
        """
        pages = self.reader.read_pages()
        collections = build_collections(pages)
        global_data: dict[str, Any] = {**self.reader.read_data(), "collections": collections}

        tagged = [p for p in pages if p.tags]
        untagged = [p for p in pages if not p.tags]

        report = BuildReport()
        for phase in (tagged, untagged):
            written = await asyncio.gather(
                *[self._render_and_write(page, global_data) for page in phase]
            )
            report.pages += sum(written)

        report.copied = await copy_passthrough(
            self.config.input_path, self.config.output_path, self.config.passthrough
        )
        # Bundles go last so a broad passthrough pattern cannot clobber them
        report.assets = await self._write_bundles()

        logger.info(
            "Built %d page(s), %d bundle(s), copied %d file(s)",
            report.pages,
            len(report.assets),
            report.copied,
        )
        return report

    async def _render_and_write(self, page: Page, global_data: dict[str, Any]) -> bool:
        output = await self.renderer.render(page, global_data)
        if page.output_path is None:
            return False

        output = self.transforms.apply(output, page.output_path)
        await self._write(page.output_path, output)
        logger.debug("Wrote %s", page.output_path)
        return True

    async def _write_bundles(self) -> list[Path]:
        """Offer every stylesheet and script to its bundler; only entries emit output."""
        candidates = self.reader.find_files(tuple(self.bundlers))

        async def compile_asset(path: Path) -> Path | None:
            bundler = self.bundlers[path.suffix.lower()]
            code = await asyncio.to_thread(bundler.compile, path)
            if code is None:
                return None
            relative = path.relative_to(self.config.input_path)
            await self._write(relative, code)
            return relative

        results = await asyncio.gather(*[compile_asset(p) for p in candidates])
        emitted = [r for r in results if r is not None]

        for suffix, bundler in self.bundlers.items():
            if not bundler.entry.is_file():
                logger.warning("No %s entry point at %s", suffix, bundler.entry)

        return emitted

    async def _write(self, relative: Path, content: str) -> None:
        target = self.config.output_path / relative
        try:
            await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)
            async with aiofiles.open(target, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            raise BuildError(f"Cannot write {target}: {e}") from e
