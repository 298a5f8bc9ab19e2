"""Brotli precompression of the generated output tree.

Writes a `.br` sibling next to every compressible file so a static file
server can serve the precompressed variant directly.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import aiofiles
import brotli

from podsite.utils.display import format_bytes
from podsite.utils.errors import CompressionError

logger = logging.getLogger(__name__)

BROTLI_SUFFIX = ".br"
DEFAULT_EXTENSIONS = (".css", ".js", ".html", ".xml", ".svg")


@dataclass
class FileStats:
    """Sizes for a single compressed file."""

    path: Path
    original: int
    compressed: int


@dataclass
class CompressionReport:
    """Aggregate statistics for a compression run."""

    files: int = 0
    original_bytes: int = 0
    compressed_bytes: int = 0

    @property
    def savings_percent(self) -> float:
        if self.original_bytes == 0:
            return 0.0
        return (1 - self.compressed_bytes / self.original_bytes) * 100

    def summary(self) -> str:
        """One-line human readable summary."""
        return (
            f"Compressed {self.files} files: "
            f"{format_bytes(self.original_bytes)} → {format_bytes(self.compressed_bytes)} "
            f"(-{self.savings_percent:.1f}%)"
        )


class BrotliCompressor:
    """Precompress text-like files in an output directory.

    Example:
        >>> compressor = BrotliCompressor(Path("dist"))
        >>> report = asyncio.run(compressor.run())
        >>> print(report.summary())
        Compressed 14 files: 182.3 KB → 41.0 KB (-77.5%)
    """

    def __init__(
        self,
        output_dir: Path,
        extensions: list[str] | tuple[str, ...] = DEFAULT_EXTENSIONS,
        quality: int = 11,
    ) -> None:
        """Initialize compressor.

        Args:
            output_dir: Directory to walk
            extensions: Allowed file extensions
            quality: Brotli quality, 0-11 (11 is maximum)
        """
        self.output_dir = output_dir
        self.extensions = tuple(e.lower() for e in extensions)
        self.quality = quality

    def find_files(self) -> list[Path]:
        """List regular files under the output directory with an allowed extension.

        Symlinks (mirrored audio, linked assets) are skipped.
        """
        files = []
        for path in sorted(self.output_dir.rglob("*")):
            if path.is_symlink() or not path.is_file():
                continue
            if path.name.lower().endswith(self.extensions):
                files.append(path)
        return files

    async def run(self) -> CompressionReport:
        """Compress every eligible file and aggregate sizes.

        Returns:
            CompressionReport for the whole run

        Raises:
            CompressionError: If the output directory is missing or any file
                fails to read, compress or write
        """
        if not self.output_dir.is_dir():
            raise CompressionError(f"Output directory not found: {self.output_dir}")

        files = self.find_files()

        # A single failure aborts the pass
        stats = await asyncio.gather(*[self.compress_file(f) for f in files])

        report = CompressionReport(
            files=len(stats),
            original_bytes=sum(s.original for s in stats),
            compressed_bytes=sum(s.compressed for s in stats),
        )
        logger.info(report.summary())
        return report

    async def compress_file(self, path: Path) -> FileStats:
        """Compress one file into `<path>.br`.

        The compressed bytes go to a temp file first and are renamed into
        place, so a `.br` file is either complete or absent.
        """
        target = path.with_name(path.name + BROTLI_SUFFIX)
        temp_file = path.with_name(path.name + BROTLI_SUFFIX + ".tmp")

        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()

            compressed = await asyncio.to_thread(
                brotli.compress, content, quality=self.quality
            )

            async with aiofiles.open(temp_file, "wb") as f:
                await f.write(compressed)

            await asyncio.to_thread(temp_file.replace, target)

        except (OSError, brotli.error) as e:
            temp_file.unlink(missing_ok=True)
            raise CompressionError(f"Failed to compress {path}: {e}") from e

        logger.debug(
            "%s: %s → %s", path, format_bytes(len(content)), format_bytes(len(compressed))
        )
        return FileStats(path=path, original=len(content), compressed=len(compressed))
