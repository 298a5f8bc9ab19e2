"""Passthrough copy of static assets."""

import asyncio
import logging
import shutil
from pathlib import Path

from podsite.utils.errors import BuildError

logger = logging.getLogger(__name__)


def expand_patterns(input_dir: Path, patterns: list[str]) -> list[Path]:
    """Resolve passthrough patterns to existing files.

    Directories expand to every file below them.
    """
    files: dict[Path, None] = {}
    for pattern in patterns:
        matches = sorted(input_dir.glob(pattern.strip("/")))
        if not matches:
            logger.debug("Passthrough pattern matched nothing: %s", pattern)

        for match in matches:
            if match.is_dir():
                for child in sorted(match.rglob("*")):
                    if child.is_file():
                        files[child] = None
            elif match.is_file():
                files[match] = None

    return list(files)


def _copy_file(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    # Never write through a link left by audio mirroring
    if target.is_symlink():
        target.unlink()
    shutil.copy2(source, target)


async def copy_passthrough(input_dir: Path, output_dir: Path, patterns: list[str]) -> int:
    """Copy static assets unchanged into the output directory.

    Returns:
        Number of files copied

    Raises:
        BuildError: If any copy fails
    """
    files = expand_patterns(input_dir, patterns)

    async def copy(source: Path) -> None:
        target = output_dir / source.relative_to(input_dir)
        try:
            await asyncio.to_thread(_copy_file, source, target)
        except OSError as e:
            raise BuildError(f"Cannot copy {source} to {target}: {e}") from e

    await asyncio.gather(*[copy(f) for f in files])
    logger.debug("Copied %d passthrough file(s)", len(files))
    return len(files)
