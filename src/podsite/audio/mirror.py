"""Mirror episode audio into the output tree as symlinks.

Audio files are large and never change between builds, so instead of
copying them the output tree links back to the source files.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from podsite.utils.errors import MirrorError

logger = logging.getLogger(__name__)


@dataclass
class MirrorReport:
    """Outcome of a mirroring run."""

    episodes: int = 0
    linked: int = 0
    existing: int = 0


class AudioMirror:
    """Link every episode's audio files into the output episodes directory.

    Example:
        >>> mirror = AudioMirror(Path("src/episodes"), Path("dist/episodes"))
        >>> report = asyncio.run(mirror.run())
        >>> report.linked
        12
    """

    def __init__(
        self,
        source_dir: Path,
        output_dir: Path,
        extensions: list[str] | None = None,
    ) -> None:
        """Initialize the mirror.

        Args:
            source_dir: Directory with one subdirectory per episode
            output_dir: Output episodes directory
            extensions: Audio extensions to link (default: .mp3)
        """
        self.source_dir = source_dir
        self.output_dir = output_dir
        self.extensions = [e.lower() for e in (extensions or [".mp3"])]

    async def run(self) -> MirrorReport:
        """Mirror all episodes.

        Returns:
            MirrorReport with episode and link counts

        Raises:
            MirrorError: If the source directory is missing or any filesystem
                operation other than an already existing link fails
        """
        if not self.source_dir.is_dir():
            raise MirrorError(f"Episodes directory not found: {self.source_dir}")

        episodes = sorted(p for p in self.source_dir.iterdir() if p.is_dir())
        results = await asyncio.gather(*[self._mirror_episode(ep) for ep in episodes])

        report = MirrorReport(episodes=len(episodes))
        for linked, existing in results:
            report.linked += linked
            report.existing += existing

        logger.info(
            "Mirrored %d episode(s): %d linked, %d already present",
            report.episodes,
            report.linked,
            report.existing,
        )
        return report

    async def _mirror_episode(self, episode_dir: Path) -> tuple[int, int]:
        """Link the audio files of one episode.

        Returns:
            (newly linked, already existing) counts
        """
        dist_dir = self.output_dir / episode_dir.name

        try:
            await asyncio.to_thread(dist_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise MirrorError(f"Cannot create {dist_dir}: {e}") from e

        linked = existing = 0
        for audio_file in sorted(episode_dir.iterdir()):
            if not audio_file.is_file() or audio_file.suffix.lower() not in self.extensions:
                continue

            if await self._link(audio_file.resolve(), dist_dir / audio_file.name):
                linked += 1
            else:
                existing += 1

        return linked, existing

    async def _link(self, target: Path, link: Path) -> bool:
        """Create a symlink, treating an existing entry as success.

        Returns:
            True if a new link was created, False if the path already existed
        """
        try:
            await asyncio.to_thread(os.symlink, target, link)
        except FileExistsError:
            logger.debug("Already present: %s", link)
            return False
        except OSError as e:
            raise MirrorError(f"Cannot link {target} -> {link}: {e}") from e

        logger.debug("Linked %s -> %s", link, target)
        return True
