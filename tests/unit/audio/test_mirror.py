"""Tests for audio mirroring."""

import os
from pathlib import Path

import pytest

from podsite.audio.mirror import AudioMirror
from podsite.utils.errors import MirrorError


@pytest.fixture
def episodes(tmp_path: Path) -> Path:
    """Source episodes directory with two episodes."""
    source = tmp_path / "src" / "episodes"
    (source / "001").mkdir(parents=True)
    (source / "001" / "episode.mp3").write_bytes(b"ID3 one")
    (source / "001" / "cover.jpg").write_bytes(b"jpeg")
    (source / "002").mkdir()
    (source / "002" / "episode.MP3").write_bytes(b"ID3 two")
    (source / "stray.mp3").write_bytes(b"not in an episode folder")
    return source


class TestAudioMirror:
    """Tests for AudioMirror."""

    @pytest.mark.asyncio
    async def test_links_audio_files(self, tmp_path: Path, episodes: Path) -> None:
        """Test audio files are symlinked into matching episode dirs."""
        output = tmp_path / "dist" / "episodes"
        mirror = AudioMirror(episodes, output)

        report = await mirror.run()

        assert report.episodes == 2
        assert report.linked == 2
        assert report.existing == 0

        link = output / "001" / "episode.mp3"
        assert link.is_symlink()
        assert Path(os.readlink(link)) == (episodes / "001" / "episode.mp3").resolve()
        assert link.read_bytes() == b"ID3 one"
        assert (output / "002" / "episode.MP3").is_symlink()

    @pytest.mark.asyncio
    async def test_skips_non_audio_and_loose_files(self, tmp_path: Path, episodes: Path) -> None:
        output = tmp_path / "dist" / "episodes"

        await AudioMirror(episodes, output).run()

        assert not (output / "001" / "cover.jpg").exists()
        assert not (output / "stray.mp3").exists()

    @pytest.mark.asyncio
    async def test_rerun_is_idempotent(self, tmp_path: Path, episodes: Path) -> None:
        """Test a second run succeeds and leaves the links intact."""
        output = tmp_path / "dist" / "episodes"
        mirror = AudioMirror(episodes, output)

        await mirror.run()
        report = await mirror.run()

        assert report.linked == 0
        assert report.existing == 2
        assert sorted(p.name for p in (output / "001").iterdir()) == ["episode.mp3"]
        assert (output / "001" / "episode.mp3").resolve().exists()

    @pytest.mark.asyncio
    async def test_custom_extensions(self, tmp_path: Path, episodes: Path) -> None:
        output = tmp_path / "dist" / "episodes"

        report = await AudioMirror(episodes, output, extensions=[".jpg"]).run()

        assert report.linked == 1
        assert (output / "001" / "cover.jpg").is_symlink()

    @pytest.mark.asyncio
    async def test_missing_source_dir(self, tmp_path: Path) -> None:
        mirror = AudioMirror(tmp_path / "nope", tmp_path / "dist")

        with pytest.raises(MirrorError, match="not found"):
            await mirror.run()

    @pytest.mark.asyncio
    async def test_blocked_output_dir_is_fatal(self, tmp_path: Path, episodes: Path) -> None:
        """Test filesystem errors other than an existing link abort the run."""
        output = tmp_path / "dist" / "episodes"
        output.mkdir(parents=True)
        (output / "001").write_text("a file where a directory should be")

        with pytest.raises(MirrorError):
            await AudioMirror(episodes, output).run()
