"""Audio metadata lookup using mutagen."""

import math
from pathlib import Path

import mutagen
from mutagen import MutagenError

from podsite.utils.errors import AudioMetadataError


def get_duration_seconds(path: Path) -> float:
    """Read the embedded duration of an audio file.

    Args:
        path: Path to an audio file (mp3, m4a, ogg, wav, ...)

    Returns:
        Duration in seconds as reported by the container/stream header

    Raises:
        AudioMetadataError: If the file is missing, unrecognized or has no duration
    """
    try:
        audio = mutagen.File(path)
    except (MutagenError, OSError) as e:
        raise AudioMetadataError(f"Cannot read audio metadata from {path}: {e}") from e

    if audio is None:
        raise AudioMetadataError(f"Unrecognized audio format: {path}")

    length = getattr(audio.info, "length", None)
    if length is None:
        raise AudioMetadataError(f"No duration metadata in {path}")

    return float(length)


def format_duration(seconds: float) -> str:
    """Format a duration as HH:MM:SS, rounding up to the next whole second.

    Hours are zero-padded and not wrapped at 24.

    Examples:
        >>> format_duration(125.4)
        '00:02:06'
        >>> format_duration(3723)
        '01:02:03'
    """
    total = math.ceil(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
