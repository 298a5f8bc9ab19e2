"""Episode audio helpers for podsite."""

from podsite.audio.metadata import format_duration, get_duration_seconds
from podsite.audio.mirror import AudioMirror, MirrorReport

__all__ = [
    "AudioMirror",
    "MirrorReport",
    "format_duration",
    "get_duration_seconds",
]
