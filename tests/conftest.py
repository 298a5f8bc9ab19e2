"""Shared fixtures for podsite tests."""

import wave
from pathlib import Path

import pytest
import yaml

from podsite.config.manager import ConfigManager
from podsite.config.schema import SiteConfig


def write_wav(path: Path, seconds: float, rate: int = 1000) -> Path:
    """Write a silent mono 8-bit WAV file of the given duration."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(1)
        w.setframerate(rate)
        w.writeframes(b"\x80" * round(seconds * rate))
    return path


EPISODE_LAYOUT = """<!DOCTYPE html>
<html>
<head><title>{{ title }}</title></head>
<body class="page  body">
    <!-- episode layout -->
    <main>
        <p class="duration">{{ audio | duration }}</p>
        <div class="player">
            <audio class="player__audio" src="/{{ audio }}" controls></audio>
            {{ content }}
        </div>
    </main>
</body>
</html>
"""

EPISODE_SOURCE = """---
title: Episode 1
episode: 1
date: 2024-01-05
tags: episode
layout: episode.jinja
audio: episodes/001/episode.wav
---
# {{ title }}

Show notes with <span class="player__timecode">01:05</span> timecodes.
"""

FEED_SOURCE = """---
permalink: /feed.xml
---
<?xml version="1.0" encoding="utf-8"?>
<!-- feed -->
<rss version="2.0">
    <channel>
        {% for item in collections.episode %}
        <item>
            <title>{{ item.data.title }}</title>
            <pubDate>{{ item.date | rfc822 }}</pubDate>
            <enclosure url="/{{ item.data.audio }}" length="{{ item.data.audio | length }}"/>
        </item>
        {% endfor %}
    </channel>
</rss>
"""


@pytest.fixture
def make_wav():
    """Factory fixture: make_wav(path, seconds) writes a WAV file."""
    return write_wav


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A minimal podcast site with one 95-second episode."""
    root = tmp_path / "site"
    src = root / "src"

    (src / "layouts").mkdir(parents=True)
    (src / "layouts" / "episode.jinja").write_text(EPISODE_LAYOUT)

    (src / "episodes" / "001").mkdir(parents=True)
    (src / "episodes" / "001" / "index.md").write_text(EPISODE_SOURCE)
    write_wav(src / "episodes" / "001" / "episode.wav", 95)
    (src / "episodes" / "001" / "cover.jpg").write_bytes(b"\xff\xd8\xff\xe0 fake jpeg")

    (src / "feed.jinja").write_text(FEED_SOURCE)

    (src / "styles").mkdir()
    (src / "styles" / "index.css").write_text('@import "base.css";\n.a { color: red; }\n')
    (src / "styles" / "base.css").write_text("body {\n    margin: 0;\n}\n")

    (src / "scripts").mkdir()
    (src / "scripts" / "index.js").write_text(
        "import { hello } from './hello.js';\n\nhello();\n"
    )
    (src / "scripts" / "hello.js").write_text(
        "export function hello() {\n    console.log('hello');\n}\n"
    )

    config = {
        "input_dir": "src",
        "output_dir": "dist",
        "passthrough": ["episodes/**/*.jpg"],
        "audio": {"extensions": [".wav"]},
    }
    (root / "podsite.yaml").write_text(yaml.safe_dump(config))
    return root


@pytest.fixture
def site_config(site_dir: Path) -> SiteConfig:
    return ConfigManager(site_dir / "podsite.yaml").load_config()
