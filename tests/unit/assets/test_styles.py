"""Tests for stylesheet bundling."""

from pathlib import Path

import pytest

from podsite.assets.styles import StyleBundler
from podsite.utils.errors import BundleError


@pytest.fixture
def styles_dir(tmp_path: Path) -> Path:
    styles = tmp_path / "styles"
    (styles / "blocks").mkdir(parents=True)
    (styles / "index.css").write_text(
        '@charset "utf-8";\n'
        "/* entry */\n"
        '@import "base.css";\n'
        "@import url(blocks/player.css);\n"
        '@import url("print.css") print;\n'
        '@import "https://fonts.example.com/font.css";\n'
    )
    (styles / "base.css").write_text('@import "vars.css";\nbody {\n    margin: 0;\n}\n')
    (styles / "vars.css").write_text(":root {\n    --accent: #e63946;\n}\n")
    (styles / "blocks" / "player.css").write_text(
        '@import "../vars.css";\n.player__audio {\n    width: 100%;\n}\n'
    )
    (styles / "print.css").write_text(".player__audio {\n    display: none;\n}\n")
    return styles


class TestStyleBundler:
    """Tests for StyleBundler."""

    def test_compile_entry_inlines_nested_imports(self, styles_dir: Path) -> None:
        bundler = StyleBundler(styles_dir / "index.css")

        css = bundler.compile(styles_dir / "index.css")

        assert css is not None
        assert "body{" in css
        assert "margin:0" in css
        assert "width:100%" in css
        assert "#e63946" in css
        assert '@import "base.css"' not in css

    def test_each_file_inlined_once(self, styles_dir: Path) -> None:
        css = StyleBundler(styles_dir / "index.css").compile(styles_dir / "index.css")

        assert css is not None
        assert css.count("#e63946") == 1

    def test_media_import_wrapped(self, styles_dir: Path) -> None:
        css = StyleBundler(styles_dir / "index.css").compile(styles_dir / "index.css")

        assert css is not None
        assert "@media print{" in css
        assert css.index("@media print{") < css.index("display:none")

    def test_remote_import_hoisted(self, styles_dir: Path) -> None:
        css = StyleBundler(styles_dir / "index.css").compile(styles_dir / "index.css")

        assert css is not None
        assert css.startswith('@import "https://fonts.example.com/font.css"')

    def test_comments_and_charset_removed(self, styles_dir: Path) -> None:
        css = StyleBundler(styles_dir / "index.css").compile(styles_dir / "index.css")

        assert css is not None
        assert "entry" not in css
        assert "@charset" not in css

    def test_non_entry_is_noop(self, styles_dir: Path) -> None:
        """Test that only the configured entry compiles."""
        bundler = StyleBundler(styles_dir / "index.css")

        assert bundler.compile(styles_dir / "base.css") is None
        assert bundler.compile(styles_dir / "blocks" / "player.css") is None

    def test_missing_import_raises(self, tmp_path: Path) -> None:
        entry = tmp_path / "index.css"
        entry.write_text('@import "missing.css";\n')

        with pytest.raises(BundleError, match="missing.css"):
            StyleBundler(entry).compile(entry)
