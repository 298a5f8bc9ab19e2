"""Tests for JavaScript bundling."""

from pathlib import Path

import pytest

from podsite.assets.scripts import ScriptBundler, _import_bindings
from podsite.utils.errors import BundleError


@pytest.fixture
def scripts_dir(tmp_path: Path) -> Path:
    scripts = tmp_path / "scripts"
    (scripts / "lib").mkdir(parents=True)
    (scripts / "index.js").write_text(
        "import { initPlayers } from './player.js';\n"
        "import format, { pad as zeroPad } from './lib/format';\n"
        "import './lib/polyfill.js';\n"
        "\n"
        "document.addEventListener('DOMContentLoaded', () => {\n"
        "    initPlayers(document, format, zeroPad);\n"
        "});\n"
    )
    (scripts / "player.js").write_text(
        "import { pad } from './lib/format.js';\n"
        "\n"
        "export const initPlayers = (root) => {\n"
        "    return root.querySelectorAll('.player');\n"
        "};\n"
    )
    (scripts / "lib" / "format.js").write_text(
        "const pad = (n) => String(n).padStart(2, '0');\n"
        "\n"
        "export default function format(seconds) {\n"
        "    return pad(seconds);\n"
        "}\n"
        "\n"
        "export { pad };\n"
    )
    (scripts / "lib" / "polyfill.js").write_text("window.polyfilled = true;\n")
    return scripts


class TestScriptBundler:
    """Tests for ScriptBundler."""

    def test_bundle_resolves_imports(self, scripts_dir: Path) -> None:
        js = ScriptBundler(scripts_dir / "index.js").compile(scripts_dir / "index.js")

        assert js is not None
        assert "querySelectorAll('.player')" in js
        assert "padStart(2,'0')" in js
        assert "window.polyfilled=true" in js
        assert "DOMContentLoaded" in js

    def test_no_module_syntax_left(self, scripts_dir: Path) -> None:
        js = ScriptBundler(scripts_dir / "index.js").compile(scripts_dir / "index.js")

        assert js is not None
        assert "import " not in js
        assert "export " not in js

    def test_dependencies_emitted_first(self, scripts_dir: Path) -> None:
        js = ScriptBundler(scripts_dir / "index.js").compile(scripts_dir / "index.js")

        assert js is not None
        assert js.index("padStart") < js.index("querySelectorAll") < js.index("DOMContentLoaded")
        # format.js is shared by index.js and player.js but emitted once
        assert js.count("padStart") == 1

    def test_wrapped_in_iife(self, scripts_dir: Path) -> None:
        js = ScriptBundler(scripts_dir / "index.js").compile(scripts_dir / "index.js")

        assert js is not None
        assert js.startswith("(()=>{")
        assert js.endswith("})();")

    def test_non_entry_is_noop(self, scripts_dir: Path) -> None:
        bundler = ScriptBundler(scripts_dir / "index.js")

        assert bundler.compile(scripts_dir / "player.js") is None

    def test_bare_import_raises(self, tmp_path: Path) -> None:
        entry = tmp_path / "index.js"
        entry.write_text("import lodash from 'lodash';\n")

        with pytest.raises(BundleError, match="only relative imports"):
            ScriptBundler(entry).compile(entry)

    def test_missing_module_raises(self, tmp_path: Path) -> None:
        entry = tmp_path / "index.js"
        entry.write_text("import { x } from './missing.js';\n")

        with pytest.raises(BundleError, match="missing.js"):
            ScriptBundler(entry).compile(entry)

    def test_circular_import_raises(self, tmp_path: Path) -> None:
        (tmp_path / "a.js").write_text("import './b.js';\n")
        (tmp_path / "b.js").write_text("import './a.js';\n")

        with pytest.raises(BundleError, match="Circular"):
            ScriptBundler(tmp_path / "a.js").compile(tmp_path / "a.js")


class TestImportBindings:
    """Tests for import clause translation."""

    def test_side_effect_import(self) -> None:
        assert _import_bindings(None, "__modules[0]") == ""

    def test_named_with_alias(self) -> None:
        assert (
            _import_bindings("{ a, b as c }", "__modules[0]")
            == "const {a,b:c}=__modules[0];"
        )

    def test_default_and_named(self) -> None:
        assert (
            _import_bindings("x, { a }", "__modules[2]")
            == "const x=__modules[2].default;const {a}=__modules[2];"
        )

    def test_namespace(self) -> None:
        assert _import_bindings("* as ns", "__modules[1]") == "const ns=__modules[1];"
