"""JavaScript bundling: resolve relative ES module imports and minify with rjsmin.

Each module is wrapped in a function scope that returns its exports, and
modules are emitted dependencies-first so every import binding reads from
an already evaluated module. Only relative specifiers are supported.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import rjsmin

from podsite.assets.base import Bundler
from podsite.utils.errors import BundleError

logger = logging.getLogger(__name__)

IMPORT_RE = re.compile(
    r"""^[ \t]*import\s+
        (?:(?P<clause>[\w$*{}\s,]+?)\s+from\s+)?
        (?P<q>['"])(?P<module>[^'"]+)(?P=q)[ \t]*;?""",
    re.MULTILINE | re.VERBOSE,
)
REEXPORT_RE = re.compile(r"""^[ \t]*export\s+(?:\*|\{[^}]*\})\s*from\s""", re.MULTILINE)
EXPORT_DECL_RE = re.compile(
    r"^([ \t]*)export\s+((?:async\s+)?(?:function\*?|class|const|let|var)\s+([\w$]+))",
    re.MULTILINE,
)
EXPORT_LIST_RE = re.compile(r"^[ \t]*export\s*\{(?P<names>[^}]*)\}[ \t]*;?", re.MULTILINE)
EXPORT_DEFAULT_RE = re.compile(r"^([ \t]*)export\s+default\s+", re.MULTILINE)

DEFAULT_BINDING = "__default"


@dataclass
class Module:
    """A parsed module in the bundle graph."""

    path: Path
    source: str
    index: int = -1
    imports: list[tuple[str | None, Path]] = field(default_factory=list)


class ScriptBundler(Bundler):
    """Bundle a single entry script targeting an ES2020 baseline."""

    def bundle(self, path: Path) -> str:
        ordered: list[Module] = []
        self._collect(path.resolve(), ordered, visiting=set(), done={})

        chunks = ["(()=>{", "const __modules=[];"]
        for module in ordered:
            chunks.append(self._wrap(module, {m.path: m.index for m in ordered}))
        chunks.append("})();")

        return rjsmin.jsmin("\n".join(chunks))

    def _collect(
        self,
        path: Path,
        ordered: list[Module],
        visiting: set[Path],
        done: dict[Path, Module],
    ) -> Module:
        if path in done:
            return done[path]
        if path in visiting:
            raise BundleError(f"Circular import involving {path}")
        visiting.add(path)

        try:
            source = path.read_text(encoding="utf-8")
        except OSError as e:
            raise BundleError(f"Cannot read script {path}: {e}") from e

        if REEXPORT_RE.search(source):
            raise BundleError(f"Re-exports are not supported: {path}")

        module = Module(path=path, source=source)
        for match in IMPORT_RE.finditer(source):
            dependency = self._resolve(match.group("module"), path)
            self._collect(dependency, ordered, visiting, done)
            module.imports.append((match.group("clause"), dependency))

        visiting.discard(path)
        module.index = len(ordered)
        ordered.append(module)
        done[path] = module
        return module

    def _resolve(self, specifier: str, importer: Path) -> Path:
        if not specifier.startswith(("./", "../")):
            raise BundleError(
                f"Cannot resolve '{specifier}' in {importer}: only relative imports are bundled"
            )

        candidate = (importer.parent / specifier).resolve()
        if not candidate.exists() and not candidate.suffix:
            candidate = candidate.with_suffix(".js")
        if not candidate.is_file():
            raise BundleError(f"Cannot resolve '{specifier}' in {importer}")
        return candidate

    def _wrap(self, module: Module, indexes: dict[Path, int]) -> str:
        imports = iter(module.imports)

        def replace_import(match: re.Match[str]) -> str:
            clause, dependency = next(imports)
            return _import_bindings(clause, f"__modules[{indexes[dependency]}]")

        body = IMPORT_RE.sub(replace_import, module.source)

        exports: dict[str, str] = {}

        def replace_decl(match: re.Match[str]) -> str:
            exports[match.group(3)] = match.group(3)
            return match.group(1) + match.group(2)

        def replace_list(match: re.Match[str]) -> str:
            for item in match.group("names").split(","):
                item = item.strip()
                if not item:
                    continue
                local, _, exported = item.partition(" as ")
                exports[(exported or local).strip()] = local.strip()
            return ""

        body = EXPORT_DECL_RE.sub(replace_decl, body)
        body = EXPORT_LIST_RE.sub(replace_list, body)
        if EXPORT_DEFAULT_RE.search(body):
            body = EXPORT_DEFAULT_RE.sub(rf"\1const {DEFAULT_BINDING}=", body, count=1)
            exports["default"] = DEFAULT_BINDING

        returned = ",".join(f"{name}:{local}" for name, local in exports.items())
        logger.debug("Bundling %s (%d exports)", module.path.name, len(exports))
        return f"__modules[{module.index}]=(()=>{{\n{body}\n;return {{{returned}}};}})();"


def _import_bindings(clause: str | None, source: str) -> str:
    """Translate an import clause into const bindings read from `source`.

    Examples:
        >>> _import_bindings("x, { a, b as c }", "__modules[0]")
        'const x=__modules[0].default;const {a,b:c}=__modules[0];'
        >>> _import_bindings("* as ns", "__modules[1]")
        'const ns=__modules[1];'
    """
    if not clause:
        return ""

    statements = []
    named = re.search(r"\{([^}]*)\}", clause)
    rest = clause[: named.start()] + clause[named.end():] if named else clause

    for part in (p.strip() for p in rest.split(",")):
        if not part:
            continue
        if part.startswith("*"):
            alias = part.split(" as ", 1)[1].strip()
            statements.append(f"const {alias}={source};")
        else:
            statements.append(f"const {part}={source}.default;")

    if named:
        bindings = []
        for item in (i.strip() for i in named.group(1).split(",")):
            if not item:
                continue
            imported, _, local = item.partition(" as ")
            imported, local = imported.strip(), local.strip()
            bindings.append(f"{imported}:{local}" if local else imported)
        statements.append(f"const {{{','.join(bindings)}}}={source};")

    return "".join(statements)
