"""Source reader: discovers documents, front matter and global data files."""

import json
import logging
from datetime import date, datetime, time, timezone
from pathlib import Path, PurePosixPath
from typing import Any

import frontmatter
import yaml

from podsite.config.schema import SiteConfig
from podsite.engine.models import Page
from podsite.utils.errors import BuildError

logger = logging.getLogger(__name__)

DATA_EXTENSIONS = (".yml", ".yaml", ".json")


def load_yaml_data(text: str) -> Any:
    """YAML data-file loader."""
    return yaml.safe_load(text)


def output_path_for(relative_path: Path, permalink: Any = None) -> Path | None:
    """Map a source path to its output path.

    `about.md` becomes `about/index.html`, `index.md` stays `index.html`.
    A permalink overrides the mapping; `False` means the page is not written.

    Examples:
        >>> output_path_for(Path("about.md"))
        PosixPath('about/index.html')
        >>> output_path_for(Path("feed.jinja"), "/feed.xml")
        PosixPath('feed.xml')
    """
    if permalink is False:
        return None

    if permalink:
        target = str(permalink).lstrip("/")
        if not target or target.endswith("/"):
            target += "index.html"
        return Path(target)

    if relative_path.stem == "index":
        return relative_path.with_suffix(".html")
    return relative_path.parent / relative_path.stem / "index.html"


def url_for(output_path: Path) -> str:
    """Site URL for an output path, dropping a trailing index.html."""
    posix = PurePosixPath(output_path.as_posix())
    if posix.name == "index.html":
        parent = posix.parent.as_posix()
        return "/" if parent == "." else f"/{parent}/"
    return f"/{posix.as_posix()}"


def coerce_date(value: Any, fallback: datetime) -> datetime:
    """Normalize a front matter date to an aware datetime (UTC when naive)."""
    if value is None:
        return fallback
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError as e:
        raise BuildError(f"Invalid date: {value!r}") from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class SourceReader:
    """Walks the input directory for a site build."""

    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self.input_dir = config.input_path
        self._excluded = [
            config.includes_path.resolve(),
            config.layouts_path.resolve(),
            config.data_path.resolve(),
        ]

    def _is_excluded(self, path: Path) -> bool:
        relative = path.relative_to(self.input_dir)
        if any(part.startswith(".") for part in relative.parts):
            return True
        resolved = path.resolve()
        return any(resolved.is_relative_to(excluded) for excluded in self._excluded)

    def find_files(self, suffixes: tuple[str, ...]) -> list[Path]:
        """Files under the input dir with one of `suffixes`, outside the special dirs."""
        if not self.input_dir.is_dir():
            raise BuildError(f"Input directory not found: {self.input_dir}")

        return [
            path
            for path in sorted(self.input_dir.rglob("*"))
            if path.is_file()
            and path.suffix.lower() in suffixes
            and not self._is_excluded(path)
        ]

    def find_documents(self) -> list[Path]:
        suffixes = tuple(f".{fmt}" for fmt in self.config.template_formats)
        return self.find_files(suffixes)

    def read_document(self, path: Path) -> Page:
        """Parse one source document."""
        try:
            post = frontmatter.loads(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise BuildError(f"Cannot read {path}: {e}") from e

        relative_path = path.relative_to(self.input_dir)
        data = dict(post.metadata)
        output_path = output_path_for(relative_path, data.get("permalink"))
        mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)

        return Page(
            input_path=path,
            relative_path=relative_path,
            template_format=path.suffix.lstrip(".").lower(),
            body=post.content,
            data=data,
            output_path=output_path,
            url=url_for(output_path) if output_path else None,
            date=coerce_date(data.get("date"), mtime),
        )

    def read_pages(self) -> list[Page]:
        """Parse every source document.

        Raises:
            BuildError: If two documents map to the same output path
        """
        pages = [self.read_document(path) for path in self.find_documents()]

        claimed: dict[Path, Path] = {}
        for page in pages:
            if page.output_path is None:
                continue
            if page.output_path in claimed:
                raise BuildError(
                    f"Output conflict: {claimed[page.output_path]} and "
                    f"{page.relative_path} both write {page.output_path}"
                )
            claimed[page.output_path] = page.relative_path

        logger.debug("Found %d source document(s)", len(pages))
        return pages

    def read_data(self) -> dict[str, Any]:
        """Load global data files, keyed by file stem."""
        data_dir = self.config.data_path
        if not data_dir.is_dir():
            return {}

        data: dict[str, Any] = {}
        for path in sorted(data_dir.iterdir()):
            if not path.is_file() or path.suffix.lower() not in DATA_EXTENSIONS:
                continue
            try:
                text = path.read_text(encoding="utf-8")
                if path.suffix.lower() == ".json":
                    data[path.stem] = json.loads(text)
                else:
                    data[path.stem] = load_yaml_data(text)
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise BuildError(f"Invalid data file {path}: {e}") from e
            logger.debug("Loaded data file %s", path.name)

        return data
