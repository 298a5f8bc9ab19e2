"""Data models for source documents and build results."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any


@dataclass
class Page:
    """A source document and, once rendered, its output.

    Attributes:
        input_path: Absolute path of the source file
        relative_path: Path relative to the input directory
        template_format: "md" or a template extension such as "jinja"
        body: Document text after the front matter
        data: Front matter
        output_path: Path relative to the output directory, None if not written
        url: Site URL of the page, None if not written
        date: Page date (timezone-aware)
        content: Rendered content before layouts are applied
    """

    input_path: Path
    relative_path: Path
    template_format: str
    body: str
    data: dict[str, Any]
    output_path: Path | None
    url: str | None
    date: datetime
    content: str = ""

    @property
    def tags(self) -> list[str]:
        tags = self.data.get("tags") or []
        if isinstance(tags, str):
            return [tags]
        return [str(t) for t in tags]

    @property
    def file_slug(self) -> str:
        """Eleventy-style slug: the file stem, or the parent directory for index files."""
        if self.relative_path.stem == "index" and self.relative_path.parent != Path("."):
            return self.relative_path.parent.name
        return self.relative_path.stem

    @property
    def is_markdown(self) -> bool:
        return self.template_format == "md"

    def as_context(self) -> dict[str, Any]:
        """The `page` variable exposed to templates."""
        return {
            "url": self.url,
            "input_path": str(self.relative_path),
            "output_path": str(self.output_path) if self.output_path else None,
            "date": self.date,
            "file_slug": self.file_slug,
        }


@dataclass
class BuildReport:
    """Outcome of a site build."""

    pages: int = 0
    assets: list[Path] = field(default_factory=list)
    copied: int = 0
