"""Stylesheet bundling: inline @import rules and minify with rcssmin."""

import logging
import re
from pathlib import Path

import rcssmin

from podsite.assets.base import Bundler
from podsite.utils.errors import BundleError

logger = logging.getLogger(__name__)

COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
CHARSET_RE = re.compile(r"@charset\s+['\"][^'\"]*['\"]\s*;", re.IGNORECASE)
IMPORT_RE = re.compile(
    r"""@import\s+
        (?:url\(\s*(?P<q1>['"]?)(?P<url>[^'")]+)(?P=q1)\s*\)
          |(?P<q2>['"])(?P<bare>[^'"]+)(?P=q2))
        \s*(?P<media>[^;]*);""",
    re.IGNORECASE | re.VERBOSE,
)
REMOTE_RE = re.compile(r"^(?:[a-z]+:|//)", re.IGNORECASE)


class StyleBundler(Bundler):
    """Bundle a single entry stylesheet.

    Local imports are inlined depth-first, each file at most once.
    Media-qualified imports are wrapped in an @media block; remote imports
    are hoisted to the top of the bundle untouched.
    """

    def bundle(self, path: Path) -> str:
        remote: list[str] = []
        body = self._inline(path, set(), remote)
        css = "\n".join(remote + [body])
        return rcssmin.cssmin(css)

    def _inline(self, path: Path, seen: set[Path], remote: list[str]) -> str:
        path = path.resolve()
        if path in seen:
            return ""
        seen.add(path)

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise BundleError(f"Cannot read stylesheet {path}: {e}") from e

        text = CHARSET_RE.sub("", COMMENT_RE.sub("", text))

        def replace(match: re.Match[str]) -> str:
            url = match.group("url") or match.group("bare")
            media = match.group("media").strip()

            if REMOTE_RE.match(url):
                remote.append(match.group(0).strip())
                return ""

            logger.debug("Inlining %s into %s", url, path.name)
            inlined = self._inline(path.parent / url, seen, remote)
            if media:
                return f"@media {media}{{{inlined}}}"
            return inlined

        return IMPORT_RE.sub(replace, text)
