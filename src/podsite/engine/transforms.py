"""Output transforms applied to rendered pages before they are written.

A transform receives the rendered content and the output path and returns
new content. Transforms only touch the output types they own and return
everything else verbatim.
"""

import logging
import re
from collections.abc import Callable
from html import unescape
from pathlib import Path

import htmlmin
from htmlmin.parser import HTMLMinParser

from podsite.config.schema import HtmlMinifyConfig
from podsite.utils.errors import MinifyError

logger = logging.getLogger(__name__)

Transform = Callable[[str, Path | str | None], str]

XML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
XMLNS_SPACE_RE = re.compile(r"[ \r\n\t]+xmlns")
BETWEEN_TAGS_RE = re.compile(r">\s*<")

# Whitespace around these tags is rendered, so htmlmin's single space is kept
INLINE_TAGS = frozenset(
    """a abbr acronym audio b bdi bdo big button cite code del dfn em font i img
    input ins kbd label mark math nobr object q rp rt rtc ruby s samp select small
    span strike strong sub sup svg textarea time tt u var video""".split()
)
_NOT_BLOCK = "|".join(sorted(INLINE_TAGS | {"pre", "script", "style"}))
TAG_WHITESPACE_RE = re.compile(
    r"\s*(?P<raw><(?P<raw_name>pre|script|style)\b.*?</(?P=raw_name)\s*>)\s*"
    r"|(?P<textarea><textarea\b.*?</textarea\s*>)"
    rf"|\s*(?P<block></?(?!(?:{_NOT_BLOCK})(?![\w:-]))[a-zA-Z][\w:-]*[^>]*>)\s*",
    re.IGNORECASE | re.DOTALL,
)

# Decoding these would change the markup
KEEP_ESCAPED = frozenset("<>&")


def sort_class_tokens(value: str) -> str:
    return " ".join(sorted(value.split()))


class SiteMinParser(HTMLMinParser):
    """htmlmin parser that decodes character references and sorts class tokens.

    Attribute values arrive already decoded from `html.parser`; references in
    text are decoded here unless the character is markup-significant or
    whitespace (`&nbsp;` stays `&nbsp;`).
    """

    sort_class_name = True
    decode_entities = True

    def _sorted(self, attrs: list[tuple[str, str | None]]) -> list[tuple[str, str | None]]:
        if not self.sort_class_name:
            return attrs
        return [
            (name, sort_class_tokens(value) if name == "class" and value else value)
            for name, value in attrs
        ]

    def handle_starttag(self, tag, attrs):
        super().handle_starttag(tag, self._sorted(attrs))

    def handle_startendtag(self, tag, attrs):
        super().handle_startendtag(tag, self._sorted(attrs))

    def handle_entityref(self, name):
        self._handle_reference(f"&{name};", name, super().handle_entityref)

    def handle_charref(self, name):
        self._handle_reference(f"&#{name};", name, super().handle_charref)

    def _handle_reference(self, reference: str, name: str, keep: Callable[[str], None]) -> None:
        text = unescape(reference)
        if (
            not self.decode_entities
            or text == reference
            or text in KEEP_ESCAPED
            or text.isspace()
        ):
            keep(name)
        else:
            self.handle_data(text)


def _parser_class(options: HtmlMinifyConfig) -> type[SiteMinParser]:
    return type(
        "ConfiguredMinParser",
        (SiteMinParser,),
        {
            "sort_class_name": options.sort_class_name,
            "decode_entities": options.decode_entities,
        },
    )


def _trim_tag_whitespace(match: re.Match[str]) -> str:
    return match.group("raw") or match.group("textarea") or match.group("block")


def collapse_whitespace(html: str) -> str:
    """Drop whitespace around block-level tags.

    Runs on htmlmin output, where text whitespace is already a single space,
    so the space next to inline tags stays. The contents of `pre`, `textarea`,
    `script` and `style` are left untouched.
    """
    return TAG_WHITESPACE_RE.sub(_trim_tag_whitespace, html)


def minify_html(html: str, options: HtmlMinifyConfig | None = None) -> str:
    """Minify an HTML document or fragment.

    Raises:
        MinifyError: If the HTML cannot be parsed
    """
    options = options or HtmlMinifyConfig()

    try:
        result = htmlmin.minify(
            html,
            remove_comments=options.remove_comments,
            reduce_boolean_attributes=options.collapse_boolean_attributes,
            remove_optional_attribute_quotes=False,
            # html.parser already decodes attribute values once
            convert_charrefs=False,
            cls=_parser_class(options),
        )
    except Exception as e:
        raise MinifyError(f"HTML minification failed: {e}") from e

    if options.collapse_whitespace:
        result = collapse_whitespace(result)
    return result


def minify_xml(xml: str) -> str:
    """Strip comments and inter-tag whitespace from an XML document."""
    xml = XML_COMMENT_RE.sub("", xml)
    xml = XMLNS_SPACE_RE.sub(" xmlns", xml)
    return BETWEEN_TAGS_RE.sub("><", xml).strip()


def _path_endswith(output_path: Path | str | None, suffix: str) -> bool:
    return output_path is not None and str(output_path).endswith(suffix)


def make_htmlmin_transform(options: HtmlMinifyConfig | None = None) -> Transform:
    """Build the `.html` minification transform."""

    def htmlmin_transform(content: str, output_path: Path | str | None) -> str:
        if not _path_endswith(output_path, ".html"):
            return content
        try:
            return minify_html(content, options)
        except MinifyError as e:
            raise MinifyError(f"{output_path}: {e}") from e

    return htmlmin_transform


def xmlmin_transform(content: str, output_path: Path | str | None) -> str:
    if not _path_endswith(output_path, ".xml"):
        return content
    return minify_xml(content)


class TransformPipeline:
    """Ordered set of named output transforms."""

    def __init__(self) -> None:
        self._transforms: list[tuple[str, Transform]] = []

    def add(self, name: str, transform: Transform) -> None:
        self._transforms.append((name, transform))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._transforms]

    def apply(self, content: str, output_path: Path | str | None) -> str:
        for name, transform in self._transforms:
            logger.debug("Transform %s on %s", name, output_path)
            content = transform(content, output_path)
        return content


def default_transforms(options: HtmlMinifyConfig | None = None) -> TransformPipeline:
    """The htmlmin and xmlmin transforms, in that order."""
    pipeline = TransformPipeline()
    pipeline.add("htmlmin", make_htmlmin_transform(options))
    pipeline.add("xmlmin", xmlmin_transform)
    return pipeline
