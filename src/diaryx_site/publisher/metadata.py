"""Metadata panel shown at the top of statically rendered pages.

Frontmatter properties are listed as a definition list: the properties in
METADATA_ORDER first, then the rest in the order the document declares them.
"""

from __future__ import annotations

import re

from markdown_it import MarkdownIt
from markupsafe import Markup, escape

from ..config import METADATA_ORDER
from ..parser import FrontmatterRecord, FrontmatterValue, Mapping, Scalar

URL_PATTERN = re.compile(r"^https?://\S+$")
EMAIL_PATTERN = re.compile(r"^[\w.%+-]+@[\w.-]+\.[A-Za-z]+$")


def ordered_items(record: FrontmatterRecord) -> list[tuple[str, FrontmatterValue]]:
    """Order frontmatter properties for display."""
    items = [(key, record[key]) for key in METADATA_ORDER if key in record]
    items.extend((key, value) for key, value in record.items() if key not in METADATA_ORDER)
    return items


def _render_scalar(text: str, md: MarkdownIt) -> str:
    stripped = text.strip()
    if URL_PATTERN.match(stripped):
        return f'<a href="{escape(stripped)}">{escape(stripped)}</a>'
    if EMAIL_PATTERN.match(stripped):
        return f'<a href="mailto:{escape(stripped)}">{escape(stripped)}</a>'
    return md.renderInline(text)


def render_value(value: FrontmatterValue, md: MarkdownIt) -> str:
    """Render one frontmatter value as inline HTML.

    List items and mapping entries are joined with commas.
    """
    if isinstance(value, Scalar):
        return _render_scalar(value.text, md)
    if isinstance(value, Mapping):
        return ", ".join(
            f"{escape(key)}: {render_value(item, md)}" for key, item in value.entries
        )
    return ", ".join(render_value(item, md) for item in value.items)


def render_metadata_panel(record: FrontmatterRecord, md: MarkdownIt) -> Markup:
    """Render the metadata panel for a document.

    Returns:
        Safe HTML markup, empty when the record has no properties.
    """
    items = ordered_items(record)
    if not items:
        return Markup("")

    rows = "\n".join(
        f"<dt>{escape(key)}</dt>\n<dd>{render_value(value, md)}</dd>" for key, value in items
    )
    return Markup(
        '<div class="diaryx-meta">\n<h2>Metadata</h2>\n'
        f"<dl>\n{rows}\n</dl>\n<hr>\n</div>"
    )
