"""Markdown rendering for static pages.

Links between documents point at `.md` files in the source tree; in the
generated site they point at the `.html` page built for that document.
"""

from __future__ import annotations

from markdown_it import MarkdownIt

from ..config import DOCUMENT_EXTENSION


def _page_href(href: str) -> str:
    """Rewrite a link to a markdown document into a link to its page."""
    path, sep, fragment = href.partition("#")
    if "://" in path or not path.endswith(DOCUMENT_EXTENSION):
        return href
    return f"{path[: -len(DOCUMENT_EXTENSION)]}.html{sep}{fragment}"


def _render_link_open(self, tokens, idx, options, env):
    token = tokens[idx]
    href = token.attrGet("href")
    if isinstance(href, str):
        token.attrSet("href", _page_href(href))
    return self.renderToken(tokens, idx, options, env)


def create_markdown() -> MarkdownIt:
    """Create a markdown-it parser that links documents to their pages.

    Raw HTML in documents and frontmatter is escaped, not passed through.
    """
    md = MarkdownIt("commonmark", {"html": False})
    md.enable("table")
    md.add_render_rule("link_open", _render_link_open)
    return md
