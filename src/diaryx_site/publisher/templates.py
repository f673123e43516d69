"""HTML templates for site generation.

Uses Jinja2 with inline template definitions for the static page and the
redirect index. The viewer template is plain HTML with two marker lines that
are filled in per document; it can be replaced by a user-supplied file.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from urllib.parse import quote

from jinja2 import BaseLoader, Environment, select_autoescape
from markupsafe import Markup

from ..config import ConfigurationError

MD_PATH_MARKER = re.compile(r'const MD_PATH = ".*"; // REPLACE_WITH_FILENAME')
MODE_MARKER = re.compile(r'const MODE = ".*"; // REPLACE_WITH_MODE')

# Default viewer - fetches the markdown copied next to it and renders it
# in the browser
VIEWER_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Diaryx</title>
    <script src="https://cdn.jsdelivr.net/npm/markdown-it@14/dist/markdown-it.min.js"></script>
    <script src="https://cdn.jsdelivr.net/npm/js-yaml@4/dist/js-yaml.min.js"></script>
</head>
<body>
    <main id="content" class="main">Loading...</main>
    <script>
    const MD_PATH = ""; // REPLACE_WITH_FILENAME
    const MODE = "live"; // REPLACE_WITH_MODE

    function splitFrontmatter(text) {
        const match = text.match(/^---\\r?\\n([\\s\\S]*?)\\r?\\n---\\s*\\r?\\n?/);
        if (!match) return [{}, text];
        return [jsyaml.load(match[1]) || {}, text.slice(match[0].length)];
    }

    const md = window.markdownit();
    const defaultLinkOpen = md.renderer.rules.link_open || function (tokens, idx, options, env, self) {
        return self.renderToken(tokens, idx, options);
    };
    md.renderer.rules.link_open = function (tokens, idx, options, env, self) {
        const href = tokens[idx].attrGet("href");
        if (MODE === "static" && href && /\\.md$/.test(href) && !/:\\/\\//.test(href)) {
            tokens[idx].attrSet("href", href.replace(/\\.md$/, ".html"));
        }
        return defaultLinkOpen(tokens, idx, options, env, self);
    };

    fetch(MD_PATH)
        .then((response) => response.text())
        .then((text) => {
            const [meta, body] = splitFrontmatter(text);
            if (meta.title) document.title = meta.title;
            document.getElementById("content").innerHTML = md.render(body);
        })
        .catch((error) => {
            document.getElementById("content").textContent = "Could not load " + MD_PATH + ": " + error;
        });
    </script>
</body>
</html>
"""

# Static page - markdown rendered at build time
STATIC_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title }}</title>
</head>
<body>
    <main class="main">
        {{ metadata_html }}
        <article class="entry-content">
            {{ body_html }}
        </article>
    </main>
</body>
</html>
"""

# Redirect index - sends visitors of the site root to the root document's page
REDIRECT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta http-equiv="refresh" content="0; url=./{{ href }}">
    <title>Redirecting...</title>
</head>
<body>
    <p>Redirecting to <a href="./{{ href }}">{{ name }}</a>...</p>
</body>
</html>
"""


def _get_env() -> Environment:
    """Create Jinja2 environment with autoescape enabled."""
    return Environment(
        loader=BaseLoader(),
        autoescape=select_autoescape(default=True, default_for_string=True),
    )


def load_viewer_template(template_path: Path | None) -> str:
    """Load the viewer template.

    Args:
        template_path: User template file, or None for the bundled viewer.

    Raises:
        ConfigurationError: If the template file cannot be read.
    """
    if template_path is None:
        return VIEWER_TEMPLATE

    try:
        return template_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Template not found: {template_path} ({e})") from e


def fill_viewer_template(template: str, filename: str) -> str:
    """Point a viewer template at one markdown file in static mode.

    Args:
        template: Viewer template text with the marker lines.
        filename: Basename of the markdown file copied next to the page.

    Returns:
        Page HTML.
    """
    md_path = json.dumps(f"./{filename}", ensure_ascii=False)
    html = MD_PATH_MARKER.sub(lambda _: f"const MD_PATH = {md_path}; // {filename}", template)
    return MODE_MARKER.sub(lambda _: 'const MODE = "static"; // static mode', html)


def render_static_page(title: str, metadata_html: Markup, body_html: str) -> str:
    """Render a page with markdown already converted to HTML.

    Args:
        title: Page title (escaped).
        metadata_html: Rendered metadata panel.
        body_html: Rendered markdown body.

    Returns:
        Complete HTML page string.
    """
    tmpl = _get_env().from_string(STATIC_TEMPLATE)
    return tmpl.render(
        title=title,
        metadata_html=metadata_html,
        # Already rendered HTML, mark as safe to prevent escaping
        body_html=Markup(body_html),
    )


def render_redirect_page(page_path: str) -> str:
    """Render an index page redirecting to the root document's page.

    Args:
        page_path: Page path relative to the output directory, e.g.
            "Portfolio site.html".
    """
    name = Path(page_path).stem
    tmpl = _get_env().from_string(REDIRECT_TEMPLATE)
    return tmpl.render(href=quote(page_path), name=name)
