"""Inline markdown link extraction from frontmatter values."""

import re

from ..config import DOCUMENT_EXTENSION
from ..models import LinkReference
from .frontmatter import FrontmatterValue, flatten_value

# Pattern for [text](target) and [text](<target>) - the angle-bracket form
# lets targets contain spaces, e.g. [Resume](<My Resume.md>)
LINK_PATTERN = re.compile(r"\[([^\]]*)\]\(<?([^)>]+)>?\)")

_ANGLE_BRACKETS = re.compile(r"^<(.+)>$")


def _strip_angle_brackets(target: str) -> str:
    return _ANGLE_BRACKETS.sub(r"\1", target.strip())


def extract_link_references(text: str) -> list[LinkReference]:
    """Extract inline markdown links from a string.

    Args:
        text: A frontmatter string, e.g. "[Resume](<Resume.md>)".

    Returns:
        Links in the order they appear.
    """
    return [
        LinkReference(text=link_text, target=_strip_angle_brackets(target))
        for link_text, target in LINK_PATTERN.findall(text)
    ]


def is_document_target(target: str) -> bool:
    """Whether a link target names another markdown document."""
    return target.endswith(DOCUMENT_EXTENSION)


def extract_document_targets(value: FrontmatterValue) -> list[str]:
    """Extract every link target naming a markdown document from a value.

    Both single strings and lists of strings are handled. URLs and links to
    non-markdown files are left out.

    Args:
        value: A frontmatter value, typically `contents` or `part_of`.

    Returns:
        Raw targets (not yet resolved against any directory), in order.
    """
    targets: list[str] = []
    for candidate in flatten_value(value):
        for link in extract_link_references(candidate):
            if is_document_target(link.target):
                targets.append(link.target)
    return targets
