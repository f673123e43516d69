"""Frontmatter and link parsing for Diaryx documents."""

from .frontmatter import (
    FrontmatterError,
    FrontmatterRecord,
    FrontmatterValue,
    Mapping,
    Scalar,
    Sequence,
    flatten_value,
    load_document,
    load_frontmatter,
    parse_frontmatter,
)
from .links import extract_document_targets, extract_link_references

__all__ = [
    "FrontmatterError",
    "FrontmatterRecord",
    "FrontmatterValue",
    "Mapping",
    "Scalar",
    "Sequence",
    "extract_document_targets",
    "extract_link_references",
    "flatten_value",
    "load_document",
    "load_frontmatter",
    "parse_frontmatter",
]
