"""YAML frontmatter parsing for Diaryx documents.

Frontmatter values are kept as a small tagged variant (Scalar, Sequence,
Mapping) instead of raw YAML objects, so callers that need candidate strings
go through flatten_value() rather than checking types themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Union

import yaml
from frontmatter.default_handlers import YAMLHandler


class DiaryxYAMLHandler(YAMLHandler):
    """YAMLHandler that also closes a block on the YAML document-end marker.

    The opening line must still be `---`. The closing line may be `---` or
    `...`.
    """

    END_BOUNDARY = re.compile(r"^(?:-{3,}|\.{3})\s*$", re.MULTILINE)

    def split(self, text: str) -> tuple[str, str]:
        opening = self.FM_BOUNDARY.match(text)
        if opening is None:
            raise ValueError("No frontmatter found")
        closing = self.END_BOUNDARY.search(text, opening.end())
        if closing is None:
            raise ValueError("Frontmatter block is not closed")
        return text[opening.end() : closing.start()], text[closing.end() :]


_handler = DiaryxYAMLHandler()


class FrontmatterError(Exception):
    """Raised when a frontmatter block exists but cannot be parsed."""

    def __init__(self, path: Path | None, message: str) -> None:
        self.path = path
        self.message = message
        prefix = f"{path}: " if path is not None else ""
        super().__init__(f"{prefix}{message}")


@dataclass(frozen=True)
class Scalar:
    text: str


@dataclass(frozen=True)
class Sequence:
    items: tuple["FrontmatterValue", ...]


@dataclass(frozen=True)
class Mapping:
    entries: tuple[tuple[str, "FrontmatterValue"], ...]


FrontmatterValue = Union[Scalar, Sequence, Mapping]
FrontmatterRecord = dict[str, FrontmatterValue]


def to_value(raw: Any) -> FrontmatterValue:
    """Convert a value produced by the YAML loader into a FrontmatterValue."""
    if isinstance(raw, str):
        return Scalar(raw)
    if raw is None:
        return Scalar("")
    # bool is an int subclass, check it first
    if isinstance(raw, bool):
        return Scalar("true" if raw else "false")
    if isinstance(raw, (datetime, date)):
        return Scalar(raw.isoformat())
    if isinstance(raw, (list, tuple)):
        return Sequence(tuple(to_value(item) for item in raw))
    if isinstance(raw, dict):
        return Mapping(tuple((str(key), to_value(item)) for key, item in raw.items()))
    return Scalar(str(raw))


def flatten_value(value: FrontmatterValue) -> list[str]:
    """Flatten a value into the list of candidate strings it holds.

    A scalar yields itself, a sequence yields its flattened items in order,
    and a mapping yields nothing.
    """
    if isinstance(value, Scalar):
        return [value.text]
    if isinstance(value, Sequence):
        flat: list[str] = []
        for item in value.items:
            flat.extend(flatten_value(item))
        return flat
    return []


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Split a document into its frontmatter block and body.

    Returns:
        Tuple of (frontmatter text or None when there is no block, body).
    """
    if not _handler.detect(text):
        return None, text
    try:
        fm, body = _handler.split(text)
    except ValueError:
        # Opening delimiter without a closing one
        return None, text
    return fm, body


def _parse_block(fm: str | None, path: Path | None) -> FrontmatterRecord:
    if fm is None:
        return {}

    try:
        data = _handler.load(fm)
    except yaml.YAMLError as e:
        raise FrontmatterError(path, f"Failed to parse frontmatter: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FrontmatterError(path, "Frontmatter must be a mapping of property names to values")

    try:
        return {str(key): to_value(raw) for key, raw in data.items()}
    except RecursionError as e:
        # Self-referencing anchors load as cyclic containers
        raise FrontmatterError(path, "Frontmatter contains a recursive value") from e


def parse_frontmatter(text: str, path: Path | None = None) -> FrontmatterRecord:
    """Parse the frontmatter record of a document.

    Args:
        text: Full document text.
        path: Source path, used in error messages only.

    Returns:
        Mapping of property name to value. Empty when there is no block.

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    fm, _ = split_frontmatter(text)
    return _parse_block(fm, path)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise FrontmatterError(path, f"File is not valid UTF-8: {e}") from e


def load_frontmatter(path: Path) -> FrontmatterRecord:
    """Read a document from disk and parse its frontmatter.

    Raises:
        OSError: If the file cannot be read.
        FrontmatterError: If the file is not UTF-8 or the block is malformed.
    """
    return parse_frontmatter(_read_text(path), path)


def load_document(path: Path) -> tuple[FrontmatterRecord, str]:
    """Read a document and return its frontmatter record and markdown body.

    Raises:
        OSError: If the file cannot be read.
        FrontmatterError: If the file is not UTF-8 or the block is malformed.
    """
    fm, body = split_frontmatter(_read_text(path))
    return _parse_block(fm, path), body
