"""Pydantic models for discovery and publishing."""

from typing import Literal

from pydantic import BaseModel


class LinkReference(BaseModel):
    """An inline markdown link found in a frontmatter value."""

    model_config = {"frozen": True}

    text: str  # Display text between the brackets
    target: str  # Link target with any angle brackets stripped


class LinkEdge(BaseModel):
    """A resolved document-to-document link seen during discovery."""

    model_config = {"frozen": True}

    source: str  # Identifier of the document holding the link
    target: str  # Resolved identifier of the linked document
    prop: str  # Frontmatter property the link came from ("contents" | "part_of")


class DiscoveryWarning(BaseModel):
    """A non-fatal problem with one document during discovery or build."""

    identifier: str
    kind: Literal["missing", "malformed", "outside_root"]
    reason: str
