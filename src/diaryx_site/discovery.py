"""Link graph discovery over `contents` and `part_of` frontmatter links.

Starting from a root document, every document reachable through the navigable
properties is visited once, breadth first. Link targets are resolved against
the directory of the document that holds them.
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Literal

from .config import NAVIGABLE_PROPERTIES
from .models import DiscoveryWarning, LinkEdge
from .parser import FrontmatterError, FrontmatterRecord, extract_document_targets, load_frontmatter

log = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Base class for fatal discovery errors."""


class DocumentNotFoundError(DiscoveryError):
    """Raised when the root document does not exist under the source directory."""

    def __init__(self, identifier: str, source_dir: Path, message: str = "Root file not found") -> None:
        self.identifier = identifier
        self.source_dir = source_dir
        super().__init__(f"{message}: {source_dir / identifier}")


def _escapes_root(identifier: str) -> bool:
    return identifier == ".." or identifier.startswith("../")


def normalize_identifier(identifier: str) -> str:
    """Normalize a document identifier (collapse `.`, `..` and duplicate slashes)."""
    return posixpath.normpath(identifier.lstrip("/"))


def resolve_link_target(source_identifier: str, target: str) -> str | None:
    """Resolve a link target against the directory of the document holding it.

    Args:
        source_identifier: Identifier of the linking document, e.g. "dir/Parent.md".
        target: Raw link target, e.g. "sub/Child.md". A leading "/" makes it
            relative to the source root instead.

    Returns:
        Normalized identifier ("dir/sub/Child.md"), or None when the target
        points outside the source root.

    Examples:
        resolve_link_target("dir/Parent.md", "sub/Child.md") -> "dir/sub/Child.md"
        resolve_link_target("dir/Parent.md", "../Index.md") -> "Index.md"
        resolve_link_target("Index.md", "../Outside.md") -> None
    """
    if target.startswith("/"):
        joined = target.lstrip("/")
    else:
        joined = posixpath.join(posixpath.dirname(source_identifier), target)

    resolved = posixpath.normpath(joined)
    if _escapes_root(resolved):
        return None
    return resolved


class LinkGraphDiscoverer:
    """Finds every document reachable from a root document.

    Warnings and edges describe the most recent run() and are reset at the
    start of each run.
    """

    def __init__(self, source_dir: Path):
        """Initialize discoverer.

        Args:
            source_dir: Directory all identifiers are relative to.
        """
        self.source_dir = source_dir
        self.warnings: list[DiscoveryWarning] = []
        self.edges: list[LinkEdge] = []

    def _warn(
        self,
        identifier: str,
        kind: Literal["missing", "malformed", "outside_root"],
        reason: str,
    ) -> None:
        log.warning("%s: %s", identifier, reason)
        self.warnings.append(DiscoveryWarning(identifier=identifier, kind=kind, reason=reason))

    def _check_root(self, root: str) -> str:
        identifier = normalize_identifier(root)
        if _escapes_root(identifier) or not (self.source_dir / identifier).is_file():
            raise DocumentNotFoundError(root, self.source_dir)
        return identifier

    def _read_record(self, identifier: str, *, is_root: bool) -> FrontmatterRecord:
        path = self.source_dir / identifier

        if not path.is_file():
            self._warn(identifier, "missing", f"File not found: {path}")
            return {}

        try:
            return load_frontmatter(path)
        except OSError as e:
            if is_root:
                raise DocumentNotFoundError(identifier, self.source_dir, "Root file cannot be read") from e
            self._warn(identifier, "missing", f"Could not read {path}: {e}")
        except FrontmatterError as e:
            self._warn(identifier, "malformed", e.message)
        return {}

    def run(self, root: str) -> list[str]:
        """Discover all documents connected to root.

        Args:
            root: Identifier of the root document, relative to source_dir.

        Returns:
            Sorted identifiers of every reachable document, root included.
            Documents that are missing or malformed are still listed.

        Raises:
            DocumentNotFoundError: If the root document does not exist.
        """
        self.warnings = []
        self.edges = []

        root_id = self._check_root(root)
        visited: set[str] = set()
        queue: list[str] = [root_id]

        while queue:
            current = queue.pop(0)
            if current in visited:
                continue
            visited.add(current)

            record = self._read_record(current, is_root=current == root_id)

            for prop in NAVIGABLE_PROPERTIES:
                value = record.get(prop)
                if value is None:
                    continue

                for target in extract_document_targets(value):
                    resolved = resolve_link_target(current, target)
                    if resolved is None:
                        self._warn(current, "outside_root", f"Link outside source directory: {target}")
                        continue

                    self.edges.append(LinkEdge(source=current, target=resolved, prop=prop))
                    if resolved not in visited:
                        queue.append(resolved)

        log.debug("Discovered %d document(s) from %s", len(visited), root_id)
        return sorted(visited)


def discover(root: str, source_dir: Path) -> list[str]:
    """Discover all documents reachable from root via `contents` and `part_of`.

    Args:
        root: Identifier of the root document, relative to source_dir.
        source_dir: Directory used as the base for all identifiers.

    Returns:
        Sorted, deduplicated document identifiers.

    Raises:
        DocumentNotFoundError: If the root document does not exist.
    """
    return LinkGraphDiscoverer(source_dir).run(root)
