"""Static site generator for Diaryx documents.

Main orchestrator that discovers the documents connected to a root document
and writes one page per document, plus the markdown sources, co-located
assets and a redirect index.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from ..config import (
    DEFAULT_ASSET_EXTENSIONS,
    DEFAULT_OUTPUT_DIR,
    ConfigurationError,
    RenderMode,
    SiteSettings,
)
from ..discovery import LinkGraphDiscoverer, normalize_identifier
from ..models import DiscoveryWarning
from ..parser import FrontmatterError, Scalar, load_document
from .metadata import render_metadata_panel
from .renderer import create_markdown
from .templates import (
    fill_viewer_template,
    load_viewer_template,
    render_redirect_page,
    render_static_page,
)

log = logging.getLogger(__name__)


@dataclass
class PublishConfig:
    """Configuration for site generation."""

    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    template_path: Path | None = None  # Bundled viewer when None
    mode: RenderMode = "viewer"
    asset_extensions: tuple[str, ...] = DEFAULT_ASSET_EXTENSIONS
    clean: bool = False  # Remove output dir before build
    redirect_index: bool = True

    @classmethod
    def from_settings(cls, settings: SiteSettings) -> "PublishConfig":
        """Create PublishConfig from loaded settings."""
        return cls(
            output_dir=Path(settings.output_dir),
            template_path=Path(settings.template) if settings.template else None,
            mode=settings.mode,
            asset_extensions=tuple(settings.asset_extensions),
            clean=settings.clean,
            redirect_index=settings.redirect_index,
        )


@dataclass
class PublishResult:
    """Result of site generation."""

    documents: list[str]  # Discovered identifiers, sorted
    pages_written: list[str]  # Page paths relative to output_dir
    assets_copied: list[str]  # Asset paths relative to output_dir
    missing: list[str]  # Discovered identifiers with no source file
    warnings: list[DiscoveryWarning]
    output_dir: str
    index_path: str | None = None  # Redirect index, when one was written


def page_path_for(identifier: str) -> str:
    """Output page path for a document identifier ("a/B.md" -> "a/B.html")."""
    return str(PurePosixPath(identifier).with_suffix(".html"))


class SiteGenerator:
    """Generates a static site from the documents reachable from a root.

    Orchestrates the publishing pipeline:
    1. Discover connected documents
    2. Write one page per document and copy its markdown source
    3. Copy assets from every directory holding a document
    4. Write a redirect index to the root page
    """

    def __init__(self, config: PublishConfig, source_dir: Path):
        """Initialize generator.

        Args:
            config: Publishing configuration
            source_dir: Directory containing the markdown documents
        """
        self.config = config
        self.source_dir = source_dir
        self.warnings: list[DiscoveryWarning] = []
        self.missing: list[str] = []

    def generate(self, root: str) -> PublishResult:
        """Generate the site for everything connected to root.

        Args:
            root: Identifier of the root document, relative to source_dir.

        Returns:
            PublishResult with the written pages and copied assets.

        Raises:
            DocumentNotFoundError: If the root document does not exist.
                Nothing is written in that case.
            ConfigurationError: If the configured template cannot be read, or
                clean is set and the output directory holds the sources.
        """
        discoverer = LinkGraphDiscoverer(self.source_dir)
        documents = discoverer.run(root)
        self.warnings = list(discoverer.warnings)
        self.missing = []

        template = None
        if self.config.mode == "viewer":
            template = load_viewer_template(self.config.template_path)

        output_dir = self.config.output_dir
        if self.config.clean and output_dir.exists():
            self._check_clean_target(output_dir)
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        pages: list[str] = []
        for identifier in documents:
            page = self._write_page(identifier, template)
            if page is not None:
                pages.append(page)

        assets = self._copy_assets(documents)

        index_path = None
        if self.config.redirect_index:
            index_path = self._write_redirect_index(page_path_for(normalize_identifier(root)))

        log.info("Wrote %d page(s) to %s", len(pages), output_dir)
        return PublishResult(
            documents=documents,
            pages_written=pages,
            assets_copied=assets,
            missing=self.missing,
            warnings=self.warnings,
            output_dir=str(output_dir),
            index_path=index_path,
        )

    def _check_clean_target(self, output_dir: Path) -> None:
        """Refuse to remove an output directory that is or contains the sources."""
        target = output_dir.resolve()
        source = self.source_dir.resolve()
        if target == source or target in source.parents:
            raise ConfigurationError(
                f"Refusing to clean {output_dir}: it contains the source directory {self.source_dir}"
            )

    def _warn_missing(self, identifier: str, reason: str) -> None:
        log.warning("%s: %s", identifier, reason)
        self.missing.append(identifier)
        self.warnings.append(DiscoveryWarning(identifier=identifier, kind="missing", reason=reason))

    def _write_page(self, identifier: str, template: str | None) -> str | None:
        """Write the page for one document and copy its markdown next to it.

        Returns:
            Page path relative to the output directory, or None if skipped.
        """
        source = self.source_dir / identifier
        page = page_path_for(identifier)
        html_path = self.config.output_dir / page
        has_source = source.is_file()

        if not has_source:
            self._warn_missing(identifier, f"Source file not found, markdown not copied: {source}")
            if self.config.mode == "static":
                return None

        if template is not None:
            html = fill_viewer_template(template, PurePosixPath(identifier).name)
        else:
            try:
                html = self._render_static(source)
            except OSError as e:
                self._warn_missing(identifier, f"Could not read {source}: {e}")
                return None

        html_path.parent.mkdir(parents=True, exist_ok=True)
        html_path.write_text(html, encoding="utf-8")
        log.debug("Generated %s -> %s", identifier, page)

        if has_source:
            shutil.copy(source, html_path.parent / source.name)

        return page

    def _render_static(self, source: Path) -> str:
        """Render a document to HTML at build time."""
        try:
            record, body = load_document(source)
        except FrontmatterError as e:
            # Discovery already reported it; render the page without the panel
            log.debug("Rendering %s without metadata: %s", source, e.message)
            record = {}
            body = source.read_text(encoding="utf-8", errors="replace")

        md = create_markdown()
        title_value = record.get("title")
        title = title_value.text if isinstance(title_value, Scalar) and title_value.text else source.stem

        return render_static_page(
            title=title,
            metadata_html=render_metadata_panel(record, md),
            body_html=md.render(body),
        )

    def _copy_assets(self, documents: list[str]) -> list[str]:
        """Copy asset files sitting next to discovered documents.

        Only files directly inside each document's directory are copied.
        """
        extensions = {f".{ext.lower()}" for ext in self.config.asset_extensions}
        directories = sorted({str(PurePosixPath(identifier).parent) for identifier in documents})
        copied: list[str] = []

        for directory in directories:
            source_dir = self.source_dir / directory
            if not source_dir.is_dir():
                continue

            target_dir = self.config.output_dir / directory
            for asset in sorted(source_dir.iterdir()):
                if not asset.is_file() or asset.suffix.lower() not in extensions:
                    continue
                target_dir.mkdir(parents=True, exist_ok=True)
                shutil.copy(asset, target_dir / asset.name)
                copied.append(str(PurePosixPath(directory) / asset.name))
                log.debug("Copied asset %s", asset.name)

        return copied

    def _write_redirect_index(self, root_page: str) -> str | None:
        """Write index.html redirecting to the root page if there is none yet."""
        output_dir = self.config.output_dir
        index_path = output_dir / "index.html"

        if not (output_dir / root_page).exists() or index_path.exists():
            return None

        index_path.write_text(render_redirect_page(root_page), encoding="utf-8")
        log.info("Created redirect index.html -> %s", root_page)
        return str(index_path)
