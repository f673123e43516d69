"""Configuration management for diaryx-site.

This module contains the configurable constants for discovery and site
generation, plus loading of the optional per-source-directory settings file.

Example .diaryxsite file (placed in the source directory):
    output_dir: ./public
    template: ./index.html
    mode: viewer
    asset_extensions: [png, jpg, svg, css]
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigurationError(Exception):
    """Raised when settings are invalid or a configured file is missing."""

    pass


# =============================================================================
# Documents and Links
# =============================================================================

# Only link targets ending in this extension are document-to-document links.
DOCUMENT_EXTENSION = ".md"

# Frontmatter properties scanned for links to other documents.
# Both are followed the same way: `part_of` points up, `contents` points down,
# and reachability ignores the direction.
NAVIGABLE_PROPERTIES = ("contents", "part_of")


# =============================================================================
# Site Generation
# =============================================================================

CONFIG_FILENAME = ".diaryxsite"

DEFAULT_OUTPUT_DIR = "public"

# Files with these extensions are copied next to the generated pages when they
# sit in the same directory as a discovered document.
DEFAULT_ASSET_EXTENSIONS = (
    "png", "jpg", "jpeg", "gif", "svg", "ico",
    "css", "js", "woff", "woff2", "ttf", "eot",
)

# Properties shown first in the metadata panel. Remaining properties follow in
# document order.
METADATA_ORDER = (
    "title", "author", "created", "updated", "visibility", "format", "reachable",
)

OUTPUT_DIR_ENV = "DIARYX_SITE_OUTPUT_DIR"

RenderMode = Literal["viewer", "static"]


class SiteSettings(BaseModel):
    """Settings from a .diaryxsite file."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = DEFAULT_OUTPUT_DIR
    template: str | None = None  # Viewer template; bundled default when unset
    mode: RenderMode = "viewer"
    asset_extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_ASSET_EXTENSIONS))
    clean: bool = False  # Remove output dir before build
    redirect_index: bool = True  # Write index.html redirecting to the root page

    @field_validator("asset_extensions")
    @classmethod
    def _normalize_extensions(cls, value: list[str]) -> list[str]:
        return [ext.lower().lstrip(".") for ext in value if ext.strip(". ")]


def _resolve_file_paths(data: dict[str, Any], source_dir: Path) -> dict[str, Any]:
    """Make relative paths from a settings file relative to its source directory."""
    resolved = dict(data)
    for key in ("output_dir", "template"):
        value = resolved.get(key)
        if isinstance(value, str) and value and not Path(value).is_absolute():
            resolved[key] = str(source_dir / value)
    return resolved


def load_settings(source_dir: Path) -> SiteSettings:
    """Load settings for a source directory.

    Discovery order for the output directory:
    1. DIARYX_SITE_OUTPUT_DIR environment variable
    2. output_dir in {source_dir}/.diaryxsite
    3. DEFAULT_OUTPUT_DIR

    Relative paths in the settings file are taken relative to source_dir.

    Args:
        source_dir: Directory holding the markdown documents.

    Returns:
        Validated settings. Defaults when no settings file exists.

    Raises:
        ConfigurationError: If the settings file cannot be read or is invalid.
    """
    config_file = source_dir / CONFIG_FILENAME
    data: dict[str, Any] = {}

    if config_file.is_file():
        try:
            loaded = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"{config_file}: could not load settings: {e}") from e

        # Empty or all-comments file
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ConfigurationError(f"{config_file}: settings must be a YAML mapping")
            data = _resolve_file_paths(loaded, source_dir)

    env_output = os.environ.get(OUTPUT_DIR_ENV)
    if env_output:
        data = {**data, "output_dir": env_output}

    try:
        return SiteSettings.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise ConfigurationError(f"{config_file}: invalid settings:\n" + "\n".join(errors)) from e
