"""Shared test fixtures for the diaryx-site test suite.

Design:
- source_dir: isolated document tree in a temp directory
- write_doc: writes a markdown document with optional YAML frontmatter
- runner: CliRunner for CLI tests
- logging and environment are reset around every test
"""

import logging
import os
from pathlib import Path
from typing import Callable, Generator

import pytest
from click.testing import CliRunner

from diaryx_site._logging import PACKAGE_LOGGER
from diaryx_site.config import OUTPUT_DIR_ENV

WriteDoc = Callable[..., Path]


# ─────────────────────────────────────────────────────────────────────────────
# Isolation
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_environment() -> Generator[None, None, None]:
    """Reset the package logger and settings env vars around each test.

    The CLI configures a stderr handler on the package logger and disables
    propagation, which would hide records from caplog in later tests.
    """
    original_output = os.environ.pop(OUTPUT_DIR_ENV, None)

    yield

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)

    if original_output is not None:
        os.environ[OUTPUT_DIR_ENV] = original_output
    else:
        os.environ.pop(OUTPUT_DIR_ENV, None)


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Empty source directory for documents."""
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def write_doc(source_dir: Path) -> WriteDoc:
    """Helper for writing documents into source_dir.

    Usage:
        def test_something(write_doc):
            write_doc("Index.md", "contents:\\n  - '[A](<A.md>)'", body="# Index")
            write_doc("A.md")  # No frontmatter at all
    """

    def _write(rel_path: str, frontmatter: str | None = None, body: str = "Body text.\n") -> Path:
        path = source_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if frontmatter is None:
            path.write_text(body, encoding="utf-8")
        else:
            path.write_text(f"---\n{frontmatter.strip()}\n---\n\n{body}", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def portfolio_site(write_doc: WriteDoc, source_dir: Path) -> Path:
    """The "Portfolio site" example tree.

    Creates:
    - Portfolio site.md (contents: Resume.md, Projects Overview.md)
    - Resume.md (part_of: Portfolio site.md)
    - Projects Overview.md (no frontmatter)
    """
    write_doc(
        "Portfolio site.md",
        """
title: Portfolio site
author: Jane Doe
contents:
  - "[Resume](<Resume.md>)"
  - "[Projects Overview](<Projects Overview.md>)"
""",
        body="# Portfolio\n\nWelcome. See [my resume](<Resume.md>).\n",
    )
    write_doc(
        "Resume.md",
        """
title: Resume
part_of:
  - "[Portfolio site](<Portfolio site.md>)"
""",
        body="# Resume\n",
    )
    write_doc("Projects Overview.md", body="# Projects\n\nNo frontmatter here.\n")
    return source_dir
