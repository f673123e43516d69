#!/usr/bin/env python3
"""
diaryx-site: build a static site from connected Diaryx documents

Usage:
    diaryx-site discover "Portfolio site.md" ./content   # List connected documents
    diaryx-site build "Portfolio site.md" ./content      # Build site into ./public
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from . import __version__ as DIARYX_SITE_VERSION
from ._logging import configure_logging

# Exit status when the root document does not exist (click uses 2 for usage errors)
EXIT_ROOT_NOT_FOUND = 3


# ─────────────────────────────────────────────────────────────────────────────
# Output Helpers
# ─────────────────────────────────────────────────────────────────────────────


def output(data: Any, as_json: bool = False) -> None:
    """Print data as JSON or plain text."""
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(data)


def format_json_error(code: str, message: str) -> str:
    """Format an error as a JSON object for --json output."""
    return json.dumps({"error": {"code": code, "message": message}})


def _fail(code: str, message: str, exit_code: int, as_json: bool) -> NoReturn:
    if as_json:
        click.echo(format_json_error(code, message), err=True)
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def _handle_error(error: Exception, as_json: bool) -> NoReturn:
    """Report a fatal error and exit with a status matching its kind."""
    from .config import ConfigurationError
    from .discovery import DocumentNotFoundError

    if isinstance(error, DocumentNotFoundError):
        _fail("ROOT_NOT_FOUND", str(error), EXIT_ROOT_NOT_FOUND, as_json)
    if isinstance(error, ConfigurationError):
        _fail("CONFIGURATION_ERROR", str(error), 1, as_json)
    _fail("INTERNAL_ERROR", str(error), 1, as_json)


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=DIARYX_SITE_VERSION, prog_name="diaryx-site")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool) -> None:
    """Discover connected Diaryx documents and build them into a static site.

    Documents are connected through the `contents` and `part_of` properties
    of their YAML frontmatter.
    """
    configure_logging("DEBUG" if verbose else None)


@cli.command()
@click.argument("root")
@click.argument("source_dir", default=".", type=click.Path(file_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def discover(root: str, source_dir: str, as_json: bool) -> None:
    """List every document connected to ROOT.

    ROOT is relative to SOURCE_DIR (default: current directory). Prints one
    document per line, sorted. Problems with individual documents are
    reported as warnings and do not stop discovery.

    \b
    Examples:
      diaryx-site discover "Portfolio site.md"
      diaryx-site discover "Portfolio site.md" ./content --json
    """
    from .discovery import DiscoveryError, LinkGraphDiscoverer

    discoverer = LinkGraphDiscoverer(Path(source_dir))
    try:
        documents = discoverer.run(root)
    except DiscoveryError as e:
        _handle_error(e, as_json)

    if as_json:
        output(
            {
                "documents": documents,
                "warnings": [warning.model_dump() for warning in discoverer.warnings],
            },
            as_json=True,
        )
        return

    for identifier in documents:
        click.echo(identifier)


@cli.command()
@click.argument("root")
@click.argument("source_dir", default=".", type=click.Path(file_okay=False))
@click.option(
    "--output",
    "-o",
    "output_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Output directory (default: public, or output_dir in .diaryxsite)",
)
@click.option(
    "--template",
    "-t",
    type=click.Path(dir_okay=False),
    default=None,
    help="Viewer template HTML file (default: bundled viewer)",
)
@click.option(
    "--mode",
    type=click.Choice(["viewer", "static"]),
    default=None,
    help="viewer: pages load the markdown in the browser; static: render at build time",
)
@click.option("--clean", is_flag=True, help="Remove output directory before build")
@click.option("--no-redirect", is_flag=True, help="Don't create a redirect index.html")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def build(
    root: str,
    source_dir: str,
    output_dir: str | None,
    template: str | None,
    mode: str | None,
    clean: bool,
    no_redirect: bool,
    as_json: bool,
) -> None:
    """Build a static site from every document connected to ROOT.

    \b
    Settings resolution (in order):
      1. Command line flags
      2. DIARYX_SITE_OUTPUT_DIR environment variable (output directory)
      3. .diaryxsite in SOURCE_DIR
      4. Defaults

    \b
    For each connected document the build:
      - writes <name>.html in the output directory
      - copies <name>.md next to it
      - copies images, fonts, css and js from the document's directory
    and finally writes index.html redirecting to the root page.

    \b
    Examples:
      diaryx-site build "Portfolio site.md"
      diaryx-site build "Portfolio site.md" ./content -o docs
      diaryx-site build "Portfolio site.md" --mode static --clean
    """
    from .config import ConfigurationError, load_settings
    from .discovery import DiscoveryError
    from .publisher import PublishConfig, SiteGenerator

    source = Path(source_dir)

    try:
        config = PublishConfig.from_settings(load_settings(source))
    except ConfigurationError as e:
        _handle_error(e, as_json)

    if output_dir:
        config.output_dir = Path(output_dir)
    if template:
        config.template_path = Path(template)
    if mode:
        config.mode = mode  # type: ignore[assignment]
    if clean:
        config.clean = True
    if no_redirect:
        config.redirect_index = False

    if not as_json:
        click.echo(f"Root file: {root}")
        click.echo(f"Source directory: {source}")

    try:
        result = SiteGenerator(config, source).generate(root)
    except (DiscoveryError, ConfigurationError, OSError) as e:
        _handle_error(e, as_json)

    if as_json:
        output(
            {
                "documents": result.documents,
                "pages_written": result.pages_written,
                "assets_copied": result.assets_copied,
                "missing": result.missing,
                "warnings": [warning.model_dump() for warning in result.warnings],
                "output_dir": result.output_dir,
                "index_path": result.index_path,
            },
            as_json=True,
        )
        return

    click.echo(f"Discovered {len(result.documents)} connected file(s)")
    for page in result.pages_written:
        click.echo(f"  ✓ {page}")
    if result.assets_copied:
        click.echo(f"Copied {len(result.assets_copied)} asset(s)")

    if result.missing:
        click.echo(f"\n⚠ Missing source files ({len(result.missing)}):")
        for identifier in result.missing:
            click.echo(f"  - {identifier}")

    click.echo("\nBuild complete!")
    click.echo(f"Output directory: {result.output_dir}")
    click.echo("\nTo preview locally:")
    click.echo(f"  cd {result.output_dir} && python -m http.server 8000")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
