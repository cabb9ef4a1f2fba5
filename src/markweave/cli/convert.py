"""Conversion command."""

import logging
import sys
from pathlib import Path

import click

from markweave.cli._common import app, configure_logging
from markweave.exceptions import InputFileNotFoundError, MarkweaveError

LOGGER = logging.getLogger(__name__)


@app.command("convert", help="Convert an HTML file (or stdin) to Markdown.")
@click.argument("source", required=False, default="-")
@click.option(
    "--heading-style",
    type=click.Choice(["atx", "setext"], case_sensitive=False),
    default=None,
    help="Heading syntax. Default: atx. Also reads MARKWEAVE_HEADING_STYLE env.",
)
@click.option(
    "--link-style",
    type=click.Choice(["inline", "referenced"], case_sensitive=False),
    default=None,
    help="Link syntax. Default: inline. Also reads MARKWEAVE_LINK_STYLE env.",
)
@click.option(
    "--code-fence",
    type=click.Choice(["backtick", "tilde"], case_sensitive=False),
    default=None,
    help="Code block fence character. Default: backtick. Also reads MARKWEAVE_CODE_FENCE env.",
)
@click.option(
    "--bullet",
    "bullet_marker",
    type=click.Choice(["-", "*", "+"]),
    default=None,
    help="Bullet list marker. Default: -. Also reads MARKWEAVE_BULLET_MARKER env.",
)
@click.option(
    "--base-url",
    type=str,
    default=None,
    help="Base URL for resolving relative links and images.",
)
@click.option(
    "--exclude",
    multiple=True,
    help="Selectors for elements to drop (tag, .class, #id; can be repeated or comma-separated).",
)
@click.option(
    "--include",
    multiple=True,
    help="Selectors for elements to keep even inside excluded ones (can be repeated or comma-separated).",
)
@click.option(
    "--parser",
    type=str,
    default=None,
    help="BeautifulSoup parser (html.parser, lxml, html5lib). Default: html.parser.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Output file. Default: stdout.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def convert_command(
    source: str,
    heading_style: str | None,
    link_style: str | None,
    code_fence: str | None,
    bullet_marker: str | None,
    base_url: str | None,
    exclude: tuple[str, ...],
    include: tuple[str, ...],
    parser: str | None,
    output: Path | None,
    verbose: bool,
) -> None:
    """Convert HTML to Markdown.

    Examples:
        markweave convert page.html
        markweave convert page.html --output page.md
        curl -s https://example.com | markweave convert -
        markweave convert page.html --heading-style setext --link-style referenced
        markweave convert page.html --exclude nav --exclude .sidebar,footer
        markweave convert page.html --exclude .ad --include .ad.keep
        markweave convert page.html --base-url https://example.com/docs/
    """
    from markweave.services.converter import convert
    from markweave.settings import get_settings

    try:
        settings = get_settings()
        configure_logging(verbose=verbose, level=settings.log_level)
        options = settings.to_options(
            heading_style=heading_style,
            link_style=link_style,
            code_fence=code_fence,
            bullet_marker=bullet_marker,
            base_url=base_url,
            exclude_selectors=list(exclude) or None,
            include_selectors=list(include) or None,
            parser=parser,
        )
        html = _read_source(source)
        markdown = convert(html, options)
    except MarkweaveError as e:
        click.echo(f"Error: {e.message}", err=True)
        LOGGER.debug(f"Conversion failed [correlation_id={e.correlation_id}] context={e.context}")
        raise SystemExit(1) from e

    if output:
        output.write_text(markdown + "\n" if markdown else "", encoding="utf-8")
        click.echo(f"Wrote {output}", err=True)
    else:
        click.echo(markdown)


def _read_source(source: str) -> bytes:
    """Read HTML bytes from a file path, or stdin for ``-``."""
    if source == "-":
        return sys.stdin.buffer.read()
    path = Path(source)
    if not path.is_file():
        raise InputFileNotFoundError(f"Input file not found: {source}", file_path=source)
    return path.read_bytes()
