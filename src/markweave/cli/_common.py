"""Common CLI utilities and the main app group."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from markweave import __version__

console = Console(stderr=True)
_configured = False


def configure_logging(*, verbose: bool = False, level: str = "INFO") -> None:
    """Configure logging with Rich handler. Call once at startup."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                tracebacks_show_locals=verbose,
            )
        ],
        force=True,
    )

    _configured = True


@click.group(help="Convert HTML to GitHub-Flavored Markdown.")
@click.version_option(__version__, prog_name="markweave")
def app() -> None:
    """
    Entry point for the markweave CLI.

    Converts HTML files or standard input to Markdown.
    """
