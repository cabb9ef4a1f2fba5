"""Command-line interface for markweave.

Commands are organized into modules by functionality:

- convert: HTML file or stdin to Markdown
"""

# Import command modules to register them with the app
from markweave.cli import convert  # noqa: F401
from markweave.cli._common import app

__all__ = ["app"]
