"""markweave: HTML to GitHub-Flavored Markdown conversion."""

from markweave.models import Alignment, CodeFence, ConversionOptions, HeadingStyle, LinkStyle
from markweave.services import MarkdownConverter, MarkdownRenderer, convert, convert_async

__version__ = "0.1.0"

__all__ = [
    "Alignment",
    "CodeFence",
    "ConversionOptions",
    "HeadingStyle",
    "LinkStyle",
    "MarkdownConverter",
    "MarkdownRenderer",
    "__version__",
    "convert",
    "convert_async",
]
