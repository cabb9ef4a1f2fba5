"""Service layer for markweave.

This module provides the conversion engine:
- MarkdownConverter: reusable HTML to Markdown converter
- MarkdownRenderer: one-shot rendering engine behind it
- convert / convert_async: function entry points
"""

from markweave.services.converter import MarkdownConverter, MarkdownRenderer, convert, convert_async

__all__ = [
    "MarkdownConverter",
    "MarkdownRenderer",
    "convert",
    "convert_async",
]
