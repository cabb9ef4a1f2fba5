"""HTML to Markdown conversion.

The conversion is a single depth-first pass over a BeautifulSoup tree:

1. The exclusion pass marks nodes matching exclude/include selectors
2. The block renderer walks the tree, driving the inline renderer and table
   formatter and pushing a scope frame for every list, quote, table and code
   block it enters
3. The output assembler joins the blocks and appends the link references

All state lives on a ``MarkdownRenderer`` created for one conversion, so
concurrent conversions share nothing.

Usage:
    markdown = convert("<h1>Title</h1><p>Body</p>", heading_style="setext")

    converter = MarkdownConverter(ConversionOptions(link_style="referenced"))
    markdown = converter.convert(html, base_url="https://example.com")
"""

import asyncio
import logging
from functools import partial
from typing import Any

from bs4 import BeautifulSoup, FeatureNotFound, Tag
from pydantic import ValidationError as PydanticValidationError

from markweave.exceptions import ConfigurationError, ValidationError, generate_correlation_id
from markweave.models import ConversionOptions, LinkStyle
from markweave.services.assembler import assemble
from markweave.services.blocks import BlockRenderer
from markweave.services.context import RenderContext
from markweave.services.links import LinkReferenceTable
from markweave.services.selectors import ExclusionMap, annotate_exclusions
from markweave.utils import log_with_correlation

LOGGER = logging.getLogger(__name__)

HtmlInput = str | bytes | BeautifulSoup | Tag | None


class MarkdownRenderer(BlockRenderer):
    """One-shot rendering engine for a single conversion.

    Attributes:
        options: Conversion options
        context: Scope stack; empty again once ``render`` returns
        links: Link references collected for the referenced link style
        exclusions: Result of the exclusion pass over the rendered tree
    """

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()
        self.context = RenderContext()
        self.links = LinkReferenceTable()
        self.exclusions = ExclusionMap()

    def render(self, root: BeautifulSoup | Tag) -> str:
        """Render a parsed document or subtree to Markdown."""
        self.exclusions = annotate_exclusions(
            root, self.options.exclude_selectors, self.options.include_selectors
        )
        if isinstance(root, BeautifulSoup):
            blocks = self.render_blocks(root)
        else:
            blocks = self.render_nodes([root])

        references = self.links if self.options.link_style is LinkStyle.REFERENCED else None
        return assemble(blocks, references)


def build_options(options: ConversionOptions | None = None, **overrides: Any) -> ConversionOptions:
    """Build validated options from a base and field overrides.

    Args:
        options: Base options; defaults when None
        **overrides: Field values replacing those of the base

    Returns:
        ConversionOptions

    Raises:
        ValidationError: If any value is not accepted
    """
    if not overrides:
        return options or ConversionOptions()
    data = options.model_dump() if options is not None else {}
    data.update(overrides)
    try:
        return ConversionOptions.model_validate(data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ()))
        raise ValidationError(
            f"Invalid conversion option: {error.get('msg', e)}",
            field=field or None,
            value=error.get("input"),
        ) from e


def parse_html(html: str | bytes, parser: str = "html.parser") -> BeautifulSoup:
    """Parse HTML with BeautifulSoup.

    Raises:
        ConfigurationError: If the parser is not installed
    """
    try:
        return BeautifulSoup(html, parser)
    except FeatureNotFound as e:
        raise ConfigurationError(f"HTML parser '{parser}' is not available", context={"parser": parser}) from e


def convert(html: HtmlInput, options: ConversionOptions | None = None, **overrides: Any) -> str:
    """Convert HTML to Markdown.

    Args:
        html: Raw HTML (text or bytes) or an already parsed tree
        options: Conversion options
        **overrides: Option fields overriding ``options``

    Returns:
        Markdown string; empty for empty input

    Raises:
        ValidationError: If the options are invalid
        ConfigurationError: If the configured parser is not installed
    """
    options = build_options(options, **overrides)
    if html is None:
        return ""
    if isinstance(html, (str, bytes)):
        if not html.strip():
            return ""
        root: BeautifulSoup | Tag = parse_html(html, options.parser)
    else:
        root = html

    renderer = MarkdownRenderer(options)
    try:
        return renderer.render(root)
    except RecursionError:
        log_with_correlation(
            LOGGER,
            logging.WARNING,
            "Document nesting too deep to render, falling back to plain text",
            correlation_id=generate_correlation_id(),
        )
        return root.get_text("\n\n", strip=True)


async def convert_async(html: HtmlInput, options: ConversionOptions | None = None, **overrides: Any) -> str:
    """Run ``convert`` in the default executor.

    The conversion always runs to completion once started; cancelling the
    awaiting task does not stop it.
    """
    options = build_options(options, **overrides)
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(convert, html, options))


class MarkdownConverter:
    """Convert HTML to clean markdown.

    Holds only immutable options, so one instance can be shared between
    threads and tasks.

    Usage:
        converter = MarkdownConverter()
        markdown = converter.convert(html, base_url="https://example.com")
    """

    def __init__(self, options: ConversionOptions | None = None):
        self.options = options or ConversionOptions()

    def _options_for(self, base_url: str | None) -> ConversionOptions:
        if base_url is None:
            return self.options
        return build_options(self.options, base_url=base_url)

    def convert(self, html: HtmlInput, base_url: str | None = None) -> str:
        """Convert HTML to markdown.

        Args:
            html: Raw HTML or a parsed tree
            base_url: Base URL for resolving relative links, overriding the options

        Returns:
            Markdown string
        """
        return convert(html, self._options_for(base_url))

    async def convert_async(self, html: HtmlInput, base_url: str | None = None) -> str:
        """Async form of ``convert``; runs in the default executor."""
        return await convert_async(html, self._options_for(base_url))
