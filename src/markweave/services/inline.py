"""Inline renderer: text, emphasis, code spans, links and images.

``InlineRenderer`` is a mixin for ``MarkdownRenderer``; it expects the
``options``, ``context``, ``links`` and ``exclusions`` attributes set up there.
"""

import logging
import re
from collections.abc import Iterable

from bs4 import Tag

from markweave.models import ConversionOptions, LinkStyle
from markweave.services.code import collect_code_text, is_text
from markweave.services.context import CodeScope, RenderContext
from markweave.services.escaping import (
    code_span,
    collapse_whitespace,
    escape_alt,
    escape_attribute,
    escape_boundary,
    escape_text,
    escape_title,
)
from markweave.services.links import LinkReferenceTable
from markweave.services.selectors import ExclusionMap
from markweave.services.tags import (
    BLOCK_TAGS,
    EMPHASIS_GROUPS,
    EMPHASIS_MARKERS,
    INLINE_HANDLERS,
    INLINE_WRAPPERS,
    SKIP_TAGS,
)
from markweave.utils import has_scheme, normalise_link

LOGGER = logging.getLogger(__name__)

HARD_BREAK = "\\\n"

_LEADING_RE = re.compile(r"^(?:\s|\\\n)+")
_TRAILING_RE = re.compile(r"(?:\s|\\\n)+$")
_BREAK_RE = re.compile(r" *\\\n *")


def trim_inline(text: str) -> str:
    """Strip surrounding whitespace and hard breaks from inline Markdown."""
    return _TRAILING_RE.sub("", _LEADING_RE.sub("", text))


def single_line(text: str) -> str:
    """Fold hard breaks into spaces and trim, for headings and labels."""
    return trim_inline(_BREAK_RE.sub(" ", text))


def join_inline(pieces: Iterable[str]) -> str:
    """Concatenate inline pieces without doubling the spaces between them."""
    parts: list[str] = []
    for piece in pieces:
        if not piece:
            continue
        if parts:
            if piece[0] == " " and parts[-1][-1] in " \n":
                piece = piece.lstrip(" ")
            elif piece.startswith(HARD_BREAK):
                parts[-1] = parts[-1].rstrip(" ")
            if not piece:
                continue
            parts[-1] = escape_boundary(parts[-1], piece)
        parts.append(piece)
    return "".join(parts)


def keep_spacing(text: str, markup: str) -> str:
    """Surround markup with the single spaces that surrounded the source text."""
    leading = " " if text[:1].isspace() else ""
    trailing = " " if text[-1:].isspace() else ""
    return f"{leading}{markup}{trailing}"


def wrap_inline(text: str, opening: str, closing: str | None = None) -> str:
    """Wrap inline text in delimiters, keeping surrounding whitespace outside.

    Examples:
        >>> wrap_inline(" bold ", "**")
        ' **bold** '
    """
    inner = trim_inline(text)
    if not inner:
        return " " if text else ""
    return keep_spacing(text, f"{opening}{inner}{closing if closing is not None else opening}")


class InlineRenderer:
    """Renders text nodes and inline elements to Markdown."""

    options: ConversionOptions
    context: RenderContext
    links: LinkReferenceTable
    exclusions: ExclusionMap

    def render_text(self, node) -> str:
        """Escaped text of a text node; literal inside code."""
        text = str(node)
        if self.context.in_code:
            return text
        return escape_text(collapse_whitespace(text))

    def render_inline(self, node) -> str:
        """Render one node in inline context."""
        if not isinstance(node, Tag):
            return self.render_text(node) if is_text(node) else ""
        if self.exclusions.is_excluded(node):
            return join_inline(self.render_inline(n) for n in self.included_within(node))

        name = node.name
        if name in SKIP_TAGS:
            return ""
        if self.context.in_code:
            return collect_code_text(node)

        handler = INLINE_HANDLERS.get(name)
        if handler is not None:
            return getattr(self, handler)(node)
        if name in INLINE_WRAPPERS:
            return self.render_inline_children(node)
        if name in BLOCK_TAGS:
            # Block element inside inline content: keep its text, separated by spaces
            content = trim_inline(self.render_inline_children(node))
            return f" {content} " if content else ""
        # kbd, mark, abbr, samp, var, sub, sup and unknown tags stay HTML
        return self.inline_passthrough(node)

    def render_inline_children(self, node: Tag) -> str:
        """Render the children of an element as one inline run."""
        if self.context.in_code:
            return "".join(self.render_inline(child) for child in node.children)
        return join_inline(self.render_inline(child) for child in node.children)

    def included_within(self, node: Tag) -> list[Tag]:
        """Topmost descendants of an excluded element that are marked included."""
        found: list[Tag] = []
        if not self.exclusions.included:
            return found
        for child in node.children:
            if isinstance(child, Tag):
                if self.exclusions.is_included(child):
                    found.append(child)
                else:
                    found.extend(self.included_within(child))
        return found

    # Element handlers

    def inline_nothing(self, el: Tag) -> str:
        return ""

    def inline_break(self, el: Tag) -> str:
        return "<br>" if self.context.in_table else HARD_BREAK

    def inline_emphasis(self, el: Tag) -> str:
        """``**strong**``, ``*em*`` and ``~~strike~~``; nested identical emphasis is not doubled."""
        marker = EMPHASIS_MARKERS[el.name]
        text = self.render_inline_children(el)
        if el.find_parent(EMPHASIS_GROUPS[marker]) is not None:
            return text
        return wrap_inline(text, marker)

    def inline_code(self, el: Tag) -> str:
        """Code span sized to the backtick runs in its content."""
        with self.context.scope(CodeScope()):
            content = self.render_inline_children(el)
        content = content.replace("\r\n", " ").replace("\n", " ")
        if not content:
            return ""
        return code_span(content)

    def inline_passthrough(self, el: Tag) -> str:
        """Keep an element as HTML with its Markdown-rendered content."""
        attrs = ""
        title = el.get("title")
        if el.name == "abbr" and title:
            attrs = f' title="{escape_attribute(title)}"'
        return wrap_inline(self.render_inline_children(el), f"<{el.name}{attrs}>", f"</{el.name}>")

    def inline_image(self, el: Tag) -> str:
        """Convert image tags, resolving relative URLs."""
        src = (el.get("src") or "").strip()
        if not src:
            return ""
        alt = escape_alt(collapse_whitespace(el.get("alt") or "").strip())
        url = normalise_link(src, self.options.base_url)
        title = el.get("title")
        if title:
            return f'![{alt}]({url} "{escape_title(title)}")'
        return f"![{alt}]({url})"

    def inline_link(self, el: Tag) -> str:
        """Convert anchor tags, resolving relative URLs.

        Strips javascript: pseudo-protocol links along with their text; they
        are UI controls with no content value. Links whose text repeats the
        URL become autolinks.
        """
        href = (el.get("href") or "").strip()
        if href.lower().startswith("javascript:"):
            return ""

        text = self.render_inline_children(el)
        label = trim_inline(text)
        if not label:
            return ""
        if not href or href == "#":
            return text

        title = el.get("title") or None
        url = normalise_link(href, self.options.base_url)
        autolink = None if title else self._autolink(el, href, url)
        if autolink is not None:
            return keep_spacing(text, autolink)

        if self.options.link_style is LinkStyle.REFERENCED:
            ref_id = self.links.register(url, title)
            markup = f"[{label}][{ref_id}]"
        elif title:
            markup = f'[{label}]({url} "{escape_title(title)}")'
        else:
            markup = f"[{label}]({url})"
        return keep_spacing(text, markup)

    def _autolink(self, el: Tag, href: str, url: str) -> str | None:
        """Autolink form when the link text is just the URL or email address."""
        if not has_scheme(url):
            return None
        plain = collapse_whitespace(el.get_text()).strip()
        if url.lower().startswith("mailto:"):
            address = url.split(":", 1)[1]
            if plain in (address, href.split(":", 1)[1]):
                LOGGER.debug(f"Rendering email autolink for {address}")
                return f"<{address}>"
        if plain in (href, url):
            LOGGER.debug(f"Rendering autolink for {url}")
            return f"<{url}>"
        return None
