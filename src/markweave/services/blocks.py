"""Block renderer: paragraphs, headings, lists, quotes, code and other blocks.

Every handler returns finished Markdown for its element (a ``Block``, a list
of blocks, or None when the element renders to nothing). Nesting is
compositional: a blockquote prefixes the lines of its rendered children, a
list item indents them, so handlers never need to know where they sit.
"""

import logging
from collections.abc import Iterable

from bs4 import Tag

from markweave.models import HeadingStyle
from markweave.services.assembler import Block, join_blocks
from markweave.services.code import collect_code_text, detect_language, is_gutter, is_text
from markweave.services.context import BlockquoteScope, CodeScope, ListScope, TableScope
from markweave.services.escaping import code_fence, escape_line_starts, escape_unescaped_pipes
from markweave.services.inline import InlineRenderer, join_inline, single_line, trim_inline
from markweave.services.tables import format_table
from markweave.services.tags import (
    BLOCK_CONTAINERS,
    BLOCK_HANDLERS,
    INLINE_WRAPPERS,
    SKIP_TAGS,
    has_block_child,
)

LOGGER = logging.getLogger(__name__)

BlockResult = Block | list[Block] | None


def int_attribute(el: Tag, name: str, default: int | None) -> int | None:
    """Integer value of an attribute, or the default when missing or invalid."""
    value = el.get(name)
    if value is None:
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number >= 0 else default


def prefix_lines(text: str, prefix: str) -> str:
    """Prefix every line; blank lines get the prefix without trailing space."""
    bare = prefix.rstrip()
    return "\n".join(f"{prefix}{line}" if line else bare for line in text.split("\n"))


def indent_item(marker: str, body: str, width: int) -> str:
    """Put a list marker before the first line and indent the rest to ``width``."""
    first, *rest = body.split("\n")
    padding = " " * width
    lines = [f"{marker} {first}"]
    lines.extend(f"{padding}{line}" if line else "" for line in rest)
    return "\n".join(lines)


class BlockRenderer(InlineRenderer):
    """Renders block-level elements, driving the inline renderer for runs of text."""

    def render_blocks(self, node: Tag) -> list[Block]:
        """Render the children of an element as a sequence of blocks."""
        return self.render_nodes(node.children)

    def render_nodes(self, nodes: Iterable) -> list[Block]:
        """Render sibling nodes; runs of inline content become paragraphs."""
        blocks: list[Block] = []
        inline: list[str] = []
        for node in nodes:
            self._render_node(node, blocks, inline)
        self._flush_paragraph(inline, blocks)
        return blocks

    def _render_node(self, node, blocks: list[Block], inline: list[str]) -> None:
        if not isinstance(node, Tag):
            if is_text(node):
                inline.append(self.render_text(node))
            return

        if self.exclusions.is_excluded(node):
            for included in self.included_within(node):
                self._render_node(included, blocks, inline)
            return

        name = node.name
        if name in SKIP_TAGS:
            return

        handler = BLOCK_HANDLERS.get(name)
        if handler is not None:
            self._flush_paragraph(inline, blocks)
            result: BlockResult = getattr(self, handler)(node)
            if isinstance(result, Block):
                blocks.append(result)
            elif result:
                blocks.extend(result)
        elif name in BLOCK_CONTAINERS or (name in INLINE_WRAPPERS and has_block_child(node)):
            self._flush_paragraph(inline, blocks)
            for child in node.children:
                self._render_node(child, blocks, inline)
            self._flush_paragraph(inline, blocks)
        else:
            inline.append(self.render_inline(node))

    def _flush_paragraph(self, inline: list[str], blocks: list[Block]) -> None:
        if not inline:
            return
        text = trim_inline(join_inline(inline))
        inline.clear()
        if text:
            blocks.append(Block(escape_line_starts(text), "paragraph"))

    def _single_line(self, el: Tag) -> str:
        return single_line(self.render_inline_children(el))

    def _visible_children(self, el: Tag) -> list[Tag]:
        """Element children, with excluded ones replaced by their included descendants."""
        visible: list[Tag] = []
        for child in el.children:
            if not isinstance(child, Tag):
                continue
            if self.exclusions.is_excluded(child):
                visible.extend(self.included_within(child))
            else:
                visible.append(child)
        return visible

    def _is_hidden(self, node: Tag, root: Tag) -> bool:
        """True if ``node`` is excluded, or sits in an excluded element below ``root``.

        An included element between the two makes it visible again.
        """
        current = node
        while current is not None and current is not root:
            if self.exclusions.is_included(current):
                return False
            if self.exclusions.is_excluded(current):
                return True
            current = current.parent
        return False

    def _find_visible(self, el: Tag, name: str) -> Tag | None:
        return next((found for found in el.find_all(name) if not self._is_hidden(found, el)), None)

    # Element handlers

    def block_heading(self, el: Tag) -> BlockResult:
        """ATX (``## Title``) or setext headings; setext only exists for levels 1 and 2."""
        level = int(el.name[1])
        text = self._single_line(el)
        if not text:
            return None
        text = escape_line_starts(text)
        if self.options.heading_style is HeadingStyle.SETEXT and level <= 2:
            underline = ("=" if level == 1 else "-") * len(text)
            return Block(f"{text}\n{underline}", "heading")
        return Block(f"{'#' * level} {text}", "heading")

    def block_rule(self, el: Tag) -> BlockResult:
        return Block("---", "rule")

    def block_blockquote(self, el: Tag) -> BlockResult:
        with self.context.scope(BlockquoteScope(depth=self.context.blockquote_depth + 1)):
            inner = join_blocks(self.render_blocks(el))
        if not inner:
            return None
        return Block(prefix_lines(inner, "> "), "blockquote")

    def block_list(self, el: Tag) -> BlockResult:
        """Bullet and ordered lists.

        Empty items are dropped without consuming a number. A ``value``
        attribute on an ordered item restarts the count from that number.
        """
        ordered = el.name == "ol"
        start = int_attribute(el, "start", 1) if ordered else 1
        frame = ListScope(ordered=ordered, index=start, marker=self.options.bullet_marker)
        items: list[str] = []
        with self.context.scope(frame):
            for nodes, value in self._list_item_groups(el):
                body = join_blocks(self.render_nodes(nodes), tight=True)
                if not body:
                    continue
                if ordered and value is not None:
                    frame.index = value
                marker = frame.next_marker()
                items.append(indent_item(marker, body, frame.width))
        if not items:
            return None
        return Block("\n".join(items), "list")

    def _list_item_groups(self, el: Tag) -> list[tuple[list, int | None]]:
        """Group list children into items; stray children join the previous item."""
        groups: list[tuple[list, int | None]] = []
        for child in el.children:
            if isinstance(child, Tag) and child.name == "li":
                if self.exclusions.is_excluded(child):
                    included = self.included_within(child)
                    if included:
                        groups.append((included, None))
                    continue
                groups.append((list(child.children), int_attribute(child, "value", None)))
            elif isinstance(child, Tag) or (is_text(child) and child.strip()):
                if groups:
                    groups[-1][0].append(child)
                else:
                    groups.append(([child], None))
        return groups

    def block_code(self, el: Tag) -> BlockResult:
        """Fenced code block from ``pre`` (normally ``pre > code``)."""
        children = [c for c in el.children if isinstance(c, Tag) and not is_gutter(c)]
        code_el = children[0] if len(children) == 1 and children[0].name == "code" else None
        # Text beside the code element belongs to the block too: collect the
        # whole pre, and take the language from pre alone
        if code_el is not None and any(is_text(c) and c.strip() for c in el.children):
            code_el = None
        language = detect_language(code_el, el)

        with self.context.scope(CodeScope()):
            text = collect_code_text(code_el if code_el is not None else el)
        if text.startswith("\r\n"):
            text = text[2:]
        elif text.startswith("\n"):
            text = text[1:]
        text = text.rstrip("\r\n")
        if not text.strip():
            return None

        fence = code_fence(text, self.options.code_fence.char)
        return Block(f"{fence}{language or ''}\n{text}\n{fence}", "code")

    def block_table(self, el: Tag) -> BlockResult:
        with self.context.scope(TableScope()):
            text = format_table(el, self._render_cell, self._visible_children)
        return Block(text, "table") if text else None

    def _render_cell(self, cell: Tag) -> str:
        """Single-line cell content; block content is joined with spaces."""
        pieces = []
        for block in self.render_blocks(cell):
            text = " ".join(line.strip() for line in block.text.split("\n") if line.strip())
            if text:
                pieces.append(text)
        return escape_unescaped_pipes(" ".join(pieces))

    def block_definitions(self, el: Tag) -> BlockResult:
        """Definition lists: the term on its own line, then ``: definition`` per ``dd``."""
        groups: list[list[str]] = []
        for child in self._definition_parts(el):
            if child.name == "dt":
                term = self._single_line(child)
                if term:
                    groups.append([escape_line_starts(term)])
                continue
            body = join_blocks(self.render_blocks(child))
            if not body:
                continue
            definition = indent_item(":", body, 2)
            if groups:
                groups[-1].append(definition)
            else:
                groups.append([definition])
        if not groups:
            return None
        return Block("\n\n".join("\n".join(group) for group in groups), "definitions")

    def _definition_parts(self, el: Tag) -> list[Tag]:
        parts = []
        for child in el.children:
            if not isinstance(child, Tag) or self.exclusions.is_excluded(child):
                continue
            if child.name in ("dt", "dd"):
                parts.append(child)
            elif child.name == "div":
                parts.extend(self._definition_parts(child))
        return parts

    def block_details(self, el: Tag) -> BlockResult:
        """Kept as HTML; the summary stays the visible label and the body is Markdown."""
        # An excluded summary stays among the body nodes, where only its included parts render
        summary = next(
            (
                c
                for c in el.children
                if isinstance(c, Tag) and c.name == "summary" and not self.exclusions.is_excluded(c)
            ),
            None,
        )
        label = self._single_line(summary) if summary is not None else ""
        body = join_blocks(self.render_nodes(c for c in el.children if c is not summary))
        if not label and not body:
            return None

        lines = ["<details open>" if el.has_attr("open") else "<details>"]
        if label:
            lines.append(f"<summary>{label}</summary>")
        if body:
            lines.extend(["", body, ""])
        lines.append("</details>")
        return Block("\n".join(lines), "html")

    def block_figure(self, el: Tag) -> BlockResult:
        """Image followed by its caption in italics."""
        img = self._find_visible(el, "img")
        if img is None:
            return self.render_blocks(el)
        image = self.render_inline(img)
        caption_el = self._find_visible(el, "figcaption")
        caption = self._single_line(caption_el) if caption_el is not None else ""
        lines = [line for line in (image, f"*{caption}*" if caption else "") if line]
        if not lines:
            return None
        return Block("\n".join(lines), "figure")
