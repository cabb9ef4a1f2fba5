"""Output assembly: block joining and the reference appendix."""

from typing import NamedTuple

from markweave.services.links import LinkReferenceTable


class Block(NamedTuple):
    """Rendered output of one block-level construct.

    Attributes:
        text: Markdown text, without surrounding blank lines
        kind: Construct kind (``paragraph``, ``heading``, ``list``, ``code``,
            ``table``, ``blockquote``, ``rule``, ``html``, ...)
    """

    text: str
    kind: str = "paragraph"


def join_blocks(blocks: list[Block], tight: bool = False) -> str:
    """Join blocks with exactly one blank line between them.

    Args:
        blocks: Rendered blocks in document order; empty ones are dropped
        tight: Join a list directly under the preceding block with a single
            newline, as inside a list item

    Returns:
        Joined Markdown text
    """
    out: list[str] = []
    for block in blocks:
        text = block.text.strip("\n").rstrip()
        if not text.strip():
            continue
        if out:
            out.append("\n" if tight and block.kind == "list" else "\n\n")
        out.append(text)
    return "".join(out)


def assemble(blocks: list[Block], references: LinkReferenceTable | None = None) -> str:
    """Build the final document.

    Args:
        blocks: Top-level blocks
        references: Reference table to append, for the referenced link style

    Returns:
        Markdown document without leading or trailing blank lines
    """
    body = join_blocks(blocks)
    if references is not None and len(references):
        appendix = references.render()
        body = f"{body}\n\n{appendix}" if body else appendix
    return body.strip("\n")
