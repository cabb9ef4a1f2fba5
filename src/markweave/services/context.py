"""Render context stack.

One scope frame is pushed for each structural construct the renderer enters
(list, blockquote, table, code) and popped on every way out, so the stack
always mirrors the ancestor chain of the node being rendered. Use
``RenderContext.scope()`` rather than ``push``/``pop`` directly.

Indentation is not read from the stack: each list item and blockquote
prefixes the lines of its own rendered content, so nested levels compose.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TypeVar


@dataclass
class ListScope:
    """An open ``ul``/``ol``; ``index`` is the number the next item will get."""

    ordered: bool
    index: int = 1
    marker: str = "-"
    width: int = field(init=False, default=2)

    def __post_init__(self) -> None:
        self.width = len(f"{self.index}." if self.ordered else self.marker) + 1

    def next_marker(self) -> str:
        """Marker for the next item, advancing the ordered counter.

        ``width`` is updated to the indentation that aligns continuation
        lines with the content of that item.
        """
        if not self.ordered:
            marker = self.marker
        else:
            marker = f"{self.index}."
            self.index += 1
        self.width = len(marker) + 1
        return marker


@dataclass
class BlockquoteScope:
    """An open ``blockquote``; ``depth`` counts enclosing quotes including this one."""

    depth: int = 1


@dataclass
class TableScope:
    """An open ``table``; line breaks in cells render as ``<br>``."""


@dataclass
class CodeScope:
    """Literal code; escaping is suppressed while one of these is open."""


Scope = ListScope | BlockquoteScope | TableScope | CodeScope

S = TypeVar("S", ListScope, BlockquoteScope, TableScope, CodeScope)


class RenderContext:
    """Stack of scope frames for one conversion."""

    def __init__(self) -> None:
        self._frames: list[Scope] = []

    def push(self, frame: Scope) -> None:
        """Enter a construct."""
        self._frames.append(frame)

    def pop(self) -> Scope:
        """Leave the innermost construct."""
        return self._frames.pop()

    @contextmanager
    def scope(self, frame: S) -> Iterator[S]:
        """Push a frame for the duration of a ``with`` block, popping it on any exit."""
        self.push(frame)
        try:
            yield frame
        finally:
            self.pop()

    @property
    def depth(self) -> int:
        """Number of open frames."""
        return len(self._frames)

    def innermost(self, kind: type[S]) -> S | None:
        """Return the innermost open frame of the given kind, if any."""
        for frame in reversed(self._frames):
            if isinstance(frame, kind):
                return frame
        return None

    @property
    def in_code(self) -> bool:
        """True while literal code is being rendered."""
        return self.innermost(CodeScope) is not None

    @property
    def in_table(self) -> bool:
        """True while table cells are being rendered."""
        return self.innermost(TableScope) is not None

    @property
    def blockquote_depth(self) -> int:
        """Nesting count of open blockquotes."""
        frame = self.innermost(BlockquoteScope)
        return frame.depth if frame else 0
