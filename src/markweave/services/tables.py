"""Table formatting: header detection, alignment and span placement.

Cell content is rendered by a callback supplied by the renderer, so this
module only deals with table structure.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from bs4 import Tag

from markweave.models import Alignment

LOGGER = logging.getLogger(__name__)

_TEXT_ALIGN_RE = re.compile(r"text-align\s*:\s*(left|center|right)", re.IGNORECASE)

# Upper bound for colspan/rowspan so a bogus attribute cannot blow up the grid
MAX_SPAN = 1000

CellRenderer = Callable[[Tag], str]
ChildLister = Callable[[Tag], list[Tag]]


@dataclass
class CellSpec:
    """One source cell before placement on the grid."""

    text: str
    alignment: Alignment = Alignment.NONE
    colspan: int = 1
    rowspan: int = 1


def cell_alignment(cell: Tag) -> Alignment:
    """Alignment declared on a cell: ``text-align`` style first, then ``align``."""
    match = _TEXT_ALIGN_RE.search(cell.get("style") or "")
    if match:
        return Alignment(match.group(1).lower())
    align = (cell.get("align") or "").strip().lower()
    if align in ("left", "center", "right"):
        return Alignment(align)
    return Alignment.NONE


def _span(cell: Tag, name: str) -> int:
    try:
        value = int(str(cell.get(name, "1")).strip())
    except ValueError:
        return 1
    return min(max(value, 1), MAX_SPAN)


def element_children(node: Tag) -> list[Tag]:
    """The element children of a node."""
    return [child for child in node.children if isinstance(child, Tag)]


def row_cells(row: Tag, children: ChildLister = element_children) -> list[Tag]:
    """The ``td``/``th`` children of a row."""
    return [cell for cell in children(row) if cell.name in ("td", "th")]


def table_rows(
    table: Tag, children: ChildLister = element_children
) -> tuple[list[list[Tag]], list[list[Tag]], list[list[Tag]]]:
    """Split the rows of a table into head, body and foot rows of cells.

    Rows of nested tables are not included. A cell met where a row is
    expected (such as the kept cell of an excluded row) forms a row of its
    own; rows without cells are dropped.

    Args:
        table: Table element
        children: Lists the children of an element that take part in
            rendering; excluded elements are left out by the renderer

    Returns:
        Head, body and foot rows
    """
    head: list[list[Tag]] = []
    body: list[list[Tag]] = []
    foot: list[list[Tag]] = []

    def add_row(target: list[list[Tag]], node: Tag) -> None:
        cells = [node] if node.name in ("td", "th") else row_cells(node, children)
        if cells:
            target.append(cells)

    for child in children(table):
        if child.name in ("tr", "td", "th"):
            add_row(body, child)
        elif child.name in ("thead", "tbody", "tfoot"):
            target = {"thead": head, "tbody": body, "tfoot": foot}[child.name]
            for row in children(child):
                if row.name in ("tr", "td", "th"):
                    add_row(target, row)
    return head, body, foot


def place_cells(rows: list[list[CellSpec]]) -> list[list[CellSpec | None]]:
    """Lay source cells out on a grid, honouring colspan and rowspan.

    A spanning cell occupies its first grid position; the other positions it
    covers hold None.

    Args:
        rows: Source cells per row

    Returns:
        Grid rows, possibly of different lengths
    """
    grid: list[list[CellSpec | None]] = []
    # column -> number of following rows still covered by a rowspan
    carried: dict[int, int] = {}

    for row in rows:
        out: list[CellSpec | None] = []

        def fill_carried() -> None:
            while carried.get(len(out), 0) > 0:
                carried[len(out)] -= 1
                out.append(None)

        for cell in row:
            fill_carried()
            start = len(out)
            out.append(cell)
            out.extend([None] * (cell.colspan - 1))
            if cell.rowspan > 1:
                for column in range(start, start + cell.colspan):
                    carried[column] = cell.rowspan - 1

        while any(count > 0 for column, count in carried.items() if column >= len(out)):
            if carried.get(len(out), 0) > 0:
                carried[len(out)] -= 1
            out.append(None)
        grid.append(out)
    return grid


def column_alignments(grid: list[list[CellSpec | None]], columns: int) -> list[Alignment]:
    """Alignment per column, taken from the first row that declares one."""
    alignments = [Alignment.NONE] * columns
    for column in range(columns):
        for row in grid:
            cell = row[column] if column < len(row) else None
            if cell is not None and cell.alignment is not Alignment.NONE:
                alignments[column] = cell.alignment
                break
    return alignments


def format_row(cells: list[str]) -> str:
    """One pipe-delimited table row."""
    return "| " + " | ".join(cells) + " |"


def format_table(table: Tag, render_cell: CellRenderer, children: ChildLister = element_children) -> str | None:
    """Render a ``table`` element as a GFM table.

    The ``thead`` row is the header; without one the first row is promoted.
    Every row is padded or truncated to the header's column count.

    Args:
        table: Table element
        render_cell: Renders a cell (or caption) to single-line Markdown
        children: Lists the children of an element that take part in rendering

    Returns:
        Table Markdown, preceded by the caption if any, or None when the
        table has no content
    """
    head, body, foot = table_rows(table, children)
    ordered_rows = [*head, *body, *foot]
    if not ordered_rows:
        return None

    specs: list[list[CellSpec]] = []
    for row in ordered_rows:
        specs.append(
            [
                CellSpec(
                    text=render_cell(cell),
                    alignment=cell_alignment(cell),
                    colspan=_span(cell, "colspan"),
                    rowspan=_span(cell, "rowspan"),
                )
                for cell in row
            ]
        )
    grid = place_cells(specs)
    columns = len(grid[0]) or max(len(row) for row in grid)
    if columns == 0:
        return None

    alignments = column_alignments(grid, columns)
    text_rows = []
    for row in grid:
        cells = [cell.text if cell is not None else "" for cell in row[:columns]]
        cells.extend([""] * (columns - len(cells)))
        text_rows.append(cells)

    caption_el = next((child for child in children(table) if child.name == "caption"), None)
    caption = render_cell(caption_el) if caption_el is not None else ""

    if not caption and not any(cell for row in text_rows for cell in row):
        return None

    LOGGER.debug(f"Formatted table with {len(text_rows)} rows x {columns} columns")
    lines = []
    if caption:
        lines.append(f"*{caption}*")
    lines.append(format_row(text_rows[0]))
    lines.append(format_row([alignment.separator for alignment in alignments]))
    lines.extend(format_row(row) for row in text_rows[1:])
    return "\n".join(lines)
