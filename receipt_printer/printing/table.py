"""
Multi-column rows and tables on a fixed-width character grid.

A Row collects Cell specs and lays them out in one pass when the owning Table
adds it:
- cells with an explicit width keep it
- flexible cells share what is left of the page width equally (integer
  division, the remainder is dropped)
- each cell is wrapped or truncated, padded horizontally, then padded
  vertically to the tallest cell of the row
- row line i is the concatenation of every cell's line i in column order

A Table turns rows, separators and feeds into queued actions and hands them to
its PrinterContext on create().
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, List, Optional, Union

from receipt_printer.core.enums import HorizontalAlignment, VerticalAlignment
from receipt_printer.core.errors import ConfigurationError, ReceiptPrinterError
from receipt_printer.printing.actions import Feed, PrimitiveAction, Separator, TableBlock, TextLines
from receipt_printer.printing.align import align_vertical, fit_line, format_line
from receipt_printer.printing.wrap import sanitize, wrap_text

if TYPE_CHECKING:
    from receipt_printer.printing.context import PrinterContext

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR_CHAR = "─"


def check_separator_char(char: str) -> str:
    """Validate a separator character: exactly one character, not a line break."""
    if not isinstance(char, str) or len(char) != 1:
        raise ConfigurationError("char", f"separator must be a single character, got {char!r}")
    if char.splitlines() != [char]:
        raise ConfigurationError("char", "separator cannot be a line break character")
    return char


class Cell:
    """
    One column of a row.

    Configuration can be given as keyword arguments or chained:

        Cell("Total").with_align(HorizontalAlignment.RIGHT).with_wrap()
    """

    def __init__(
        self,
        content: str,
        width: Optional[int] = None,
        *,
        align: HorizontalAlignment = HorizontalAlignment.LEFT,
        valign: VerticalAlignment = VerticalAlignment.TOP,
        wrap: bool = False,
    ):
        if width is not None and width < 1:
            raise ConfigurationError("width", f"cell width must be positive, got {width}")
        self.content = sanitize(content)
        self.width = width
        self.align = HorizontalAlignment(align)
        self.valign = VerticalAlignment(valign)
        self.wrap = bool(wrap)

    def __repr__(self) -> str:
        return (
            f"Cell({self.content!r}, width={self.width!r}, align={self.align.value}, "
            f"valign={self.valign.value}, wrap={self.wrap})"
        )

    @property
    def flexible(self) -> bool:
        return self.width is None

    def with_wrap(self, enabled: bool = True) -> "Cell":
        self.wrap = bool(enabled)
        return self

    def with_align(self, align: HorizontalAlignment) -> "Cell":
        self.align = HorizontalAlignment(align)
        return self

    def with_valign(self, valign: VerticalAlignment) -> "Cell":
        self.valign = VerticalAlignment(valign)
        return self

    def layout(self, width: int) -> List[str]:
        """
        Render the content at the resolved width, before vertical padding.

        Empty content produces no lines; the row pads it to its height.
        A non-positive width (over-full row) yields a single zero-width line.
        """
        if not self.content:
            return []
        if width <= 0:
            return [""]
        if self.wrap:
            return [format_line(line, width, self.align) for line in wrap_text(self.content, width)]
        return [fit_line(self.content, width, self.align)]


def resolve_widths(cells: Sequence[Cell], page_width: int) -> List[int]:
    """
    Resolve each cell's column width.

    Flexible cells get (page_width - sum(explicit widths)) // flexible_count.
    Explicit widths are never clamped, so a row may end up wider or narrower
    than the page.
    """
    fixed_total = sum(c.width for c in cells if c.width is not None)
    flexible_count = sum(1 for c in cells if c.width is None)
    shared = (page_width - fixed_total) // flexible_count if flexible_count else 0

    widths = [c.width if c.width is not None else shared for c in cells]
    total = sum(widths)
    if total != page_width and cells:
        logger.debug("row width %d differs from page width %d (widths=%s)", total, page_width, widths)
    return widths


class Row:
    """An ordered list of cells that share one or more printed lines."""

    def __init__(self, page_width: int):
        self.page_width = page_width
        self.cells: List[Cell] = []

    def __len__(self) -> int:
        return len(self.cells)

    def add(self, cell: Union[Cell, str]) -> "Row":
        self.cells.append(cell if isinstance(cell, Cell) else Cell(cell))
        return self

    def add_cell(
        self,
        content: str,
        width: Optional[int] = None,
        *,
        align: HorizontalAlignment = HorizontalAlignment.LEFT,
        valign: VerticalAlignment = VerticalAlignment.TOP,
        wrap: bool = False,
        configure: Optional[Callable[[Cell], Any]] = None,
    ) -> "Row":
        cell = Cell(content, width, align=align, valign=valign, wrap=wrap)
        if configure is not None:
            configure(cell)
        self.cells.append(cell)
        return self

    def widths(self) -> List[int]:
        return resolve_widths(self.cells, self.page_width)

    def render(self) -> List[str]:
        """Lay out every cell once and merge them into the row's output lines."""
        if not self.cells:
            return []

        widths = self.widths()
        laid_out = [cell.layout(w) for cell, w in zip(self.cells, widths)]
        height = max(len(lines) for lines in laid_out)
        padded = [
            align_vertical(lines, height, cell.valign, max(0, w))
            for cell, lines, w in zip(self.cells, laid_out, widths)
        ]
        return ["".join(col[i] if i < len(col) else "" for col in padded) for i in range(height)]


RowSpec = Union[Cell, str]


class Table:
    """
    Table builder bound to a PrinterContext.

    Rows are laid out immediately when added; create() appends the collected
    actions to the context's queue as one block and returns the context.
    """

    def __init__(
        self,
        page_width: int,
        context: Optional["PrinterContext"] = None,
        separator_char: str = DEFAULT_SEPARATOR_CHAR,
    ):
        if page_width < 1:
            raise ConfigurationError("page_width", f"must be at least 1, got {page_width}")
        self.page_width = page_width
        self.separator_char = check_separator_char(separator_char)
        self._context = context
        self._actions: List[PrimitiveAction] = []

    @property
    def actions(self) -> tuple[PrimitiveAction, ...]:
        return tuple(self._actions)

    def add_row(self, *cells: Union[RowSpec, Sequence[RowSpec], Callable[[Row], Any]]) -> "Table":
        """
        Add a row given as cells/strings, a list of them, or a function that
        fills a Row:

            table.add_row("Item", Cell("9.99", 8, align="right"))
            table.add_row(lambda r: r.add_cell("Item").add_cell("9.99", 8))
        """
        row = Row(self.page_width)
        if len(cells) == 1 and callable(cells[0]):
            cells[0](row)
        else:
            specs = cells[0] if len(cells) == 1 and isinstance(cells[0], (list, tuple)) else cells
            for spec in specs:
                row.add(spec)  # type: ignore[arg-type]

        for line in row.render():
            self._actions.append(TextLines((line,)))
        return self

    def add_label_value(self, label: str, value: str, min_value_width: int = 15) -> "Table":
        """
        Two-column row: label on the left, value right-aligned in a column of
        max(min_value_width, len(value)) + 1 characters.

        When the value cannot fit beside a label, the label is dropped and the
        value is wrapped across the full page width; it is never truncated.
        """
        value = sanitize(value)
        value_width = max(min_value_width, len(value)) + 1
        if self.page_width > 1:
            value_width = min(value_width, self.page_width - 1)
        label_width = self.page_width - value_width
        if label_width < 1 or len(value) > value_width:
            logger.debug("label %r dropped; value %r needs the full page width", label, value)
            return self.add_row(Cell(value, align=HorizontalAlignment.RIGHT, wrap=True))
        return self.add_row(
            Cell(label, label_width),
            Cell(value, value_width, align=HorizontalAlignment.RIGHT),
        )

    def add_separator(self, char: Optional[str] = None) -> "Table":
        ch = check_separator_char(char) if char is not None else self.separator_char
        self._actions.append(Separator(ch * self.page_width))
        return self

    def feed_line(self, lines: int = 1) -> "Table":
        self._actions.append(Feed(lines))
        return self

    def add_empty_line(self) -> "Table":
        return self.feed_line(1)

    def create(self) -> "PrinterContext":
        if self._context is None:
            raise ReceiptPrinterError("table is not bound to a printer context")
        self._context.add_table_block(TableBlock(tuple(self._actions)))
        return self._context


__all__ = [
    "DEFAULT_SEPARATOR_CHAR",
    "Cell",
    "Row",
    "Table",
    "check_separator_char",
    "resolve_widths",
]
