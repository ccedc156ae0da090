"""
PrinterContext: fluent receipt builder and its single-pass executor.

Building is synchronous and side-effect free: every add_* call renders its
content against the page width right away and appends an immutable action to
the queue. execute() is the only place that talks to the output backend:

    initialize -> open_connection -> queued actions in order
    -> cut paper / open drawer (if configured) -> release -> close_connection

Cancellation is cooperative and checked before each action. Release/close
always run, also after a backend failure or a cancellation.

A context is single-use; executing it twice raises ContextConsumedError.
Contexts are not thread-safe; build each one from a single thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Union

from receipt_printer.backends.base import OutputBackend
from receipt_printer.core.config import PrinterOptions, load_options
from receipt_printer.core.enums import BarcodeWidth, HorizontalAlignment, HRIPosition, ScaleMode, TextSize
from receipt_printer.core.errors import BackendError, ConfigurationError, ContextConsumedError
from receipt_printer.printing.actions import (
    Action,
    BarcodeBlock,
    Feed,
    ImageBlock,
    PrimitiveAction,
    Separator,
    TableBlock,
    TextLines,
    iter_primitive,
)
from receipt_printer.printing.align import fit_line, format_line
from receipt_printer.printing.table import DEFAULT_SEPARATOR_CHAR, Table, check_separator_char
from receipt_printer.printing.wrap import sanitize, wrap_text

logger = logging.getLogger(__name__)

DRAWER_PIN_MODE = 0
DRAWER_ON_MS = 30
DRAWER_OFF_MS = 255


class CancellationToken(Protocol):
    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class ExecutionSummary:
    total: int
    dispatched: int
    cancelled: bool = False
    cut: bool = False
    drawer_opened: bool = False


def _is_cancelled(cancel: Optional[CancellationToken]) -> bool:
    return cancel is not None and bool(cancel.is_set())


def _call(operation: str, fn: Callable[..., Any], *args: Any) -> Any:
    """Invoke a backend method, converting any failure into BackendError."""
    try:
        return fn(*args)
    except BackendError:
        raise
    except Exception as e:
        raise BackendError(operation, str(e) or type(e).__name__) from e


class PrinterContext:
    """
    Accumulates receipt content and prints it against one backend.

        ctx = PrinterContext(ConsoleBackend(32), page_width=32, cut_after_print=True)
        ctx.add_text("INVOICE", align="center").feed_line()
        ctx.table().add_label_value("Subtotal", "274.50").add_separator().create()
        ctx.add_barcode("123456789012")
        ctx.execute()
    """

    def __init__(
        self,
        backend: OutputBackend,
        options: Union[PrinterOptions, Mapping[str, Any], None] = None,
        **overrides: Any,
    ):
        if isinstance(options, PrinterOptions) and not overrides:
            self.options = options
        elif isinstance(options, PrinterOptions):
            self.options = load_options(options.model_dump(), **overrides)
        else:
            self.options = load_options(options, **overrides)
        self.backend = backend
        self._actions: List[Action] = []
        self._executed = False

    @property
    def page_width(self) -> int:
        return self.options.page_width

    @property
    def actions(self) -> tuple[Action, ...]:
        return tuple(self._actions)

    @property
    def executed(self) -> bool:
        return self._executed

    def _append(self, action: Action) -> "PrinterContext":
        if self._executed:
            raise ContextConsumedError("cannot add content to a printer context that already executed")
        self._actions.append(action)
        return self

    # Builder --------------------------------------------------------------

    def add_text(
        self,
        content: str,
        *,
        wrap: bool = False,
        align: HorizontalAlignment = HorizontalAlignment.LEFT,
        size: TextSize = TextSize.NORMAL,
    ) -> "PrinterContext":
        """
        Queue a text block. Without wrap the text is truncated to the page
        width; with wrap it is split into as many lines as needed.
        """
        if not content:
            raise ConfigurationError("content", "text cannot be empty")
        align = HorizontalAlignment(align)
        width = self.page_width
        text = sanitize(content)
        if wrap:
            lines = [format_line(line, width, align) for line in wrap_text(text, width)]
        else:
            lines = [fit_line(text, width, align)]
        if not lines:
            lines = [" " * width]
        return self._append(TextLines(tuple(lines), align, TextSize(size)))

    def add_separator(self, char: str = DEFAULT_SEPARATOR_CHAR) -> "PrinterContext":
        return self._append(Separator(check_separator_char(char) * self.page_width))

    def feed_line(self, lines: int = 1) -> "PrinterContext":
        if isinstance(lines, bool) or not isinstance(lines, int) or lines < 1:
            raise ConfigurationError("lines", f"number of lines must be at least 1, got {lines!r}")
        return self._append(Feed(lines))

    def table(self, separator_char: str = DEFAULT_SEPARATOR_CHAR) -> Table:
        """Start a table builder; its create() appends the table and returns this context."""
        return Table(self.page_width, self, separator_char)

    def add_table(self, build: Callable[[Table], Any], separator_char: str = DEFAULT_SEPARATOR_CHAR) -> "PrinterContext":
        table = self.table(separator_char)
        build(table)
        return table.create()

    def add_table_block(self, block: TableBlock) -> "PrinterContext":
        return self._append(block)

    def add_image(self, path: str, *, label: str = "", scale: ScaleMode = ScaleMode.NORMAL) -> "PrinterContext":
        if not path:
            raise ConfigurationError("path", "image path cannot be empty")
        return self._append(ImageBlock(str(path), label or "", ScaleMode(scale)))

    def add_barcode(
        self,
        data: str,
        *,
        height: int = 100,
        width: BarcodeWidth = BarcodeWidth.LARGE,
        align: HorizontalAlignment = HorizontalAlignment.CENTER,
        hri: HRIPosition = HRIPosition.BELOW,
    ) -> "PrinterContext":
        if not data:
            raise ConfigurationError("data", "barcode data cannot be empty")
        if height < 1:
            raise ConfigurationError("height", f"barcode height must be positive, got {height}")
        return self._append(
            BarcodeBlock(data, height, BarcodeWidth(width), HorizontalAlignment(align), HRIPosition(hri))
        )

    # Execution ------------------------------------------------------------

    def _dispatch(self, action: PrimitiveAction) -> None:
        backend = self.backend
        if isinstance(action, TextLines):
            for line in action.lines:
                _call("emit_text_line", backend.emit_text_line, line, action.align, action.size)
        elif isinstance(action, Separator):
            _call("emit_text_line", backend.emit_text_line, action.line, HorizontalAlignment.LEFT, TextSize.NORMAL)
        elif isinstance(action, Feed):
            if action.count < 1:
                logger.debug("Skipping feed of %d lines", action.count)
                return
            _call("feed_lines", backend.feed_lines, action.count)
        elif isinstance(action, BarcodeBlock):
            _call(
                "emit_barcode",
                backend.emit_barcode,
                action.data,
                action.height,
                action.width,
                action.align,
                action.hri,
            )
        elif isinstance(action, ImageBlock):
            _call("emit_image", backend.emit_image, action.path, action.label, action.scale)
        else:
            raise TypeError(f"Unknown print action: {action!r}")

    def _shutdown(self, initialized: bool, opened: bool, *, raise_errors: bool) -> None:
        """
        Release then close whatever was acquired. With raise_errors=False
        (a primary error is propagating) failures are only logged.
        """
        first: Optional[BackendError] = None
        steps = []
        if initialized:
            steps.append(("release", self.backend.release))
        if opened:
            steps.append(("close_connection", self.backend.close_connection))
        for operation, fn in steps:
            try:
                _call(operation, fn)
            except BackendError as e:
                logger.warning("Cleanup step %s failed: %s", operation, e)
                if first is None:
                    first = e
        if first is not None and raise_errors:
            raise first

    def execute(self, cancel: Optional[CancellationToken] = None) -> ExecutionSummary:
        """
        Run the queued actions against the backend in declaration order.

        Raises:
            ContextConsumedError if this context already executed.
            BackendError for any backend failure, after best-effort cleanup.
        """
        if self._executed:
            raise ContextConsumedError("printer context already executed; build a new context per receipt")
        self._executed = True

        actions = list(iter_primitive(self._actions))
        total = len(actions)
        dispatched = 0
        cancelled = False
        cut = drawer = False
        initialized = opened = False

        logger.info("Starting print job: %d actions, page_width=%d", total, self.page_width)
        try:
            _call("initialize", self.backend.initialize, self.options.model_hint)
            initialized = True
            _call("open_connection", self.backend.open_connection, self.options.connection_string)
            opened = True
            logger.info("Printer connection established")

            for action in actions:
                if _is_cancelled(cancel):
                    cancelled = True
                    logger.info("Print job cancelled after %d/%d actions", dispatched, total)
                    break
                self._dispatch(action)
                dispatched += 1

            if self.options.cut_after_print:
                _call("cut_paper", self.backend.cut_paper, self.options.cut_distance)
                cut = True
            if self.options.open_drawer_after_print and not cancelled:
                _call("open_cash_drawer", self.backend.open_cash_drawer, DRAWER_PIN_MODE, DRAWER_ON_MS, DRAWER_OFF_MS)
                drawer = True
        except BaseException:
            logger.error("Print job failed after %d/%d actions", dispatched, total)
            self._shutdown(initialized, opened, raise_errors=False)
            raise
        self._shutdown(initialized, opened, raise_errors=True)
        logger.info("Printer connection closed")

        return ExecutionSummary(total=total, dispatched=dispatched, cancelled=cancelled, cut=cut, drawer_opened=drawer)

    async def execute_async(self, cancel: Optional[CancellationToken] = None) -> ExecutionSummary:
        """Run execute() on a worker thread so the calling event loop is not blocked."""
        return await asyncio.to_thread(self.execute, cancel)

    def open_drawer(self) -> None:
        """Kick the cash drawer right away, independent of the queued content."""
        initialized = opened = False
        try:
            _call("initialize", self.backend.initialize, self.options.model_hint)
            initialized = True
            _call("open_connection", self.backend.open_connection, self.options.connection_string)
            opened = True
            _call("open_cash_drawer", self.backend.open_cash_drawer, DRAWER_PIN_MODE, DRAWER_ON_MS, DRAWER_OFF_MS)
        except BaseException:
            self._shutdown(initialized, opened, raise_errors=False)
            raise
        self._shutdown(initialized, opened, raise_errors=True)
        logger.info("Cash drawer opened")

    async def open_drawer_async(self) -> None:
        await asyncio.to_thread(self.open_drawer)


__all__ = ["DRAWER_OFF_MS", "DRAWER_ON_MS", "DRAWER_PIN_MODE", "CancellationToken", "ExecutionSummary", "PrinterContext"]
