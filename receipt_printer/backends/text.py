"""
Text receipt backends: draw the receipt as framed monospace text.

- ConsoleBackend writes to stdout (or any text stream)
- FileBackend writes to a UTF-8 file

Both render barcodes as dummy bar glyphs with a centered HRI label, and images
as a framed placeholder showing the image label (or file name).
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from receipt_printer.backends.base import OutputBackend
from receipt_printer.core.enums import BarcodeWidth, HorizontalAlignment, HRIPosition, ScaleMode, TextSize
from receipt_printer.printing.align import format_line
from receipt_printer.printing.wrap import wrap_text

logger = logging.getLogger(__name__)

# Frame geometry around the printable area
BORDER_PADDING = 8
TOP_LEFT = "╭"
TOP_RIGHT = "╮"
BOTTOM_LEFT = "╰"
BOTTOM_RIGHT = "╯"
HORIZONTAL_LINE = "─"
VERTICAL_LINE = "│"


def receipt_text(text: str, width: int) -> str:
    """Frame one line of a `width`-character receipt: left margin, padding, side borders."""
    inner = f"   {text}".ljust(width + BORDER_PADDING - 2)
    return f"{VERTICAL_LINE}{inner}{VERTICAL_LINE}"


def dummy_barcode(data: str) -> str:
    """Bar glyphs whose run lengths vary with each character of the data."""
    return " ".join(VERTICAL_LINE * ((ord(c) - ord("0")) % 4 + 1) for c in data)


class TextReceiptBackend(OutputBackend):
    """Renders receipt lines inside a rounded box to a text stream."""

    def __init__(self, page_width: int, stream: Optional[TextIO] = None):
        self.page_width = page_width
        self._stream = stream
        self._frame_open = False

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")

    def _border(self, left: str, right: str) -> str:
        return f"{left}{HORIZONTAL_LINE * (self.page_width + BORDER_PADDING - 2)}{right}"

    def _line(self, text: str) -> None:
        if not self._frame_open:
            self._write(self._border(TOP_LEFT, TOP_RIGHT))
            self._frame_open = True
        self._write(receipt_text(text, self.page_width))

    def _close_frame(self) -> None:
        if self._frame_open:
            self._write(self._border(BOTTOM_LEFT, BOTTOM_RIGHT))
            self._write("")
            self._frame_open = False

    def _box(self, body: List[str]) -> None:
        """Draw body lines (already inner-width) inside a nested frame."""
        rule = HORIZONTAL_LINE * (self.page_width - 2)
        self._line(f"{TOP_LEFT}{rule}{TOP_RIGHT}")
        for text in body:
            self._line(text)
        self._line(f"{BOTTOM_LEFT}{rule}{BOTTOM_RIGHT}")

    def initialize(self, model_hint: str = "") -> None:
        self._frame_open = False
        logger.info("Text printer initialized (page_width=%d)", self.page_width)

    def open_connection(self, connection: str) -> None:
        logger.debug("Text printer connection opened (%s)", connection)

    def close_connection(self) -> None:
        self._close_frame()
        self.stream.flush()

    def feed_lines(self, count: int) -> None:
        for _ in range(count):
            self._line("")

    def emit_text_line(
        self,
        text: str,
        align: HorizontalAlignment = HorizontalAlignment.LEFT,
        size: TextSize = TextSize.NORMAL,
    ) -> None:
        self._line(text)

    def emit_barcode(
        self,
        data: str,
        height: int,
        width: BarcodeWidth = BarcodeWidth.LARGE,
        align: HorizontalAlignment = HorizontalAlignment.CENTER,
        hri: HRIPosition = HRIPosition.BELOW,
    ) -> None:
        inner = max(1, self.page_width - BORDER_PADDING)
        bars = dummy_barcode(data[:inner])
        if len(bars) <= inner:
            bars = format_line(bars, inner, align)
        bars = bars[: self.page_width]

        label = format_line(data[:inner], inner, HorizontalAlignment.CENTER)
        label_line = receipt_text(label, inner)
        body: List[str] = []
        if hri in (HRIPosition.ABOVE, HRIPosition.BOTH):
            body.append(label_line)
        body.append(bars)
        if hri in (HRIPosition.BELOW, HRIPosition.BOTH):
            body.append(label_line)
        self._box(body)

    def emit_image(self, path: str, label: str = "", scale: ScaleMode = ScaleMode.NORMAL) -> None:
        inner = max(1, self.page_width - BORDER_PADDING)
        caption = label or os.path.basename(path)
        body = [receipt_text(format_line(line, inner, HorizontalAlignment.CENTER), inner) for line in wrap_text(caption, inner)]
        self._box(body)

    def cut_paper(self, distance: int = 0) -> None:
        self._close_frame()
        logger.info("Paper cut with distance %d requested", distance)

    def open_cash_drawer(self, pin_mode: int = 0, on_ms: int = 30, off_ms: int = 255) -> None:
        logger.info("Open cash drawer requested (pin=%d on=%d off=%d)", pin_mode, on_ms, off_ms)


class ConsoleBackend(TextReceiptBackend):
    """Prints the framed receipt to stdout, or to the stream given."""


class FileBackend(TextReceiptBackend):
    """Writes the framed receipt to a UTF-8 text file, replacing any previous content."""

    def __init__(self, path: str, page_width: int):
        super().__init__(page_width)
        self.path = Path(path)
        self._file: Optional[TextIO] = None

    @property
    def stream(self) -> TextIO:
        if self._file is None:
            raise RuntimeError("file printer connection is not open")
        return self._file

    def open_connection(self, connection: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.path.open("w", encoding="utf-8")
        logger.info("File printer writing to %s", self.path)

    def close_connection(self) -> None:
        if self._file is None:
            return
        try:
            super().close_connection()
        finally:
            self._file.close()
            self._file = None


__all__ = [
    "BORDER_PADDING",
    "ConsoleBackend",
    "FileBackend",
    "TextReceiptBackend",
    "dummy_barcode",
    "receipt_text",
]
