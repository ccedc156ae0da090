"""
Output backend contract.

A backend is the only place where side effects happen. PrinterContext drives
it in a fixed order: initialize, open_connection, one call per queued
primitive, optional cut/drawer, release, close_connection.

Text arrives pre-wrapped and pre-padded to the page width; backends should
emit it as-is.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from receipt_printer.core.enums import BarcodeWidth, HorizontalAlignment, HRIPosition, ScaleMode, TextSize


class OutputBackend(ABC):
    """Abstract sink for rendered receipt content."""

    @abstractmethod
    def initialize(self, model_hint: str = "") -> None: ...

    @abstractmethod
    def open_connection(self, connection: str) -> None: ...

    @abstractmethod
    def close_connection(self) -> None: ...

    def release(self) -> None:
        """Free resources acquired by initialize(). Nothing to do by default."""
        return None

    @abstractmethod
    def feed_lines(self, count: int) -> None: ...

    @abstractmethod
    def emit_text_line(
        self,
        text: str,
        align: HorizontalAlignment = HorizontalAlignment.LEFT,
        size: TextSize = TextSize.NORMAL,
    ) -> None: ...

    @abstractmethod
    def emit_barcode(
        self,
        data: str,
        height: int,
        width: BarcodeWidth = BarcodeWidth.LARGE,
        align: HorizontalAlignment = HorizontalAlignment.CENTER,
        hri: HRIPosition = HRIPosition.BELOW,
    ) -> None: ...

    @abstractmethod
    def emit_image(self, path: str, label: str = "", scale: ScaleMode = ScaleMode.NORMAL) -> None: ...

    @abstractmethod
    def cut_paper(self, distance: int = 0) -> None: ...

    @abstractmethod
    def open_cash_drawer(self, pin_mode: int = 0, on_ms: int = 30, off_ms: int = 255) -> None: ...


__all__ = ["OutputBackend"]
