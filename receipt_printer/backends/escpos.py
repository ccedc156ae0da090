"""
ESC/POS printer backend built on python-escpos.

The connection string has the form "<address>, <speed>"; how the address is
read depends on printer_type:

- usb:     "0x04b8:0x0e28" (vendor:product, hex)
- network: "192.168.1.50" or "192.168.1.50:9100"
- serial:  "/dev/ttyUSB0" or "COM3", opened at <speed> baud
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import Any, Optional, Tuple

from PIL import Image

from receipt_printer.backends.base import OutputBackend
from receipt_printer.core.enums import BarcodeWidth, HorizontalAlignment, HRIPosition, ScaleMode, TextSize
from receipt_printer.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_NETWORK_PORT = 9100
# Default ESC/POS line spacing in motion units (1/6 inch at 180 dpi)
LINE_SPACING_DOTS = 30
MAX_BARCODE_HEIGHT = 255

_BARCODE_WIDTHS = {
    BarcodeWidth.SMALL: 2,
    BarcodeWidth.MEDIUM: 3,
    BarcodeWidth.LARGE: 4,
}

_HRI_POSITIONS = {
    HRIPosition.NONE: "OFF",
    HRIPosition.ABOVE: "ABOVE",
    HRIPosition.BELOW: "BELOW",
    HRIPosition.BOTH: "BOTH",
}


def parse_connection(connection: str) -> Tuple[str, Optional[int]]:
    """Split "<address>, <speed>" into its parts; speed is None when absent or not numeric."""
    address, sep, speed = connection.rpartition(",")
    if not sep:
        return connection.strip(), None
    speed = speed.strip()
    return address.strip(), int(speed) if speed.isdigit() else None


def _connect_printer(printer_type: str, connection: str, profile: Optional[str] = None):
    """
    Create and return an ESC/POS printer instance for the given connection string.
    Supports USB, Network, and Serial with an optional profile.
    """
    address, speed = parse_connection(connection)
    ptype = printer_type.lower()
    kwargs: dict[str, Any] = {"profile": profile} if profile else {}

    if ptype == "usb":
        from escpos.printer import Usb

        try:
            vendor_s, product_s = address.split(":", 1)
            vendor, product = int(vendor_s, 16), int(product_s, 16)
        except ValueError as e:
            raise ConfigurationError("connection_address", f"expected vendor:product for usb, got {address!r}") from e
        return Usb(vendor, product, **kwargs)
    if ptype == "network":
        from escpos.printer import Network

        host, _, port_s = address.partition(":")
        port = int(port_s) if port_s.isdigit() else DEFAULT_NETWORK_PORT
        return Network(host, port, **kwargs)
    if ptype == "serial":
        from escpos.printer import Serial

        if speed is not None:
            return Serial(address, baudrate=speed, **kwargs)
        return Serial(address, **kwargs)
    raise ConfigurationError("printer_type", f"unsupported printer type: {printer_type}")


def scale_image(img: Image.Image, scale: ScaleMode) -> Image.Image:
    """Stretch an image to emulate the printer's double width/height raster modes."""
    w, h = img.size
    if scale == ScaleMode.DOUBLE_WIDTH:
        return img.resize((w * 2, h))
    if scale == ScaleMode.DOUBLE_HEIGHT:
        return img.resize((w, h * 2))
    if scale == ScaleMode.DOUBLE_WIDTH_AND_HEIGHT:
        return img.resize((w * 2, h * 2))
    return img


class EscposBackend(OutputBackend):
    """Drives a physical ESC/POS receipt printer."""

    def __init__(
        self,
        printer_type: str = "serial",
        profile: Optional[str] = None,
        printer_factory: Optional[Callable[..., Any]] = None,
    ):
        self.printer_type = printer_type
        self.profile = profile
        self._factory = printer_factory or _connect_printer
        self._printer = None
        self.model_hint = ""

    @property
    def printer(self):
        if self._printer is None:
            raise RuntimeError("printer connection is not open")
        return self._printer

    def initialize(self, model_hint: str = "") -> None:
        self.model_hint = model_hint
        logger.info("ESC/POS backend initialized (type=%s, model=%s)", self.printer_type, model_hint or "-")

    def open_connection(self, connection: str) -> None:
        profile = self.profile or self.model_hint or None
        self._printer = self._factory(self.printer_type, connection, profile)
        self._printer.hw("INIT")
        logger.info("Connected to %s printer at %s", self.printer_type, connection)

    def close_connection(self) -> None:
        if self._printer is None:
            return
        try:
            self._printer.close()
        finally:
            self._printer = None

    def feed_lines(self, count: int) -> None:
        self.printer.text("\n" * count)

    def emit_text_line(
        self,
        text: str,
        align: HorizontalAlignment = HorizontalAlignment.LEFT,
        size: TextSize = TextSize.NORMAL,
    ) -> None:
        # Lines arrive padded to the page width, so printer alignment stays left
        p = self.printer
        if TextSize(size) == TextSize.DOUBLE_HEIGHT:
            p.set(align="left", double_height=True)
        else:
            p.set(align="left", normal_textsize=True)
        p.text(text + "\n")

    def emit_barcode(
        self,
        data: str,
        height: int,
        width: BarcodeWidth = BarcodeWidth.LARGE,
        align: HorizontalAlignment = HorizontalAlignment.CENTER,
        hri: HRIPosition = HRIPosition.BELOW,
    ) -> None:
        p = self.printer
        align = HorizontalAlignment(align)
        p.set(align=align.value, normal_textsize=True)
        p.barcode(
            "{B" + data,
            "CODE128",
            height=min(height, MAX_BARCODE_HEIGHT),
            width=_BARCODE_WIDTHS[BarcodeWidth(width)],
            pos=_HRI_POSITIONS[HRIPosition(hri)],
            align_ct=align == HorizontalAlignment.CENTER,
        )
        p.set(align="left")

    def emit_image(self, path: str, label: str = "", scale: ScaleMode = ScaleMode.NORMAL) -> None:
        with Image.open(path) as src:
            img = scale_image(src.convert("L"), ScaleMode(scale))
        self.printer.image(img)

    def cut_paper(self, distance: int = 0) -> None:
        p = self.printer
        if distance > 0:
            p.print_and_feed(min(255, math.ceil(distance / LINE_SPACING_DOTS)))
        p.cut()
        logger.info("Paper cut (distance=%d)", distance)

    def open_cash_drawer(self, pin_mode: int = 0, on_ms: int = 30, off_ms: int = 255) -> None:
        # ESC p m t1 t2
        self.printer.cashdraw([27, 112, pin_mode, on_ms, off_ms])
        logger.info("Cash drawer pulse sent (pin=%d)", pin_mode)


__all__ = ["EscposBackend", "parse_connection", "scale_image"]
