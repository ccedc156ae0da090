"""
Preview backend for Receipt Printer.

Renders everything a print job emits onto a grayscale Pillow image:
- Text lines drawn with a monospace TrueType font (double height is stretched)
- Images loaded from disk, scaled and pasted full-width or smaller
- Barcodes drawn as bar glyphs with the HRI text above and/or below
- Paper cuts drawn as a dashed rule

The image is saved as PNG to the output path when the connection closes.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from receipt_printer.backends.base import OutputBackend
from receipt_printer.backends.escpos import scale_image
from receipt_printer.backends.text import dummy_barcode
from receipt_printer.core.enums import BarcodeWidth, HorizontalAlignment, HRIPosition, ScaleMode, TextSize

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 20
MARGIN = 8
_BAR_MODULES = {
    BarcodeWidth.SMALL: 2,
    BarcodeWidth.MEDIUM: 3,
    BarcodeWidth.LARGE: 4,
}


def _measure_text(font: ImageFont.FreeTypeFont | ImageFont.ImageFont, text: str) -> tuple[int, int]:
    """
    Text measurement across Pillow font types.
    Tries getbbox() first, then getmask() as fallback.
    Returns (width, height).
    """
    try:
        bbox = font.getbbox(text)
        return int(bbox[2] - bbox[0]), int(bbox[3] - bbox[1])
    except AttributeError:
        mask = font.getmask(text)
        return int(mask.size[0]), int(mask.size[1])


def resolve_font(font_path: Optional[str], font_size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Resolve a monospace font for rendering, preferring:
    1) font_path when provided
    2) RECEIPTPRINTER_FONT_PATH environment variable
    3) A list of common system monospace fonts (DejaVu, Liberation, FreeMono, Noto)
    Falls back to PIL's default font if none are found.
    """
    candidates: List[str] = []
    if font_path and font_path.strip():
        candidates.append(font_path.strip())
    env_path = os.environ.get("RECEIPTPRINTER_FONT_PATH")
    if env_path and env_path not in candidates:
        candidates.append(env_path)

    common: Sequence[str] = (
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
        "/usr/share/fonts/truetype/freefont/FreeMono.ttf",
        "/usr/share/fonts/truetype/noto/NotoSansMono-Regular.ttf",
        "/usr/share/fonts/dejavu/DejaVuSansMono.ttf",
        "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    )
    for pth in common:
        if pth not in candidates:
            candidates.append(pth)

    for pth in candidates:
        try:
            return ImageFont.truetype(pth, font_size)
        except OSError:
            continue
    logger.debug("No monospace TTF font found; using Pillow's default font")
    return ImageFont.load_default()


class PreviewBackend(OutputBackend):
    """Draws the receipt as it would print and saves a PNG preview."""

    def __init__(
        self,
        output_path: str,
        page_width: int,
        font_path: Optional[str] = None,
        font_size: int = DEFAULT_FONT_SIZE,
    ):
        self.output_path = Path(output_path)
        self.page_width = page_width
        self.font = resolve_font(font_path, font_size)
        char_w, _ = _measure_text(self.font, "M" * 10)
        _, line_h = _measure_text(self.font, "Mgjy|")
        self.char_width = max(1, char_w // 10)
        self.line_height = max(1, line_h) + 4
        self.canvas_width = self.page_width * self.char_width + 2 * MARGIN
        self._parts: List[Image.Image] = []
        self.image: Optional[Image.Image] = None

    def _strip(self, height: int) -> Tuple[Image.Image, ImageDraw.ImageDraw]:
        img = Image.new("L", (self.canvas_width, max(1, height)), 255)
        return img, ImageDraw.Draw(img)

    def _text_strip(self, text: str) -> Image.Image:
        img, draw = self._strip(self.line_height)
        draw.text((MARGIN, 2), text, font=self.font, fill=0)
        return img

    def _x_for(self, content_width: int, align: HorizontalAlignment) -> int:
        if align == HorizontalAlignment.RIGHT:
            return max(0, self.canvas_width - MARGIN - content_width)
        if align == HorizontalAlignment.CENTER:
            return max(0, (self.canvas_width - content_width) // 2)
        return MARGIN

    def initialize(self, model_hint: str = "") -> None:
        self._parts = []
        self.image = None
        logger.info("Preview renderer initialized (page_width=%d)", self.page_width)

    def open_connection(self, connection: str) -> None:
        logger.debug("Preview renderer ignores connection %s", connection)

    def close_connection(self) -> None:
        height = sum(p.height for p in self._parts) + 2 * MARGIN
        canvas = Image.new("L", (self.canvas_width, height), 255)
        y = MARGIN
        for part in self._parts:
            canvas.paste(part, (0, y))
            y += part.height
        self.image = canvas
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        canvas.save(self.output_path, format="PNG")
        logger.info("Preview saved to %s (%dx%d)", self.output_path, canvas.width, canvas.height)

    def feed_lines(self, count: int) -> None:
        for _ in range(count):
            self._parts.append(self._strip(self.line_height)[0])

    def emit_text_line(
        self,
        text: str,
        align: HorizontalAlignment = HorizontalAlignment.LEFT,
        size: TextSize = TextSize.NORMAL,
    ) -> None:
        strip = self._text_strip(text)
        if TextSize(size) == TextSize.DOUBLE_HEIGHT:
            strip = strip.resize((strip.width, strip.height * 2))
        self._parts.append(strip)

    def emit_barcode(
        self,
        data: str,
        height: int,
        width: BarcodeWidth = BarcodeWidth.LARGE,
        align: HorizontalAlignment = HorizontalAlignment.CENTER,
        hri: HRIPosition = HRIPosition.BELOW,
    ) -> None:
        hri = HRIPosition(hri)
        module = _BAR_MODULES[BarcodeWidth(width)]
        pattern = dummy_barcode(data)
        bars_width = min(len(pattern) * module, self.canvas_width - 2 * MARGIN)
        x0 = self._x_for(bars_width, HorizontalAlignment(align))

        img, draw = self._strip(height)
        for i, ch in enumerate(pattern):
            x = x0 + i * module
            if x + module > x0 + bars_width:
                break
            if ch != " ":
                draw.rectangle([x, 0, x + module - 1, height - 1], fill=0)

        label_w, _ = _measure_text(self.font, data)
        label, label_draw = self._strip(self.line_height)
        label_draw.text((self._x_for(label_w, HorizontalAlignment.CENTER), 2), data, font=self.font, fill=0)

        if hri in (HRIPosition.ABOVE, HRIPosition.BOTH):
            self._parts.append(label)
        self._parts.append(img)
        if hri in (HRIPosition.BELOW, HRIPosition.BOTH):
            self._parts.append(label.copy())

    def emit_image(self, path: str, label: str = "", scale: ScaleMode = ScaleMode.NORMAL) -> None:
        with Image.open(path) as src:
            img = scale_image(src.convert("L"), ScaleMode(scale))
        max_w = self.canvas_width - 2 * MARGIN
        if img.width > max_w:
            img = img.resize((max_w, max(1, img.height * max_w // img.width)))
        strip, _ = self._strip(img.height)
        strip.paste(img, (self._x_for(img.width, HorizontalAlignment.CENTER), 0))
        self._parts.append(strip)

    def cut_paper(self, distance: int = 0) -> None:
        img, draw = self._strip(self.line_height)
        y = self.line_height // 2
        for x in range(0, self.canvas_width, 8):
            draw.line([x, y, x + 3, y], fill=0)
        self._parts.append(img)

    def open_cash_drawer(self, pin_mode: int = 0, on_ms: int = 30, off_ms: int = 255) -> None:
        logger.info("Preview: cash drawer would open (pin=%d)", pin_mode)


__all__ = ["PreviewBackend", "resolve_font"]
