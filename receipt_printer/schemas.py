"""
Pydantic schemas for JSON receipt documents.

A document is an ordered list of blocks that build_receipt() replays onto a
PrinterContext, so a receipt can be stored or submitted as data:

    {
      "blocks": [
        {"type": "text", "content": "INVOICE", "align": "center"},
        {"type": "table", "rows": [
          {"type": "row", "cells": [{"content": "Item"}, {"content": "9.99", "width": 8, "align": "right"}]},
          {"type": "label_value", "label": "Total", "value": "9.99"}
        ]},
        {"type": "barcode", "data": "123456789012"}
      ]
    }

Validation problems surface as ConfigurationError, like every other bad input.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from receipt_printer.core.enums import (
    BarcodeWidth,
    HorizontalAlignment,
    HRIPosition,
    ScaleMode,
    TextSize,
    VerticalAlignment,
)
from receipt_printer.core.errors import ConfigurationError
from receipt_printer.printing.context import PrinterContext
from receipt_printer.printing.table import DEFAULT_SEPARATOR_CHAR, Cell, Table

logger = logging.getLogger(__name__)


class CellSpec(BaseModel):
    """One column of a table row."""
    content: str = Field(default="", description="Cell text; line breaks become spaces")
    width: Optional[int] = Field(
        default=None,
        ge=1,
        description="Fixed column width in characters; omit to share the remaining width",
    )
    align: HorizontalAlignment = HorizontalAlignment.LEFT
    valign: VerticalAlignment = VerticalAlignment.TOP
    wrap: bool = False


class RowEntry(BaseModel):
    type: Literal["row"] = "row"
    cells: List[CellSpec] = Field(min_length=1)


class SeparatorEntry(BaseModel):
    type: Literal["separator"] = "separator"
    char: Optional[str] = Field(default=None, description="Overrides the table's separator character")


class FeedEntry(BaseModel):
    type: Literal["feed"] = "feed"
    lines: int = Field(default=1, ge=1)


class LabelValueEntry(BaseModel):
    type: Literal["label_value"] = "label_value"
    label: str
    value: str
    min_value_width: int = Field(default=15, ge=0)


TableEntry = Annotated[
    Union[RowEntry, SeparatorEntry, FeedEntry, LabelValueEntry],
    Field(discriminator="type"),
]


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    content: str = Field(min_length=1)
    wrap: bool = False
    align: HorizontalAlignment = HorizontalAlignment.LEFT
    size: TextSize = TextSize.NORMAL


class SeparatorBlock(BaseModel):
    type: Literal["separator"] = "separator"
    char: str = DEFAULT_SEPARATOR_CHAR


class FeedBlock(BaseModel):
    type: Literal["feed"] = "feed"
    lines: int = Field(default=1, ge=1)


class ImageSpec(BaseModel):
    type: Literal["image"] = "image"
    path: str = Field(min_length=1)
    label: str = ""
    scale: ScaleMode = ScaleMode.NORMAL


class BarcodeSpec(BaseModel):
    type: Literal["barcode"] = "barcode"
    data: str = Field(min_length=1)
    height: int = Field(default=100, ge=1)
    width: BarcodeWidth = BarcodeWidth.LARGE
    align: HorizontalAlignment = HorizontalAlignment.CENTER
    hri: HRIPosition = HRIPosition.BELOW


class TableSpec(BaseModel):
    type: Literal["table"] = "table"
    separator_char: str = DEFAULT_SEPARATOR_CHAR
    rows: List[TableEntry] = Field(default_factory=list)


Block = Annotated[
    Union[TextBlock, SeparatorBlock, FeedBlock, ImageSpec, BarcodeSpec, TableSpec],
    Field(discriminator="type"),
]


class ReceiptDocument(BaseModel):
    """A whole receipt: the blocks to print, in order."""
    blocks: List[Block] = Field(description="Receipt content in print order")

    @field_validator("blocks")
    @classmethod
    def _blocks_rules(cls, v: List[Any]) -> List[Any]:
        if not v:
            raise ValueError("a receipt needs at least one block")
        return v


def parse_receipt(data: Any) -> ReceiptDocument:
    """
    Validate a decoded JSON object into a ReceiptDocument.

    Raises:
        ConfigurationError naming the first offending location.
    """
    try:
        return ReceiptDocument.model_validate(data)
    except ValidationError as e:
        first_err = e.errors()[0]
        loc = ".".join(str(p) for p in first_err.get("loc", ())) or "document"
        raise ConfigurationError(loc, first_err.get("msg", "invalid receipt document")) from e


def load_receipt(path: str) -> ReceiptDocument:
    """Read and validate a JSON receipt document from disk."""
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError("document", f"invalid JSON in {path}: {e.msg}") from e
    return parse_receipt(data)


def _fill_table(table: Table, rows: List[Any]) -> None:
    for entry in rows:
        if isinstance(entry, RowEntry):
            table.add_row(
                [Cell(c.content, c.width, align=c.align, valign=c.valign, wrap=c.wrap) for c in entry.cells]
            )
        elif isinstance(entry, SeparatorEntry):
            table.add_separator(entry.char)
        elif isinstance(entry, FeedEntry):
            table.feed_line(entry.lines)
        elif isinstance(entry, LabelValueEntry):
            table.add_label_value(entry.label, entry.value, entry.min_value_width)


def build_receipt(document: ReceiptDocument, context: PrinterContext) -> PrinterContext:
    """Replay a document's blocks onto a context in order; returns the context."""
    for block in document.blocks:
        if isinstance(block, TextBlock):
            context.add_text(block.content, wrap=block.wrap, align=block.align, size=block.size)
        elif isinstance(block, SeparatorBlock):
            context.add_separator(block.char)
        elif isinstance(block, FeedBlock):
            context.feed_line(block.lines)
        elif isinstance(block, ImageSpec):
            context.add_image(block.path, label=block.label, scale=block.scale)
        elif isinstance(block, BarcodeSpec):
            context.add_barcode(
                block.data, height=block.height, width=block.width, align=block.align, hri=block.hri
            )
        elif isinstance(block, TableSpec):
            table = context.table(block.separator_char)
            _fill_table(table, block.rows)
            table.create()
    logger.debug("Built receipt with %d blocks", len(document.blocks))
    return context


__all__ = [
    "BarcodeSpec",
    "CellSpec",
    "FeedBlock",
    "ImageSpec",
    "ReceiptDocument",
    "SeparatorBlock",
    "TableSpec",
    "TextBlock",
    "build_receipt",
    "load_receipt",
    "parse_receipt",
]
