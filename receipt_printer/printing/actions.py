"""
Queued print actions.

Each action is an immutable, fully rendered record. Nothing here touches a
backend; PrinterContext.execute() interprets the queue in order. Because every
field is resolved when the action is created, later builder calls cannot leak
into the output of earlier actions.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Tuple, Union

from receipt_printer.core.enums import BarcodeWidth, HorizontalAlignment, HRIPosition, ScaleMode, TextSize


@dataclass(frozen=True)
class TextLines:
    """One or more pre-wrapped, pre-padded lines emitted one backend call each."""

    lines: Tuple[str, ...]
    align: HorizontalAlignment = HorizontalAlignment.LEFT
    size: TextSize = TextSize.NORMAL


@dataclass(frozen=True)
class Separator:
    """A full-width line of one repeated character."""

    line: str


@dataclass(frozen=True)
class Feed:
    """Request `count` blank lines from the backend's feed primitive."""

    count: int = 1


@dataclass(frozen=True)
class BarcodeBlock:
    data: str
    height: int = 100
    width: BarcodeWidth = BarcodeWidth.LARGE
    align: HorizontalAlignment = HorizontalAlignment.CENTER
    hri: HRIPosition = HRIPosition.BELOW


@dataclass(frozen=True)
class ImageBlock:
    path: str
    label: str = ""
    scale: ScaleMode = ScaleMode.NORMAL


@dataclass(frozen=True)
class TableBlock:
    """The primitive actions produced by one table builder, kept together."""

    actions: Tuple["PrimitiveAction", ...]


PrimitiveAction = Union[TextLines, Separator, Feed, BarcodeBlock, ImageBlock]
Action = Union[PrimitiveAction, TableBlock]


def iter_primitive(actions: Iterable[Action]) -> Iterator[PrimitiveAction]:
    """Yield queued actions in order, expanding table blocks into their rows/separators/feeds."""
    for action in actions:
        if isinstance(action, TableBlock):
            yield from action.actions
        else:
            yield action


def render_text(actions: Iterable[Action]) -> list[str]:
    """
    Flatten the textual output of a queue: text and separator lines as-is,
    feeds as blank lines. Barcodes and images are skipped.

    Useful for previews and assertions; it does not involve any backend.
    """
    out: list[str] = []
    for action in iter_primitive(actions):
        if isinstance(action, TextLines):
            out.extend(action.lines)
        elif isinstance(action, Separator):
            out.append(action.line)
        elif isinstance(action, Feed):
            out.extend([""] * action.count)
    return out


__all__ = [
    "Action",
    "BarcodeBlock",
    "Feed",
    "ImageBlock",
    "PrimitiveAction",
    "Separator",
    "TableBlock",
    "TextLines",
    "iter_primitive",
    "render_text",
]
