"""
Enumerations shared by the layout engine, the action queue and the output backends.

Values are lowercase strings so they round-trip through JSON receipt documents.
"""

from __future__ import annotations

from enum import Enum


class HorizontalAlignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class VerticalAlignment(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class TextSize(str, Enum):
    NORMAL = "normal"
    DOUBLE_HEIGHT = "double_height"


class BarcodeWidth(str, Enum):
    """Module width of a barcode; backends map it to their own units."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class HRIPosition(str, Enum):
    """Where the human-readable interpretation of a barcode is printed."""

    NONE = "none"
    ABOVE = "above"
    BELOW = "below"
    BOTH = "both"


class ScaleMode(str, Enum):
    NORMAL = "normal"
    DOUBLE_WIDTH = "double_width"
    DOUBLE_HEIGHT = "double_height"
    DOUBLE_WIDTH_AND_HEIGHT = "double_width_and_height"


__all__ = ["BarcodeWidth", "HRIPosition", "HorizontalAlignment", "ScaleMode", "TextSize", "VerticalAlignment"]
