"""
Horizontal and vertical alignment of text within fixed-width cells.
"""

from __future__ import annotations

from typing import List, Sequence

from receipt_printer.core.enums import HorizontalAlignment, VerticalAlignment


def format_line(line: str, width: int, align: HorizontalAlignment = HorizontalAlignment.LEFT) -> str:
    """
    Pad a line to exactly `width` characters according to `align`.

    Center pads on the left up to (width + len) // 2 characters, then on the
    right up to width, so an odd leftover space always lands on the right.
    Callers guarantee len(line) <= width.
    """
    align = HorizontalAlignment(align)
    if align is HorizontalAlignment.RIGHT:
        return line.rjust(width)
    if align is HorizontalAlignment.CENTER:
        return line.rjust((width + len(line)) // 2).ljust(width)
    return line.ljust(width)


def fit_line(content: str, width: int, align: HorizontalAlignment = HorizontalAlignment.LEFT) -> str:
    """
    No-wrap path: truncate content to `width` characters when too long
    (alignment is irrelevant then), otherwise pad it with format_line().
    """
    if width <= 0:
        return ""
    if len(content) > width:
        return content[:width]
    return format_line(content, width, align)


def align_vertical(
    lines: Sequence[str],
    target_height: int,
    valign: VerticalAlignment = VerticalAlignment.TOP,
    fill_width: int = 0,
) -> List[str]:
    """
    Pad `lines` with blank lines of `fill_width` spaces up to `target_height`.

    Top appends, Bottom prepends, Center splits the excess with the extra
    blank line (odd excess) placed at the bottom. Original lines are returned
    untouched and in order; nothing happens when already tall enough.
    """
    valign = VerticalAlignment(valign)
    result = list(lines)
    excess = target_height - len(result)
    if excess <= 0:
        return result

    blank = " " * max(0, fill_width)
    if valign is VerticalAlignment.BOTTOM:
        return [blank] * excess + result
    if valign is VerticalAlignment.CENTER:
        top = excess // 2
        return [blank] * top + result + [blank] * (excess - top)
    return result + [blank] * excess


__all__ = ["HorizontalAlignment", "VerticalAlignment", "align_vertical", "fit_line", "format_line"]
