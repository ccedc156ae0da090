"""
Greedy word wrapping over a fixed character budget.

Every character is one grid cell, so widths are plain string lengths.
"""

from __future__ import annotations

from typing import List

from receipt_printer.core.errors import ConfigurationError


def sanitize(text: str) -> str:
    """Replace each line break character with a space so content is one logical paragraph."""
    return (text or "").replace("\n", " ").replace("\r", " ")


def wrap_text(text: str, max_width: int) -> List[str]:
    """
    Greedy word-wrapping for a given character width.

    Words longer than max_width are hard split: the free space left on the
    current line is filled with a prefix of the word, then full-width chunks
    are emitted until the remainder fits.

    Args:
        text: The input text to wrap.
        max_width: Maximum characters per line (>= 1).

    Returns:
        List of wrapped lines, each at most max_width long. Empty for blank input.
    """
    if max_width < 1:
        raise ConfigurationError("max_width", f"must be at least 1, got {max_width}")

    lines: List[str] = []
    current_line = ""

    for word in (text or "").split():
        while len(word) > max_width:
            if current_line:
                space_left = max_width - len(current_line) - 1
                if space_left > 0:
                    lines.append(f"{current_line} {word[:space_left]}")
                    word = word[space_left:]
                else:
                    lines.append(current_line)
                current_line = ""
            else:
                lines.append(word[:max_width])
                word = word[max_width:]

        if len(current_line) + len(word) + (1 if current_line else 0) <= max_width:
            current_line = f"{current_line} {word}" if current_line else word
        else:
            if current_line:
                lines.append(current_line)
            current_line = word

    if current_line:
        lines.append(current_line)

    return lines


__all__ = ["sanitize", "wrap_text"]
