import pytest

from receipt_printer.printing.align import (
    HorizontalAlignment,
    VerticalAlignment,
    align_vertical,
    fit_line,
    format_line,
)


def test_center_pads_left_to_half_of_width_plus_length():
    assert format_line("AB", 6, HorizontalAlignment.CENTER) == "  AB  "


def test_center_odd_leftover_lands_on_the_right():
    assert format_line("A", 4, HorizontalAlignment.CENTER) == " A  "
    assert format_line("AB", 5, HorizontalAlignment.CENTER) == " AB  "


def test_left_and_right_padding():
    assert format_line("AB", 5) == "AB   "
    assert format_line("AB", 5, HorizontalAlignment.RIGHT) == "   AB"


def test_alignment_accepts_plain_strings():
    assert format_line("AB", 5, "right") == "   AB"
    assert format_line("AB", 6, "center") == "  AB  "


@pytest.mark.parametrize("align", list(HorizontalAlignment))
@pytest.mark.parametrize("text", ["", "x", "hello", "a b c"])
def test_padded_length_is_exactly_width(text, align):
    for width in range(len(text), len(text) + 6):
        out = format_line(text, width, align)
        assert len(out) == width
        assert out.strip() == text.strip()


def test_fit_line_truncates_without_padding():
    assert fit_line("HelloWorldExtra", 5) == "Hello"
    assert fit_line("HelloWorldExtra", 5, HorizontalAlignment.RIGHT) == "Hello"


def test_fit_line_pads_short_content_and_handles_zero_width():
    assert fit_line("Hi", 4, HorizontalAlignment.RIGHT) == "  Hi"
    assert fit_line("Hi", 0) == ""


def test_vertical_center_puts_extra_blank_line_at_bottom():
    assert align_vertical(["a"], 4, VerticalAlignment.CENTER, 1) == [" ", "a", " ", " "]


def test_vertical_top_and_bottom():
    assert align_vertical(["a", "b"], 3, VerticalAlignment.TOP, 1) == ["a", "b", " "]
    assert align_vertical(["a", "b"], 3, VerticalAlignment.BOTTOM, 1) == [" ", "a", "b"]


def test_vertical_noop_when_tall_enough():
    lines = ["a", "b"]
    assert align_vertical(lines, 1, VerticalAlignment.CENTER) == ["a", "b"]
    assert align_vertical(lines, 2, "bottom") == ["a", "b"]


@pytest.mark.parametrize("valign", list(VerticalAlignment))
@pytest.mark.parametrize("target", [0, 1, 2, 5, 6])
def test_vertical_padding_is_exact_and_keeps_order(valign, target):
    lines = ["one", "two"]
    out = align_vertical(lines, target, valign, 3)
    assert len(out) == max(target, len(lines))
    kept = [line for line in out if line.strip()]
    assert kept == lines
