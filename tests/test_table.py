import pytest

from receipt_printer.core.enums import HorizontalAlignment, VerticalAlignment
from receipt_printer.core.errors import ConfigurationError, ReceiptPrinterError
from receipt_printer.printing.actions import Feed, Separator, TableBlock, TextLines, render_text
from receipt_printer.printing.context import PrinterContext
from receipt_printer.printing.table import Cell, Row, Table, check_separator_char, resolve_widths


def _lines(table: Table):
    return render_text(table.actions)


def test_flexible_cells_share_remaining_width():
    row = Row(32).add(Cell("A", 10)).add("B").add("C")
    assert row.widths() == [10, 11, 11]
    assert row.render() == ["A".ljust(10) + "B".ljust(11) + "C".ljust(11)]


def test_flexible_share_drops_remainder():
    assert resolve_widths([Cell("a"), Cell("b"), Cell("c")], 32) == [10, 10, 10]


def test_overfull_row_gives_flexible_cells_zero_width():
    row = Row(10).add(Cell("abcdefgh", 8)).add(Cell("ijk", 4)).add("zzz")
    assert row.widths() == [8, 4, -2]
    assert row.render() == ["abcdefghijk "]


def test_every_row_line_has_the_summed_width():
    row = Row(20)
    row.add_cell("one two three four", 8, wrap=True)
    row.add_cell("x", align=HorizontalAlignment.RIGHT, valign=VerticalAlignment.BOTTOM)
    lines = row.render()
    assert lines == [
        "one two " + " " * 12,
        "three   " + " " * 12,
        "four    " + "x".rjust(12),
    ]
    assert all(len(line) == 20 for line in lines)


def test_vertical_center_in_row():
    row = Row(12)
    row.add_cell("a b c d", 2, wrap=True)
    row.add_cell("mid", valign=VerticalAlignment.CENTER)
    lines = row.render()
    assert len(lines) == 4
    assert [line[2:] for line in lines] == [" " * 10, "mid".ljust(10), " " * 10, " " * 10]


def test_no_wrap_truncates_to_cell_width():
    assert Cell("HelloWorldExtra", 5).layout(5) == ["Hello"]


def test_chained_cell_configuration():
    cell = Cell("Total").with_align("right").with_valign("bottom").with_wrap()
    assert cell.align is HorizontalAlignment.RIGHT
    assert cell.valign is VerticalAlignment.BOTTOM
    assert cell.wrap is True
    assert cell.flexible is True


def test_cell_content_line_breaks_become_spaces():
    assert Cell("a\nb").content == "a b"


def test_crlf_in_cell_becomes_two_spaces():
    assert Cell("a\r\nb", 6).layout(6) == ["a  b  "]


def test_with_wrap_stores_a_bool():
    assert Cell("x").with_wrap(1).wrap is True
    assert Cell("x").with_wrap(0).wrap is False


def test_cell_rejects_non_positive_width():
    with pytest.raises(ConfigurationError) as ei:
        Cell("x", 0)
    assert ei.value.parameter == "width"


def test_empty_cell_is_padded_to_row_height():
    row = Row(10).add(Cell("", 3)).add("abc")
    assert row.render() == ["   abc    "]


def test_row_of_empty_cells_prints_nothing():
    table = Table(10).add_row("", "")
    assert table.actions == ()


def test_multi_line_row_becomes_one_action_per_line():
    table = Table(10).add_row(Cell("aaa bbb ccc", 3, wrap=True), "x")
    assert len(table.actions) == 3
    assert all(isinstance(a, TextLines) and len(a.lines) == 1 for a in table.actions)
    assert _lines(table) == ["aaax      ", "bbb       ", "ccc       "]


def test_add_row_accepts_list_and_callable():
    by_list = Table(16).add_row(["Item", Cell("9.99", 6, align="right")])
    by_fn = Table(16).add_row(lambda r: r.add_cell("Item").add_cell("9.99", 6, align="right"))
    expected = ["Item".ljust(10) + "  9.99"]
    assert _lines(by_list) == expected
    assert _lines(by_fn) == expected


def test_add_cell_configure_callback():
    row = Row(8).add_cell("ab", configure=lambda c: c.with_align(HorizontalAlignment.CENTER))
    assert row.render() == ["   ab   "]


def test_label_value_right_aligns_value_column():
    table = Table(32).add_label_value("Subtotal", "274.50")
    assert _lines(table) == ["Subtotal".ljust(16) + "274.50".rjust(16)]


def test_label_value_grows_value_column_for_long_values():
    value = "1234567890123456789"
    table = Table(32).add_label_value("Due", value, min_value_width=5)
    line = _lines(table)[0]
    assert len(line) == 32
    assert line.endswith(value)
    assert line.startswith("Due")


def test_label_value_drops_label_rather_than_truncating_value():
    table = Table(10).add_label_value("Tot", "12345678901")
    assert _lines(table) == ["1234567890", "1".rjust(10)]


def test_label_value_keeps_label_when_value_fills_its_column():
    table = Table(10).add_label_value("Tot", "123456789")
    assert _lines(table) == ["T123456789"]


@pytest.mark.parametrize("width", [0, -4])
def test_table_rejects_non_positive_page_width(width):
    with pytest.raises(ConfigurationError) as ei:
        Table(width)
    assert ei.value.parameter == "page_width"


def test_separator_fills_page_with_character():
    table = Table(32, separator_char="=").add_separator().add_separator("*")
    assert table.actions == (Separator("=" * 32), Separator("*" * 32))


@pytest.mark.parametrize("bad", ["", "ab", "\n", "\r"])
def test_separator_character_must_be_single_and_printable(bad):
    with pytest.raises(ConfigurationError):
        check_separator_char(bad)


def test_feed_and_empty_line():
    table = Table(10).feed_line(2).add_empty_line()
    assert table.actions == (Feed(2), Feed(1))


def test_unbound_table_cannot_create():
    with pytest.raises(ReceiptPrinterError):
        Table(10).create()


def test_table_create_appends_block_to_context(backend):
    ctx = PrinterContext(backend, page_width=12)
    returned = ctx.table().add_separator().add_row("a", "b").create()
    assert returned is ctx
    block = ctx.actions[-1]
    assert isinstance(block, TableBlock)
    assert render_text(ctx.actions) == ["─" * 12, "a".ljust(6) + "b".ljust(6)]


def test_add_table_with_builder_function(backend):
    ctx = PrinterContext(backend, page_width=10)
    ctx.add_table(lambda t: t.add_label_value("Tax", "1.00", min_value_width=4))
    assert render_text(ctx.actions) == ["Tax".ljust(5) + " 1.00"]
