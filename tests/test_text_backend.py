import io

from receipt_printer.backends.text import (
    ConsoleBackend,
    FileBackend,
    TextReceiptBackend,
    dummy_barcode,
    receipt_text,
)
from receipt_printer.core.enums import HRIPosition
from receipt_printer.printing.context import PrinterContext


def _run(backend, *steps):
    backend.initialize()
    backend.open_connection("unused, 9600")
    for step in steps:
        step(backend)
    backend.close_connection()


def test_text_lines_are_framed():
    out = io.StringIO()
    _run(TextReceiptBackend(10, out), lambda b: b.emit_text_line("abc".ljust(10)))
    assert out.getvalue().splitlines() == [
        "╭" + "─" * 16 + "╮",
        "│" + ("   abc" + " " * 10) + "│",
        "╰" + "─" * 16 + "╯",
        "",
    ]


def test_no_frame_without_content():
    out = io.StringIO()
    _run(TextReceiptBackend(10, out))
    assert out.getvalue() == ""


def test_receipt_text_width():
    assert len(receipt_text("x" * 20, 20)) == 28
    assert receipt_text("", 4) == "│" + " " * 10 + "│"


def test_dummy_barcode_bar_lengths():
    assert dummy_barcode("123") == "││ │││ ││││"
    assert dummy_barcode("0") == "│"


def test_barcode_box_with_label_below():
    out = io.StringIO()
    _run(TextReceiptBackend(20, out), lambda b: b.emit_barcode("123", 100))
    lines = out.getvalue().splitlines()
    framed = [line for line in lines if line]
    assert all(len(line) == 28 for line in framed)
    bar_index = next(i for i, line in enumerate(lines) if "││ │││ ││││" in line)
    assert "123" in lines[bar_index + 1]


def test_barcode_label_above_or_hidden():
    above = io.StringIO()
    _run(TextReceiptBackend(20, above), lambda b: b.emit_barcode("123", 100, hri=HRIPosition.ABOVE))
    lines = above.getvalue().splitlines()
    bar_index = next(i for i, line in enumerate(lines) if "││ │││ ││││" in line)
    assert "123" in lines[bar_index - 1]

    hidden = io.StringIO()
    _run(TextReceiptBackend(20, hidden), lambda b: b.emit_barcode("123", 100, hri=HRIPosition.NONE))
    assert "123" not in hidden.getvalue()


def test_image_placeholder_shows_wrapped_label():
    out = io.StringIO()
    _run(TextReceiptBackend(16, out), lambda b: b.emit_image("/tmp/logo.png", "Store Logo Banner"))
    text = out.getvalue()
    assert "Store" in text and "Logo" in text and "Banner" in text
    assert all(len(line) == 24 for line in text.splitlines() if line)


def test_image_placeholder_falls_back_to_file_name():
    out = io.StringIO()
    _run(TextReceiptBackend(20, out), lambda b: b.emit_image("/tmp/assets/logo.png"))
    assert "logo.png" in out.getvalue()


def test_cut_closes_the_frame():
    out = io.StringIO()
    _run(
        TextReceiptBackend(8, out),
        lambda b: b.emit_text_line("a" * 8),
        lambda b: b.cut_paper(66),
        lambda b: b.feed_lines(1),
    )
    lines = out.getvalue().splitlines()
    assert lines.count("╭" + "─" * 14 + "╮") == 2
    assert lines.count("╰" + "─" * 14 + "╯") == 2


def test_console_backend_prints_receipt(capsys):
    ctx = PrinterContext(ConsoleBackend(12), page_width=12)
    ctx.add_text("TOTAL", align="center").table().add_label_value("Due", "5.00", min_value_width=5).create()
    ctx.execute()
    out = capsys.readouterr().out
    assert "   TOTAL    " in out
    assert "Due".ljust(6) + "5.00".rjust(6) in out


def test_file_backend_writes_receipt(tmp_path):
    target = tmp_path / "out" / "receipt.txt"
    ctx = PrinterContext(FileBackend(str(target), 20), page_width=20, cut_after_print=True)
    ctx.add_text("Hello").add_separator("=").add_barcode("42")
    ctx.execute()

    lines = target.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "╭" + "─" * 26 + "╮"
    assert lines[1] == receipt_text("Hello".ljust(20), 20)
    assert lines[2] == receipt_text("=" * 20, 20)
    assert any("42" in line for line in lines)
