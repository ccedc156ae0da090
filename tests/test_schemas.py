import json
from pathlib import Path

import pytest

from receipt_printer.core.errors import ConfigurationError
from receipt_printer.printing.actions import BarcodeBlock, Feed, ImageBlock, Separator, TableBlock, TextLines, render_text
from receipt_printer.printing.context import PrinterContext
from receipt_printer.schemas import ReceiptDocument, build_receipt, load_receipt, parse_receipt

EXAMPLE = Path(__file__).resolve().parent.parent / "examples" / "invoice.json"


def test_parse_and_build_all_block_types(backend):
    doc = parse_receipt(
        {
            "blocks": [
                {"type": "text", "content": "INVOICE", "align": "center"},
                {"type": "separator", "char": "="},
                {"type": "feed", "lines": 2},
                {"type": "image", "path": "logo.png", "label": "Logo", "scale": "double_width"},
                {"type": "barcode", "data": "123", "hri": "none"},
                {
                    "type": "table",
                    "rows": [
                        {"type": "row", "cells": [{"content": "Item"}, {"content": "9.99", "width": 6, "align": "right"}]},
                        {"type": "separator", "char": "-"},
                        {"type": "feed"},
                        {"type": "label_value", "label": "Total", "value": "9.99", "min_value_width": 5},
                    ],
                },
            ]
        }
    )
    ctx = build_receipt(doc, PrinterContext(backend, page_width=16))
    kinds = [type(a) for a in ctx.actions]
    assert kinds == [TextLines, Separator, Feed, ImageBlock, BarcodeBlock, TableBlock]
    assert ctx.actions[0].lines == ("    INVOICE     ",)
    assert ctx.actions[3].scale == "double_width"
    assert ctx.actions[4].hri == "none"
    assert render_text(ctx.actions[5:]) == [
        "Item".ljust(10) + "  9.99",
        "-" * 16,
        "",
        "Total".ljust(10) + "  9.99",
    ]


def test_unknown_block_type_is_a_configuration_error():
    with pytest.raises(ConfigurationError) as ei:
        parse_receipt({"blocks": [{"type": "qr", "data": "x"}]})
    assert "blocks" in ei.value.parameter


def test_empty_document_is_rejected():
    with pytest.raises(ConfigurationError):
        parse_receipt({"blocks": []})


def test_invalid_cell_width_names_the_field():
    data = {"blocks": [{"type": "table", "rows": [{"type": "row", "cells": [{"content": "x", "width": 0}]}]}]}
    with pytest.raises(ConfigurationError) as ei:
        parse_receipt(data)
    assert ei.value.parameter.endswith("width")


def test_builder_errors_surface_from_build(backend):
    doc = ReceiptDocument.model_validate({"blocks": [{"type": "separator", "char": "=="}]})
    with pytest.raises(ConfigurationError):
        build_receipt(doc, PrinterContext(backend))


def test_load_example_invoice(backend):
    doc = load_receipt(str(EXAMPLE))
    ctx = build_receipt(doc, PrinterContext(backend))
    lines = render_text(ctx.actions)
    assert "INVOICE".center(32) in lines or any("INVOICE" in line for line in lines)
    assert "Subtotal".ljust(16) + "274.50".rjust(16) in lines
    assert all(len(line) in (0, 32) for line in lines)


def test_load_receipt_rejects_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError) as ei:
        load_receipt(str(path))
    assert ei.value.parameter == "document"


def test_document_round_trips_through_json(tmp_path):
    doc = parse_receipt({"blocks": [{"type": "text", "content": "Hi", "wrap": True}]})
    path = tmp_path / "doc.json"
    path.write_text(doc.model_dump_json(), encoding="utf-8")
    assert load_receipt(str(path)) == doc
    assert json.loads(path.read_text(encoding="utf-8"))["blocks"][0]["type"] == "text"
