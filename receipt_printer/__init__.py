"""
Receipt Printer package

A fluent, fixed-width layout engine for thermal receipt printers:
- Build a receipt with PrinterContext: text, separators, feeds, tables,
  images and barcodes, each laid out against the page width when added
- Execute it once against an output backend (ESC/POS printer, console,
  text file or PNG preview), synchronously, asynchronously, or through
  the background job worker
- Describe receipts as JSON documents validated with pydantic

Typical use:

    from receipt_printer import ConsoleBackend, PrinterContext

    ctx = PrinterContext(ConsoleBackend(32), page_width=32)
    ctx.add_text("INVOICE", align="center").feed_line()
    ctx.table().add_label_value("Total", "9.99").create()
    ctx.execute()
"""

from .core import (
    BackendError,
    BarcodeWidth,
    ConfigurationError,
    ContextConsumedError,
    HorizontalAlignment,
    HRIPosition,
    PrinterOptions,
    ReceiptPrinterError,
    ScaleMode,
    TextSize,
    VerticalAlignment,
    configure_logging,
    load_options,
)
from .printing import (
    Cell,
    ExecutionSummary,
    PrinterContext,
    Row,
    Table,
    cancel_job,
    enqueue_context,
    ensure_worker,
    get_job,
    list_jobs,
    render_text,
    wrap_text,
)
from .backends import (
    ConsoleBackend,
    EscposBackend,
    FileBackend,
    OutputBackend,
    PreviewBackend,
    create_backend,
)
from .schemas import ReceiptDocument, build_receipt, load_receipt, parse_receipt

__version__ = "0.1.0"

__all__ = [
    "BackendError",
    "BarcodeWidth",
    "Cell",
    "ConfigurationError",
    "ConsoleBackend",
    "ContextConsumedError",
    "EscposBackend",
    "ExecutionSummary",
    "FileBackend",
    "HRIPosition",
    "HorizontalAlignment",
    "OutputBackend",
    "PreviewBackend",
    "PrinterContext",
    "PrinterOptions",
    "ReceiptDocument",
    "ReceiptPrinterError",
    "Row",
    "ScaleMode",
    "Table",
    "TextSize",
    "VerticalAlignment",
    "build_receipt",
    "cancel_job",
    "configure_logging",
    "create_backend",
    "enqueue_context",
    "ensure_worker",
    "get_job",
    "list_jobs",
    "load_options",
    "load_receipt",
    "parse_receipt",
    "render_text",
    "wrap_text",
]
