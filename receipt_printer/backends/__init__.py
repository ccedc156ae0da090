"""
Output backends for Receipt Printer.

- base: the OutputBackend contract driven by PrinterContext
- escpos: physical ESC/POS printers over USB, network or serial (python-escpos)
- text: framed text receipts on the console or in a file
- preview: PNG previews rendered with Pillow
- factory: create_backend() from PrinterOptions

Exports are explicit to keep static analyzers (e.g., Pyright) happy.
"""

from .base import OutputBackend
from .escpos import EscposBackend, parse_connection
from .factory import create_backend
from .preview import PreviewBackend
from .text import ConsoleBackend, FileBackend, TextReceiptBackend

__all__ = [
    "ConsoleBackend",
    "EscposBackend",
    "FileBackend",
    "OutputBackend",
    "PreviewBackend",
    "TextReceiptBackend",
    "create_backend",
    "parse_connection",
]
