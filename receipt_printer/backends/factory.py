"""
Backend selection from PrinterOptions.
"""

from __future__ import annotations

import logging

from receipt_printer.backends.base import OutputBackend
from receipt_printer.backends.escpos import EscposBackend
from receipt_printer.backends.preview import PreviewBackend
from receipt_printer.backends.text import ConsoleBackend, FileBackend
from receipt_printer.core.config import PrinterOptions
from receipt_printer.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def create_backend(options: PrinterOptions) -> OutputBackend:
    """
    Build the output backend named by options.backend.

    Raises:
        ConfigurationError when the file or preview backend has no output_path.
    """
    kind = options.backend
    logger.debug("Creating %s backend", kind)
    if kind == "escpos":
        return EscposBackend(options.printer_type, options.printer_profile)
    if kind == "console":
        return ConsoleBackend(options.page_width)
    if kind in ("file", "preview"):
        if not options.output_path:
            raise ConfigurationError("output_path", f"the {kind} backend needs an output path")
        if kind == "file":
            return FileBackend(options.output_path, options.page_width)
        return PreviewBackend(options.output_path, options.page_width)
    raise ConfigurationError("backend", f"unknown backend: {kind}")


__all__ = ["create_backend"]
