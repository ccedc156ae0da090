"""
Exception types for Receipt Printer.

- ConfigurationError: invalid builder arguments, raised at the call that introduced them
- BackendError: any failure reported by an output backend during execution
- ContextConsumedError: a printer context was executed more than once
"""

from __future__ import annotations


class ReceiptPrinterError(Exception):
    """Base class for all Receipt Printer errors."""


class ConfigurationError(ReceiptPrinterError, ValueError):
    """
    Raised when a builder call or option set receives an invalid value.

    The message names the offending parameter.
    """

    def __init__(self, parameter: str, message: str):
        self.parameter = parameter
        super().__init__(f"{parameter}: {message}")


class BackendError(ReceiptPrinterError, RuntimeError):
    """
    Raised when the output backend fails during initialize/open/emit/close/release.

    The original exception is chained as __cause__.
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"backend {operation} failed: {message}")


class ContextConsumedError(ReceiptPrinterError):
    """Raised when execute() is called on a context that already ran."""


__all__ = ["BackendError", "ConfigurationError", "ContextConsumedError", "ReceiptPrinterError"]
