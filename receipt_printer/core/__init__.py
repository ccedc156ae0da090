"""
Core utilities for Receipt Printer.

This package groups helpers used across the library:
- config: config path resolution, JSON load/save, PrinterOptions validation
- enums: alignment, text size and barcode/image option enums
- errors: the exception taxonomy
- logging: job-id aware logging filters/formatters and root logger config

Exports are explicit to keep static analyzers (e.g., Pyright) happy.
"""

from .config import (
    DEFAULT_CONNECTION_SPEED,
    DEFAULT_CUT_DISTANCE,
    DEFAULT_PAGE_WIDTH,
    PrinterOptions,
    default_config_path,
    get_config_path,
    load_config,
    load_options,
    save_config,
)
from .enums import (
    BarcodeWidth,
    HorizontalAlignment,
    HRIPosition,
    ScaleMode,
    TextSize,
    VerticalAlignment,
)
from .errors import (
    BackendError,
    ConfigurationError,
    ContextConsumedError,
    ReceiptPrinterError,
)
from .logging import (
    JobIdFilter,
    JsonFormatter,
    configure_logging,
    current_job_id,
)

__all__ = [
    # config
    "DEFAULT_CONNECTION_SPEED",
    "DEFAULT_CUT_DISTANCE",
    "DEFAULT_PAGE_WIDTH",
    "PrinterOptions",
    "default_config_path",
    "get_config_path",
    "load_config",
    "load_options",
    "save_config",
    # enums
    "BarcodeWidth",
    "HRIPosition",
    "HorizontalAlignment",
    "ScaleMode",
    "TextSize",
    "VerticalAlignment",
    # errors
    "BackendError",
    "ConfigurationError",
    "ContextConsumedError",
    "ReceiptPrinterError",
    # logging
    "JobIdFilter",
    "JsonFormatter",
    "configure_logging",
    "current_job_id",
]
