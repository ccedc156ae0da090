"""
Printing subsystem for Receipt Printer.

This package groups the layout engine and the print queue:

- wrap: greedy word wrap over a character budget
- align: horizontal padding and vertical alignment of cell lines
- actions: immutable queued print actions
- table: cells, rows and the table builder
- context: PrinterContext, the fluent builder and executor
- worker: background job queue and job registry

For convenience, common functions are re-exported for easy import.
"""

from .wrap import *
from .align import *
from .actions import *
from .table import *
from .context import *
from .worker import *
