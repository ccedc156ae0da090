# Ensure the repository root is on sys.path so `receipt_printer` can be imported in tests.

import sys
from pathlib import Path
from typing import Any, List, Set, Tuple

import pytest


def _ensure_repo_root_on_syspath() -> None:
    # This file lives at: <repo_root>/tests/conftest.py
    here = Path(__file__).resolve()
    repo_root = here.parent.parent
    repo_str = str(repo_root)
    if repo_str not in sys.path:
        sys.path.insert(0, repo_str)


_ensure_repo_root_on_syspath()

from receipt_printer.backends.base import OutputBackend  # noqa: E402


class RecordingBackend(OutputBackend):
    """Backend fake that records every call; operations named in fail_on raise RuntimeError."""

    def __init__(self, fail_on: Set[str] = frozenset()):
        self.calls: List[Tuple[Any, ...]] = []
        self.fail_on = set(fail_on)

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise RuntimeError(f"{name} boom")

    @property
    def names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def initialize(self, model_hint=""):
        self._record("initialize", model_hint)

    def open_connection(self, connection):
        self._record("open_connection", connection)

    def close_connection(self):
        self._record("close_connection")

    def release(self):
        self._record("release")

    def feed_lines(self, count):
        self._record("feed_lines", count)

    def emit_text_line(self, text, align="left", size="normal"):
        self._record("emit_text_line", text, align, size)

    def emit_barcode(self, data, height, width="large", align="center", hri="below"):
        self._record("emit_barcode", data, height, width, align, hri)

    def emit_image(self, path, label="", scale="normal"):
        self._record("emit_image", path, label, scale)

    def cut_paper(self, distance=0):
        self._record("cut_paper", distance)

    def open_cash_drawer(self, pin_mode=0, on_ms=30, off_ms=255):
        self._record("open_cash_drawer", pin_mode, on_ms, off_ms)


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def restore_root_logging():
    import logging

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)
