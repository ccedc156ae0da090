"""
Config utilities for Receipt Printer.

Responsibilities:
- Resolve the config path with environment and XDG support
- Provide JSON load/save helpers for the printer config
- Validate a config mapping into PrinterOptions
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from receipt_printer.core.errors import ConfigurationError

DEFAULT_PAGE_WIDTH = 32
DEFAULT_CONNECTION_SPEED = 9600
DEFAULT_CUT_DISTANCE = 66


def default_config_path() -> str:
    """
    Resolve the default config path using:
    1) $XDG_CONFIG_HOME/receiptprinter/config.json
    2) ~/.config/receiptprinter/config.json
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return str(Path(xdg) / "receiptprinter" / "config.json")
    return str(Path.home() / ".config" / "receiptprinter" / "config.json")


def get_config_path() -> str:
    """
    Return the config path honoring RECEIPTPRINTER_CONFIG_PATH override.
    """
    return os.environ.get("RECEIPTPRINTER_CONFIG_PATH", default_config_path())


def load_config(path: Optional[str] = None) -> Optional[dict[str, Any]]:
    """
    Load the JSON config if it exists; return None if missing.

    Raises:
        json.JSONDecodeError if the file exists but contains invalid JSON.
        OSError for I/O errors other than missing file.
    """
    cfg_path = Path(path or get_config_path())
    if not cfg_path.exists():
        return None
    with cfg_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def save_config(data: dict[str, Any], path: Optional[str] = None) -> None:
    """
    Save the JSON config, creating parent directories as needed.

    Writes atomically by using a temporary file and os.replace().
    Raises OSError on I/O failures.
    """
    cfg_path = Path(path or get_config_path())
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = cfg_path.with_suffix(cfg_path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, cfg_path)


class PrinterOptions(BaseModel):
    """Configuration for one print job: page geometry, connection and post-print behavior."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    page_width: int = Field(
        default=DEFAULT_PAGE_WIDTH,
        gt=0,
        description="Characters per printed line",
        examples=[32, 42, 48],
    )
    connection_address: str = Field(
        default="",
        description="Port name, host[:port] or usb vendor:product, depending on printer_type",
        examples=["COM3", "/dev/ttyUSB0", "192.168.1.50:9100", "0x04b8:0x0e28"],
    )
    connection_speed: int = Field(default=DEFAULT_CONNECTION_SPEED, gt=0, description="Serial baud rate")
    cut_after_print: bool = False
    open_drawer_after_print: bool = False
    model_hint: str = Field(default="", description="Printer model passed to backend initialize()")
    cut_distance: int = Field(default=DEFAULT_CUT_DISTANCE, ge=0)
    backend: Literal["escpos", "console", "file", "preview"] = "console"
    printer_type: Literal["usb", "network", "serial"] = "serial"
    printer_profile: Optional[str] = None
    output_path: Optional[str] = Field(default=None, description="Target file for the file and preview backends")

    @field_validator("backend", "printer_type", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def connection_string(self) -> str:
        return f"{self.connection_address}, {self.connection_speed}"


def load_options(data: Optional[Mapping[str, Any]] = None, **overrides: Any) -> PrinterOptions:
    """
    Validate a config mapping (plus keyword overrides) into PrinterOptions.

    Raises:
        ConfigurationError naming the first offending field.
    """
    merged: dict[str, Any] = dict(data or {})
    merged.update(overrides)
    try:
        return PrinterOptions(**merged)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "options"
        raise ConfigurationError(field, err.get("msg", "invalid value")) from e


__all__ = [
    "DEFAULT_CONNECTION_SPEED",
    "DEFAULT_CUT_DISTANCE",
    "DEFAULT_PAGE_WIDTH",
    "PrinterOptions",
    "default_config_path",
    "get_config_path",
    "load_config",
    "load_options",
    "save_config",
]
