"""Folio package."""

from folio.concurrency import run_async
from folio.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    IndexWriteError,
    PackageError,
    SettingsError,
    UnknownDocumentTypeError,
)
from folio.logging import configure_logging, get_logger
from folio.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("folio")

__all__ = [
    "ConfigurationError",
    "DocumentNotFoundError",
    "IndexWriteError",
    "PackageError",
    "Settings",
    "SettingsError",
    "UnknownDocumentTypeError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
    "run_async",
]
