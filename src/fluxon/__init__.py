"""Fluxon package."""

from fluxon.exceptions import (
    ArchiveError,
    DependencyError,
    DocumentError,
    LayoutError,
    PackageError,
    PageRangeError,
    RenderError,
    SettingsError,
)
from fluxon.logging import configure_logging, get_logger
from fluxon.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("fluxon")

__all__ = [
    "ArchiveError",
    "DependencyError",
    "DocumentError",
    "LayoutError",
    "PackageError",
    "PageRangeError",
    "RenderError",
    "Settings",
    "SettingsError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
]
