"""Runtime dependency checks for CLI commands."""

from __future__ import annotations

import importlib.util

from fluxon.exceptions import DependencyError

_PDF_MODULES = {"pymupdf": "fitz"}
_RASTER_MODULES = {**_PDF_MODULES, "pillow": "PIL"}
_COMMAND_MODULES: dict[str, dict[str, str]] = {
    "merge": _RASTER_MODULES,
    "split": _RASTER_MODULES,
    "nup": _RASTER_MODULES,
    "images": _RASTER_MODULES,
    "info": _PDF_MODULES,
}


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def _collect_missing_dependencies(modules_by_package: dict[str, str]) -> list[str]:
    """Collect missing packages for a module mapping.

    Args:
        modules_by_package (Mapping[str, str]): Mapping of package name -> import module.

    Returns:
        list[str]: Missing package names.
    """
    return [package for package, module in modules_by_package.items() if not _is_module_available(module)]


def ensure_cli_dependencies(command: str) -> None:
    """Validate required runtime dependencies for one `fluxon` sub-command.

    Args:
        command (str): Sub-command name.

    Raises:
        DependencyError: If one or more required modules are missing.
    """
    missing = _collect_missing_dependencies(_COMMAND_MODULES.get(command, _PDF_MODULES))
    if missing:
        raise DependencyError(missing_package=missing, message=command)
