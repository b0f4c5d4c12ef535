"""Small formatting helpers shared by every operation."""

from __future__ import annotations

import re

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")
_WHITESPACE_RE = re.compile(r"\s+")


def format_file_size(size: int) -> str:
    """Format a byte count in human-readable form.

    Args:
        size (int): Byte count.

    Raises:
        ValueError: If the byte count is negative.

    Returns:
        str: `"<n> B"` below 1 KiB, otherwise one decimal with a binary unit.
    """
    if size < 0:
        raise ValueError("File size cannot be negative")  # noqa: TRY003
    if size < 1024:
        return f"{size} B"

    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(_SIZE_UNITS) - 1:
        exponent += 1
    return f"{size / 1024**exponent:.1f} {_SIZE_UNITS[exponent]}"


def sanitize_output_name(name: str | None, default: str) -> str:
    """Replace whitespace runs with underscores, falling back to `default` when blank.

    Args:
        name (str | None): User supplied name.
        default (str): Name used when `name` is empty.

    Returns:
        str: Name safe to use as a filename stem.
    """
    cleaned = _WHITESPACE_RE.sub("_", (name or "").strip())
    return cleaned or default
