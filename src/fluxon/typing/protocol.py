"""Callback interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from fluxon.typing.models import ProgressUpdate


class ProgressCallback(Protocol):
    """Receiver for progress updates emitted by long-running operations."""

    def __call__(self, update: ProgressUpdate) -> None:
        """Handle one progress update.

        Args:
            update: Progress payload.
        """
