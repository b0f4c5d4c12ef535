"""Progress reporting helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fluxon import logger
from fluxon.typing.models import ProgressUpdate

if TYPE_CHECKING:
    from fluxon.typing.enums import ProgressPhase
    from fluxon.typing.protocol import ProgressCallback


def emit_progress(
    on_progress: ProgressCallback | None,
    status: str,
    progress: float,
    phase: ProgressPhase | None = None,
) -> None:
    """Send one update to `on_progress` when a receiver is set.

    Args:
        on_progress (ProgressCallback | None): Optional receiver.
        status (str): Human readable status line.
        progress (float): Percentage, clamped into `[0, 100]`.
        phase (ProgressPhase | None): Optional phase label.
    """
    if on_progress is None:
        return
    on_progress(ProgressUpdate(status=status, progress=min(max(progress, 0.0), 100.0), phase=phase))


def log_progress(update: ProgressUpdate) -> None:
    """Progress receiver that writes updates to the package logger."""
    logger.debug(
        update.status,
        extra={"progress": round(update.progress, 1), "phase": update.phase.to_str() if update.phase else None},
    )
