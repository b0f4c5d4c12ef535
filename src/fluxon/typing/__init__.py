"""Typing-centric domain modules."""

from fluxon.typing.enums import ImageFormat, Orientation, PaperSize, ProgressPhase, SplitMode
from fluxon.typing.models import (
    CellRect,
    ComposeRequest,
    ImageExportRequest,
    MergeRequest,
    OutputArtifact,
    PageRange,
    ProgressUpdate,
    SheetLayout,
    SplitRequest,
)
from fluxon.typing.protocol import ProgressCallback

__all__ = [
    "CellRect",
    "ComposeRequest",
    "ImageExportRequest",
    "ImageFormat",
    "MergeRequest",
    "Orientation",
    "OutputArtifact",
    "PageRange",
    "PaperSize",
    "ProgressCallback",
    "ProgressPhase",
    "ProgressUpdate",
    "SheetLayout",
    "SplitMode",
    "SplitRequest",
]
