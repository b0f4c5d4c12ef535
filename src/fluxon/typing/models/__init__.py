"""Core domain model exports."""

from fluxon.typing.models.artifacts import PDF_MEDIA_TYPE, ZIP_MEDIA_TYPE, OutputArtifact, ProgressUpdate
from fluxon.typing.models.layout import CellRect, PageRange, SheetLayout
from fluxon.typing.models.requests import (
    ComposeRequest,
    ImageExportRequest,
    MergeRequest,
    SplitRequest,
)

__all__ = [
    "PDF_MEDIA_TYPE",
    "ZIP_MEDIA_TYPE",
    "CellRect",
    "ComposeRequest",
    "ImageExportRequest",
    "MergeRequest",
    "OutputArtifact",
    "PageRange",
    "ProgressUpdate",
    "SheetLayout",
    "SplitRequest",
]
