"""Output artifact and progress models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from fluxon.typing.enums import ProgressPhase

PDF_MEDIA_TYPE = "application/pdf"
ZIP_MEDIA_TYPE = "application/zip"


class OutputArtifact(BaseModel):
    """In-memory file produced by an operation, ready to be written out."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str = Field(min_length=1)
    data: bytes
    media_type: str = PDF_MEDIA_TYPE
    page_numbers: list[int] = Field(default_factory=list)
    width: int | None = None
    height: int | None = None

    @property
    def size(self) -> int:
        """Payload size in bytes."""
        return len(self.data)


class ProgressUpdate(BaseModel):
    """Progress notification emitted between sequential steps."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: str
    progress: float = Field(ge=0.0, le=100.0)
    phase: ProgressPhase | None = None
