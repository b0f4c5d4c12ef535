"""Operation request models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fluxon.typing.enums import ImageFormat, Orientation, PaperSize, SplitMode


def _validate_input_file(value: Path) -> Path:
    """Ensure an input path exists and points to a file.

    Args:
        value (Path): Input path.

    Raises:
        TypeError: If the input path is not a `pathlib.Path`.
        ValueError: If the path does not exist or is not a file.

    Returns:
        Path: Validated input path.
    """
    if not isinstance(value, Path):
        raise TypeError("input path must be a pathlib.Path instance")  # noqa: TRY003
    if not value.exists():
        raise ValueError(f"Input path does not exist: {value}")  # noqa: TRY003
    if not value.is_file():
        raise ValueError(f"Input path is not a file: {value}")  # noqa: TRY003
    return value


class MergeRequest(BaseModel):
    """Merge settings."""

    model_config = ConfigDict(extra="forbid")

    inputs: list[Path]
    invert: bool = False
    invert_scale: float = Field(default=3.0, gt=0.0, le=10.0)
    output_name: str | None = None

    @field_validator("inputs")
    @classmethod
    def _validate_inputs(cls, value: list[Path]) -> list[Path]:
        return [_validate_input_file(path) for path in value]


class SplitRequest(BaseModel):
    """Split settings."""

    model_config = ConfigDict(extra="forbid")

    input_path: Path
    mode: SplitMode = SplitMode.ALL
    ranges: str | None = None
    interval: int = Field(default=1, ge=1)
    rasterize: bool = False
    prefix: str | None = None

    @field_validator("input_path")
    @classmethod
    def _validate_input_path(cls, value: Path) -> Path:
        return _validate_input_file(value)

    @model_validator(mode="after")
    def _require_ranges(self) -> SplitRequest:
        if self.mode == SplitMode.RANGES and not (self.ranges or "").strip():
            raise ValueError("Page ranges are required in 'ranges' mode")  # noqa: TRY003
        return self


class ComposeRequest(BaseModel):
    """N-up composition settings."""

    model_config = ConfigDict(extra="forbid")

    inputs: list[Path]
    rows: int = Field(default=5, ge=1)
    cols: int = Field(default=2, ge=1)
    paper: PaperSize = PaperSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    outer_margin_mm: float = Field(default=5.0, ge=0.0)
    inner_margin_mm: float = Field(default=1.0, ge=0.0)
    show_border: bool = True
    dpi: int = Field(default=180, ge=72)
    invert: bool = False
    output_name: str | None = None

    @field_validator("inputs")
    @classmethod
    def _validate_inputs(cls, value: list[Path]) -> list[Path]:
        return [_validate_input_file(path) for path in value]


class ImageExportRequest(BaseModel):
    """PDF-to-image conversion settings."""

    model_config = ConfigDict(extra="forbid")

    input_path: Path
    image_format: ImageFormat = ImageFormat.PNG
    quality: int = Field(default=95, ge=1, le=100)
    scale: float = Field(default=2.0, gt=0.0, le=10.0)
    pages: str | None = None
    prefix: str | None = None
    invert: bool = False

    @field_validator("input_path")
    @classmethod
    def _validate_input_path(cls, value: Path) -> Path:
        return _validate_input_file(value)
