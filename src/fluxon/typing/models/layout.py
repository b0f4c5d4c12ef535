"""Page range and N-up sheet geometry models."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PageRange(BaseModel):
    """Inclusive 1-based page interval."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: int = Field(ge=1)
    end: int = Field(ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> PageRange:
        if self.start > self.end:
            raise ValueError("Range start must not exceed range end")  # noqa: TRY003
        return self

    @property
    def page_numbers(self) -> list[int]:
        """Page numbers covered by the range."""
        return list(range(self.start, self.end + 1))

    def label(self) -> str:
        """Return the `start-end` label."""
        return f"{self.start}-{self.end}"


class CellRect(BaseModel):
    """Pixel rectangle on a sheet."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: int
    y: int
    width: int
    height: int


class SheetLayout(BaseModel):
    """Pixel-space geometry of one N-up sheet."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    dpi: int
    rows: int
    cols: int
    sheet_width: int
    sheet_height: int
    outer_margin: int
    inner_margin: int
    cell_width: int
    cell_height: int
    cells: list[CellRect]

    @property
    def pages_per_sheet(self) -> int:
        """Number of cells on a sheet."""
        return self.rows * self.cols

    def sheet_count(self, page_count: int) -> int:
        """Return how many sheets are needed for `page_count` pages."""
        return math.ceil(max(page_count, 0) / self.pages_per_sheet)
