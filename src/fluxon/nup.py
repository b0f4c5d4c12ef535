"""N-up composition: several source pages per output sheet.

Sheet geometry is computed in pixel space at the requested DPI. Thumbnails are
rendered to fit their cell, centered, then placed on sheets sized in points
(`px * 72 / dpi`).
"""

from __future__ import annotations

import math
from contextlib import ExitStack
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import fitz

from fluxon import logger
from fluxon.exceptions import DocumentError, LayoutError
from fluxon.formatting import sanitize_output_name
from fluxon.pdf_render import encode_pixmap, iter_pages, open_document, render_page, save_document
from fluxon.progress import emit_progress
from fluxon.typing.enums import ImageFormat, Orientation, PaperSize, ProgressPhase
from fluxon.typing.models import CellRect, OutputArtifact, SheetLayout

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from fluxon.typing.models import ComposeRequest
    from fluxon.typing.protocol import ProgressCallback

MM_PER_INCH = 25.4
POINTS_PER_INCH = 72
MIN_DPI = 72
MAX_RENDER_SCALE = 2.5
THUMBNAIL_JPEG_QUALITY = 90
BORDER_COLOR = (200 / 255, 200 / 255, 200 / 255)
DEFAULT_OUTPUT_NAME = "nup_compose_output"

# preset -> (rows, cols)
NUP_PRESETS: dict[str, tuple[int, int]] = {
    "10": (5, 2),
    "9": (3, 3),
    "6": (3, 2),
    "4": (2, 2),
}


@dataclass(frozen=True)
class _Thumbnail:
    data: bytes
    width: int
    height: int


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def mm_to_px(mm: float, dpi: int) -> int:
    """Convert millimeters to whole pixels at `dpi`."""
    return _round_half_up(mm * dpi / MM_PER_INCH)


def resolve_preset(preset: str) -> tuple[int, int]:
    """Return `(rows, cols)` for a named preset.

    Args:
        preset (str): Preset name, e.g. `"10"`.

    Raises:
        LayoutError: If the preset is unknown.

    Returns:
        tuple[int, int]: Rows and columns.
    """
    try:
        return NUP_PRESETS[preset]
    except KeyError:
        supported = ", ".join(NUP_PRESETS)
        raise LayoutError(message=f"Unknown preset '{preset}'. Expected one of: {supported}") from None


def compute_sheet_layout(
    *,
    paper: PaperSize,
    orientation: Orientation,
    dpi: int,
    rows: int,
    cols: int,
    outer_margin_mm: float,
    inner_margin_mm: float,
) -> SheetLayout:
    """Compute sheet size and the row-major grid of equally sized cells.

    Args:
        paper (PaperSize): Paper size.
        orientation (Orientation): Landscape swaps the paper width and height.
        dpi (int): Sheet resolution, at least 72.
        rows (int): Grid rows, at least 1.
        cols (int): Grid columns, at least 1.
        outer_margin_mm (float): Margin around the grid.
        inner_margin_mm (float): Gap between cells.

    Raises:
        LayoutError: If an input is out of bounds or the margins leave no room for cells.

    Returns:
        SheetLayout: Pixel-space geometry.
    """
    if rows < 1 or cols < 1:
        raise LayoutError(message=f"Rows and columns must be at least 1, got {rows}x{cols}")
    if dpi < MIN_DPI:
        raise LayoutError(message=f"DPI must be at least {MIN_DPI}, got {dpi}")
    if outer_margin_mm < 0 or inner_margin_mm < 0:
        raise LayoutError(message="Margins cannot be negative")

    width_mm, height_mm = paper.millimeters
    if orientation == Orientation.LANDSCAPE:
        width_mm, height_mm = height_mm, width_mm

    sheet_width = mm_to_px(width_mm, dpi)
    sheet_height = mm_to_px(height_mm, dpi)
    outer = mm_to_px(outer_margin_mm, dpi)
    inner = mm_to_px(inner_margin_mm, dpi)

    printable_width = sheet_width - 2 * outer
    printable_height = sheet_height - 2 * outer
    cell_width = (printable_width - (cols - 1) * inner) // cols
    cell_height = (printable_height - (rows - 1) * inner) // rows
    if cell_width <= 0 or cell_height <= 0:
        raise LayoutError(message="Margins leave no room for cells on the sheet")

    cells = [
        CellRect(
            x=outer + col * (cell_width + inner),
            y=outer + row * (cell_height + inner),
            width=cell_width,
            height=cell_height,
        )
        for row in range(rows)
        for col in range(cols)
    ]
    return SheetLayout(
        dpi=dpi,
        rows=rows,
        cols=cols,
        sheet_width=sheet_width,
        sheet_height=sheet_height,
        outer_margin=outer,
        inner_margin=inner,
        cell_width=cell_width,
        cell_height=cell_height,
        cells=cells,
    )


def fit_to_cell(width: float, height: float, cell: CellRect) -> CellRect:
    """Scale a `width` x `height` image to fit `cell`, keeping its aspect ratio, centered.

    Args:
        width (float): Image width in pixels.
        height (float): Image height in pixels.
        cell (CellRect): Target cell.

    Raises:
        LayoutError: If the image has no area.

    Returns:
        CellRect: Drawing rectangle inside the cell.
    """
    if width <= 0 or height <= 0:
        raise LayoutError(message=f"Cannot place an empty image ({width}x{height})")

    scale = min(cell.width / width, cell.height / height)
    draw_width = _round_half_up(width * scale)
    draw_height = _round_half_up(height * scale)
    return CellRect(
        x=cell.x + _round_half_up((cell.width - draw_width) / 2),
        y=cell.y + _round_half_up((cell.height - draw_height) / 2),
        width=draw_width,
        height=draw_height,
    )


T = TypeVar("T")


def paginate(items: Sequence[T], per_sheet: int) -> list[list[T]]:
    """Split `items` into consecutive sheets of `per_sheet` items, the last possibly partial."""
    if per_sheet < 1:
        raise LayoutError(message="A sheet must hold at least one page")
    return [list(items[start : start + per_sheet]) for start in range(0, len(items), per_sheet)]


def _px_to_points(value: float, dpi: int) -> float:
    return value * POINTS_PER_INCH / dpi


def _points_rect(x: float, y: float, width: float, height: float, dpi: int) -> fitz.Rect:
    return fitz.Rect(
        _px_to_points(x, dpi),
        _px_to_points(y, dpi),
        _px_to_points(x + width, dpi),
        _px_to_points(y + height, dpi),
    )


def _render_thumbnail(page: fitz.Page, layout: SheetLayout, *, invert: bool) -> _Thumbnail:
    scale = min(
        layout.cell_width / page.rect.width,
        layout.cell_height / page.rect.height,
        MAX_RENDER_SCALE,
    )
    pix = render_page(page, scale=scale, invert=invert)
    return _Thumbnail(
        data=encode_pixmap(pix, ImageFormat.JPEG, quality=THUMBNAIL_JPEG_QUALITY),
        width=pix.width,
        height=pix.height,
    )


def _render_all(
    paths: Sequence[Path],
    layout: SheetLayout,
    *,
    invert: bool,
    on_progress: ProgressCallback | None,
) -> list[_Thumbnail]:
    with ExitStack() as stack:
        docs = [stack.enter_context(open_document(path)) for path in paths]
        total = sum(doc.page_count for doc in docs)
        emit_progress(on_progress, "Rendering pages...", 10, ProgressPhase.RENDER)

        thumbnails: list[_Thumbnail] = []
        for doc in docs:
            for _, page in iter_pages(doc, list(range(1, doc.page_count + 1))):
                thumbnails.append(_render_thumbnail(page, layout, invert=invert))
                emit_progress(
                    on_progress,
                    f"Rendered {len(thumbnails)}/{total} pages",
                    10 + round(len(thumbnails) / total * 50),
                    ProgressPhase.RENDER,
                )
    return thumbnails


def compose_nup(
    paths: Sequence[Path],
    layout: SheetLayout,
    *,
    show_border: bool = True,
    invert: bool = False,
    on_progress: ProgressCallback | None = None,
) -> bytes:
    """Place every page of `paths`, in order, onto N-up sheets.

    Args:
        paths (Sequence[Path]): Input PDFs.
        layout (SheetLayout): Sheet geometry.
        show_border (bool): Draw a light gray outline around each used cell.
        invert (bool): Invert thumbnail colors.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Raises:
        DocumentError: If no input is given.

    Returns:
        bytes: Composed PDF.
    """
    if not paths:
        raise DocumentError(message="No files selected")

    emit_progress(on_progress, "Loading documents...", 5, ProgressPhase.LOAD)
    thumbnails = _render_all(paths, layout, invert=invert, on_progress=on_progress)

    sheet_count = layout.sheet_count(len(thumbnails))
    emit_progress(on_progress, f"Composing {sheet_count} sheet(s)...", 60, ProgressPhase.COMPOSE)
    sheet_width = _px_to_points(layout.sheet_width, layout.dpi)
    sheet_height = _px_to_points(layout.sheet_height, layout.dpi)
    out = fitz.open()
    try:
        placed = 0
        for sheet in paginate(thumbnails, layout.pages_per_sheet):
            page = out.new_page(width=sheet_width, height=sheet_height)
            for cell, thumbnail in zip(layout.cells, sheet, strict=False):
                target = fit_to_cell(thumbnail.width, thumbnail.height, cell)
                page.insert_image(
                    _points_rect(target.x, target.y, target.width, target.height, layout.dpi),
                    stream=thumbnail.data,
                    keep_proportion=False,
                )
                if show_border:
                    page.draw_rect(
                        _points_rect(cell.x + 0.5, cell.y + 0.5, cell.width - 1, cell.height - 1, layout.dpi),
                        color=BORDER_COLOR,
                        width=_px_to_points(1, layout.dpi),
                    )
                placed += 1
                emit_progress(
                    on_progress,
                    f"Placed {placed}/{len(thumbnails)} thumbnails",
                    60 + round(placed / len(thumbnails) * 35),
                    ProgressPhase.COMPOSE,
                )

        emit_progress(on_progress, "Finalizing PDF...", 98, ProgressPhase.COMPOSE)
        data = save_document(out)
    finally:
        out.close()

    emit_progress(on_progress, "Complete!", 100, ProgressPhase.COMPOSE)
    return data


def composed_filename(output_name: str | None) -> str:
    """Return `<name>.pdf`, defaulting to `nup_compose_output.pdf`."""
    return f"{sanitize_output_name(output_name, DEFAULT_OUTPUT_NAME)}.pdf"


def run_compose(request: ComposeRequest, *, on_progress: ProgressCallback | None = None) -> OutputArtifact:
    """Top-level N-up flow used by CLI.

    Args:
        request (ComposeRequest): Composition request.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Returns:
        OutputArtifact: Composed PDF.
    """
    layout = compute_sheet_layout(
        paper=request.paper,
        orientation=request.orientation,
        dpi=request.dpi,
        rows=request.rows,
        cols=request.cols,
        outer_margin_mm=request.outer_margin_mm,
        inner_margin_mm=request.inner_margin_mm,
    )
    data = compose_nup(
        request.inputs,
        layout,
        show_border=request.show_border,
        invert=request.invert,
        on_progress=on_progress,
    )
    with open_document(data) as composed:
        sheets = composed.page_count

    logger.info(
        "N-up composed",
        extra={
            "files": len(request.inputs),
            "sheets": sheets,
            "grid": f"{layout.rows}x{layout.cols}",
            "dpi": layout.dpi,
        },
    )
    return OutputArtifact(
        filename=composed_filename(request.output_name),
        data=data,
        page_numbers=list(range(1, sheets + 1)),
        width=layout.sheet_width,
        height=layout.sheet_height,
    )
