"""Cut one PDF into several, by page, by explicit ranges or by fixed intervals."""

from __future__ import annotations

from typing import TYPE_CHECKING

import fitz

from fluxon import logger
from fluxon.archive import build_zip
from fluxon.exceptions import PageRangeError, RenderError
from fluxon.formatting import sanitize_output_name
from fluxon.page_ranges import all_pages, interval_ranges, parse_page_ranges
from fluxon.pdf_render import (
    encode_pixmap,
    image_pdf_page,
    iter_pages,
    open_document,
    render_page,
    save_document,
)
from fluxon.progress import emit_progress
from fluxon.typing.enums import ImageFormat, ProgressPhase, SplitMode
from fluxon.typing.models import OutputArtifact

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from fluxon.typing.models import PageRange, SplitRequest
    from fluxon.typing.protocol import ProgressCallback

RASTER_SCALE = 2.0
RASTER_JPEG_QUALITY = 92


def range_filename(page_range: PageRange) -> str:
    """Return `page_<n>.pdf` for single pages, `pages_<s>-<e>.pdf` otherwise."""
    if page_range.start == page_range.end:
        return f"page_{page_range.start}.pdf"
    return f"pages_{page_range.start}-{page_range.end}.pdf"


def split_archive_name(prefix: str | None) -> str:
    """Return the zip filename for a split."""
    stem = sanitize_output_name(prefix, "")
    return f"{stem}_split_pdfs.zip" if stem else "split_pdfs.zip"


def _copy_range(source: fitz.Document, target: fitz.Document, page_range: PageRange) -> None:
    target.insert_pdf(source, from_page=page_range.start - 1, to_page=page_range.end - 1)


def _rasterize_page(target: fitz.Document, page: fitz.Page) -> None:
    pix = render_page(page, scale=RASTER_SCALE)
    image_bytes = encode_pixmap(pix, ImageFormat.JPEG, quality=RASTER_JPEG_QUALITY)
    image_pdf_page(target, image_bytes, width=page.rect.width, height=page.rect.height)


def split_document(
    pdf_path: Path,
    ranges: Sequence[PageRange] | Callable[[int], Sequence[PageRange]],
    *,
    rasterize: bool = False,
    on_progress: ProgressCallback | None = None,
) -> list[OutputArtifact]:
    """Write one PDF per page range.

    Args:
        pdf_path (Path): Source PDF.
        ranges (Sequence[PageRange] | Callable[[int], Sequence[PageRange]]): Ranges, or a
            factory receiving the page count and returning the ranges.
        rasterize (bool): Rebuild pages from JPEG renderings instead of copying them.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Raises:
        PageRangeError: If no range fits the document.
        RenderError: If a range cannot be written.

    Returns:
        list[OutputArtifact]: One PDF per distinct valid range, in first-seen order.
    """
    emit_progress(on_progress, "Loading PDF...", 10, ProgressPhase.LOAD)
    with open_document(pdf_path) as source:
        total = source.page_count
        requested = ranges(total) if callable(ranges) else ranges
        valid: list[PageRange] = []
        for page_range in requested:
            # one piece per distinct range
            if page_range.end <= total and page_range not in valid:
                valid.append(page_range)
        if not valid:
            raise PageRangeError(message="No valid page ranges specified")

        emit_progress(on_progress, f"Processing {len(valid)} range(s)...", 20, ProgressPhase.SPLIT)
        pages_to_process = sum(len(page_range.page_numbers) for page_range in valid)
        processed = 0
        results: list[OutputArtifact] = []

        for range_idx, page_range in enumerate(valid, start=1):
            piece = fitz.open()
            try:
                if rasterize:
                    for _, page in iter_pages(source, page_range.page_numbers):
                        _rasterize_page(piece, page)
                else:
                    _copy_range(source, piece, page_range)
                data = save_document(piece)
            except RenderError:
                raise
            except Exception as exc:
                raise RenderError(message=f"Failed to process range {page_range.label()}: {exc}") from exc
            finally:
                piece.close()

            results.append(
                OutputArtifact(
                    filename=range_filename(page_range),
                    data=data,
                    page_numbers=page_range.page_numbers,
                ),
            )
            processed += len(page_range.page_numbers)
            emit_progress(
                on_progress,
                f"Processed range {range_idx}/{len(valid)} ({page_range.label()})",
                20 + round(processed / pages_to_process * 70),
                ProgressPhase.SPLIT,
            )

    emit_progress(on_progress, "Complete!", 100, ProgressPhase.SPLIT)
    logger.info(
        "PDF split",
        extra={"input_path": str(pdf_path), "pieces": len(results), "rasterized": rasterize},
    )
    return results


def _ranges_for(request: SplitRequest) -> Callable[[int], Sequence[PageRange]]:
    if request.mode == SplitMode.RANGES:
        return lambda total: parse_page_ranges(request.ranges or "", total)
    if request.mode == SplitMode.INTERVAL:
        return lambda total: interval_ranges(total, request.interval)
    return all_pages


def run_split(
    request: SplitRequest,
    *,
    bundle: bool = True,
    on_progress: ProgressCallback | None = None,
) -> list[OutputArtifact]:
    """Top-level split flow used by CLI.

    Args:
        request (SplitRequest): Split request.
        bundle (bool): Return a single zip archive instead of the individual pieces.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Returns:
        list[OutputArtifact]: `[zip]` when bundling, otherwise one PDF per piece.
    """
    pieces = split_document(
        request.input_path,
        _ranges_for(request),
        rasterize=request.rasterize,
        on_progress=on_progress,
    )
    if not bundle:
        return pieces
    return [build_zip(pieces, split_archive_name(request.prefix), on_progress=on_progress)]
