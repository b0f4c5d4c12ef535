"""Merge several PDFs into one, optionally inverting colors."""

from __future__ import annotations

from typing import TYPE_CHECKING

import fitz

from fluxon import logger
from fluxon.exceptions import DocumentError
from fluxon.formatting import sanitize_output_name
from fluxon.pdf_render import (
    encode_pixmap,
    image_pdf_page,
    iter_pages,
    open_document,
    render_page,
    save_document,
)
from fluxon.progress import emit_progress
from fluxon.typing.enums import ImageFormat, ProgressPhase
from fluxon.typing.models import OutputArtifact

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from fluxon.typing.models import MergeRequest
    from fluxon.typing.protocol import ProgressCallback

DEFAULT_OUTPUT_NAME = "merged_pdf"
_INVERT_JPEG_QUALITY = 90


def merge_documents(paths: Sequence[Path], *, on_progress: ProgressCallback | None = None) -> bytes:
    """Concatenate every page of `paths`, in order, into a new PDF.

    Pages are copied as-is (no rasterization).

    Args:
        paths (Sequence[Path]): Input PDFs.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Raises:
        DocumentError: If no input is given or an input cannot be opened.

    Returns:
        bytes: Merged PDF.
    """
    if not paths:
        raise DocumentError(message="No files provided for merging")

    emit_progress(on_progress, "Starting merge...", 0, ProgressPhase.MERGE)
    merged = fitz.open()
    try:
        for idx, path in enumerate(paths, start=1):
            with open_document(path) as donor:
                merged.insert_pdf(donor)
            emit_progress(
                on_progress,
                f"Merging: {idx}/{len(paths)} files",
                idx / len(paths) * 100,
                ProgressPhase.MERGE,
            )
        return save_document(merged)
    finally:
        merged.close()


def invert_document(
    pdf_bytes: bytes,
    *,
    scale: float = 3.0,
    on_progress: ProgressCallback | None = None,
) -> bytes:
    """Rebuild a PDF from color-inverted renderings of its pages.

    Each output page keeps the size of its source page.

    Args:
        pdf_bytes (bytes): Source PDF.
        scale (float): Render zoom relative to 72 DPI.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Returns:
        bytes: Inverted PDF.
    """
    emit_progress(on_progress, "Starting color inversion...", 0, ProgressPhase.INVERT)
    with open_document(pdf_bytes) as source:
        total = source.page_count
        inverted = fitz.open()
        try:
            for page_number, page in iter_pages(source, list(range(1, total + 1))):
                pix = render_page(page, scale=scale, invert=True)
                image_bytes = encode_pixmap(pix, ImageFormat.JPEG, quality=_INVERT_JPEG_QUALITY)
                pix = None
                image_pdf_page(inverted, image_bytes, width=page.rect.width, height=page.rect.height)
                emit_progress(
                    on_progress,
                    f"Inverting colors: {page_number}/{total} pages",
                    page_number / total * 100,
                    ProgressPhase.INVERT,
                )
            return save_document(inverted)
        finally:
            inverted.close()


def merged_filename(output_name: str | None, *, inverted: bool) -> str:
    """Return the output filename for a merge.

    Args:
        output_name (str | None): User supplied name stem.
        inverted (bool): Whether colors were inverted.

    Returns:
        str: `<name>.pdf` or `<name>_inverted.pdf`.
    """
    stem = sanitize_output_name(output_name, DEFAULT_OUTPUT_NAME)
    return f"{stem}_inverted.pdf" if inverted else f"{stem}.pdf"


def run_merge(request: MergeRequest, *, on_progress: ProgressCallback | None = None) -> OutputArtifact:
    """Top-level merge flow used by CLI.

    Args:
        request (MergeRequest): Merge request.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Returns:
        OutputArtifact: Merged PDF.
    """
    data = merge_documents(request.inputs, on_progress=on_progress)
    if request.invert:
        data = invert_document(data, scale=request.invert_scale, on_progress=on_progress)

    with open_document(data) as merged:
        page_count = merged.page_count

    artifact = OutputArtifact(
        filename=merged_filename(request.output_name, inverted=request.invert),
        data=data,
        page_numbers=list(range(1, page_count + 1)),
    )
    logger.info(
        "PDFs merged",
        extra={"files": len(request.inputs), "pages": page_count, "inverted": request.invert},
    )
    return artifact
