"""PDF to PNG/JPEG/WebP conversion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fluxon import logger
from fluxon.archive import build_zip
from fluxon.exceptions import PageRangeError
from fluxon.formatting import sanitize_output_name
from fluxon.page_ranges import parse_page_numbers
from fluxon.pdf_render import encode_pixmap, iter_pages, open_document, render_page
from fluxon.progress import emit_progress
from fluxon.typing.enums import ImageFormat, ProgressPhase
from fluxon.typing.models import OutputArtifact

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from fluxon.typing.models import ImageExportRequest
    from fluxon.typing.protocol import ProgressCallback

DEFAULT_IMAGE_PREFIX = "page"
DEFAULT_ARCHIVE_NAME = "images"


def select_pages(total_pages: int, pages: str | Sequence[int] | None) -> list[int]:
    """Resolve a page selection against a document.

    Args:
        total_pages (int): Page count of the document.
        pages (str | Sequence[int] | None): `None` for every page, a range string, or
            explicit 1-based page numbers.

    Raises:
        PageRangeError: If nothing is left once out-of-bounds pages are dropped.

    Returns:
        list[int]: Page numbers to convert.
    """
    if pages is None:
        return list(range(1, total_pages + 1))
    if isinstance(pages, str):
        selected = parse_page_numbers(pages, total_pages)
    else:
        selected = [page for page in pages if 1 <= page <= total_pages]
    if not selected:
        raise PageRangeError(message="No valid pages to convert")
    return selected


def image_filename(prefix: str, page_number: int, image_format: ImageFormat) -> str:
    """Return `<prefix>_<n>.<ext>`."""
    return f"{prefix}_{page_number}.{image_format.extension}"


def images_archive_name(prefix: str | None) -> str:
    """Return the zip filename for an image export."""
    return f"{sanitize_output_name(prefix, DEFAULT_ARCHIVE_NAME)}.zip"


def export_images(
    pdf_path: Path,
    *,
    image_format: ImageFormat = ImageFormat.PNG,
    quality: int = 95,
    scale: float = 2.0,
    pages: str | Sequence[int] | None = None,
    prefix: str | None = None,
    invert: bool = False,
    on_progress: ProgressCallback | None = None,
) -> list[OutputArtifact]:
    """Render selected pages of a PDF to image files.

    Args:
        pdf_path (Path): Source PDF.
        image_format (ImageFormat): Output format.
        quality (int): JPEG/WebP quality in `1..100`.
        scale (float): Render zoom relative to 72 DPI.
        pages (str | Sequence[int] | None): Page selection, see `select_pages`.
        prefix (str | None): Filename prefix, defaults to `page`.
        invert (bool): Invert colors before encoding.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Returns:
        list[OutputArtifact]: One image per selected page, in page order.
    """
    stem = sanitize_output_name(prefix, DEFAULT_IMAGE_PREFIX)
    emit_progress(on_progress, "Loading PDF...", 10, ProgressPhase.LOAD)

    results: list[OutputArtifact] = []
    with open_document(pdf_path) as doc:
        page_numbers = select_pages(doc.page_count, pages)
        emit_progress(on_progress, "Converting pages...", 20, ProgressPhase.RENDER)

        for idx, (page_number, page) in enumerate(iter_pages(doc, page_numbers), start=1):
            pix = render_page(page, scale=scale, invert=invert)
            results.append(
                OutputArtifact(
                    filename=image_filename(stem, page_number, image_format),
                    data=encode_pixmap(pix, image_format, quality=quality),
                    media_type=image_format.mime_type,
                    page_numbers=[page_number],
                    width=pix.width,
                    height=pix.height,
                ),
            )
            pix = None
            emit_progress(
                on_progress,
                f"Converted page {idx}/{len(page_numbers)}",
                20 + round(idx / len(page_numbers) * 70),
                ProgressPhase.RENDER,
            )

    emit_progress(on_progress, "Complete!", 100, ProgressPhase.RENDER)
    logger.info(
        "PDF converted to images",
        extra={"input_path": str(pdf_path), "images": len(results), "format": image_format.to_str()},
    )
    return results


def run_export_images(
    request: ImageExportRequest,
    *,
    bundle: bool = True,
    on_progress: ProgressCallback | None = None,
) -> list[OutputArtifact]:
    """Top-level image export flow used by CLI.

    Args:
        request (ImageExportRequest): Export request.
        bundle (bool): Return a single zip archive instead of the individual images.
        on_progress (ProgressCallback | None): Optional progress receiver.

    Returns:
        list[OutputArtifact]: `[zip]` when bundling, otherwise one image per page.
    """
    images = export_images(
        request.input_path,
        image_format=request.image_format,
        quality=request.quality,
        scale=request.scale,
        pages=request.pages,
        prefix=request.prefix,
        invert=request.invert,
        on_progress=on_progress,
    )
    if not bundle:
        return images
    return [build_zip(images, images_archive_name(request.prefix), on_progress=on_progress)]
