"""PDF opening, rendering and encoding helpers."""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import fitz
from PIL import Image

from fluxon.exceptions import DocumentError, RenderError
from fluxon.logging import get_logger
from fluxon.typing.enums import ImageFormat

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger(__name__)

_PIL_FORMAT = {
    ImageFormat.JPEG: "JPEG",
    ImageFormat.WEBP: "WEBP",
}


def open_document(source: Path | bytes) -> fitz.Document:
    """Open a PDF from a path or an in-memory payload.

    Args:
        source (Path | bytes): PDF file path or raw bytes.

    Raises:
        DocumentError: If the file cannot be parsed, is password protected, or has no pages.

    Returns:
        fitz.Document: Open document; the caller owns it and must close it.
    """
    label = str(source) if isinstance(source, Path) else "<memory>"
    try:
        if isinstance(source, Path):
            doc = fitz.open(source, filetype="pdf")
        else:
            doc = fitz.open(stream=source, filetype="pdf")
    except Exception as exc:
        raise DocumentError(message=f"Failed to load PDF: {label}") from exc

    if doc.needs_pass:
        doc.close()
        raise DocumentError(message=f"PDF is password protected: {label}")
    if doc.page_count == 0:
        doc.close()
        raise DocumentError(message=f"No pages found in PDF: {label}")
    logger.debug("PDF opened", extra={"input_path": label, "pages": doc.page_count})
    return doc


def get_page_count(pdf_path: Path) -> int:
    """Return the number of pages of a PDF file.

    Args:
        pdf_path (Path): PDF file path.

    Returns:
        int: Page count.
    """
    with open_document(pdf_path) as doc:
        return doc.page_count


def render_page(page: fitz.Page, *, scale: float, invert: bool = False) -> fitz.Pixmap:
    """Rasterize a page into an opaque RGB pixmap.

    Args:
        page (fitz.Page): Page to render; its rotation is applied.
        scale (float): Zoom factor relative to 72 DPI.
        invert (bool): Invert RGB channels after rendering.

    Raises:
        RenderError: If rendering fails.

    Returns:
        fitz.Pixmap: Rendered pixels on a white background.
    """
    try:
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), colorspace=fitz.csRGB, alpha=False)
    except Exception as exc:
        raise RenderError(message=f"Failed to render page {page.number + 1}") from exc
    if invert:
        invert_pixmap(pix)
    return pix


def invert_pixmap(pix: fitz.Pixmap) -> fitz.Pixmap:
    """Invert color channels of `pix` in place (`v -> 255 - v`); alpha is untouched.

    Args:
        pix (fitz.Pixmap): Pixmap to modify.

    Returns:
        fitz.Pixmap: The same pixmap, for chaining.
    """
    pix.invert_irect(pix.irect)
    return pix


def encode_pixmap(pix: fitz.Pixmap, image_format: ImageFormat, *, quality: int = 95) -> bytes:
    """Encode a pixmap to PNG, JPEG or WebP bytes.

    Args:
        pix (fitz.Pixmap): Opaque RGB pixmap.
        image_format (ImageFormat): Target format.
        quality (int): JPEG/WebP quality in `1..100`, ignored for PNG.

    Raises:
        RenderError: If encoding fails.

    Returns:
        bytes: Encoded image.
    """
    try:
        if image_format == ImageFormat.PNG:
            return pix.tobytes(output="png")

        image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        buf = io.BytesIO()
        image.save(buf, format=_PIL_FORMAT[image_format], quality=quality)
        return buf.getvalue()
    except Exception as exc:
        raise RenderError(message=f"Failed to encode page as {image_format.to_str()}") from exc


def iter_pages(doc: fitz.Document, page_numbers: list[int]) -> Iterator[tuple[int, fitz.Page]]:
    """Yield `(page_number, page)` pairs for 1-based page numbers.

    Args:
        doc (fitz.Document): Open document.
        page_numbers (list[int]): 1-based page numbers, all within the document.

    Raises:
        RenderError: If a page cannot be loaded.

    Yields:
        tuple[int, fitz.Page]: Page number and loaded page.
    """
    for page_number in page_numbers:
        try:
            page = doc.load_page(page_number - 1)
        except Exception as exc:
            raise RenderError(message=f"Failed to load page {page_number}") from exc
        yield page_number, page


def image_pdf_page(out_doc: fitz.Document, image_bytes: bytes, *, width: float, height: float) -> fitz.Page:
    """Append a page of `width` x `height` points fully covered by an image.

    Args:
        out_doc (fitz.Document): Document being written.
        image_bytes (bytes): Encoded image.
        width (float): Page width in points.
        height (float): Page height in points.

    Returns:
        fitz.Page: The new page.
    """
    page = out_doc.new_page(width=width, height=height)
    page.insert_image(page.rect, stream=image_bytes, keep_proportion=False)
    return page


def save_document(doc: fitz.Document) -> bytes:
    """Serialize a document with garbage collection and stream compression."""
    return doc.tobytes(garbage=3, deflate=True)
