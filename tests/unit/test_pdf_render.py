from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from fluxon.exceptions import DocumentError, RenderError
from fluxon.pdf_render import encode_pixmap, open_document, render_page
from fluxon.typing.enums import ImageFormat

if TYPE_CHECKING:
    from pathlib import Path


class _FakeDoc:
    def __init__(self, *, pages: int = 1, needs_pass: bool = False) -> None:
        self.page_count = pages
        self.needs_pass = needs_pass
        self.closed = False

    def close(self) -> None:
        self.closed = True


class _FakeFitzModule:
    def __init__(self, doc: _FakeDoc) -> None:
        self.doc = doc

    def open(self, *args: object, **kwargs: object) -> _FakeDoc:
        _ = args, kwargs
        return self.doc


class _BrokenPage:
    number = 4

    def get_pixmap(self, **kwargs: object) -> None:
        _ = kwargs
        raise RuntimeError("cannot render")


class _BrokenPixmap:
    width = 2
    height = 2
    samples = b"\x00"


def test_open_document_rejects_garbage(tmp_path: Path) -> None:
    pdf = tmp_path / "doc.pdf"
    pdf.write_bytes(b"this is not a pdf")

    with pytest.raises(DocumentError, match="Failed to load PDF"):
        open_document(pdf)


def test_open_document_rejects_empty_document(tmp_path: Path, monkeypatch) -> None:
    fake_doc = _FakeDoc(pages=0)
    monkeypatch.setattr("fluxon.pdf_render.fitz", _FakeFitzModule(fake_doc))

    with pytest.raises(DocumentError, match="No pages found"):
        open_document(tmp_path / "doc.pdf")
    assert fake_doc.closed


def test_open_document_rejects_encrypted_document(monkeypatch) -> None:
    fake_doc = _FakeDoc(needs_pass=True)
    monkeypatch.setattr("fluxon.pdf_render.fitz", _FakeFitzModule(fake_doc))

    with pytest.raises(DocumentError, match="password protected"):
        open_document(b"%PDF-1.7")
    assert fake_doc.closed


def test_render_page_wraps_errors() -> None:
    with pytest.raises(RenderError, match="Failed to render page 5"):
        render_page(_BrokenPage(), scale=1.0)


def test_encode_pixmap_wraps_errors() -> None:
    with pytest.raises(RenderError, match="Failed to encode page as jpeg"):
        encode_pixmap(_BrokenPixmap(), ImageFormat.JPEG)
