from __future__ import annotations

import fitz

from fluxon.pdf_render import invert_pixmap, open_document, render_page


def test_inverting_twice_restores_pixels(make_pdf) -> None:
    pdf = make_pdf(pages=1, size=(120, 80))

    with open_document(pdf) as doc:
        pix = render_page(doc[0], scale=1.0)
        original = bytes(pix.samples)

        invert_pixmap(pix)
        assert bytes(pix.samples) != original
        assert pix.pixel(2, 2) == (0, 0, 0)

        invert_pixmap(pix)
        assert bytes(pix.samples) == original


def test_render_page_is_opaque_rgb(make_pdf) -> None:
    pdf = make_pdf(pages=1, size=(120, 80))

    with open_document(pdf) as doc:
        pix = render_page(doc[0], scale=2.0)

    assert pix.n == 3
    assert pix.colorspace.name == fitz.csRGB.name
    assert (pix.width, pix.height) == (240, 160)
