from __future__ import annotations

import fitz
import pytest

from fluxon.exceptions import DocumentError
from fluxon.merge import invert_document, merge_documents, run_merge
from fluxon.typing.models import MergeRequest


def _page_texts(data: bytes) -> list[str]:
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [page.get_text().strip() for page in doc]


def test_merge_single_file_keeps_pages(make_pdf) -> None:
    pdf = make_pdf(pages=3)

    merged = merge_documents([pdf])

    assert _page_texts(merged) == ["Page 1", "Page 2", "Page 3"]


def test_merge_keeps_input_order(make_pdf) -> None:
    first = make_pdf("first.pdf", pages=2, label="First")
    second = make_pdf("second.pdf", pages=1, label="Second")
    updates = []

    merged = merge_documents([second, first], on_progress=updates.append)

    assert _page_texts(merged) == ["Second 1", "First 1", "First 2"]
    assert [update.status for update in updates][-2:] == ["Merging: 1/2 files", "Merging: 2/2 files"]
    assert updates[-1].progress == 100


def test_merge_rejects_empty_input() -> None:
    with pytest.raises(DocumentError, match="No files provided"):
        merge_documents([])


def test_merge_rejects_broken_input(make_pdf, tmp_path) -> None:
    good = make_pdf(pages=1)
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"not a pdf")

    with pytest.raises(DocumentError, match="Failed to load PDF"):
        merge_documents([good, broken])


def test_invert_document_keeps_page_sizes(make_pdf) -> None:
    portrait = make_pdf("portrait.pdf", pages=1)
    landscape = make_pdf("landscape.pdf", pages=1, size=(842, 595))
    merged = merge_documents([portrait, landscape])

    inverted = invert_document(merged, scale=1.0)

    with fitz.open(stream=inverted, filetype="pdf") as doc:
        assert doc.page_count == 2
        assert [(round(page.rect.width), round(page.rect.height)) for page in doc] == [(595, 842), (842, 595)]
        assert len(doc[0].get_images()) == 1
        pix = doc[0].get_pixmap(colorspace=fitz.csRGB, alpha=False)
        background = pix.pixel(10, 10)
        filled = pix.pixel(80, 130)
    assert max(background) < 60
    assert min(filled) > 195


def test_run_merge_names_inverted_output(make_pdf) -> None:
    pdf = make_pdf(pages=2)

    plain = run_merge(MergeRequest(inputs=[pdf], output_name="my report"))
    inverted = run_merge(MergeRequest(inputs=[pdf], invert=True, invert_scale=1.0))

    assert plain.filename == "my_report.pdf"
    assert plain.page_numbers == [1, 2]
    assert plain.data.startswith(b"%PDF")
    assert inverted.filename == "merged_pdf_inverted.pdf"
    assert inverted.page_numbers == [1, 2]
