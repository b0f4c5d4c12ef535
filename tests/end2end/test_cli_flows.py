from __future__ import annotations

import io
import os
import sys
import zipfile
from subprocess import run as subprocess_run  # noqa: S404
from typing import TYPE_CHECKING

import fitz

if TYPE_CHECKING:
    from pathlib import Path


def _run_cli(*args: str, cwd: Path):
    env = {**os.environ, "LOG_JSON": "false", "LOG_LEVEL": "WARNING"}
    return subprocess_run(  # noqa: S603
        [sys.executable, "-m", "fluxon.cli", *args],
        capture_output=True,
        text=True,
        check=False,
        cwd=cwd,
        env=env,
    )


def test_merge_writes_output_file(make_pdf, tmp_path: Path) -> None:
    first = make_pdf("first.pdf", pages=2)
    second = make_pdf("second.pdf", pages=1)
    out_dir = tmp_path / "out"

    result = _run_cli("merge", str(first), str(second), "--name", "combined", "--output-dir", str(out_dir), cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    merged = out_dir / "combined.pdf"
    assert str(merged) in result.stdout
    with fitz.open(merged) as doc:
        assert doc.page_count == 3


def test_split_writes_zip_to_default_output_dir(make_pdf, tmp_path: Path) -> None:
    pdf = make_pdf(pages=4)

    result = _run_cli("split", str(pdf), "--mode", "interval", "--interval", "3", cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    archive = tmp_path / "results" / "split_pdfs.zip"
    with zipfile.ZipFile(io.BytesIO(archive.read_bytes())) as zf:
        assert zf.namelist() == ["pages_1-3.pdf", "page_4.pdf"]


def test_info_prints_page_count(make_pdf, tmp_path: Path) -> None:
    pdf = make_pdf(pages=3)

    result = _run_cli("info", str(pdf), cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    assert "doc.pdf: 3 pages" in result.stdout


def test_missing_input_exits_with_error(tmp_path: Path) -> None:
    result = _run_cli("merge", str(tmp_path / "missing.pdf"), cwd=tmp_path)

    assert result.returncode == 1
