"""Pytest marker auto-assignment by folder and shared PDF fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import fitz
import pytest

from fluxon import logger

if TYPE_CHECKING:
    from collections.abc import Callable


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = Path(config.rootpath) / "tests" / marker
    target_dir = target_dir.resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(
                f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker assignment",
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing a PDF whose pages read `<label> <n>`."""

    def _make(
        name: str = "doc.pdf",
        *,
        pages: int = 3,
        size: tuple[float, float] = (595, 842),
        label: str = "Page",
    ) -> Path:
        path = tmp_path / name
        with fitz.open() as doc:
            for number in range(1, pages + 1):
                page = doc.new_page(width=size[0], height=size[1])
                page.insert_text((72, 72), f"{label} {number}", fontsize=24)
                page.draw_rect(fitz.Rect(72, 100, 72 + 20 * number, 160), color=(0, 0, 0), fill=(0, 0, 0))
            doc.save(path)
        return path

    return _make
