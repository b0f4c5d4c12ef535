from __future__ import annotations

import pytest

from fluxon.exceptions import LayoutError
from fluxon.nup import compute_sheet_layout, fit_to_cell, mm_to_px, paginate, resolve_preset
from fluxon.typing.enums import Orientation, PaperSize
from fluxon.typing.models import CellRect


def _layout(**overrides):
    params = {
        "paper": PaperSize.A4,
        "orientation": Orientation.PORTRAIT,
        "dpi": 72,
        "rows": 2,
        "cols": 2,
        "outer_margin_mm": 0.0,
        "inner_margin_mm": 0.0,
    }
    params.update(overrides)
    return compute_sheet_layout(**params)


def test_mm_to_px_rounds_to_whole_pixels() -> None:
    assert mm_to_px(210, 72) == 595
    assert mm_to_px(297, 72) == 842
    assert mm_to_px(25.4, 300) == 300


def test_layout_without_margins_splits_sheet_evenly() -> None:
    layout = _layout()

    assert (layout.sheet_width, layout.sheet_height) == (595, 842)
    assert (layout.cell_width, layout.cell_height) == (297, 421)
    assert [(cell.x, cell.y) for cell in layout.cells] == [(0, 0), (297, 0), (0, 421), (297, 421)]


def test_layout_with_margins_matches_default_ten_up_grid() -> None:
    layout = _layout(dpi=180, rows=5, cols=2, outer_margin_mm=5, inner_margin_mm=1)

    assert (layout.sheet_width, layout.sheet_height) == (1488, 2105)
    assert (layout.outer_margin, layout.inner_margin) == (35, 7)
    assert (layout.cell_width, layout.cell_height) == (705, 401)
    assert layout.cells[1] == CellRect(x=747, y=35, width=705, height=401)
    assert layout.cells[2] == CellRect(x=35, y=443, width=705, height=401)
    assert len(layout.cells) == layout.pages_per_sheet == 10


def test_landscape_swaps_sheet_dimensions() -> None:
    layout = _layout(orientation=Orientation.LANDSCAPE, paper=PaperSize.LETTER)

    assert layout.sheet_width > layout.sheet_height
    assert (layout.sheet_width, layout.sheet_height) == (mm_to_px(279.4, 72), mm_to_px(215.9, 72))


def test_cells_stay_inside_printable_area() -> None:
    layout = _layout(dpi=150, rows=3, cols=3, outer_margin_mm=10, inner_margin_mm=2)

    for cell in layout.cells:
        assert cell.x >= layout.outer_margin
        assert cell.y >= layout.outer_margin
        assert cell.x + cell.width <= layout.sheet_width - layout.outer_margin
        assert cell.y + cell.height <= layout.sheet_height - layout.outer_margin


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"rows": 0}, "at least 1"),
        ({"cols": -2}, "at least 1"),
        ({"dpi": 50}, "DPI must be at least 72"),
        ({"outer_margin_mm": -1.0}, "cannot be negative"),
        ({"outer_margin_mm": 120.0}, "no room for cells"),
        ({"rows": 2000}, "no room for cells"),
    ],
)
def test_layout_rejects_invalid_inputs(overrides: dict[str, object], message: str) -> None:
    with pytest.raises(LayoutError, match=message):
        _layout(**overrides)


def test_sheet_count_for_two_by_two_grid() -> None:
    layout = _layout()

    assert layout.sheet_count(4) == 1
    assert layout.sheet_count(5) == 2
    assert layout.sheet_count(0) == 0


def test_fit_to_cell_keeps_aspect_ratio_and_centers() -> None:
    cell = CellRect(x=10, y=20, width=100, height=100)

    assert fit_to_cell(200, 100, cell) == CellRect(x=10, y=45, width=100, height=50)
    assert fit_to_cell(30, 60, cell) == CellRect(x=35, y=20, width=50, height=100)


def test_fit_to_cell_rejects_empty_image() -> None:
    with pytest.raises(LayoutError, match="empty image"):
        fit_to_cell(0, 10, CellRect(x=0, y=0, width=10, height=10))


def test_paginate_fills_sheets_before_starting_a_new_one() -> None:
    assert paginate([1, 2, 3, 4], 4) == [[1, 2, 3, 4]]
    assert paginate([1, 2, 3, 4, 5], 4) == [[1, 2, 3, 4], [5]]
    assert paginate([], 4) == []


def test_resolve_preset() -> None:
    assert resolve_preset("10") == (5, 2)
    assert resolve_preset("4") == (2, 2)
    with pytest.raises(LayoutError, match="Unknown preset"):
        resolve_preset("7")
