from __future__ import annotations

import pytest

from fluxon.formatting import format_file_size, sanitize_output_name


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (1024**2, "1.0 MB"),
        (5 * 1024**3, "5.0 GB"),
        (2 * 1024**5, "2048.0 TB"),
    ],
)
def test_format_file_size(size: int, expected: str) -> None:
    assert format_file_size(size) == expected


def test_format_file_size_rejects_negative_sizes() -> None:
    with pytest.raises(ValueError, match="cannot be negative"):
        format_file_size(-1)


def test_sanitize_output_name_replaces_whitespace() -> None:
    assert sanitize_output_name("  my merged   file ", "merged_pdf") == "my_merged_file"


@pytest.mark.parametrize("name", [None, "", "   "])
def test_sanitize_output_name_falls_back_to_default(name: str | None) -> None:
    assert sanitize_output_name(name, "merged_pdf") == "merged_pdf"
