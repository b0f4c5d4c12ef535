from dataclasses import FrozenInstanceError

import pytest

from fluxon.exceptions import (
    ArchiveError,
    DependencyError,
    DocumentError,
    LayoutError,
    PackageError,
    PageRangeError,
    RenderError,
    SettingsError,
)


def test_root_exception_hierarchy() -> None:
    for error_cls in (
        ArchiveError,
        DependencyError,
        DocumentError,
        LayoutError,
        PageRangeError,
        RenderError,
        SettingsError,
    ):
        assert issubclass(error_cls, PackageError)


def test_page_range_error_includes_offending_value() -> None:
    assert str(PageRangeError(message="Malformed page range", value="3-x")) == "Malformed page range: '3-x'"
    assert str(PageRangeError(message="No valid pages to convert")) == "No valid pages to convert"


def test_settings_error_message() -> None:
    assert str(SettingsError()) == "Failed to load settings"
    assert str(SettingsError(exc=ValueError("boom"))) == "Failed to load settings: boom"


def test_exceptions_are_immutable() -> None:
    error = ArchiveError(message="No files to add to the archive")

    with pytest.raises(FrozenInstanceError):
        error.message = "changed"
