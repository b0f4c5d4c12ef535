"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class DocumentError(PackageError):
    """Raised when an input PDF cannot be opened or holds no pages."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class PageRangeError(PackageError):
    """Raised when a page selection is malformed or selects nothing."""

    message: str
    value: str | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.value!r}" if self.value is not None else self.message


@dataclass(frozen=True)
class LayoutError(PackageError):
    """Raised when an N-up sheet layout cannot be built."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class RenderError(PackageError):
    """Raised when a page fails to render or encode."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class ArchiveError(PackageError):
    """Raised when output artifacts cannot be packaged."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message
