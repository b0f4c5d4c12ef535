"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class ImageFormat(_EnumMixin):
    """Raster output formats for image export."""

    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def extension(self) -> str:
        """File extension used for exported images."""
        return "jpg" if self is ImageFormat.JPEG else self.value

    @property
    def mime_type(self) -> str:
        """MIME type of encoded images."""
        return f"image/{self.value}"


class PaperSize(_EnumMixin):
    """Supported sheet sizes for N-up composition."""

    A4 = "A4"
    LETTER = "Letter"

    @property
    def millimeters(self) -> tuple[float, float]:
        """Portrait width and height in millimeters."""
        return _PAPER_MM[self]


_PAPER_MM: dict[PaperSize, tuple[float, float]] = {
    PaperSize.A4: (210.0, 297.0),
    PaperSize.LETTER: (215.9, 279.4),
}


class Orientation(_EnumMixin):
    """Sheet orientation."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class SplitMode(_EnumMixin):
    """Strategy used to cut a document into pieces."""

    ALL = "all"
    RANGES = "ranges"
    INTERVAL = "interval"


class ProgressPhase(_EnumMixin):
    """Phase reported alongside progress updates."""

    LOAD = "load"
    MERGE = "merge"
    INVERT = "invert"
    SPLIT = "split"
    RENDER = "render"
    COMPOSE = "compose"
    ARCHIVE = "archive"
