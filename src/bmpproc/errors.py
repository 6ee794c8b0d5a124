from __future__ import annotations


class BmpProcError(Exception):
    """Base for every failure the package raises on purpose."""

    category = "Processing error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def render(self) -> str:
        return f"{self.category}: {self.message}"


class ParameterError(BmpProcError, ValueError):
    """Malformed command line."""

    category = "Not valid console input"


class FilterError(ParameterError):
    """Unknown filter name or bad filter parameters."""

    category = "Filters processing error"


class FormatError(BmpProcError, ValueError):
    """The bytes are not a bitmap this codec accepts."""

    category = "File processing error"


class ImageIOError(BmpProcError, OSError):
    """A path could not be opened for reading or writing."""

    category = "File processing error"
