"""Failures a conversion can report to its caller."""

from enum import Enum


class ErrorKind(Enum):
    INVALID_DIMENSIONS = "invalid_dimensions"
    BUFFER_UNAVAILABLE = "buffer_unavailable"
    DEGENERATE_SAMPLING = "degenerate_sampling"


class ConversionError(Exception):
    """Base class for every failure raised by the conversion pipeline.

    ``kind`` lets callers branch on the failure without importing each
    subclass; nothing raised from here is retried internally.
    """

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class InvalidDimensions(ConversionError):
    """Source width or height is zero."""

    kind = ErrorKind.INVALID_DIMENSIONS


class BufferUnavailable(ConversionError):
    """Pixel data could not be read."""

    kind = ErrorKind.BUFFER_UNAVAILABLE


class DegenerateSampling(ConversionError):
    """Resolution too low to produce a single output cell."""

    kind = ErrorKind.DEGENERATE_SAMPLING
