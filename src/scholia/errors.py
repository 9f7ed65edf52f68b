"""Exception hierarchy for scholia.

Only contract violations raise. Empty scan results and unknown export
formats are ordinary return values, never errors.
"""

from typing import Any


class ScholiaError(Exception):
    """Base exception for all scholia errors.

    Attributes:
        message: Human-readable error message
        details: Additional context about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class NotAnAnnotationError(ScholiaError):
    """The construct at a position is not an annotation link."""

    def __init__(self, position: int, found: str | None = None):
        if found is None:
            message = f"No annotation link at offset {position}"
        else:
            message = f"Link at offset {position} is not an annotation: {found!r}"
        super().__init__(message, {"position": position, "found": found})
        self.position = position


class InvalidRangeError(ScholiaError):
    """A text span lies outside the document or is reversed."""

    def __init__(self, start: int, end: int, length: int):
        super().__init__(
            f"Invalid range {start}..{end} for document of length {length}",
            {"start": start, "end": end, "length": length},
        )


class ConfigError(ScholiaError):
    """Invalid configuration value."""
