# backend/errors.py
from typing import List, Optional


class StackBuilderError(Exception):
    """Base class for every error raised by the stack builder."""


class UpstreamUnavailable(StackBuilderError):
    """The catalog API could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamDataError(StackBuilderError):
    """The catalog API answered, but reported query errors or sent a malformed payload."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class InvariantViolation(StackBuilderError, ValueError):
    """A caller broke a selection-state contract; the state was left unchanged."""
