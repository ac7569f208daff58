"""
Error types shared by the catalog, fetcher and pipeline.

Also provides small helpers for turning core errors into HTTP errors at the
route boundary.
"""

from typing import TYPE_CHECKING, TypeVar

from fastapi import HTTPException

if TYPE_CHECKING:
    from .sources import SourceConfig

T = TypeVar("T")


class ValidationError(ValueError):
    """Raised when an interest or source fails sanitization."""
    pass


class FetchError(Exception):
    """Raised when a feed cannot be downloaded or parsed."""

    def __init__(self, source: "SourceConfig", cause: BaseException | str):
        self.source = source
        self.cause = cause
        message = str(cause) or cause.__class__.__name__
        super().__init__(message)

    def warning(self) -> str:
        """Human-readable warning for the summary response."""
        return f"could not read {self.source.name}: {self}"


def require_non_empty(values: list[T], detail: str) -> list[T]:
    """
    Raise 400 if the list is empty, otherwise return it.

    Usage:
        interests = require_non_empty(interests, "Select at least one interest")
    """
    if not values:
        raise HTTPException(status_code=400, detail=detail)
    return values
