"""
Exception hierarchy for NAVI.

Only request-level failures are exceptions. Outcomes of the navigation
engine itself (function not found, timeout truncation, unclosed body) are
reported as regular values so a request always degrades to a smaller but
well-formed result.
"""

from __future__ import annotations

__all__ = [
    "NaviError",
    "InvalidPathError",
    "InvalidRequestError",
]


class NaviError(Exception):
    """Base class for all NAVI errors."""


class InvalidPathError(NaviError):
    """Raised when a request's root path does not exist or is unreadable."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path does not exist: {path}")


class InvalidRequestError(NaviError):
    """Raised when request arguments fail validation."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)
