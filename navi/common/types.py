"""
Shared type definitions for navigation modules.

This module provides TypedDicts for the dictionaries returned to callers
(CLI, service consumers) and Protocols for the collaborators the engine
accepts, so modules stay decoupled from concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypedDict

# =============================================================================
# Result Types
# =============================================================================


class FunctionNodeDict(TypedDict):
    """Serialized call-graph node."""

    function_name: str
    file_path: str
    line: int
    signature: str
    language: str
    depth: int
    callers: list[FunctionNodeDict]
    callees: list[FunctionNodeDict]


class TraceMetadata(TypedDict):
    """Metadata attached to every call-chain trace result."""

    function_name: str
    search_path: str
    direction: str
    max_depth: int
    total_nodes: int
    timestamp: str
    truncated: bool
    found: bool


class TraceResultDict(TypedDict):
    """Serialized call-chain trace: tree (or None when not found) plus metadata."""

    report: FunctionNodeDict | None
    metadata: TraceMetadata


# =============================================================================
# Protocols
# =============================================================================


class StepContextProtocol(Protocol):
    """Protocol for step context managers."""

    items_processed: int
    items_created: int
    stats: dict[str, Any] | None

    def __enter__(self) -> StepContextProtocol: ...

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...

    def complete(self, message: str = "") -> None:
        """Mark step as complete."""
        ...

    def error(self, error: str, message: str = "") -> None:
        """Mark step as failed."""
        ...


class RunLoggerProtocol(Protocol):
    """Protocol for structured run loggers accepted by the tracer."""

    def phase_start(self, phase: str, message: str = "") -> None:
        """Log the start of a phase."""
        ...

    def phase_complete(
        self, phase: str, message: str = "", stats: dict[str, Any] | None = None
    ) -> None:
        """Log the completion of a phase."""
        ...

    def phase_error(self, phase: str, error: str, message: str = "") -> None:
        """Log a phase error."""
        ...

    def step_start(self, step: str, message: str = "") -> StepContextProtocol:
        """Log the start of a step and return a context manager."""
        ...

    def detail_cycle(self, file_path: str, function_name: str, depth: int) -> None:
        """Log a cycle guard hit."""
        ...

    def detail_timeout(self, function_name: str, elapsed_ms: int) -> None:
        """Log a timeout truncation."""
        ...


Clock = Callable[[], float]
"""Monotonic clock returning seconds, injectable for deterministic timeouts."""


__all__ = [
    # Results
    "FunctionNodeDict",
    "TraceMetadata",
    "TraceResultDict",
    # Protocols
    "StepContextProtocol",
    "RunLoggerProtocol",
    "Clock",
]
