"""
Data models for navigation results.

FunctionNode is the unit of the call graph. Nodes handed out by the
resolver are templates: the tracer never attaches them directly but
inserts a fresh copy per occurrence (``copy_at``), so two branches never
share a mutable node.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from navi.common.types import FunctionNodeDict, TraceResultDict

EXTERNAL_PATH = "external"
UNKNOWN_LANGUAGE = "unknown"


def current_timestamp() -> str:
    """Get current timestamp in ISO format."""
    return datetime.now().isoformat()


class Direction(str, Enum):
    """Which edges of the call graph a trace follows."""

    CALLERS = "callers"
    CALLEES = "callees"
    BOTH = "both"

    @property
    def includes_callers(self) -> bool:
        return self in (Direction.CALLERS, Direction.BOTH)

    @property
    def includes_callees(self) -> bool:
        return self in (Direction.CALLEES, Direction.BOTH)


@dataclass
class FunctionNode:
    """A function occurrence in a call-chain tree."""

    function_name: str
    file_path: str
    line: int  # 1-indexed; 0 for placeholders
    signature: str
    language: str
    depth: int = 0
    callers: list[FunctionNode] = field(default_factory=list)
    callees: list[FunctionNode] = field(default_factory=list)

    @classmethod
    def external(cls, function_name: str, depth: int = 0) -> FunctionNode:
        """Create a placeholder for a callee that resolves nowhere in the corpus."""
        return cls(
            function_name=function_name,
            file_path=EXTERNAL_PATH,
            line=0,
            signature=f"{function_name}()",
            language=UNKNOWN_LANGUAGE,
            depth=depth,
        )

    @property
    def is_external(self) -> bool:
        return self.file_path == EXTERNAL_PATH

    @property
    def location(self) -> tuple[str, str]:
        """(file_path, function_name) identity used by the cycle guard."""
        return (self.file_path, self.function_name)

    def copy_at(self, depth: int) -> FunctionNode:
        """Fresh childless copy of this node at a given depth."""
        return FunctionNode(
            function_name=self.function_name,
            file_path=self.file_path,
            line=self.line,
            signature=self.signature,
            language=self.language,
            depth=depth,
        )

    def iter_nodes(self) -> Iterator[FunctionNode]:
        """Pre-order traversal over this node and every descendant."""
        yield self
        for child in self.callers:
            yield from child.iter_nodes()
        for child in self.callees:
            yield from child.iter_nodes()

    def to_dict(self) -> FunctionNodeDict:
        """Convert to a nested dictionary."""
        return {
            "function_name": self.function_name,
            "file_path": self.file_path,
            "line": self.line,
            "signature": self.signature,
            "language": self.language,
            "depth": self.depth,
            "callers": [child.to_dict() for child in self.callers],
            "callees": [child.to_dict() for child in self.callees],
        }


@dataclass
class TraceResult:
    """Outcome of a call-chain trace.

    A trace whose root cannot be resolved is a normal result with
    ``root=None``; a trace cut short by its time budget keeps every node
    discovered so far and sets ``truncated``.
    """

    root: FunctionNode | None
    function_name: str
    search_path: str
    direction: Direction
    max_depth: int
    total_nodes: int = 0
    timestamp: str = field(default_factory=current_timestamp)
    truncated: bool = False

    @property
    def found(self) -> bool:
        return self.root is not None

    def to_dict(self) -> TraceResultDict:
        """Convert to ``{"report": tree | None, "metadata": {...}}``."""
        return {
            "report": self.root.to_dict() if self.root else None,
            "metadata": {
                "function_name": self.function_name,
                "search_path": self.search_path,
                "direction": self.direction.value,
                "max_depth": self.max_depth,
                "total_nodes": self.total_nodes,
                "timestamp": self.timestamp,
                "truncated": self.truncated,
                "found": self.found,
            },
        }


@dataclass(frozen=True)
class Scope:
    """An enclosing function or class found by the backward scan."""

    name: str
    kind: str  # 'function' or 'class'
    line: int  # 1-indexed
    is_abstract: bool = False


@dataclass(frozen=True)
class CallSite:
    """A single ``name(`` or ``qualifier.name(`` token inside a body."""

    name: str
    qualifier: str | None
    line_index: int  # 0-indexed, absolute within the file
    column: int  # 1-indexed
    context: str


# =============================================================================
# Supplementary operation results
# =============================================================================


@dataclass
class FunctionDefinition:
    """A located function definition with its surrounding details."""

    name: str
    file_path: str
    line: int
    column: int
    language: str
    signature: str
    kind: str = "declaration"
    documentation: str = ""
    parent_class: str = ""
    module: str = ""
    parameters: list[dict[str, Any]] = field(default_factory=list)
    return_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class FunctionReference:
    """A declaration or call of a matching function name."""

    function_name: str
    file_path: str
    line: int
    column: int
    context: str
    kind: str  # 'declaration' or 'call'

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class FunctionSearchResult:
    """Result of find_function."""

    function_name: str
    search_path: str
    definition: FunctionDefinition | None = None
    references: list[FunctionReference] = field(default_factory=list)
    timestamp: str = field(default_factory=current_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "report": {
                "definition": self.definition.to_dict() if self.definition else None,
                "references": [ref.to_dict() for ref in self.references],
            },
            "metadata": {
                "function_name": self.function_name,
                "search_path": self.search_path,
                "total_references": len(self.references),
                "has_definition": self.definition is not None,
                "timestamp": self.timestamp,
            },
        }


@dataclass
class FunctionCall:
    """A call made from inside a function body."""

    function_name: str
    qualifier: str | None
    called_from: str
    file_path: str
    line: int
    language: str
    context: str

    @property
    def qualified_name(self) -> str:
        return f"{self.qualifier}.{self.function_name}" if self.qualifier else self.function_name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class FunctionCallsResult:
    """Result of find_function_calls."""

    function_name: str
    search_path: str
    calls: list[FunctionCall] = field(default_factory=list)
    timestamp: str = field(default_factory=current_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "report": {"calls": [call.to_dict() for call in self.calls]},
            "metadata": {
                "function_name": self.function_name,
                "search_path": self.search_path,
                "total_calls": len(self.calls),
                "timestamp": self.timestamp,
            },
        }


@dataclass
class ClassContext:
    """The class enclosing a function."""

    name: str
    line: int
    methods: list[str] = field(default_factory=list)


@dataclass
class ModuleContext:
    """The file containing a function."""

    name: str
    path: str
    imports: list[str] = field(default_factory=list)
    exports: list[str] = field(default_factory=list)


@dataclass
class FunctionContext:
    """A function definition together with its class and module context."""

    definition: FunctionDefinition
    module: ModuleContext
    parent_class: ClassContext | None = None
    related_functions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class FunctionContextResult:
    """Result of get_function_context."""

    function_name: str
    search_path: str
    context: FunctionContext | None = None
    timestamp: str = field(default_factory=current_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "report": self.context.to_dict() if self.context else None,
            "metadata": {
                "function_name": self.function_name,
                "search_path": self.search_path,
                "has_context": self.context is not None,
                "timestamp": self.timestamp,
            },
        }


@dataclass
class ImplementedMethod:
    """A method declared in the body of an implementation."""

    name: str
    line: int
    signature: str
    file_path: str = ""


@dataclass
class Implementation:
    """A class, struct or impl block implementing an interface or extending a base type."""

    name: str
    file_path: str
    line: int
    language: str
    signature: str
    is_abstract: bool = False
    parent_interface: str = ""
    methods: list[ImplementedMethod] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class ImplementationSearchResult:
    """Result of find_implementations."""

    interface_name: str
    search_path: str
    include_abstract: bool = True
    implementations: list[Implementation] = field(default_factory=list)
    timestamp: str = field(default_factory=current_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "report": {"implementations": [impl.to_dict() for impl in self.implementations]},
            "metadata": {
                "interface_name": self.interface_name,
                "search_path": self.search_path,
                "total_implementations": len(self.implementations),
                "include_abstract": self.include_abstract,
                "timestamp": self.timestamp,
            },
        }


__all__ = [
    "EXTERNAL_PATH",
    "UNKNOWN_LANGUAGE",
    "current_timestamp",
    "Direction",
    "FunctionNode",
    "TraceResult",
    "Scope",
    "CallSite",
    "FunctionDefinition",
    "FunctionReference",
    "FunctionSearchResult",
    "FunctionCall",
    "FunctionCallsResult",
    "ClassContext",
    "ModuleContext",
    "FunctionContext",
    "FunctionContextResult",
    "ImplementedMethod",
    "Implementation",
    "ImplementationSearchResult",
]
