"""
Navigation module - lexical code navigation over a source corpus.

Architecture:
- models.py: FunctionNode, TraceResult and supplementary result types
- base.py: Line-level helpers (signatures, comments, declaration matching)
- resolver.py: FunctionResolver and the per-request ResolutionCache
- scope.py: Backward scan for the enclosing function/class
- body.py: Body isolation and call extraction
- tracer.py: Depth-, time- and cycle-bounded call-chain tracing
- references.py, calls.py, context.py, implementations.py: find-function,
  function-calls, function-context and find-implementations operations

Usage:
    from navi.modules.navigation import trace_call_chain

    result = trace_call_chain("handle_request", "/path/to/src", direction="callees", max_depth=3)
    print(result.to_dict()["metadata"]["total_nodes"])

Nothing in this package is fatal: not-found, timeouts and unclosed bodies
are reported in the returned values.
"""

from __future__ import annotations

from .base import count_nodes, extract_signature
from .body import extract_calls, isolate_body, iter_call_sites
from .calls import find_function_calls
from .context import get_function_context
from .implementations import find_implementations
from .models import (
    CallSite,
    ClassContext,
    Direction,
    FunctionCall,
    FunctionCallsResult,
    FunctionContext,
    FunctionContextResult,
    FunctionDefinition,
    FunctionNode,
    FunctionReference,
    FunctionSearchResult,
    Implementation,
    ImplementationSearchResult,
    ImplementedMethod,
    ModuleContext,
    Scope,
    TraceResult,
)
from .references import find_function, name_matcher
from .resolver import FunctionResolver, ResolutionCache
from .scope import enclosing_class, enclosing_function, enclosing_scope
from .tracer import CallChainTracer, VisitedPath, trace_call_chain

__all__ = [
    # Models
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
    # Engine
    "ResolutionCache",
    "FunctionResolver",
    "enclosing_scope",
    "enclosing_function",
    "enclosing_class",
    "isolate_body",
    "iter_call_sites",
    "extract_calls",
    "extract_signature",
    "count_nodes",
    "VisitedPath",
    "CallChainTracer",
    "trace_call_chain",
    # Supplementary operations
    "find_function",
    "name_matcher",
    "find_function_calls",
    "get_function_context",
    "find_implementations",
]
