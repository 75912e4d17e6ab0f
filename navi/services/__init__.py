"""
Services layer - request validation and orchestration.

Modules:
- config_models: NaviSettings (pydantic-settings) and request models
- navigation: NavigationService wiring corpus, resolver and operations
"""

from __future__ import annotations

from .config_models import (
    FindFunctionCallsRequest,
    FindFunctionRequest,
    FindImplementationsRequest,
    GetFunctionContextRequest,
    NaviSettings,
    TraceCallChainRequest,
)
from .navigation import NavigationService

__all__ = [
    "NaviSettings",
    "TraceCallChainRequest",
    "FindFunctionRequest",
    "FindFunctionCallsRequest",
    "GetFunctionContextRequest",
    "FindImplementationsRequest",
    "NavigationService",
]
