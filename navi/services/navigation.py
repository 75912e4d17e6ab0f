"""
Navigation service for NAVI.

Validates requests, checks the search root, builds the per-request corpus
and resolution cache, and calls the navigation module functions. Every
request gets fresh state; nothing is shared between requests except the
immutable language registry.

Used by the CLI and by library callers.

Usage:
    from navi.services.navigation import NavigationService

    service = NavigationService()
    result = service.trace_call_chain({
        "function_name": "handle_request",
        "path": "/path/to/src",
        "direction": "callees",
        "max_depth": 3,
    })
    print(result.to_dict()["metadata"]["total_nodes"])
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from navi.adapters.corpus import Corpus
from navi.common.exceptions import InvalidPathError, InvalidRequestError
from navi.common.logging import RunLogger, setup_logging_bridge, teardown_logging_bridge
from navi.common.types import Clock
from navi.modules.navigation import (
    CallChainTracer,
    FunctionCallsResult,
    FunctionContextResult,
    FunctionResolver,
    FunctionSearchResult,
    ImplementationSearchResult,
    ResolutionCache,
    TraceResult,
    find_function,
    find_function_calls,
    find_implementations,
    get_function_context,
)

from .config_models import (
    FindFunctionCallsRequest,
    FindFunctionRequest,
    FindImplementationsRequest,
    GetFunctionContextRequest,
    NaviSettings,
    TraceCallChainRequest,
)

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)

_BRIDGED_LOGGERS = ["navi"]


class NavigationService:
    """Entry point for all navigation operations."""

    def __init__(self, settings: NaviSettings | None = None, clock: Clock = time.monotonic):
        """
        Initialize the service.

        Args:
            settings: Engine settings; loaded from environment/.env when omitted
            clock: Monotonic clock used for trace time budgets
        """
        load_dotenv()
        self.settings = settings or NaviSettings()
        self.clock = clock

    # =========================================================================
    # Operations
    # =========================================================================

    def trace_call_chain(self, request: TraceCallChainRequest | dict[str, Any]) -> TraceResult:
        """
        Trace the callers and/or callees of a function.

        Raises:
            InvalidRequestError: If the request fails validation
            InvalidPathError: If the search root does not exist
        """
        req = self._validate(TraceCallChainRequest, request)
        self._check_path(req.path)
        timeout_ms = req.timeout_ms if req.timeout_ms is not None else self.settings.timeout_ms
        max_depth = req.max_depth or self.settings.default_max_depth

        with self._run_logging("trace") as run_logger:
            corpus = self._corpus(req.path, req.languages)
            tracer = CallChainTracer(
                corpus,
                self._resolver(corpus),
                max_depth=max_depth,
                timeout_ms=timeout_ms,
                include_external=req.include_external,
                clock=self.clock,
                run_logger=run_logger,
                body_fallback_lines=self.settings.body_fallback_lines,
                signature_lines=self.settings.signature_lines,
            )
            result = tracer.trace(req.function_name, req.direction)

        logger.info(
            "Traced %s (%s, depth %d): %d nodes%s",
            req.function_name,
            req.direction.value,
            max_depth,
            result.total_nodes,
            " (truncated)" if result.truncated else "",
        )
        return result

    def find_function(self, request: FindFunctionRequest | dict[str, Any]) -> FunctionSearchResult:
        """
        Find a function's definition and references.

        Raises:
            InvalidRequestError: If the request fails validation
            InvalidPathError: If the search root does not exist
        """
        req = self._validate(FindFunctionRequest, request)
        self._check_path(req.path)

        with self._run_logging("find"):
            corpus = self._corpus(req.path, req.languages)
            return find_function(
                self._resolver(corpus),
                req.function_name,
                exact_match=req.exact_match,
                include_references=req.include_references,
                max_results=req.max_results or self.settings.max_results,
            )

    def find_function_calls(
        self, request: FindFunctionCallsRequest | dict[str, Any]
    ) -> FunctionCallsResult:
        """
        List the calls made inside a function.

        Raises:
            InvalidRequestError: If the request fails validation
            InvalidPathError: If the search root does not exist
        """
        req = self._validate(FindFunctionCallsRequest, request)
        self._check_path(req.path)

        with self._run_logging("calls"):
            corpus = self._corpus(req.path, req.languages)
            return find_function_calls(
                self._resolver(corpus),
                req.function_name,
                include_builtins=req.include_builtins,
                max_results=req.max_results or self.settings.max_results,
                body_fallback_lines=self.settings.body_fallback_lines,
            )

    def get_function_context(
        self, request: GetFunctionContextRequest | dict[str, Any]
    ) -> FunctionContextResult:
        """
        Get a function's definition with its class and module context.

        Raises:
            InvalidRequestError: If the request fails validation
            InvalidPathError: If the search root does not exist
        """
        req = self._validate(GetFunctionContextRequest, request)
        self._check_path(req.path)

        with self._run_logging("context"):
            corpus = self._corpus(req.path, req.languages)
            context = get_function_context(
                self._resolver(corpus),
                req.function_name,
                include_parent_class=req.include_parent_class,
                include_documentation=req.include_documentation,
            )
        return FunctionContextResult(
            function_name=req.function_name,
            search_path=corpus.root_path,
            context=context,
        )

    def find_implementations(
        self, request: FindImplementationsRequest | dict[str, Any]
    ) -> ImplementationSearchResult:
        """
        Find the types implementing an interface or extending a base type.

        Raises:
            InvalidRequestError: If the request fails validation
            InvalidPathError: If the search root does not exist
        """
        req = self._validate(FindImplementationsRequest, request)
        self._check_path(req.path)

        with self._run_logging("implementations"):
            result = find_implementations(
                self._corpus(req.path, req.languages),
                req.interface_name,
                include_abstract=req.include_abstract,
                max_results=req.max_results or self.settings.max_results,
                signature_lines=self.settings.signature_lines,
                body_fallback_lines=self.settings.body_fallback_lines,
            )

        logger.info("Found %d implementations of %s", len(result.implementations), req.interface_name)
        return result

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _validate(model: type[RequestT], request: RequestT | dict[str, Any]) -> RequestT:
        if isinstance(request, model):
            return request
        try:
            return model.model_validate(request)
        except ValidationError as e:
            errors = [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
            details = "; ".join(f"{err['field']}: {err['message']}" for err in errors)
            raise InvalidRequestError(f"Invalid request: {details}", errors) from e

    @staticmethod
    def _check_path(path: str) -> None:
        if not Path(path).exists():
            raise InvalidPathError(path)

    def _corpus(self, path: str, languages: list[str] | None) -> Corpus:
        return Corpus(
            path,
            languages=languages,
            exclude_patterns=self.settings.exclude_patterns,
            include_hidden=self.settings.include_hidden,
            max_file_size=self.settings.max_file_size,
        )

    def _resolver(self, corpus: Corpus) -> FunctionResolver:
        return FunctionResolver(corpus, ResolutionCache(), self.settings.signature_lines)

    @contextmanager
    def _run_logging(self, operation: str) -> Iterator[RunLogger | None]:
        """Write a JSONL run log for the duration of a request, when enabled."""
        if not self.settings.log_runs:
            yield None
            return

        run_id = f"{operation}_{uuid.uuid4().hex[:8]}"
        run_logger = RunLogger(run_id=run_id, logs_dir=self.settings.logs_dir)
        handler = setup_logging_bridge(run_logger, logger_names=_BRIDGED_LOGGERS)
        logger.debug("Run log: %s", run_logger.get_log_path())
        try:
            yield run_logger
        finally:
            teardown_logging_bridge(handler, logger_names=_BRIDGED_LOGGERS)


__all__ = [
    "NavigationService",
]
