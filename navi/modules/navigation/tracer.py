"""
Call-chain tracer - builds a bounded caller/callee tree around a function.

Expansion at a node of depth ``d`` proceeds in a fixed order:

1. ``d >= max_depth``: the node is a leaf.
2. The time budget is spent: the node is a leaf and the result is marked
   truncated. Every sibling re-checks on entry, so the rest of the tree
   stops as well while keeping what was already discovered.
3. The visited key ``(file_path, function_name, d)`` is already on the
   current path: the node is a leaf. Depth grows by one per edge, so no
   ancestor can hold the same key: in a trace started at depth 0 this
   check never fires and is not the effective cycle guard.
4. Otherwise children are discovered and attached. A child whose
   ``(file_path, function_name)`` already appears among its ancestors is
   attached but not expanded. This ancestor guard is what cuts every
   cycle, direct recursion aside (self-calls are never edges).

The visited path is an immutable value threaded down the recursion, so
leaving a branch needs no cleanup. The same function may appear in
unrelated branches; diamonds yield repeated subtrees.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from contextlib import nullcontext
from dataclasses import dataclass

from navi.adapters.corpus import Corpus
from navi.adapters.languages import get_pattern_set
from navi.common.types import Clock, RunLoggerProtocol, StepContextProtocol

from .base import DEFAULT_SIGNATURE_LINES, count_nodes, extract_signature, is_comment_line
from .body import DEFAULT_FALLBACK_LINES, extract_calls, isolate_body
from .models import Direction, FunctionNode, TraceResult
from .resolver import FunctionResolver, ResolutionCache
from .scope import enclosing_function

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5
DEFAULT_TIMEOUT_MS = 30_000

VisitedKey = tuple[str, str, int]


@dataclass(frozen=True)
class VisitedPath:
    """Visited keys and function locations on one root-to-node path."""

    keys: frozenset[VisitedKey] = frozenset()
    locations: frozenset[tuple[str, str]] = frozenset()

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def extend(self, node: FunctionNode, depth: int) -> VisitedPath:
        """Return a new path that also contains ``node`` at ``depth``."""
        return VisitedPath(
            keys=self.keys | {(node.file_path, node.function_name, depth)},
            locations=self.locations | {node.location},
        )

    def has_ancestor(self, node: FunctionNode) -> bool:
        """Check whether the node's function is already on this path."""
        return node.location in self.locations


@dataclass
class _TraceRun:
    """Mutable bookkeeping for one trace() call."""

    started: float
    truncated: bool = False
    cycles: int = 0


class CallChainTracer:
    """Traces callers and callees of a function through one corpus."""

    def __init__(
        self,
        corpus: Corpus,
        resolver: FunctionResolver | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        include_external: bool = False,
        clock: Clock = time.monotonic,
        run_logger: RunLoggerProtocol | None = None,
        body_fallback_lines: int = DEFAULT_FALLBACK_LINES,
        signature_lines: int = DEFAULT_SIGNATURE_LINES,
    ) -> None:
        """
        Initialize the tracer.

        Args:
            corpus: Files to search (already language-filtered)
            resolver: Resolver bound to the same corpus; a fresh one with its
                own ResolutionCache is created when omitted
            max_depth: Maximum number of edges from the root
            timeout_ms: Time budget for the whole trace
            include_external: Keep builtin/denylisted callees
            clock: Monotonic clock in seconds
            run_logger: Optional structured run logger
            body_fallback_lines: Cap for brace bodies that never close
            signature_lines: Maximum lines joined into a signature
        """
        self.corpus = corpus
        self.resolver = resolver or FunctionResolver(corpus, ResolutionCache(), signature_lines)
        self.max_depth = max_depth
        self.timeout_ms = timeout_ms
        self.include_external = include_external
        self.clock = clock
        self.run_logger = run_logger
        self.body_fallback_lines = body_fallback_lines
        self.signature_lines = signature_lines

    def trace(self, function_name: str, direction: Direction = Direction.BOTH) -> TraceResult:
        """
        Trace the call chain around a function.

        Args:
            function_name: Exact name of the root function
            direction: Which edges to follow

        Returns:
            TraceResult; ``found`` is False when the root does not resolve
        """
        direction = Direction(direction)
        run = _TraceRun(started=self.clock())

        self._phase_start("resolution", f"Resolving {function_name}")
        template = self.resolver.resolve(function_name)
        self._phase_complete("resolution", stats={"found": int(template is not None)})

        result = TraceResult(
            root=None,
            function_name=function_name,
            search_path=self.corpus.root_path,
            direction=direction,
            max_depth=self.max_depth,
        )
        if template is None:
            logger.info("Function %s not found under %s", function_name, self.corpus.root_path)
            return result

        root = template.copy_at(0)
        for phase, enabled in (
            (Direction.CALLERS, direction.includes_callers),
            (Direction.CALLEES, direction.includes_callees),
        ):
            if not enabled:
                continue
            self._phase_start(phase.value, f"Expanding {phase.value} of {function_name}")
            try:
                self._expand(root, 0, VisitedPath(), phase, run)
            except Exception as e:
                if self.run_logger:
                    self.run_logger.phase_error(phase.value, str(e))
                raise
            self._phase_complete(
                phase.value,
                stats={"nodes": count_nodes(root), "cycles": run.cycles, "truncated": int(run.truncated)},
            )

        result.root = root
        result.total_nodes = count_nodes(root)
        result.truncated = run.truncated
        return result

    # =========================================================================
    # Recursion
    # =========================================================================

    def _expand(
        self,
        node: FunctionNode,
        depth: int,
        path: VisitedPath,
        direction: Direction,
        run: _TraceRun,
    ) -> None:
        if depth >= self.max_depth:
            return
        if self._out_of_time(node, run):
            return
        if (node.file_path, node.function_name, depth) in path:
            self._record_cycle(node, depth, run)
            return

        child_path = path.extend(node, depth)
        if direction is Direction.CALLERS:
            templates = self.find_callers(node)
            children = node.callers
        else:
            templates = self.find_callees(node)
            children = node.callees

        for template in templates:
            child = template.copy_at(depth + 1)
            children.append(child)
            if child.is_external:
                continue
            if child_path.has_ancestor(child):
                self._record_cycle(child, depth + 1, run)
                continue
            self._expand(child, depth + 1, child_path, direction, run)

    def _out_of_time(self, node: FunctionNode, run: _TraceRun) -> bool:
        elapsed_ms = int((self.clock() - run.started) * 1000)
        if elapsed_ms < self.timeout_ms:
            return False
        if not run.truncated:
            run.truncated = True
            logger.warning(
                "Trace timeout after %dms while expanding %s; result truncated",
                elapsed_ms,
                node.function_name,
            )
            if self.run_logger:
                self.run_logger.detail_timeout(node.function_name, elapsed_ms)
        return True

    def _record_cycle(self, node: FunctionNode, depth: int, run: _TraceRun) -> None:
        run.cycles += 1
        logger.debug("Cycle: %s:%s reappears at depth %d", node.file_path, node.function_name, depth)
        if self.run_logger:
            self.run_logger.detail_cycle(node.file_path, node.function_name, depth)

    # =========================================================================
    # Edge discovery
    # =========================================================================

    def find_callers(self, node: FunctionNode) -> list[FunctionNode]:
        """
        Find the functions containing a call to ``node`` across the corpus.

        Multiple call sites within one enclosing function collapse into one
        caller. Call sites enclosed by the target itself (its declaration
        line, recursion) are ignored.

        Returns:
            Depth-0 caller nodes in corpus order
        """
        callers: list[FunctionNode] = []
        seen: set[tuple[str, str]] = set()
        files_scanned = 0

        with self._step("scan_callers", f"Scanning corpus for calls to {node.function_name}") as step:
            for source_file in self.corpus:
                lines = self.corpus.read_lines(source_file)
                if not lines:
                    continue
                files_scanned += 1
                pattern_set = get_pattern_set(source_file.language)
                call_rules = pattern_set.compile_calls(node.function_name)

                for i, line in enumerate(lines):
                    if not any(rule.match(line) for rule in call_rules):
                        continue
                    if is_comment_line(line, pattern_set):
                        continue
                    scope = enclosing_function(lines, i, source_file.language)
                    if scope is None or scope.name == node.function_name:
                        continue
                    key = (source_file.relative_path, scope.name)
                    if key in seen:
                        continue
                    seen.add(key)
                    callers.append(
                        FunctionNode(
                            function_name=scope.name,
                            file_path=source_file.relative_path,
                            line=scope.line,
                            signature=extract_signature(lines, scope.line - 1, self.signature_lines),
                            language=source_file.language,
                        )
                    )
            if step:
                step.items_processed = files_scanned
                step.items_created = len(callers)
        return callers

    def find_callees(self, node: FunctionNode) -> list[FunctionNode]:
        """
        Find the functions called from the body of ``node``.

        The body is isolated from the node's own declaration line. Each
        distinct callee name is resolved across the corpus; names that do
        not resolve become external placeholders.

        Returns:
            Depth-0 callee nodes in order of first call
        """
        if node.is_external:
            return []
        source_file = self.corpus.get_file(node.file_path)
        if source_file is None:
            return []
        lines = self.corpus.read_lines(source_file)
        if not lines:
            return []

        pattern_set = get_pattern_set(source_file.language)
        start = node.line - 1
        with self._step("isolate_body", f"Isolating body of {node.function_name}") as step:
            end, closed = isolate_body(lines, start, pattern_set.block_style, self.body_fallback_lines)
            if not closed:
                logger.debug("Using fallback body bounds for %s in %s", node.function_name, node.file_path)

            sites = extract_calls(
                lines[start : end + 1],
                source_file.language,
                include_builtins=self.include_external,
                exclude=(node.function_name,),
                start_line=start,
            )
            if step:
                step.items_processed = end - start + 1
                step.items_created = len(sites)
                step.stats = {"file_path": node.file_path, "end_line": end + 1, "closed": closed}
        callees: list[FunctionNode] = []
        for site in sites:
            resolved = self.resolver.resolve(site.name)
            callees.append(resolved if resolved is not None else FunctionNode.external(site.name))
        return callees

    # =========================================================================
    # Run logging
    # =========================================================================

    def _phase_start(self, phase: str, message: str) -> None:
        if self.run_logger:
            self.run_logger.phase_start(phase, message)

    def _phase_complete(self, phase: str, stats: dict[str, int]) -> None:
        if self.run_logger:
            self.run_logger.phase_complete(phase, stats=stats)

    def _step(self, step: str, message: str) -> StepContextProtocol | nullcontext[None]:
        if self.run_logger:
            return self.run_logger.step_start(step, message)
        return nullcontext()


def trace_call_chain(
    function_name: str,
    root_path: str,
    direction: Direction | str = Direction.BOTH,
    max_depth: int = DEFAULT_MAX_DEPTH,
    languages: Iterable[str] | None = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    include_external: bool = False,
    *,
    exclude_patterns: Iterable[str] | None = None,
    clock: Clock = time.monotonic,
    run_logger: RunLoggerProtocol | None = None,
) -> TraceResult:
    """
    Trace a call chain with a fresh corpus and resolution cache.

    Args:
        function_name: Exact name of the root function
        root_path: Directory (or file) to search
        direction: 'callers', 'callees' or 'both'
        max_depth: Maximum number of edges from the root
        languages: Optional language allow-list
        timeout_ms: Time budget in milliseconds
        include_external: Keep builtin/denylisted callees
        exclude_patterns: Override the default exclude patterns
        clock: Monotonic clock in seconds
        run_logger: Optional structured run logger

    Returns:
        TraceResult
    """
    corpus = Corpus(root_path, languages=languages, exclude_patterns=exclude_patterns)
    tracer = CallChainTracer(
        corpus,
        FunctionResolver(corpus, ResolutionCache()),
        max_depth=max_depth,
        timeout_ms=timeout_ms,
        include_external=include_external,
        clock=clock,
        run_logger=run_logger,
    )
    return tracer.trace(function_name, Direction(direction))


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_TIMEOUT_MS",
    "VisitedPath",
    "CallChainTracer",
    "trace_call_chain",
]
