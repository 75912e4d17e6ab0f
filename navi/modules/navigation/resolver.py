"""
Function resolver - locates function definitions across a corpus.

Resolution is a linear scan: files in corpus order, lines in ascending
order, declaration rules in registry order. The first declaration line
wins, which makes the result deterministic for a given corpus. Results,
including negative ones, are memoized in a ResolutionCache that lives for
exactly one request.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from navi.adapters.corpus import Corpus, SourceFile
from navi.adapters.languages import RuleKind, get_pattern_set

from .base import DEFAULT_SIGNATURE_LINES, extract_signature, first_declaration, is_comment_line
from .models import FunctionNode

logger = logging.getLogger(__name__)

_MISSING = object()


class ResolutionCache:
    """Per-request memo of ``(function_name, root_path) -> FunctionNode | None``.

    Never shared between requests: a fresh cache is created for every
    request and discarded with it.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], FunctionNode | None] = {}
        self.hits = 0
        self.misses = 0

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, function_name: str, root_path: str) -> object:
        """Return the cached entry, or ``MISSING`` when the key was never resolved."""
        entry = self._entries.get((function_name, root_path), _MISSING)
        if entry is _MISSING:
            self.misses += 1
        else:
            self.hits += 1
        return entry

    def store(self, function_name: str, root_path: str, node: FunctionNode | None) -> None:
        self._entries[(function_name, root_path)] = node


MISSING = _MISSING


@dataclass(frozen=True)
class DeclarationMatch:
    """A declaration line found in the corpus."""

    source_file: SourceFile
    line_index: int  # 0-indexed
    column: int  # 1-indexed
    name: str
    kind: RuleKind


class FunctionResolver:
    """Resolves function names to definitions within one corpus."""

    def __init__(
        self,
        corpus: Corpus,
        cache: ResolutionCache | None = None,
        signature_lines: int = DEFAULT_SIGNATURE_LINES,
    ) -> None:
        self.corpus = corpus
        self.cache = cache if cache is not None else ResolutionCache()
        self.signature_lines = signature_lines

    def resolve(self, function_name: str) -> FunctionNode | None:
        """
        Find the first definition of a function in the corpus.

        The returned node is shared through the cache; callers that attach
        it to a tree must insert ``node.copy_at(depth)`` instead.

        Args:
            function_name: Exact function name

        Returns:
            FunctionNode at depth 0, or None if no declaration matches
        """
        root_path = self.corpus.root_path
        cached = self.cache.lookup(function_name, root_path)
        if cached is not MISSING:
            return cached  # type: ignore[return-value]

        node = None
        for match in self.iter_declarations(function_name):
            node = self.node_for(match)
            break

        if node is None:
            logger.debug("No definition found for %s under %s", function_name, root_path)
        self.cache.store(function_name, root_path, node)
        return node

    def node_for(self, match: DeclarationMatch) -> FunctionNode:
        """Build a depth-0 node for a declaration match."""
        lines = self.corpus.read_lines(match.source_file) or []
        return FunctionNode(
            function_name=match.name,
            file_path=match.source_file.relative_path,
            line=match.line_index + 1,
            signature=extract_signature(lines, match.line_index, self.signature_lines),
            language=match.source_file.language,
        )

    def iter_declarations(self, function_name: str | None = None) -> Iterator[DeclarationMatch]:
        """
        Iterate over declaration lines in corpus order.

        Args:
            function_name: Exact name to look for, or None for every declaration

        Yields:
            DeclarationMatch per declaration line (first matching rule only)
        """
        for source_file in self.corpus:
            lines = self.corpus.read_lines(source_file)
            if not lines:
                continue
            pattern_set = get_pattern_set(source_file.language)
            rules = pattern_set.compile_declarations(function_name)
            if not rules:
                continue
            for i, line in enumerate(lines):
                if not line.strip() or is_comment_line(line, pattern_set):
                    continue
                found = first_declaration(line, rules, pattern_set)
                if found is None:
                    continue
                name, rule, column = found
                yield DeclarationMatch(
                    source_file=source_file,
                    line_index=i,
                    column=column,
                    name=name,
                    kind=rule.kind,
                )


__all__ = [
    "MISSING",
    "ResolutionCache",
    "DeclarationMatch",
    "FunctionResolver",
]
