"""
Function search - definitions and call references of matching names.

Exact matching compares names verbatim. Otherwise the query is a
case-insensitive substring match in which ``*`` stands for any run of
characters, so ``get*user`` finds ``getCurrentUser``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from navi.adapters.languages import get_pattern_set

from .base import first_declaration, is_comment_line
from .context import build_definition
from .models import FunctionReference, FunctionSearchResult
from .resolver import DeclarationMatch, FunctionResolver

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 50


def name_matcher(query: str, exact_match: bool = False) -> Callable[[str], bool]:
    """
    Build a predicate deciding whether a function name matches a query.

    Examples:
        >>> name_matcher("load")("loadConfig")
        True
        >>> name_matcher("load", exact_match=True)("loadConfig")
        False
        >>> name_matcher("get*user")("getCurrentUser")
        True
    """
    if exact_match:
        return lambda name: name == query
    pattern = re.compile(".*".join(re.escape(part) for part in query.split("*")), re.IGNORECASE)
    return lambda name: pattern.search(name) is not None


def find_function(
    resolver: FunctionResolver,
    function_name: str,
    exact_match: bool = False,
    include_references: bool = True,
    max_results: int = DEFAULT_MAX_RESULTS,
    include_documentation: bool = True,
) -> FunctionSearchResult:
    """
    Find the definition of a function and the places it is referenced.

    Files are scanned in corpus order and scanning stops once
    ``max_results`` references have been collected. References are returned
    declarations first, then calls, each group in corpus order.

    Args:
        resolver: Resolver bound to the request's corpus
        function_name: Name or pattern to look for
        exact_match: Compare names verbatim instead of by pattern
        include_references: Collect call references as well as declarations
        max_results: Maximum number of references returned
        include_documentation: Extract documentation for the definition

    Returns:
        FunctionSearchResult
    """
    corpus = resolver.corpus
    matches = name_matcher(function_name, exact_match)
    result = FunctionSearchResult(function_name=function_name, search_path=corpus.root_path)
    references: list[FunctionReference] = []

    for source_file in corpus:
        if len(references) >= max_results:
            break
        lines = corpus.read_lines(source_file)
        if not lines:
            continue
        pattern_set = get_pattern_set(source_file.language)
        declaration_rules = pattern_set.compile_declarations()
        call_rules = pattern_set.compile_calls()

        for i, line in enumerate(lines):
            if not line.strip() or is_comment_line(line, pattern_set):
                continue

            declared = first_declaration(line, declaration_rules, pattern_set)
            declared_name = None
            if declared and matches(declared[0]):
                declared_name, rule, column = declared
                references.append(
                    FunctionReference(
                        function_name=declared_name,
                        file_path=source_file.relative_path,
                        line=i + 1,
                        column=column,
                        context=line.strip(),
                        kind="declaration",
                    )
                )
                if result.definition is None:
                    match = DeclarationMatch(source_file, i, column, declared_name, rule.kind)
                    result.definition = build_definition(
                        match, lines, include_documentation, resolver.signature_lines
                    )

            if not include_references:
                continue
            seen_columns: set[int] = set()
            for rule in call_rules:
                for m in rule.finditer(line):
                    name = m.group("name")
                    column = m.start("name") + 1
                    if column in seen_columns or name == declared_name:
                        continue
                    seen_columns.add(column)
                    if pattern_set.is_keyword(name) or not matches(name):
                        continue
                    references.append(
                        FunctionReference(
                            function_name=name,
                            file_path=source_file.relative_path,
                            line=i + 1,
                            column=column,
                            context=line.strip(),
                            kind="call",
                        )
                    )

    # Stable sort keeps corpus order within each group
    references.sort(key=lambda ref: ref.kind != "declaration")
    result.references = references[:max_results]
    logger.debug(
        "find_function %s: %d references, definition=%s",
        function_name,
        len(result.references),
        result.definition is not None,
    )
    return result


__all__ = [
    "DEFAULT_MAX_RESULTS",
    "name_matcher",
    "find_function",
]
