"""
Function calls - every call made from inside the definitions of a function.
"""

from __future__ import annotations

import logging

from navi.adapters.languages import get_pattern_set

from .body import isolate_body, iter_call_sites
from .models import FunctionCall, FunctionCallsResult
from .references import DEFAULT_MAX_RESULTS
from .resolver import FunctionResolver

logger = logging.getLogger(__name__)


def find_function_calls(
    resolver: FunctionResolver,
    function_name: str,
    include_builtins: bool = False,
    max_results: int = DEFAULT_MAX_RESULTS,
    body_fallback_lines: int = 50,
) -> FunctionCallsResult:
    """
    List the calls made inside every definition of a function.

    Unlike callee discovery in a trace, repeated calls are all reported,
    one entry per call site.

    Args:
        resolver: Resolver bound to the request's corpus
        function_name: Exact function name
        include_builtins: Keep builtin/denylisted calls
        max_results: Maximum number of calls returned
        body_fallback_lines: Cap for brace bodies that never close

    Returns:
        FunctionCallsResult with calls in corpus order
    """
    corpus = resolver.corpus
    result = FunctionCallsResult(function_name=function_name, search_path=corpus.root_path)

    for match in resolver.iter_declarations(function_name):
        source_file = match.source_file
        lines = corpus.read_lines(source_file) or []
        pattern_set = get_pattern_set(source_file.language)
        end, closed = isolate_body(lines, match.line_index, pattern_set.block_style, body_fallback_lines)
        if not closed:
            logger.debug("Using fallback body bounds for %s in %s", function_name, source_file.relative_path)

        for site in iter_call_sites(
            lines[match.line_index : end + 1],
            source_file.language,
            start_line=match.line_index,
            include_builtins=include_builtins,
        ):
            result.calls.append(
                FunctionCall(
                    function_name=site.name,
                    qualifier=site.qualifier,
                    called_from=function_name,
                    file_path=source_file.relative_path,
                    line=site.line_index + 1,
                    language=source_file.language,
                    context=site.context,
                )
            )
            if len(result.calls) >= max_results:
                return result

    return result


__all__ = [
    "find_function_calls",
]
