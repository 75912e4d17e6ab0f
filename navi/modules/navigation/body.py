"""
Function-body isolation and call extraction.

Bodies are bounded lexically: brace counting for brace languages,
indentation for Python. Neither is aware of strings or comments, so a
brace inside a string literal can shift the boundary; when a brace body
never closes the end is capped instead of running to end of file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence

from navi.adapters.languages import get_pattern_set

from .base import first_declaration, is_comment_line
from .models import CallSite

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_LINES = 50


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


def isolate_body(
    lines: Sequence[str],
    start_line: int,
    block_style: str = "braces",
    fallback_lines: int = DEFAULT_FALLBACK_LINES,
) -> tuple[int, bool]:
    """
    Find the last line of the body opened at a declaration line.

    Args:
        lines: File lines
        start_line: 0-indexed declaration line
        block_style: 'braces' or 'indent'
        fallback_lines: Cap applied when a brace body never closes

    Returns:
        (end_line, closed): 0-indexed inclusive end line, and False when the
        end is the fallback cap rather than a real boundary
    """
    if not lines:
        return start_line, False
    last = len(lines) - 1
    start_line = min(max(start_line, 0), last)

    if block_style == "indent":
        return _isolate_indented(lines, start_line), True

    balance = 0
    opened = False
    for i in range(start_line, len(lines)):
        line = lines[i]
        for char in line:
            if char == "{":
                balance += 1
                opened = True
            elif char == "}":
                balance -= 1
        if opened and balance <= 0:
            return i, True
        if not opened and line.rstrip().endswith(";"):
            # Declaration without a body (abstract, interface member, prototype)
            return i, True

    end = min(start_line + fallback_lines, last)
    logger.debug("Body at line %d never closed; capped at line %d", start_line + 1, end + 1)
    return end, False


def _isolate_indented(lines: Sequence[str], start_line: int) -> int:
    base_indent = _indent_width(lines[start_line])
    end = start_line

    # Signature continuation lines until parentheses balance
    depth = lines[start_line].count("(") - lines[start_line].count(")")
    i = start_line + 1
    while depth > 0 and i < len(lines):
        depth += lines[i].count("(") - lines[i].count(")")
        end = i
        i += 1

    for j in range(i, len(lines)):
        line = lines[j]
        if not line.strip():
            continue
        if _indent_width(line) <= base_indent:
            break
        end = j
    return end


def iter_call_sites(
    lines: Sequence[str],
    language: str | None,
    start_line: int = 0,
    include_builtins: bool = False,
    exclude: Iterable[str] = (),
) -> Iterator[CallSite]:
    """
    Tokenize ``name(`` and ``qualifier.name(`` occurrences.

    Keywords are never reported. Names declared on the same line (a nested
    function, the body's own header) are skipped. Builtins are dropped when
    either the name or its qualifier is on the language's denylist, unless
    ``include_builtins`` is set.

    Args:
        lines: Body lines
        language: Language of the file
        start_line: Absolute 0-indexed line of ``lines[0]`` in its file
        include_builtins: Keep denylisted names
        exclude: Names never reported

    Yields:
        CallSite per occurrence, in line then column order
    """
    pattern_set = get_pattern_set(language)
    call_rules = pattern_set.compile_calls()
    declaration_rules = pattern_set.compile_declarations() + pattern_set.compile_classes()
    excluded = set(exclude)

    for offset, line in enumerate(lines):
        if not line.strip() or is_comment_line(line, pattern_set):
            continue
        declared = first_declaration(line, declaration_rules, pattern_set)
        declared_name = declared[0] if declared else None

        seen_columns: set[int] = set()
        sites: list[CallSite] = []
        for rule in call_rules:
            for m in rule.finditer(line):
                column = m.start("name") + 1
                if column in seen_columns:
                    continue
                seen_columns.add(column)
                name = m.group("name")
                if name in excluded or name == declared_name or pattern_set.is_keyword(name):
                    continue
                qualifier = _qualifier_before(line, m.start("name"))
                if not include_builtins and (
                    pattern_set.is_builtin(name) or (qualifier and pattern_set.is_builtin(qualifier))
                ):
                    continue
                sites.append(
                    CallSite(
                        name=name,
                        qualifier=qualifier,
                        line_index=start_line + offset,
                        column=column,
                        context=line.strip(),
                    )
                )
        yield from sorted(sites, key=lambda s: s.column)


def _qualifier_before(line: str, name_start: int) -> str | None:
    """Return the identifier directly before ``.`` preceding a name, if any."""
    i = name_start - 1
    while i >= 0 and line[i].isspace():
        i -= 1
    if i < 0 or line[i] != ".":
        return None
    i -= 1
    while i >= 0 and line[i].isspace():
        i -= 1
    end = i + 1
    while i >= 0 and (line[i].isalnum() or line[i] == "_"):
        i -= 1
    qualifier = line[i + 1 : end]
    return qualifier if qualifier and not qualifier[0].isdigit() else None


def extract_calls(
    lines: Sequence[str],
    language: str | None,
    include_builtins: bool = False,
    exclude: Iterable[str] = (),
    start_line: int = 0,
) -> list[CallSite]:
    """
    Extract the distinct callees of a body.

    Identical callee names are collapsed; the first occurrence wins.

    Args:
        lines: Body lines
        language: Language of the file
        include_builtins: Keep denylisted names
        exclude: Names never reported (typically the function's own name)
        start_line: Absolute 0-indexed line of ``lines[0]``

    Returns:
        CallSites with unique names, in order of first occurrence
    """
    seen: set[str] = set()
    calls: list[CallSite] = []
    for site in iter_call_sites(lines, language, start_line, include_builtins, exclude):
        if site.name in seen:
            continue
        seen.add(site.name)
        calls.append(site)
    return calls


__all__ = [
    "DEFAULT_FALLBACK_LINES",
    "isolate_body",
    "iter_call_sites",
    "extract_calls",
]
