"""
Scope analyzer - finds the function or class enclosing a line.

The scan walks backward from the line itself (inclusive, so a one-line
declaration that contains a call encloses it) and reports the nearest
line matching a function or class opening rule. Nearest-match is a
proximity heuristic: a call after the end of one function and before the
next declaration is attributed to the earlier function.
"""

from __future__ import annotations

from collections.abc import Sequence

from navi.adapters.languages import CompiledRule, RuleKind, get_pattern_set

from .base import first_declaration, is_comment_line
from .models import Scope


def _scan_backward(
    lines: Sequence[str],
    line_index: int,
    language: str | None,
    function_rules: bool,
    class_rules: bool,
) -> Scope | None:
    if not lines:
        return None
    pattern_set = get_pattern_set(language)
    groups: list[tuple[str, list[CompiledRule]]] = []
    if function_rules:
        groups.append(("function", pattern_set.compile_declarations()))
    if class_rules:
        groups.append(("class", pattern_set.compile_classes()))

    for i in range(min(line_index, len(lines) - 1), -1, -1):
        line = lines[i]
        if not line.strip() or is_comment_line(line, pattern_set):
            continue
        for kind, rules in groups:
            found = first_declaration(line, rules, pattern_set)
            if found:
                name, rule, _ = found
                return Scope(
                    name=name,
                    kind=kind,
                    line=i + 1,
                    is_abstract=rule.kind is RuleKind.ABSTRACT_DECLARATION,
                )
    return None


def enclosing_scope(lines: Sequence[str], line_index: int, language: str | None) -> Scope | None:
    """
    Find the nearest function or class opening at or above a line.

    Args:
        lines: File lines
        line_index: 0-indexed line to start from (inclusive)
        language: Language of the file

    Returns:
        Scope of the nearest opening, or None
    """
    return _scan_backward(lines, line_index, language, function_rules=True, class_rules=True)


def enclosing_function(lines: Sequence[str], line_index: int, language: str | None) -> Scope | None:
    """Find the nearest function declaration at or above a line."""
    return _scan_backward(lines, line_index, language, function_rules=True, class_rules=False)


def enclosing_class(lines: Sequence[str], line_index: int, language: str | None) -> Scope | None:
    """Find the nearest class/type opening at or above a line."""
    return _scan_backward(lines, line_index, language, function_rules=False, class_rules=True)


__all__ = [
    "enclosing_scope",
    "enclosing_function",
    "enclosing_class",
]
