"""
Base utilities for navigation modules.

Line-level helpers shared by the resolver, the scope analyzer, the body
isolator and the tracer.
"""

from __future__ import annotations

from collections.abc import Sequence

from navi.adapters.languages import CompiledRule, LanguagePatternSet

from .models import FunctionNode

DEFAULT_SIGNATURE_LINES = 3


def extract_signature(
    lines: Sequence[str], line_index: int, max_lines: int = DEFAULT_SIGNATURE_LINES
) -> str:
    """
    Extract a declaration's signature starting at a line.

    The declaration line is trimmed and extended with following lines until
    parentheses balance, reading at most ``max_lines`` lines in total.

    Args:
        lines: File lines
        line_index: 0-indexed declaration line
        max_lines: Maximum number of lines joined

    Returns:
        Single-line signature text

    Examples:
        >>> extract_signature(["def f(a,", "      b):", "    pass"], 0)
        'def f(a, b):'
    """
    parts: list[str] = []
    balance = 0
    for i in range(line_index, min(line_index + max_lines, len(lines))):
        text = lines[i].strip()
        if text:
            parts.append(text)
        balance += text.count("(") - text.count(")")
        if balance <= 0:
            break
    return " ".join(parts)


def count_nodes(node: FunctionNode | None) -> int:
    """Count every node in a tree, repeated occurrences included."""
    if node is None:
        return 0
    return sum(1 for _ in node.iter_nodes())


def is_comment_line(line: str, pattern_set: LanguagePatternSet) -> bool:
    """Check whether a line is a comment in the given language."""
    stripped = line.lstrip()
    for prefix in pattern_set.comment_prefixes:
        if prefix == "*":
            # Block comment continuation; '*ptr = ...' is code
            if stripped == "*" or stripped.startswith(("* ", "*/")):
                return True
        elif stripped.startswith(prefix):
            return True
    return False


def first_declaration(
    line: str, rules: Sequence[CompiledRule], pattern_set: LanguagePatternSet
) -> tuple[str, CompiledRule, int] | None:
    """
    Classify a line with the first matching declaration rule.

    Args:
        line: Source line
        rules: Compiled declaration (or class) rules in priority order
        pattern_set: Language whose keywords are never declaration names

    Returns:
        (name, rule, column) where column is 1-indexed, or None
    """
    for rule in rules:
        m = rule.match(line)
        if m is None:
            continue
        name = m.group("name")
        if pattern_set.is_keyword(name):
            continue
        return name, rule, m.start("name") + 1
    return None


__all__ = [
    "DEFAULT_SIGNATURE_LINES",
    "extract_signature",
    "count_nodes",
    "is_comment_line",
    "first_declaration",
]
