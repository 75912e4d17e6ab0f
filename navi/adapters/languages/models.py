"""Data models for lexical match rules.

A rule is a regular-expression template with a ``{name}`` placeholder. The
placeholder compiles either to the escaped target name (searching for one
specific function) or to a generic identifier capture (discovering any
function). Both forms expose the matched identifier as the ``name`` group.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

IDENTIFIER = r"[A-Za-z_]\w*"
"""Generic identifier pattern used when no target name is given."""


class RuleKind(str, Enum):
    """Classification a rule assigns to the line it matches."""

    DECLARATION = "declaration"
    CALL = "call"
    ABSTRACT_DECLARATION = "abstract-declaration"

    @property
    def is_declaration(self) -> bool:
        """True for both concrete and abstract declarations."""
        return self in (RuleKind.DECLARATION, RuleKind.ABSTRACT_DECLARATION)


@dataclass(frozen=True)
class MatchRule:
    """A pattern template and the kind of line it identifies."""

    template: str
    kind: RuleKind = RuleKind.DECLARATION
    flags: int = 0

    def compile(self, target_name: str | None = None) -> CompiledRule:
        """Compile the template for a target name (or any identifier).

        Args:
            target_name: Exact identifier to search for, or None to capture any

        Returns:
            CompiledRule bound to this rule
        """
        return CompiledRule(rule=self, regex=_compile(self.template, self.flags, target_name))


@dataclass(frozen=True)
class CompiledRule:
    """A MatchRule with its template resolved to a regex."""

    rule: MatchRule
    regex: re.Pattern[str]

    @property
    def kind(self) -> RuleKind:
        return self.rule.kind

    def match(self, line: str) -> re.Match[str] | None:
        """Search a line, returning the first match or None."""
        return self.regex.search(line)

    def match_name(self, line: str) -> str | None:
        """Return the identifier captured on a line, or None."""
        m = self.regex.search(line)
        return m.group("name") if m else None

    def finditer(self, line: str):
        """Iterate over all non-overlapping matches on a line."""
        return self.regex.finditer(line)


@lru_cache(maxsize=4096)
def _compile(template: str, flags: int, target_name: str | None) -> re.Pattern[str]:
    name_pattern = re.escape(target_name) if target_name else IDENTIFIER
    return re.compile(template.replace("{name}", f"(?P<name>{name_pattern})"), flags)


__all__ = [
    "IDENTIFIER",
    "RuleKind",
    "MatchRule",
    "CompiledRule",
]
