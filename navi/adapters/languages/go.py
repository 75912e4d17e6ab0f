"""Go language patterns."""

from __future__ import annotations

from . import register_language
from .base import CALL_RULE, LanguagePatternSet
from .models import MatchRule, RuleKind

GO_KEYWORDS = frozenset({
    "if", "else", "for", "switch", "case", "break", "continue", "return",
    "defer", "go", "select", "func", "range", "type", "struct", "interface",
    "map", "chan",
})

GO_BUILTINS = frozenset({
    "fmt", "Println", "Printf", "Sprintf", "Errorf", "len", "cap", "make",
    "new", "append", "copy", "delete", "panic", "recover", "close", "print",
    "println", "errors",
})

GO = LanguagePatternSet(
    name="go",
    declaration_rules=(
        MatchRule(r"^\s*func\s+(?:\([^)]*\)\s*)?{name}\s*(?:\[[^\]]*\])?\s*\("),
    ),
    call_rules=(CALL_RULE,),
    class_rules=(
        MatchRule(r"^\s*type\s+{name}\s+interface\b", RuleKind.ABSTRACT_DECLARATION),
        MatchRule(r"^\s*type\s+{name}\s+struct\b"),
    ),
    # Interfaces are satisfied by method sets, not declared
    method_receiver_pattern=r"^\s*func\s*\(\s*(?:\w+\s+)?\*?\s*(?P<type>\w+)(?:\[[^\]]*\])?\s*\)\s*(?P<name>\w+)\s*[\[(]",
    interface_member_pattern=r"^\s*(?P<name>[A-Za-z_]\w*)\s*\(",
    import_patterns=(
        r"^\s*import\s+(?:[\w.]+\s+)?\"(?P<module>[^\"]+)\"",
        # Entries of an import ( ... ) block
        r"^\s+(?:[\w.]+\s+)?\"(?P<module>[^\"]+)\"\s*$",
    ),
    export_patterns=(
        r"^\s*func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Z]\w*)",
        r"^\s*type\s+(?P<name>[A-Z]\w*)",
    ),
    keywords=GO_KEYWORDS,
    builtins=GO_BUILTINS,
)

# Register this language
register_language(GO)
