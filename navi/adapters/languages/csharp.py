"""C# language patterns."""

from __future__ import annotations

from . import register_language
from .base import CALL_RULE, LanguagePatternSet
from .models import MatchRule, RuleKind

# =============================================================================
# C# Filter Constants
# =============================================================================

CSHARP_KEYWORDS = frozenset({
    "if", "else", "for", "foreach", "while", "do", "switch", "case", "break",
    "continue", "return", "try", "catch", "finally", "throw", "new", "using",
    "lock", "typeof", "sizeof", "nameof", "await", "yield", "this", "base",
    "default", "checked", "unchecked", "fixed", "when",
})

CSHARP_BUILTINS = frozenset({
    "Console", "WriteLine", "Write", "ToString", "Equals", "GetHashCode",
    "GetType", "Math", "String", "Convert", "Task", "Format", "Parse",
    "TryParse", "Add", "Count", "Any", "Select", "Where", "First",
    "FirstOrDefault", "ToList", "ToArray",
})

_TYPE = r"[\w<>\[\],.?]+"
_NOT_A_STATEMENT = r"(?!(?:return|throw|new|else|await|var|case)\b)"

CSHARP = LanguagePatternSet(
    name="csharp",
    declaration_rules=(
        MatchRule(r"\babstract\s+(?:" + _TYPE + r"\s+)+{name}\s*(?:<[^>]*>)?\s*\(", RuleKind.ABSTRACT_DECLARATION),
        # Interface members: Type Name(args);
        MatchRule(
            r"^\s*" + _NOT_A_STATEMENT + _TYPE + r"\s+{name}\s*(?:<[^>]*>)?\s*\([^)]*\)\s*;\s*$",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        MatchRule(
            r"^\s*(?:\[[^\]]*\]\s*)*"
            r"(?:(?:public|private|protected|internal|static|virtual|override|sealed|async|extern|unsafe|new|partial)\s+)+"
            r"(?:" + _TYPE + r"\s+)*{name}\s*(?:<[^>]*>)?\s*\("
        ),
        MatchRule(r"^\s*" + _NOT_A_STATEMENT + _TYPE + r"\s+{name}\s*(?:<[^>]*>)?\s*\([^;]*$"),
    ),
    call_rules=(CALL_RULE,),
    class_rules=(
        MatchRule(
            r"\b(?:abstract\s+(?:partial\s+)?class|interface)\s+{name}\b",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        MatchRule(r"\b(?:class|struct|record|enum)\s+{name}\b"),
    ),
    inheritance_rules=(
        # Base list after a single ':'
        MatchRule(r"(?<!:):(?!:)[^{]*\b{name}\b"),
    ),
    import_patterns=(
        r"^\s*using\s+(?:static\s+)?(?P<module>[\w.]+)\s*;",
    ),
    export_patterns=(
        r"\bpublic\s+(?:(?:abstract|sealed|static|partial)\s+)*"
        r"(?:class|interface|struct|record|enum)\s+(?P<name>\w+)",
    ),
    comment_prefixes=("///", "//", "/*", "*"),
    keywords=CSHARP_KEYWORDS,
    builtins=CSHARP_BUILTINS,
)

# Register this language
register_language(CSHARP)
