"""Java language patterns."""

from __future__ import annotations

from . import register_language
from .base import CALL_RULE, LanguagePatternSet
from .models import MatchRule, RuleKind

# =============================================================================
# Java Filter Constants
# =============================================================================

JAVA_KEYWORDS = frozenset({
    "if", "else", "for", "while", "do", "switch", "case", "break", "continue",
    "return", "try", "catch", "finally", "throw", "throws", "new",
    "synchronized", "this", "super", "assert", "instanceof",
})

JAVA_BUILTINS = frozenset({
    "System", "String", "Integer", "Long", "Double", "Boolean", "Math",
    "Objects", "Arrays", "Collections", "Optional", "List", "Map", "Set",
    "println", "print", "printf", "format", "valueOf", "equals", "hashCode",
    "toString", "length", "size", "isEmpty", "stream",
})

# Type token: identifiers, generics, arrays, qualified names, wildcards
_TYPE = r"[\w<>\[\],.?]+"
_NOT_A_STATEMENT = r"(?!(?:return|throw|new|else|case)\b)"

JAVA = LanguagePatternSet(
    name="java",
    declaration_rules=(
        MatchRule(r"\babstract\s+(?:" + _TYPE + r"\s+)+{name}\s*\(", RuleKind.ABSTRACT_DECLARATION),
        # Interface methods: Type name(args);
        MatchRule(
            r"^\s*" + _NOT_A_STATEMENT + r"(?:(?:public|static)\s+)?" + _TYPE
            + r"\s+{name}\s*\([^)]*\)\s*(?:throws\s+[\w.,\s]+)?;\s*$",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        MatchRule(
            r"^\s*(?:@\w+(?:\([^)]*\))?\s+)*"
            r"(?:(?:public|protected|private|static|final|synchronized|native|default|strictfp)\s+)+"
            r"(?:<[^>]+>\s+)?(?:" + _TYPE + r"\s+)*{name}\s*\("
        ),
        # Package-private methods
        MatchRule(r"^\s*" + _NOT_A_STATEMENT + r"(?:<[^>]+>\s+)?" + _TYPE + r"\s+{name}\s*\([^;]*$"),
    ),
    call_rules=(CALL_RULE,),
    class_rules=(
        MatchRule(r"\b(?:abstract\s+class|interface|@interface)\s+{name}\b", RuleKind.ABSTRACT_DECLARATION),
        MatchRule(r"\b(?:class|enum|record)\s+{name}\b"),
    ),
    inheritance_rules=(
        MatchRule(r"\b(?:extends|implements)\b[^{]*\b{name}\b"),
    ),
    import_patterns=(
        r"^\s*import\s+(?:static\s+)?(?P<module>[\w.*]+)\s*;",
    ),
    export_patterns=(
        r"\bpublic\s+(?:(?:abstract|final|static|sealed)\s+)*"
        r"(?:class|interface|enum|record|@interface)\s+(?P<name>\w+)",
    ),
    keywords=JAVA_KEYWORDS,
    builtins=JAVA_BUILTINS,
)

# Register this language
register_language(JAVA)
