"""Python language patterns."""

from __future__ import annotations

from . import register_language
from .base import CALL_RULE, LanguagePatternSet
from .models import MatchRule, RuleKind

# =============================================================================
# Python Filter Constants
# =============================================================================

PYTHON_KEYWORDS = frozenset({
    "if", "elif", "else", "for", "while", "break", "continue", "return",
    "try", "except", "finally", "raise", "with", "assert", "lambda", "yield",
    "not", "and", "or", "in", "is", "del", "global", "nonlocal", "pass",
    "def", "class", "async", "await", "import", "from", "match", "case",
})

PYTHON_BUILTINS = frozenset({
    "print", "len", "range", "enumerate", "zip", "map", "filter", "sorted",
    "reversed", "isinstance", "issubclass", "str", "int", "float", "bool",
    "dict", "list", "set", "tuple", "frozenset", "bytes", "super", "open",
    "type", "getattr", "setattr", "hasattr", "delattr", "any", "all", "min",
    "max", "sum", "abs", "repr", "iter", "next", "id", "hash", "format",
    "round", "vars", "dir", "callable", "object", "property", "staticmethod",
    "classmethod",
})

PYTHON = LanguagePatternSet(
    name="python",
    declaration_rules=(
        MatchRule(r"^\s*(?:async\s+)?def\s+{name}\s*\("),
    ),
    call_rules=(CALL_RULE,),
    class_rules=(
        MatchRule(
            r"^\s*class\s+{name}\s*\([^)]*\b(?:ABC|ABCMeta|Protocol)\b",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        MatchRule(r"^\s*class\s+{name}\b"),
    ),
    inheritance_rules=(
        MatchRule(r"^\s*class\s+\w+\s*\([^)]*\b{name}\b"),
    ),
    abstract_markers=("@abstractmethod", "@abc.abstractmethod"),
    import_patterns=(
        r"^\s*import\s+(?P<module>[\w.]+)",
        r"^\s*from\s+(?P<module>[.\w]+)\s+import\b",
    ),
    export_patterns=(
        r"^__all__\s*=\s*[\[(](?P<names>[^\])]+)",
        r"^(?:async\s+)?def\s+(?P<name>[A-Za-z]\w*)",
        r"^class\s+(?P<name>[A-Za-z]\w*)",
    ),
    comment_prefixes=("#",),
    block_style="indent",
    keywords=PYTHON_KEYWORDS,
    builtins=PYTHON_BUILTINS,
)

# Register this language
register_language(PYTHON)
