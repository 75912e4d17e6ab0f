"""JavaScript/TypeScript language patterns."""

from __future__ import annotations

from dataclasses import replace

from . import register_language
from .base import CALL_RULE, LanguagePatternSet
from .models import MatchRule, RuleKind

# =============================================================================
# JavaScript/TypeScript Filter Constants
# =============================================================================

JS_KEYWORDS = frozenset({
    "if", "else", "for", "while", "do", "switch", "case", "break", "continue",
    "return", "try", "catch", "finally", "throw", "new", "typeof",
    "instanceof", "function", "class", "await", "yield", "delete", "void",
    "in", "of", "super", "import", "with",
})

JS_BUILTINS = frozenset({
    # Global functions
    "parseInt", "parseFloat", "isNaN", "isFinite", "encodeURIComponent",
    "decodeURIComponent", "encodeURI", "decodeURI", "eval", "require", "fetch",
    # Console
    "console", "log", "warn", "error", "info", "debug",
    # Timers
    "setTimeout", "setInterval", "clearTimeout", "clearInterval", "setImmediate",
    # Built-in constructors and namespaces
    "Array", "Object", "String", "Number", "Boolean", "Symbol", "Promise",
    "Map", "Set", "Date", "Error", "RegExp", "JSON", "Math",
    # Common prototype methods
    "push", "pop", "shift", "unshift", "slice", "splice", "concat", "join",
    "forEach", "map", "filter", "reduce", "includes", "indexOf", "then",
    "stringify", "parse", "keys", "values", "entries", "assign", "toString",
})

# Names a line-leading method rule must never capture
_NOT_A_METHOD = r"(?!(?:if|for|while|switch|catch|with|return|function|do|else)\b)"

_IMPORTS = (
    r"\bimport\s+(?:[\w*{}\s,]+\s+from\s+)?['\"](?P<module>[^'\"]+)['\"]",
    r"\brequire\s*\(\s*['\"](?P<module>[^'\"]+)['\"]\s*\)",
)

_EXPORTS = (
    r"^\s*export\s+(?:default\s+)?(?:declare\s+)?(?:async\s+)?"
    r"(?:const|let|var|function\*?|class|interface|type|enum|abstract\s+class)\s+(?P<name>\w+)",
    r"^\s*export\s*\{(?P<names>[^}]+)\}",
)

_FUNCTION_RULES = (
    MatchRule(r"^\s*(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*{name}\s*[<(]"),
    MatchRule(r"\b{name}\s*[:=]\s*(?:async\s+)?function\b"),
    MatchRule(r"\b{name}\s*[:=]\s*(?:async\s+)?\([^)]*\)\s*(?::\s*[^=]+)?=>"),
    MatchRule(r"\b{name}\s*[:=]\s*(?:async\s+)?[A-Za-z_$][\w$]*\s*=>"),
)

_METHOD_RULE = MatchRule(
    r"^\s*(?:(?:public|private|protected|static|async|override|readonly|get|set)\s+)*"
    + _NOT_A_METHOD
    + r"{name}\s*(?:<[^>]*>)?\s*\([^)]*\)\s*(?::\s*[^{=;]+)?\{"
)

JAVASCRIPT = LanguagePatternSet(
    name="javascript",
    declaration_rules=_FUNCTION_RULES + (_METHOD_RULE,),
    call_rules=(CALL_RULE,),
    class_rules=(
        MatchRule(r"^\s*(?:export\s+)?(?:default\s+)?class\s+{name}\b"),
    ),
    inheritance_rules=(
        MatchRule(r"\b(?:extends|implements)\b[^{]*\b{name}\b"),
    ),
    import_patterns=_IMPORTS,
    export_patterns=_EXPORTS,
    keywords=JS_KEYWORDS,
    builtins=JS_BUILTINS,
)

TYPESCRIPT = replace(
    JAVASCRIPT,
    name="typescript",
    declaration_rules=_FUNCTION_RULES
    + (
        MatchRule(
            r"^\s*(?:(?:public|protected|private)\s+)?abstract\s+{name}\s*(?:<[^>]*>)?\s*\(",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        # Interface members: name(args): Type;
        MatchRule(
            r"^\s*" + _NOT_A_METHOD + r"{name}\s*\??\s*(?:<[^>]*>)?\s*\([^)]*\)\s*:\s*[^{=]+;\s*$",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        _METHOD_RULE,
    ),
    class_rules=(
        MatchRule(
            r"^\s*(?:export\s+)?(?:declare\s+)?abstract\s+class\s+{name}\b",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        MatchRule(r"^\s*(?:export\s+)?(?:declare\s+)?interface\s+{name}\b", RuleKind.ABSTRACT_DECLARATION),
        MatchRule(r"^\s*(?:export\s+)?(?:default\s+)?(?:declare\s+)?class\s+{name}\b"),
    ),
)

# Register these languages
register_language(JAVASCRIPT)
register_language(TYPESCRIPT)
