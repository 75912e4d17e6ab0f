"""Rust language patterns."""

from __future__ import annotations

from . import register_language
from .base import CALL_RULE, LanguagePatternSet
from .models import MatchRule, RuleKind

RUST_KEYWORDS = frozenset({
    "if", "else", "for", "while", "loop", "match", "return", "break",
    "continue", "let", "mut", "fn", "impl", "trait", "struct", "enum",
    "where", "as", "in", "move", "unsafe", "async", "await",
})

RUST_BUILTINS = frozenset({
    "Some", "None", "Ok", "Err", "Box", "Vec", "String", "Rc", "Arc",
    "new", "unwrap", "expect", "clone", "to_string", "into", "iter", "map",
    "collect", "push", "len", "is_empty", "default", "from",
})

_VISIBILITY = r"(?:pub(?:\([^)]*\))?\s+)?"
_FN_QUALIFIERS = r"(?:const\s+)?(?:async\s+)?(?:unsafe\s+)?(?:extern\s+\"[^\"]*\"\s+)?"

RUST = LanguagePatternSet(
    name="rust",
    declaration_rules=(
        # Trait method without a body
        MatchRule(
            r"^\s*" + _VISIBILITY + _FN_QUALIFIERS + r"fn\s+{name}\s*(?:<[^>]*>)?\s*\([^{]*;\s*$",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        MatchRule(r"^\s*" + _VISIBILITY + _FN_QUALIFIERS + r"fn\s+{name}\b"),
    ),
    call_rules=(CALL_RULE,),
    class_rules=(
        MatchRule(r"^\s*" + _VISIBILITY + r"(?:unsafe\s+)?trait\s+{name}\b", RuleKind.ABSTRACT_DECLARATION),
        MatchRule(r"^\s*" + _VISIBILITY + r"(?:struct|enum|union)\s+{name}\b"),
        MatchRule(r"^\s*(?:unsafe\s+)?impl(?:<[^>]*>)?\s+(?:[\w:<>]+\s+for\s+)?{name}\b"),
    ),
    inheritance_rules=(
        MatchRule(r"\bimpl(?:<[^>]*>)?\s+(?:\w+::)*{name}(?:<[^>]*>)?\s+for\b"),
        # Supertraits
        MatchRule(r"\btrait\s+\w+(?:<[^>]*>)?\s*:[^{]*\b{name}\b"),
    ),
    import_patterns=(
        r"^\s*(?:pub\s+)?use\s+(?P<module>[\w:]+)",
        r"^\s*(?:pub\s+)?mod\s+(?P<module>\w+)\s*;",
        r"^\s*extern\s+crate\s+(?P<module>\w+)",
    ),
    export_patterns=(
        r"^\s*pub\s+(?:async\s+)?(?:unsafe\s+)?(?:fn|struct|enum|trait|type|const|static|mod)\s+(?P<name>\w+)",
    ),
    comment_prefixes=("///", "//!", "//", "/*", "*"),
    keywords=RUST_KEYWORDS,
    builtins=RUST_BUILTINS,
)

# Register this language
register_language(RUST)
