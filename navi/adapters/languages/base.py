"""Language pattern set - the per-language data driving lexical navigation."""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import CompiledRule, MatchRule, RuleKind

CALL_RULE = MatchRule(r"\b{name}\s*\(", RuleKind.CALL)
"""``IDENTIFIER(`` - the call rule shared by every language."""


@dataclass(frozen=True)
class LanguagePatternSet:
    """Immutable description of how one language looks to the line scanner.

    Rule order is significant: the first declaration-type rule that matches
    a line decides its classification, so specific multi-keyword rules
    (``abstract class X implements Y``) are listed before generic ones.

    Attributes:
        name: Lowercase language name used as registry key
        declaration_rules: Function/method opening rules, in priority order
        call_rules: Call-site rules (their matches are unioned)
        class_rules: Class/type/trait opening rules, in priority order
        inheritance_rules: Rules matched against a class header, with
            ``{name}`` bound to the interface or base type it names
        abstract_markers: Substrings of a class body that make the class abstract
        method_receiver_pattern: Regex with ``type`` and ``name`` groups for
            methods declared outside their type; setting it switches the
            language to structural (method-set) interface satisfaction
        interface_member_pattern: Regex with a ``name`` group for the
            method lines of a structural interface body
        import_patterns: Regexes with a ``module`` group
        export_patterns: Regexes with a ``name`` group or a comma-separated ``names`` group
        comment_prefixes: Line prefixes that mark documentation comments
        block_style: ``braces`` or ``indent``
        keywords: Control-flow words that look like calls but never are
        builtins: Standard-library names dropped from callee lists by default
    """

    name: str
    declaration_rules: tuple[MatchRule, ...] = ()
    call_rules: tuple[MatchRule, ...] = (CALL_RULE,)
    class_rules: tuple[MatchRule, ...] = ()
    inheritance_rules: tuple[MatchRule, ...] = ()
    abstract_markers: tuple[str, ...] = ()
    method_receiver_pattern: str | None = None
    interface_member_pattern: str | None = None
    import_patterns: tuple[str, ...] = ()
    export_patterns: tuple[str, ...] = ()
    comment_prefixes: tuple[str, ...] = ("//", "/*", "*")
    block_style: str = "braces"
    keywords: frozenset[str] = field(default_factory=frozenset)
    builtins: frozenset[str] = field(default_factory=frozenset)

    def compile_declarations(self, target_name: str | None = None) -> list[CompiledRule]:
        return [rule.compile(target_name) for rule in self.declaration_rules]

    def compile_calls(self, target_name: str | None = None) -> list[CompiledRule]:
        return [rule.compile(target_name) for rule in self.call_rules]

    def compile_classes(self, target_name: str | None = None) -> list[CompiledRule]:
        return [rule.compile(target_name) for rule in self.class_rules]

    def compile_inheritance(self, base_name: str) -> list[CompiledRule]:
        return [rule.compile(base_name) for rule in self.inheritance_rules]

    @property
    def is_structural(self) -> bool:
        return self.method_receiver_pattern is not None

    def is_keyword(self, name: str) -> bool:
        return name in self.keywords

    def is_builtin(self, name: str) -> bool:
        return name in self.builtins


# Words opening a statement that merely contains a call
_STATEMENT_WORDS = (
    "return", "await", "yield", "throw", "new", "echo", "print", "puts",
    "if", "elif", "elsif", "else", "unless", "until", "while", "for",
    "foreach", "switch", "case", "when", "then", "do", "not", "and", "or",
)

# Fallback for detected-but-unregistered languages: ``IDENTIFIER(`` after
# declaration words and before a body opener (``function f($x) {``,
# ``fun f(x: Int): Int``, ``def f(x)``) or an unclosed parameter list.
GENERIC = LanguagePatternSet(
    name="generic",
    declaration_rules=(
        MatchRule(
            r"^\s*(?!(?:" + "|".join(_STATEMENT_WORDS) + r")\b)(?:[\w$]+\s+)+{name}\s*\("
            r"(?:[^)]*\)\s*(?:[:{=]|->|$)|[^)]*$)"
        ),
    ),
    class_rules=(
        MatchRule(
            r"^\s*(?:\w+\s+)*(?:abstract\s+class|interface|trait)\s+{name}\b",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        MatchRule(r"^\s*(?:\w+\s+)*(?:class|object|struct)\s+{name}\b"),
    ),
    # Any later mention in the header: extends, implements, '<' or ':'
    inheritance_rules=(
        MatchRule(r"\b(?:class|interface|trait|object|struct)\s+[\w$]+[^{]*\b{name}\b"),
    ),
    comment_prefixes=("//", "/*", "*", "#", "--"),
    keywords=frozenset({
        "if", "for", "while", "switch", "catch", "return", "elif", "else",
        "function", "func", "fun", "def", "sub", "fn",
    }),
)


__all__ = [
    "CALL_RULE",
    "LanguagePatternSet",
    "GENERIC",
]
