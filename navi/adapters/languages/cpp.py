"""C/C++ language patterns.

Both languages share one pattern set: C code is matched by the C++ rules
because every C function definition is also a valid C++ one lexically.
"""

from __future__ import annotations

from . import register_language
from .base import CALL_RULE, LanguagePatternSet
from .models import MatchRule, RuleKind

CPP_KEYWORDS = frozenset({
    "if", "else", "for", "while", "do", "switch", "case", "break", "continue",
    "return", "goto", "sizeof", "alignof", "typeid", "decltype", "new",
    "delete", "throw", "try", "catch", "static_cast", "dynamic_cast",
    "reinterpret_cast", "const_cast", "defined", "template", "operator",
})

CPP_BUILTINS = frozenset({
    "printf", "fprintf", "sprintf", "snprintf", "scanf", "puts", "putchar",
    "getchar", "malloc", "calloc", "realloc", "free", "memcpy", "memset",
    "memmove", "strlen", "strcpy", "strncpy", "strcmp", "strncmp", "strcat",
    "assert", "exit", "abort", "fopen", "fclose", "fread", "fwrite",
    "std", "cout", "cerr", "endl", "move", "forward", "make_shared",
    "make_unique", "size", "begin", "end", "push_back", "emplace_back",
})

_NOT_A_STATEMENT = r"(?!(?:return|else|new|delete|throw|case|goto)\b)"

CPP = LanguagePatternSet(
    name="cpp",
    declaration_rules=(
        # Pure virtual: virtual T name(...) = 0;
        MatchRule(
            r"\bvirtual\s+[^;(]*?\b{name}\s*\([^)]*\)[^;{]*=\s*0\s*;",
            RuleKind.ABSTRACT_DECLARATION,
        ),
        # Return type(s), optional pointer/reference, optional Class:: prefix; no ';'
        MatchRule(
            r"^\s*" + _NOT_A_STATEMENT + r"(?:[\w:<>\*&~,]+\s+)+[\*&]*(?:\w+::)*~?{name}\s*\([^;]*$"
        ),
        # Out-of-class constructors/destructors: Class::Class(...)
        MatchRule(r"^\s*(?:\w+::)+~?{name}\s*\([^;]*$"),
    ),
    call_rules=(CALL_RULE,),
    class_rules=(
        # Definitions only; forward declarations end in ';'
        MatchRule(r"^\s*(?:template\s*<[^>]*>\s*)?(?:class|struct|union)\s+{name}\b(?![^{]*;\s*$)"),
    ),
    inheritance_rules=(
        # Base-specifier list; '::' is scope resolution
        MatchRule(r"(?<!:):(?!:)[^{;]*\b{name}\b"),
    ),
    import_patterns=(
        r"^\s*#\s*include\s*[<\"](?P<module>[^>\"]+)[>\"]",
        r"^\s*import\s+(?P<module>[\w.:<>\"]+)\s*;",
    ),
    comment_prefixes=("///", "//", "/*", "*"),
    keywords=CPP_KEYWORDS,
    builtins=CPP_BUILTINS,
)

# Register this language (C shares the C++ rules)
register_language(CPP, "c")
