"""Language pattern registry.

Each language module describes itself as a LanguagePatternSet and
registers it on import. Adding a language is a data registration, not a
new code path.
"""

from __future__ import annotations

from .base import GENERIC, LanguagePatternSet
from .models import IDENTIFIER, CompiledRule, MatchRule, RuleKind

# Language registry - maps language names to pattern sets
# Populated when language modules are imported
_LANGUAGE_REGISTRY: dict[str, LanguagePatternSet] = {}
_languages_loaded = False


def register_language(pattern_set: LanguagePatternSet, *aliases: str) -> None:
    """Register a language pattern set.

    Args:
        pattern_set: Pattern set to register under its own name
        aliases: Additional names sharing the same patterns
    """
    _LANGUAGE_REGISTRY[pattern_set.name.lower()] = pattern_set
    for alias in aliases:
        _LANGUAGE_REGISTRY[alias.lower()] = pattern_set


def get_pattern_set(language: str | None) -> LanguagePatternSet:
    """Get the pattern set for a language.

    Args:
        language: Language name (e.g., 'python', 'go')

    Returns:
        Registered LanguagePatternSet, or the generic fallback
    """
    _ensure_languages_loaded()
    if not language:
        return GENERIC
    return _LANGUAGE_REGISTRY.get(language.lower(), GENERIC)


def patterns_for(language: str | None, target_name: str | None = None) -> list[CompiledRule]:
    """Compile declaration rules followed by call rules for a language.

    Args:
        language: Language name
        target_name: Exact identifier to search for, or None for any

    Returns:
        Compiled rules in the order they must be tried
    """
    pattern_set = get_pattern_set(language)
    return pattern_set.compile_declarations(target_name) + pattern_set.compile_calls(target_name)


def is_registered(language: str) -> bool:
    """Check whether a language has its own pattern set."""
    _ensure_languages_loaded()
    return language.lower() in _LANGUAGE_REGISTRY


def supported_languages() -> list[str]:
    """Get sorted list of registered languages."""
    _ensure_languages_loaded()
    return sorted(_LANGUAGE_REGISTRY.keys())


def _ensure_languages_loaded() -> None:
    """Lazy-load all language modules."""
    global _languages_loaded
    if _languages_loaded:
        return
    _languages_loaded = True

    # Import all languages - they self-register on import
    from . import cpp  # noqa: F401
    from . import csharp  # noqa: F401
    from . import go  # noqa: F401
    from . import java  # noqa: F401
    from . import javascript  # noqa: F401
    from . import python  # noqa: F401
    from . import rust  # noqa: F401


__all__ = [
    "IDENTIFIER",
    "RuleKind",
    "MatchRule",
    "CompiledRule",
    "LanguagePatternSet",
    "GENERIC",
    "register_language",
    "get_pattern_set",
    "patterns_for",
    "is_registered",
    "supported_languages",
]
