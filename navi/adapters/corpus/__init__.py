"""Corpus adapter - enumerates and reads the source files of a search root.

Provides language detection by extension, exclude-pattern filtering and a
per-request line cache.
"""

from __future__ import annotations

from .manager import Corpus, is_excluded
from .models import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_MAX_FILE_SIZE, SourceFile

__all__ = [
    "Corpus",
    "SourceFile",
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_MAX_FILE_SIZE",
    "is_excluded",
]
