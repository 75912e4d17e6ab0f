"""File corpus walker for lexical navigation.

A Corpus is the filtered set of source files under a search root, in
deterministic enumeration order (lexical by relative POSIX path). It is
built once per request and caches the lines of every file it reads, so a
trace that revisits a file never reads it twice.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from .models import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_MAX_FILE_SIZE, SourceFile

logger = logging.getLogger(__name__)


def _match_path_pattern(file_path: str, pattern: str) -> bool:
    """
    Match a relative path against a glob pattern.

    Directory components of ``**`` patterns are matched as whole path
    segments, not substrings. E.g. '**/tests/**' will NOT match
    'contests/foo.py'.

    Args:
        file_path: Relative path (any separator)
        pattern: Glob pattern (forward slashes)

    Returns:
        True if path matches pattern

    Examples:
        >>> _match_path_pattern("src/tests/test_app.py", "**/tests/**")
        True
        >>> _match_path_pattern("src/contests/app.py", "**/tests/**")
        False
        >>> _match_path_pattern("docs/readme.md", "docs/*")
        True
    """
    normalized_path = file_path.replace("\\", "/").lower()
    pattern = pattern.lower()

    if "**" in pattern:
        parts = [p.strip("/") for p in pattern.split("**") if p.strip("/")]
        for part in parts:
            dir_pattern = rf"(^|/){re.escape(part)}(/|$)"
            if not re.search(dir_pattern, normalized_path):
                return False
        return True
    return fnmatch.fnmatch(normalized_path, pattern)


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    """Check a relative path against exclude patterns.

    Patterns containing '/' are matched against the whole relative path;
    plain patterns ('node_modules', '*.log') against the final segment.
    """
    name = relative_path.rsplit("/", 1)[-1]
    for pattern in patterns:
        if "/" in pattern:
            if _match_path_pattern(relative_path, pattern):
                return True
        elif fnmatch.fnmatchcase(name, pattern):
            return True
    return False


class Corpus:
    """The language-filtered source files under one root path."""

    # Extension to language mapping
    EXTENSION_MAP: dict[str, str] = {
        ".py": "python",
        ".pyw": "python",
        ".pyi": "python",
        ".js": "javascript",
        ".mjs": "javascript",
        ".cjs": "javascript",
        ".jsx": "javascript",
        ".ts": "typescript",
        ".tsx": "typescript",
        ".mts": "typescript",
        ".cts": "typescript",
        ".java": "java",
        ".cs": "csharp",
        ".go": "go",
        ".rs": "rust",
        ".cpp": "cpp",
        ".cxx": "cpp",
        ".cc": "cpp",
        ".c++": "cpp",
        ".hpp": "cpp",
        ".hxx": "cpp",
        ".h++": "cpp",
        ".c": "c",
        ".h": "c",
        ".php": "php",
        ".rb": "ruby",
        ".swift": "swift",
        ".kt": "kotlin",
        ".kts": "kotlin",
        ".scala": "scala",
        ".dart": "dart",
        ".lua": "lua",
        ".pl": "perl",
        ".pm": "perl",
    }

    def __init__(
        self,
        root: str | Path,
        languages: Iterable[str] | None = None,
        exclude_patterns: Iterable[str] | None = None,
        include_hidden: bool = False,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        """Initialize a corpus.

        Args:
            root: Directory (or single file) to search
            languages: Optional allow-list of language names (case-insensitive)
            exclude_patterns: Patterns of files/directories to skip
            include_hidden: Include dot-files and dot-directories
            max_file_size: Files larger than this many bytes are skipped
        """
        self.root = Path(root)
        self.languages = {lang.lower() for lang in languages} if languages else None
        self.exclude_patterns = tuple(
            DEFAULT_EXCLUDE_PATTERNS if exclude_patterns is None else exclude_patterns
        )
        self.include_hidden = include_hidden
        self.max_file_size = max_file_size

        self._files: list[SourceFile] | None = None
        self._lines: dict[Path, list[str] | None] = {}

    @property
    def root_path(self) -> str:
        """Root path as given, used as cache key and in result metadata."""
        return str(self.root)

    @classmethod
    def detect_language(cls, file_path: str | Path) -> str | None:
        """Detect language from file extension."""
        ext = os.path.splitext(str(file_path))[1].lower()
        return cls.EXTENSION_MAP.get(ext)

    @classmethod
    def extensions_for_languages(cls, languages: Iterable[str]) -> list[str]:
        """Get the file extensions mapped to the given languages."""
        wanted = {lang.lower() for lang in languages}
        return [ext for ext, lang in cls.EXTENSION_MAP.items() if lang in wanted]

    def accepts_language(self, language: str | None) -> bool:
        """Check a detected language against the request's allow-list."""
        if language is None:
            return False
        return self.languages is None or language in self.languages

    def files(self) -> list[SourceFile]:
        """Get all corpus files in lexical order of relative path."""
        if self._files is None:
            self._files = sorted(self._walk(), key=lambda f: f.relative_path)
            logger.debug("Corpus %s: %d files", self.root, len(self._files))
        return self._files

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self.files())

    def __len__(self) -> int:
        return len(self.files())

    def get_file(self, relative_path: str) -> SourceFile | None:
        """Look up a corpus file by relative path."""
        for source_file in self.files():
            if source_file.relative_path == relative_path:
                return source_file
        return None

    def read_lines(self, source_file: SourceFile) -> list[str] | None:
        """Read a file's lines, memoized for the lifetime of the corpus.

        Returns:
            Lines without terminators, or None if the file is unreadable
        """
        if source_file.path in self._lines:
            return self._lines[source_file.path]

        lines: list[str] | None
        try:
            lines = source_file.path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable file %s: %s", source_file.path, e)
            lines = None
        self._lines[source_file.path] = lines
        return lines

    def _walk(self) -> Iterator[SourceFile]:
        if self.root.is_file():
            source_file = self._make_source_file(self.root, self.root.name)
            if source_file:
                yield source_file
            return

        for dirpath, dirnames, filenames in os.walk(self.root):
            rel_dir = Path(dirpath).relative_to(self.root).as_posix()
            prefix = "" if rel_dir == "." else f"{rel_dir}/"

            # Prune in place so os.walk never descends into excluded directories
            dirnames[:] = sorted(
                d
                for d in dirnames
                if (self.include_hidden or not d.startswith("."))
                and not is_excluded(prefix + d, self.exclude_patterns)
            )

            for filename in sorted(filenames):
                if not self.include_hidden and filename.startswith("."):
                    continue
                relative_path = prefix + filename
                if is_excluded(relative_path, self.exclude_patterns):
                    continue
                source_file = self._make_source_file(Path(dirpath) / filename, relative_path)
                if source_file:
                    yield source_file

    def _make_source_file(self, path: Path, relative_path: str) -> SourceFile | None:
        language = self.detect_language(path)
        if not self.accepts_language(language):
            return None
        try:
            size = path.stat().st_size
        except OSError as e:
            logger.debug("Skipping %s: %s", path, e)
            return None
        if size > self.max_file_size:
            logger.debug("Skipping %s: %d bytes exceeds limit", path, size)
            return None
        return SourceFile(path=path, relative_path=relative_path, language=language)


__all__ = [
    "Corpus",
    "is_excluded",
]
