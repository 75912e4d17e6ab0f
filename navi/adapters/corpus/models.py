"""
Shared data models for the file corpus.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

__all__ = [
    "SourceFile",
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_MAX_FILE_SIZE",
]

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    # Dependencies
    "node_modules", "vendor", "packages", "bower_components",
    # Version control
    ".git", ".svn", ".hg",
    # Build outputs
    "dist", "build", "out", "target", "bin", "obj",
    ".next", ".nuxt", ".vuepress", ".docusaurus",
    # Test artifacts and coverage
    "coverage", ".nyc_output", ".coverage", "htmlcov", "test-results", "junit",
    # Editors and OS files
    ".vscode", ".idea", ".vs", "*.swp", "*.swo", "*~",
    ".DS_Store", "Thumbs.db", "desktop.ini",
    # Logs, temp and caches
    "logs", "*.log", "tmp", "temp", ".tmp", ".temp",
    ".cache", ".parcel-cache", ".webpack", ".rollup.cache",
    # Python environments
    "__pycache__", ".venv",
)

DEFAULT_MAX_FILE_SIZE = 1024 * 1024  # 1 MiB


@dataclass(frozen=True)
class SourceFile:
    """A source file in the corpus."""

    path: Path
    relative_path: str  # POSIX separators, relative to the corpus root
    language: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "path": str(self.path),
            "relative_path": self.relative_path,
            "language": self.language,
        }
