"""
Pydantic models for NAVI configuration and requests.

Uses pydantic-settings for environment variable validation and type coercion.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from navi.adapters.corpus import DEFAULT_EXCLUDE_PATTERNS, DEFAULT_MAX_FILE_SIZE
from navi.modules.navigation import Direction

# =============================================================================
# Environment Settings (from .env file)
# =============================================================================


class NaviSettings(BaseSettings):
    """
    Navigation engine settings.

    Usage:
        settings = NaviSettings()
        print(settings.timeout_ms)

    List values are read from the environment as JSON, e.g.
    ``NAVI_EXCLUDE_PATTERNS='["node_modules", "dist"]'``.
    """

    model_config = SettingsConfigDict(env_prefix="NAVI_", env_file=".env", extra="ignore")

    # Corpus
    exclude_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    include_hidden: bool = False
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=1)

    # Tracing
    timeout_ms: int = Field(default=30_000, ge=0)
    default_max_depth: int = Field(default=5, ge=1)
    max_results: int = Field(default=50, ge=1)
    signature_lines: int = Field(default=3, ge=1)
    body_fallback_lines: int = Field(default=50, ge=1)

    # Logging
    log_level: str = "WARNING"
    log_runs: bool = False
    logs_dir: str = "workspace/logs"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v


# =============================================================================
# Request Models
# =============================================================================


class _SearchRequest(BaseModel):
    """Fields shared by every request: where to search and in which languages."""

    path: str = Field(..., min_length=1, description="Root directory (or file) to search")
    languages: list[str] | None = Field(default=None, description="Optional language allow-list")

    @field_validator("languages", mode="before")
    @classmethod
    def normalize_languages(cls, v: list[str] | None) -> list[str] | None:
        """Lowercase language names and drop blanks; an empty list means no filter."""
        if v is None:
            return None
        if isinstance(v, str):
            v = v.split(",")
        languages = [lang.strip().lower() for lang in v if isinstance(lang, str) and lang.strip()]
        return languages or None


class _NavigationRequest(_SearchRequest):
    """Fields shared by every request about one function."""

    function_name: str = Field(..., min_length=1, description="Function name to look for")

    @field_validator("function_name", mode="before")
    @classmethod
    def strip_function_name(cls, v: str) -> str:
        """Strip surrounding whitespace before the length check."""
        if isinstance(v, str):
            return v.strip()
        return v


class TraceCallChainRequest(_NavigationRequest):
    """Request for a call-chain trace."""

    direction: Direction = Field(default=Direction.BOTH, description="callers, callees or both")
    max_depth: int | None = Field(default=None, ge=1, description="Maximum edges; settings default when None")
    include_external: bool = Field(default=False, description="Keep builtin/denylisted callees")
    timeout_ms: int | None = Field(default=None, ge=0, description="Time budget; settings default when None")

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v: str) -> str:
        """Normalize direction to lowercase before Enum validation."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class FindFunctionRequest(_NavigationRequest):
    """Request for a function search."""

    exact_match: bool = Field(default=False, description="Compare names verbatim")
    include_references: bool = Field(default=True, description="Collect call references")
    max_results: int | None = Field(default=None, ge=1, description="Maximum references returned")


class FindFunctionCallsRequest(_NavigationRequest):
    """Request for the calls made inside a function."""

    include_builtins: bool = Field(default=False, description="Keep builtin/denylisted calls")
    max_results: int | None = Field(default=None, ge=1, description="Maximum calls returned")


class GetFunctionContextRequest(_NavigationRequest):
    """Request for the context of a function."""

    include_parent_class: bool = Field(default=True, description="Describe the enclosing class")
    include_documentation: bool = Field(default=True, description="Extract documentation")


class FindImplementationsRequest(_SearchRequest):
    """Request for the implementations of an interface or base type."""

    interface_name: str = Field(..., min_length=1, description="Interface, trait or base class name")
    include_abstract: bool = Field(default=True, description="Keep abstract implementations")
    max_results: int | None = Field(default=None, ge=1, description="Maximum implementations returned")

    @field_validator("interface_name", mode="before")
    @classmethod
    def strip_interface_name(cls, v: str) -> str:
        """Strip surrounding whitespace before the length check."""
        if isinstance(v, str):
            return v.strip()
        return v


__all__ = [
    "NaviSettings",
    "TraceCallChainRequest",
    "FindFunctionRequest",
    "FindFunctionCallsRequest",
    "GetFunctionContextRequest",
    "FindImplementationsRequest",
]
