"""Tests for config_models module (pydantic-settings integration)."""

from typing import Any

import pytest
from pydantic import ValidationError

from navi.modules.navigation import Direction
from navi.services.config_models import (
    FindFunctionCallsRequest,
    FindFunctionRequest,
    GetFunctionContextRequest,
    NaviSettings,
    TraceCallChainRequest,
)

# Type alias to help with BaseSettings._env_file parameter which isn't in the type signature
_NaviSettings: Any = NaviSettings


class TestNaviSettings:
    """Tests for NaviSettings."""

    def test_default_values(self):
        """Should have sensible defaults."""
        settings = _NaviSettings(_env_file=None)
        assert settings.timeout_ms == 30_000
        assert settings.default_max_depth == 5
        assert settings.max_results == 50
        assert settings.signature_lines == 3
        assert settings.body_fallback_lines == 50
        assert settings.include_hidden is False
        assert settings.log_runs is False
        assert "node_modules" in settings.exclude_patterns

    def test_loads_from_env(self, monkeypatch):
        """Should load values from NAVI_ environment variables."""
        monkeypatch.setenv("NAVI_TIMEOUT_MS", "500")
        monkeypatch.setenv("NAVI_DEFAULT_MAX_DEPTH", "2")
        monkeypatch.setenv("NAVI_EXCLUDE_PATTERNS", '["gen", "third_party"]')
        settings = _NaviSettings(_env_file=None)
        assert settings.timeout_ms == 500
        assert settings.default_max_depth == 2
        assert settings.exclude_patterns == ["gen", "third_party"]

    def test_log_level_normalized(self, monkeypatch):
        """Should uppercase the log level."""
        monkeypatch.setenv("NAVI_LOG_LEVEL", "debug")
        assert _NaviSettings(_env_file=None).log_level == "DEBUG"

    def test_rejects_invalid_values(self, monkeypatch):
        """Should validate numeric bounds."""
        monkeypatch.setenv("NAVI_DEFAULT_MAX_DEPTH", "0")
        with pytest.raises(ValidationError):
            _NaviSettings(_env_file=None)


class TestTraceCallChainRequest:
    """Tests for TraceCallChainRequest."""

    def test_defaults(self):
        """Optional fields default to None or the documented values."""
        request = TraceCallChainRequest(function_name="main", path="/src")
        assert request.direction is Direction.BOTH
        assert request.max_depth is None
        assert request.timeout_ms is None
        assert request.include_external is False
        assert request.languages is None

    def test_direction_case_insensitive(self):
        """Direction should be normalized to lowercase."""
        request = TraceCallChainRequest(function_name="main", path="/src", direction=" Callees ")
        assert request.direction is Direction.CALLEES

    def test_invalid_direction(self):
        """Unknown directions are rejected."""
        with pytest.raises(ValidationError):
            TraceCallChainRequest(function_name="main", path="/src", direction="sideways")

    def test_max_depth_positive(self):
        """max_depth must be at least 1."""
        with pytest.raises(ValidationError):
            TraceCallChainRequest(function_name="main", path="/src", max_depth=0)

    def test_negative_timeout_rejected(self):
        """timeout_ms must not be negative."""
        with pytest.raises(ValidationError):
            TraceCallChainRequest(function_name="main", path="/src", timeout_ms=-1)


class TestNavigationRequestFields:
    """Tests for fields shared by every request."""

    def test_function_name_stripped(self):
        """Surrounding whitespace is removed."""
        request = FindFunctionRequest(function_name="  load  ", path=".")
        assert request.function_name == "load"

    def test_blank_function_name_rejected(self):
        """A blank name is a validation error."""
        with pytest.raises(ValidationError):
            FindFunctionRequest(function_name="   ", path=".")

    def test_empty_path_rejected(self):
        """An empty path is a validation error."""
        with pytest.raises(ValidationError):
            FindFunctionCallsRequest(function_name="f", path="")

    def test_languages_normalized(self):
        """Languages are lowercased; a comma string is accepted."""
        request = GetFunctionContextRequest(function_name="f", path=".", languages="Python, GO")
        assert request.languages == ["python", "go"]
        request = GetFunctionContextRequest(function_name="f", path=".", languages=["Rust", " "])
        assert request.languages == ["rust"]

    def test_empty_languages_means_no_filter(self):
        """An empty list disables filtering."""
        request = FindFunctionRequest(function_name="f", path=".", languages=[])
        assert request.languages is None

    def test_request_specific_defaults(self):
        """Each request type carries its own defaults."""
        find = FindFunctionRequest(function_name="f", path=".")
        assert find.exact_match is False and find.include_references is True
        calls = FindFunctionCallsRequest(function_name="f", path=".")
        assert calls.include_builtins is False and calls.max_results is None
        context = GetFunctionContextRequest(function_name="f", path=".")
        assert context.include_parent_class is True and context.include_documentation is True
