"""Tests for cli.cli module (typer-based)."""

from __future__ import annotations

import json
import sys

from typer.testing import CliRunner

from navi.cli.cli import app, main
from navi.cli.commands.report import (
    _print_calls_result,
    _print_context_result,
    _print_implementations_result,
    _print_search_result,
    _print_trace_result,
)
from navi.modules.navigation import (
    Direction,
    FunctionCallsResult,
    FunctionContextResult,
    FunctionNode,
    FunctionSearchResult,
    ImplementationSearchResult,
    TraceResult,
)

runner = CliRunner()


class TestCLIHelp:
    """Tests for CLI help commands."""

    def test_main_help(self):
        """Should show main help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Lexical code navigation" in result.stdout

    def test_trace_help(self):
        """Should show trace options."""
        result = runner.invoke(app, ["trace", "--help"])
        assert result.exit_code == 0
        assert "--direction" in result.stdout
        assert "--max-depth" in result.stdout


class TestTraceCommand:
    """Tests for the trace command."""

    def test_json_output(self, python_app):
        """--json prints the report and metadata."""
        result = runner.invoke(
            app, ["trace", "main", str(python_app), "--direction", "callees", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["metadata"]["total_nodes"] == 5
        assert data["metadata"]["direction"] == "callees"
        assert data["report"]["function_name"] == "main"

    def test_text_output(self, python_app):
        """Text output draws the tree."""
        result = runner.invoke(app, ["trace", "main", str(python_app), "-d", "callees"])
        assert result.exit_code == 0
        assert "CALL CHAIN: main" in result.stdout
        assert "-> load_config (app.py:6)" in result.stdout
        assert "-> helper (utils.py:1)" in result.stdout

    def test_callers(self, python_app):
        """Callers are drawn with a left arrow."""
        result = runner.invoke(app, ["trace", "helper", str(python_app), "-d", "callers"])
        assert result.exit_code == 0
        assert "<- run (app.py:14)" in result.stdout

    def test_not_found(self, python_app):
        """An unknown function is reported, not an error."""
        result = runner.invoke(app, ["trace", "nope", str(python_app)])
        assert result.exit_code == 0
        assert "Function 'nope' not found." in result.stdout

    def test_missing_path(self, tmp_path):
        """A missing root exits with status 1."""
        result = runner.invoke(app, ["trace", "main", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Error: Path does not exist" in result.output

    def test_invalid_depth(self, python_app):
        """Invalid request values exit with status 1."""
        result = runner.invoke(app, ["trace", "main", str(python_app), "--max-depth", "0"])
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestOtherCommands:
    """Tests for find, calls, context and languages."""

    def test_find(self, python_app):
        """find prints the definition and references."""
        result = runner.invoke(app, ["find", "helper", str(python_app), "--exact"])
        assert result.exit_code == 0
        assert "FUNCTION SEARCH: helper" in result.stdout
        assert "Definition: utils.py:1" in result.stdout
        assert "References (3):" in result.stdout

    def test_find_json_without_references(self, python_app):
        """--no-references keeps only the definition."""
        result = runner.invoke(
            app, ["find", "helper", str(python_app), "--no-references", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["report"]["references"] == []
        assert data["metadata"]["has_definition"] is True

    def test_calls(self, python_app):
        """calls lists each call site."""
        result = runner.invoke(app, ["calls", "run", str(python_app)])
        assert result.exit_code == 0
        assert "CALLS FROM: run" in result.stdout
        assert "helper  (app.py:15)" in result.stdout
        assert "helper  (app.py:16)" in result.stdout

    def test_calls_none(self, python_app):
        """Functions making only builtin calls report none."""
        result = runner.invoke(app, ["calls", "helper", str(python_app)])
        assert result.exit_code == 0
        assert "No calls found." in result.stdout

    def test_context(self, python_app):
        """context prints location and module."""
        result = runner.invoke(app, ["context", "parse", str(python_app)])
        assert result.exit_code == 0
        assert "FUNCTION CONTEXT: parse" in result.stdout
        assert "Location:  app.py:10" in result.stdout
        assert "Module: app (app.py)" in result.stdout

    def test_implementations(self, java_services):
        """implementations lists each type, marking abstract ones."""
        result = runner.invoke(app, ["implementations", "Service", str(java_services)])
        assert result.exit_code == 0
        assert "IMPLEMENTATIONS: Service" in result.stdout
        assert "BaseWorker [abstract]  (BaseWorker.java:1, java)" in result.stdout
        assert "Worker  (Worker.java:1, java)" in result.stdout
        assert "    - helper" in result.stdout

    def test_implementations_json_without_abstract(self, java_services):
        """--no-abstract drops abstract types from the JSON report."""
        result = runner.invoke(
            app, ["implementations", "Service", str(java_services), "--no-abstract", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["metadata"]["total_implementations"] == 1
        assert data["metadata"]["include_abstract"] is False
        assert data["report"]["implementations"][0]["name"] == "Worker"

    def test_implementations_missing_path(self, tmp_path):
        """A missing root exits with status 1."""
        result = runner.invoke(app, ["implementations", "Service", str(tmp_path / "missing")])
        assert result.exit_code == 1

    def test_languages(self):
        """languages marks dedicated and generic pattern sets."""
        result = runner.invoke(app, ["languages"])
        assert result.exit_code == 0
        assert "SUPPORTED LANGUAGES" in result.stdout
        lines = {line.split()[0]: line for line in result.stdout.splitlines() if line.startswith("  ")}
        assert "dedicated" in lines["python"]
        assert ".py" in lines["python"]
        assert "generic" in lines["ruby"]

    def test_languages_json(self):
        """JSON form lists registered languages separately."""
        result = runner.invoke(app, ["languages", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert "python" in data["registered"]
        assert data["languages"]["go"]["extensions"] == [".go"]


class TestMain:
    """Tests for the console entry point."""

    def test_main_returns_zero(self, monkeypatch):
        """main() returns the exit status instead of raising."""
        monkeypatch.setattr(sys, "argv", ["navi", "languages"])
        assert main() == 0

    def test_main_returns_error_status(self, monkeypatch, tmp_path):
        """Failures surface as a non-zero status."""
        monkeypatch.setattr(sys, "argv", ["navi", "trace", "main", str(tmp_path / "missing")])
        assert main() == 1


class TestPrinters:
    """Tests for the plain-text result printers."""

    def test_trace_truncated(self, capsys):
        """Truncated traces say so."""
        root = FunctionNode(
            function_name="main", file_path="app.py", line=1, signature="def main():", language="python"
        )
        root.callees.append(FunctionNode.external("print", depth=1))
        result = TraceResult(
            root=root,
            function_name="main",
            search_path="/src",
            direction=Direction.CALLEES,
            max_depth=3,
            total_nodes=2,
            truncated=True,
        )
        _print_trace_result(result)
        out = capsys.readouterr().out
        assert "Truncated:   yes (timeout reached)" in out
        assert "-> print (external)" in out

    def test_empty_results(self, capsys):
        """Empty results print placeholders."""
        _print_search_result(FunctionSearchResult(function_name="x", search_path="/src"))
        _print_calls_result(FunctionCallsResult(function_name="x", search_path="/src"))
        _print_context_result(FunctionContextResult(function_name="x", search_path="/src"))
        _print_implementations_result(ImplementationSearchResult(interface_name="x", search_path="/src"))
        out = capsys.readouterr().out
        assert "No definition found." in out
        assert "No references found." in out
        assert "No calls found." in out
        assert "No implementations found." in out
        assert "Function 'x' not found." in out
