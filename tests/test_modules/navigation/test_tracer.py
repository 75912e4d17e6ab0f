"""Tests for modules.navigation.tracer module."""

from __future__ import annotations

import pytest

from navi.adapters.corpus import Corpus
from navi.common.logging import LogLevel, RunLogger
from navi.modules.navigation import (
    CallChainTracer,
    Direction,
    FunctionNode,
    VisitedPath,
    trace_call_chain,
)
from navi.modules.navigation.models import EXTERNAL_PATH


def _names(nodes: list[FunctionNode]) -> list[str]:
    return [node.function_name for node in nodes]


class TestVisitedPath:
    """Tests for the immutable visited path."""

    def test_extend_is_persistent(self):
        """Extending should not modify the original path."""
        node = FunctionNode("f", "a.py", 1, "def f():", "python")
        empty = VisitedPath()
        extended = empty.extend(node, 0)
        assert ("a.py", "f", 0) in extended
        assert ("a.py", "f", 0) not in empty
        assert extended.has_ancestor(node.copy_at(3))
        assert not empty.has_ancestor(node)


class TestTraceNotFound:
    """Tests for unresolvable roots."""

    def test_missing_function(self, python_app):
        """Should return an empty, well-formed result."""
        result = trace_call_chain("does_not_exist", str(python_app))
        assert result.root is None
        assert not result.found
        assert result.total_nodes == 0
        data = result.to_dict()
        assert data["report"] is None
        assert data["metadata"]["found"] is False
        assert data["metadata"]["function_name"] == "does_not_exist"


class TestTraceCallees:
    """Tests for callee expansion."""

    def test_full_tree(self, python_app):
        """Should expand callees across files."""
        result = trace_call_chain("main", str(python_app), direction="callees")
        root = result.root
        assert _names(root.callees) == ["load_config", "run"]
        assert _names(root.callees[0].callees) == ["parse"]
        helper = root.callees[1].callees[0]
        assert (helper.function_name, helper.file_path, helper.line) == ("helper", "utils.py", 1)
        assert result.total_nodes == 5
        assert root.callers == []

    def test_repeated_calls_collapse(self, python_app):
        """run() calls helper twice; helper appears once."""
        result = trace_call_chain("run", str(python_app), direction="callees")
        assert _names(result.root.callees) == ["helper"]

    def test_depths_bounded(self, python_app):
        """Every node depth should be within max_depth."""
        for max_depth in (1, 2, 5):
            result = trace_call_chain("main", str(python_app), max_depth=max_depth)
            assert all(node.depth <= max_depth for node in result.root.iter_nodes())

    def test_max_depth_one(self, python_app):
        """Only direct callees, with no grandchildren."""
        result = trace_call_chain("main", str(python_app), direction="callees", max_depth=1)
        assert _names(result.root.callees) == ["load_config", "run"]
        assert all(child.callees == [] for child in result.root.callees)
        assert result.total_nodes == 3

    def test_self_recursion_terminates(self, write_tree):
        """A recursive function is not its own callee or caller."""
        root = write_tree(
            {
                "math.py": """
                def fact(n):
                    if n <= 1:
                        return 1
                    return n * fact(n - 1)
                """
            }
        )
        result = trace_call_chain("fact", str(root))
        assert result.total_nodes == 1
        assert result.root.callers == [] and result.root.callees == []

    def test_mutual_recursion_cut_at_ancestor(self, js_cycle):
        """a -> b -> c -> b: the repeated b is attached as a leaf."""
        result = trace_call_chain("a", str(js_cycle), direction="callees")
        b = result.root.callees[0]
        c = b.callees[0]
        assert _names([b, c]) == ["b", "c"]
        assert _names(c.callees) == ["b"]
        assert c.callees[0].callees == []
        assert c.callees[0].depth == 3
        assert result.total_nodes == 4
        assert not result.truncated

    def test_diamond_repeats_shared_subtree(self, write_tree):
        """a -> b, c; b -> d; c -> d: d appears under both branches."""
        root = write_tree(
            {
                "graph.js": """
                function a() {
                  b();
                  c();
                }

                function b() {
                  d();
                }

                function c() {
                  d();
                }

                function d() {
                  return 1;
                }
                """
            }
        )
        result = trace_call_chain("a", str(root), direction="callees")
        b, c = result.root.callees
        assert _names([b, c]) == ["b", "c"]
        assert _names(b.callees) == ["d"]
        assert _names(c.callees) == ["d"]
        assert b.callees[0] is not c.callees[0]
        assert b.callees[0].depth == c.callees[0].depth == 2
        assert result.total_nodes == 5
        assert not result.truncated

    def test_unregistered_language_trace(self, write_tree):
        """Languages without a dedicated pattern set still trace."""
        root = write_tree(
            {
                "app.php": """
                <?php
                function process($x) { helper($x); }

                function helper($x) {
                    return strlen($x);
                }
                """
            }
        )
        result = trace_call_chain("process", str(root), direction="callees", languages=["php"])
        assert result.found
        assert (result.root.file_path, result.root.line, result.root.language) == ("app.php", 2, "php")
        [helper] = result.root.callees
        assert (helper.function_name, helper.line) == ("helper", 4)
        assert _names(helper.callees) == ["strlen"]
        assert helper.callees[0].is_external

        callers = trace_call_chain("helper", str(root), direction="callers")
        assert _names(callers.root.callers) == ["process"]

    def test_unresolved_callee_becomes_placeholder(self, write_tree):
        """Unknown callees are external leaves; builtins are dropped."""
        root = write_tree(
            {
                "job.py": """
                def outer():
                    print("x")
                    unknown_lib(1)
                """
            }
        )
        result = trace_call_chain("outer", str(root), direction="callees")
        [placeholder] = result.root.callees
        assert placeholder.function_name == "unknown_lib"
        assert placeholder.file_path == EXTERNAL_PATH
        assert placeholder.line == 0
        assert placeholder.signature == "unknown_lib()"
        assert placeholder.depth == 1

    def test_include_external_keeps_builtins(self, write_tree):
        """With include_external, builtins appear as placeholders too."""
        root = write_tree({"job.py": "def outer():\n    print('x')\n    unknown_lib(1)\n"})
        result = trace_call_chain("outer", str(root), direction="callees", include_external=True)
        assert _names(result.root.callees) == ["print", "unknown_lib"]
        assert all(child.is_external for child in result.root.callees)


class TestTraceCallers:
    """Tests for caller expansion."""

    def test_callers_chain(self, python_app):
        """helper <- run <- main, with repeated call sites collapsed."""
        result = trace_call_chain("helper", str(python_app), direction="callers")
        root = result.root
        assert _names(root.callers) == ["run"]
        run = root.callers[0]
        assert (run.file_path, run.line, run.depth) == ("app.py", 14, 1)
        assert _names(run.callers) == ["main"]
        assert run.callers[0].callers == []
        assert root.callees == []
        assert result.total_nodes == 3

    def test_both_directions(self, python_app):
        """Both populates callers and callees of the root."""
        result = trace_call_chain("run", str(python_app), direction=Direction.BOTH)
        assert _names(result.root.callers) == ["main"]
        assert _names(result.root.callees) == ["helper"]
        assert result.direction is Direction.BOTH

    def test_callers_in_other_languages(self, write_tree):
        """Callers are found in any corpus language."""
        root = write_tree(
            {
                "lib.py": "def shared():\n    pass\n",
                "main.go": "func Start() {\n    shared()\n}\n",
            }
        )
        result = trace_call_chain("shared", str(root), direction="callers")
        [caller] = result.root.callers
        assert (caller.function_name, caller.file_path, caller.language) == ("Start", "main.go", "go")


class TestLanguageFilter:
    """Tests for the language allow-list."""

    def test_same_name_different_languages(self, write_tree):
        """The filter decides which definition is the root."""
        root = write_tree(
            {
                "a.py": "def process():\n    pass\n",
                "a.go": "func process() {\n}\n",
            }
        )
        go = trace_call_chain("process", str(root), languages=["go"])
        python = trace_call_chain("process", str(root), languages=["python"])
        assert (go.root.file_path, go.root.language) == ("a.go", "go")
        assert (python.root.file_path, python.root.language) == ("a.py", "python")


class TestTimeout:
    """Tests for the time budget."""

    def test_truncates_and_keeps_partial_tree(self, python_app, fake_clock):
        """Expansion stops once the budget is spent; discovered nodes remain."""
        # start, main, load_config, then out of time for parse and run
        clock = fake_clock(0.0, 0.0, 0.5, 2.0)
        result = trace_call_chain(
            "main", str(python_app), direction="callees", timeout_ms=1000, clock=clock
        )
        root = result.root
        assert result.truncated
        assert _names(root.callees) == ["load_config", "run"]
        assert _names(root.callees[0].callees) == ["parse"]
        assert root.callees[0].callees[0].callees == []
        assert root.callees[1].callees == []
        assert result.total_nodes == 4
        assert result.to_dict()["metadata"]["truncated"] is True

    def test_zero_budget_returns_root_only(self, python_app, fake_clock):
        """A zero budget still returns the resolved root."""
        result = trace_call_chain(
            "main", str(python_app), timeout_ms=0, clock=fake_clock(0.0)
        )
        assert result.found
        assert result.truncated
        assert result.total_nodes == 1

    def test_generous_budget_not_truncated(self, python_app, fake_clock):
        """A frozen clock never exhausts a positive budget."""
        result = trace_call_chain("main", str(python_app), timeout_ms=10, clock=fake_clock(0.0))
        assert not result.truncated
        assert result.total_nodes == 5


class TestTracerRunLogging:
    """Tests for structured run logging during a trace."""

    def test_phases_and_cycle_logged(self, js_cycle, tmp_path):
        """Phases are logged at level 1 and cycle hits at level 3."""
        run_logger = RunLogger(run_id="trace_test", logs_dir=tmp_path / "logs")
        tracer = CallChainTracer(Corpus(js_cycle), run_logger=run_logger)
        tracer.trace("a", Direction.CALLEES)

        phases = run_logger.read_logs(level=LogLevel.PHASE)
        assert [(e["phase"], e["status"]) for e in phases] == [
            ("resolution", "started"),
            ("resolution", "completed"),
            ("callees", "started"),
            ("callees", "completed"),
        ]
        assert phases[-1]["stats"]["cycles"] == 1

        [cycle] = run_logger.read_logs(level=LogLevel.DETAIL)
        assert cycle["status"] == "skipped"
        assert cycle["stats"]["function_name"] == "b"
        assert cycle["stats"]["reason"] == "cycle"

    def test_timeout_logged(self, python_app, tmp_path, fake_clock):
        """Timeout truncation is logged once."""
        run_logger = RunLogger(run_id="timeout_test", logs_dir=tmp_path / "logs")
        tracer = CallChainTracer(
            Corpus(python_app), timeout_ms=0, clock=fake_clock(0.0), run_logger=run_logger
        )
        tracer.trace("main", Direction.BOTH)
        details = run_logger.read_logs(level=LogLevel.DETAIL)
        assert [e["status"] for e in details] == ["truncated"]

    def test_steps_logged(self, python_app, tmp_path):
        """Caller scans and body isolations are logged as steps."""
        run_logger = RunLogger(run_id="steps_test", logs_dir=tmp_path / "logs")
        tracer = CallChainTracer(Corpus(python_app), max_depth=1, run_logger=run_logger)
        tracer.trace("run", Direction.BOTH)

        completed = [
            e for e in run_logger.read_logs(level=LogLevel.STEP) if e["status"] == "completed"
        ]
        assert [(e["phase"], e["step"]) for e in completed] == [
            ("callers", "scan_callers"),
            ("callees", "isolate_body"),
        ]
        scan, body = completed
        assert scan["items_processed"] == 2
        assert scan["items_created"] == 1
        assert body["items_created"] == 1
        assert body["stats"] == {"file_path": "app.py", "end_line": 16, "closed": True}

    def test_unclosed_body_logged(self, write_tree, tmp_path):
        """A body capped by the fallback is logged with closed=False."""
        root = write_tree({"open.js": "function open() {\n  helper();\n"})
        run_logger = RunLogger(run_id="open_test", logs_dir=tmp_path / "logs")
        CallChainTracer(Corpus(root), run_logger=run_logger).trace("open", Direction.CALLEES)
        [body] = [
            e for e in run_logger.read_logs(level=LogLevel.STEP) if e["status"] == "completed"
        ]
        assert body["stats"]["closed"] is False

    def test_phase_error_logged(self, python_app, tmp_path, monkeypatch):
        """An exception during expansion closes the phase with an error."""
        run_logger = RunLogger(run_id="error_test", logs_dir=tmp_path / "logs")
        tracer = CallChainTracer(Corpus(python_app), run_logger=run_logger)

        def _fail(node):
            raise RuntimeError("disk gone")

        monkeypatch.setattr(tracer, "find_callees", _fail)
        with pytest.raises(RuntimeError):
            tracer.trace("main", Direction.CALLEES)

        last = run_logger.read_logs(level=LogLevel.PHASE)[-1]
        assert (last["phase"], last["status"], last["error"]) == ("callees", "error", "disk gone")
