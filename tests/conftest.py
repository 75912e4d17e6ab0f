"""
Shared pytest fixtures for NAVI tests.

Fixtures write small source trees under ``tmp_path``; every test gets a
fresh tree, corpus and resolution cache.
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from navi.adapters.corpus import Corpus
from navi.modules.navigation import FunctionResolver, ResolutionCache

# =============================================================================
# Sample Sources
# =============================================================================

PYTHON_APP = """
def main():
    config = load_config("app.ini")
    run(config)


def load_config(path):
    return parse(path)


def parse(path):
    return {"path": path}


def run(config):
    helper(config)
    helper(config)
"""

PYTHON_UTILS = """
def helper(value):
    return len(value)
"""

JS_CYCLE = """
function a() {
  b();
}

function b() {
  c();
}

function c() {
  b();
}
"""

JAVA_SERVICE = """
public interface Service {
    void run();
}
"""

JAVA_BASE_WORKER = """
public abstract class BaseWorker
        implements Service {
    public abstract void prepare();
}
"""

JAVA_WORKER = """
public class Worker implements Service, Closeable {
    public void run() {
        helper();
    }

    private void helper() {
    }
}
"""

JAVA_OTHER = """
public class Other extends Thread {
    public void run() {
    }
}
"""


# =============================================================================
# Tree Fixtures
# =============================================================================


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative_path: source}`` under tmp_path and return the root."""

    def _write(files: dict[str, str]) -> Path:
        for relative_path, content in files.items():
            path = tmp_path / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def python_app(write_tree) -> Path:
    """Two-file Python tree: main -> load_config -> parse, main -> run -> helper."""
    return write_tree({"app.py": PYTHON_APP, "utils.py": PYTHON_UTILS})


@pytest.fixture
def js_cycle(write_tree) -> Path:
    """JavaScript file where b and c call each other."""
    return write_tree({"a.js": JS_CYCLE})


@pytest.fixture
def java_services(write_tree) -> Path:
    """Java tree: interface Service, abstract BaseWorker and Worker implementing it, unrelated Other."""
    return write_tree(
        {
            "BaseWorker.java": JAVA_BASE_WORKER,
            "Other.java": JAVA_OTHER,
            "Service.java": JAVA_SERVICE,
            "Worker.java": JAVA_WORKER,
        }
    )


@pytest.fixture
def make_resolver() -> Callable[..., FunctionResolver]:
    """Build a resolver with a fresh cache over a root."""

    def _make(root: Path, languages: list[str] | None = None) -> FunctionResolver:
        return FunctionResolver(Corpus(root, languages=languages), ResolutionCache())

    return _make


@pytest.fixture
def fake_clock() -> Callable[..., Callable[[], float]]:
    """Clock returning the given readings in order, then repeating the last one."""

    def _make(*readings: float) -> Callable[[], float]:
        values = list(readings)

        def _clock() -> float:
            if len(values) > 1:
                return values.pop(0)
            return values[0]

        return _clock

    return _make
