"""Tests for modules.navigation.resolver module."""

from __future__ import annotations

from navi.adapters.corpus import Corpus
from navi.adapters.languages import RuleKind
from navi.modules.navigation import FunctionResolver, ResolutionCache
from navi.modules.navigation.resolver import MISSING


class TestResolutionCache:
    """Tests for ResolutionCache."""

    def test_lookup_missing(self):
        """Should return MISSING for keys never stored."""
        cache = ResolutionCache()
        assert cache.lookup("f", "/src") is MISSING
        assert cache.misses == 1

    def test_stores_negative_results(self):
        """A stored None is a cached answer, not a miss."""
        cache = ResolutionCache()
        cache.store("f", "/src", None)
        assert cache.lookup("f", "/src") is None
        assert ("f", "/src") in cache
        assert cache.hits == 1

    def test_keyed_by_root(self):
        """The same name under another root is a separate entry."""
        cache = ResolutionCache()
        cache.store("f", "/a", None)
        assert cache.lookup("f", "/b") is MISSING
        assert len(cache) == 1


class TestResolve:
    """Tests for FunctionResolver.resolve."""

    def test_resolves_definition(self, python_app, make_resolver):
        """Should locate the declaration line and signature."""
        node = make_resolver(python_app).resolve("load_config")
        assert node is not None
        assert node.file_path == "app.py"
        assert node.line == 6
        assert node.signature == "def load_config(path):"
        assert node.language == "python"
        assert node.depth == 0
        assert node.callers == [] and node.callees == []

    def test_not_found(self, python_app, make_resolver):
        """Should return None when no declaration matches."""
        assert make_resolver(python_app).resolve("missing") is None

    def test_call_is_not_a_definition(self, write_tree, make_resolver):
        """Lines that only call a function should not resolve it."""
        root = write_tree({"a.py": "x = compute(1)\n"})
        assert make_resolver(root).resolve("compute") is None

    def test_first_file_wins(self, write_tree, make_resolver):
        """Should return the first declaration in corpus order."""
        root = write_tree(
            {
                "b.py": "def dup():\n    return 2\n",
                "a.py": "def dup():\n    return 1\n",
            }
        )
        assert make_resolver(root).resolve("dup").file_path == "a.py"

    def test_comment_lines_skipped(self, write_tree, make_resolver):
        """Commented-out declarations should not resolve."""
        root = write_tree({"a.py": "# def ghost():\n#     pass\n"})
        assert make_resolver(root).resolve("ghost") is None

    def test_multiline_signature(self, write_tree, make_resolver):
        """Should join continuation lines until parentheses balance."""
        root = write_tree({"a.py": "def build(a,\n          b):\n    return a\n"})
        assert make_resolver(root).resolve("build").signature == "def build(a, b):"

    def test_language_filter_applies(self, write_tree, make_resolver):
        """Should only search files of the requested languages."""
        root = write_tree(
            {
                "a.py": "def process():\n    pass\n",
                "b.go": "func process() {\n}\n",
            }
        )
        assert make_resolver(root, ["go"]).resolve("process").file_path == "b.go"
        assert make_resolver(root, ["python"]).resolve("process").file_path == "a.py"

    def test_unregistered_language_resolves(self, write_tree, make_resolver):
        """Files without a dedicated pattern set use the generic declaration rule."""
        root = write_tree({"app.php": "<?php\nhelper($x);\nfunction process($x) {\n    helper($x);\n}\n"})
        node = make_resolver(root).resolve("process")
        assert (node.file_path, node.line, node.language) == ("app.php", 3, "php")
        assert make_resolver(root).resolve("helper") is None


class TestResolveCaching:
    """Tests for per-request memoization."""

    def test_resolution_memoized(self, python_app):
        """A second resolve should hit the cache."""
        cache = ResolutionCache()
        resolver = FunctionResolver(Corpus(python_app), cache)
        first = resolver.resolve("run")
        second = resolver.resolve("run")
        assert first is second
        assert cache.misses == 1
        assert cache.hits == 1

    def test_negative_result_memoized(self, python_app):
        """Not-found results should also be cached."""
        cache = ResolutionCache()
        resolver = FunctionResolver(Corpus(python_app), cache)
        resolver.resolve("missing")
        resolver.resolve("missing")
        assert ("missing", str(python_app)) in cache
        assert cache.hits == 1

    def test_fresh_cache_per_resolver(self, python_app):
        """Resolvers built without a cache should not share one."""
        corpus = Corpus(python_app)
        assert FunctionResolver(corpus).cache is not FunctionResolver(corpus).cache


class TestIterDeclarations:
    """Tests for FunctionResolver.iter_declarations."""

    def test_all_declarations_in_order(self, python_app, make_resolver):
        """Should yield every declaration in corpus then line order."""
        names = [m.name for m in make_resolver(python_app).iter_declarations()]
        assert names == ["main", "load_config", "parse", "run", "helper"]

    def test_abstract_kind_reported(self, write_tree, make_resolver):
        """Should report the kind of the matching rule."""
        root = write_tree(
            {
                "Shape.java": """
                public abstract class Shape {
                    abstract double area();
                }
                """
            }
        )
        matches = list(make_resolver(root).iter_declarations("area"))
        assert len(matches) == 1
        assert matches[0].kind is RuleKind.ABSTRACT_DECLARATION
        assert matches[0].line_index == 1
        assert matches[0].column == 21

    def test_copy_at_is_independent(self, python_app, make_resolver):
        """Copies of a resolved node should not share children."""
        template = make_resolver(python_app).resolve("run")
        first = template.copy_at(1)
        second = template.copy_at(2)
        first.callees.append(template.copy_at(3))
        assert second.callees == []
        assert template.callees == []
        assert (first.depth, second.depth) == (1, 2)
