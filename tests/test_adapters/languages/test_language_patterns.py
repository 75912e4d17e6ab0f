"""Tests for the per-language declaration and class rules."""

from __future__ import annotations

import pytest

from navi.adapters.languages import RuleKind, get_pattern_set
from navi.modules.navigation.base import first_declaration


def _declared(language: str, line: str) -> tuple[str, RuleKind] | None:
    pattern_set = get_pattern_set(language)
    found = first_declaration(line, pattern_set.compile_declarations(), pattern_set)
    return (found[0], found[1].kind) if found else None


def _class_declared(language: str, line: str) -> tuple[str, RuleKind] | None:
    pattern_set = get_pattern_set(language)
    found = first_declaration(line, pattern_set.compile_classes(), pattern_set)
    return (found[0], found[1].kind) if found else None


DECL = RuleKind.DECLARATION
ABSTRACT = RuleKind.ABSTRACT_DECLARATION


class TestFunctionDeclarations:
    """Lines each language should classify as function declarations."""

    @pytest.mark.parametrize(
        "language,line,expected",
        [
            ("python", "def handle(request):", ("handle", DECL)),
            ("python", "    async def fetch(self, url):", ("fetch", DECL)),
            ("javascript", "function loadUser(id) {", ("loadUser", DECL)),
            ("javascript", "export async function save(user) {", ("save", DECL)),
            ("javascript", "const add = (a, b) => a + b;", ("add", DECL)),
            ("javascript", "const double = x => x * 2;", ("double", DECL)),
            ("javascript", "  render() {", ("render", DECL)),
            ("typescript", "  abstract area(): number;", ("area", ABSTRACT)),
            ("typescript", "  save(item: Item): void;", ("save", ABSTRACT)),
            ("java", "    public static void main(String[] args) {", ("main", DECL)),
            ("java", "    abstract double area();", ("area", ABSTRACT)),
            ("java", "    void draw(Canvas c);", ("draw", ABSTRACT)),
            ("csharp", "    public async Task<int> LoadAsync(string id)", ("LoadAsync", DECL)),
            ("csharp", "    void Save(Item item);", ("Save", ABSTRACT)),
            ("go", "func (s *Server) Start() error {", ("Start", DECL)),
            ("go", "func Map[T any](xs []T) []T {", ("Map", DECL)),
            ("rust", "pub fn parse_args() -> Args {", ("parse_args", DECL)),
            ("rust", "    fn area(&self) -> f64;", ("area", ABSTRACT)),
            ("cpp", "int Widget::render(int x) {", ("render", DECL)),
            ("cpp", "    virtual void draw() = 0;", ("draw", ABSTRACT)),
            ("cpp", "static void helper(void)", ("helper", DECL)),
        ],
    )
    def test_declaration(self, language, line, expected):
        """Should classify the line as a declaration of the expected name."""
        assert _declared(language, line) == expected


class TestNotDeclarations:
    """Lines that contain calls or control flow but declare nothing."""

    @pytest.mark.parametrize(
        "language,line",
        [
            ("python", "    result = handle(request)"),
            ("javascript", "  if (ready) {"),
            ("javascript", "    doWork();"),
            ("java", "        return compute(x);"),
            ("java", "        String name = getName();"),
            ("go", "    result := compute(x)"),
            ("rust", "    let total = sum(values);"),
            ("cpp", "    return compute(x);"),
        ],
    )
    def test_not_declaration(self, language, line):
        """Should not classify the line as a declaration."""
        assert _declared(language, line) is None


class TestClassDeclarations:
    """Class, type and trait openings."""

    @pytest.mark.parametrize(
        "language,line,expected",
        [
            ("python", "class Repository(ABC):", ("Repository", ABSTRACT)),
            ("python", "class Handler(Base):", ("Handler", DECL)),
            ("typescript", "export abstract class Shape {", ("Shape", ABSTRACT)),
            ("typescript", "export interface Store {", ("Store", ABSTRACT)),
            ("javascript", "export default class App {", ("App", DECL)),
            ("java", "public abstract class Shape {", ("Shape", ABSTRACT)),
            ("java", "public interface Store {", ("Store", ABSTRACT)),
            ("java", "public class Circle extends Shape {", ("Circle", DECL)),
            ("csharp", "public interface IStore", ("IStore", ABSTRACT)),
            ("go", "type Store interface {", ("Store", ABSTRACT)),
            ("go", "type Server struct {", ("Server", DECL)),
            ("rust", "pub trait Shape {", ("Shape", ABSTRACT)),
            ("rust", "impl Shape for Circle {", ("Circle", DECL)),
            ("cpp", "class Widget : public Base {", ("Widget", DECL)),
        ],
    )
    def test_class_declaration(self, language, line, expected):
        """Should classify the line as a class opening of the expected name."""
        assert _class_declared(language, line) == expected

    def test_cpp_forward_declaration_ignored(self):
        """A forward declaration should not open a class scope."""
        assert _class_declared("cpp", "class Widget;") is None


class TestLanguageData:
    """Keywords, builtins and block styles."""

    def test_python_uses_indentation(self):
        """Python bodies should be bounded by indentation."""
        assert get_pattern_set("python").block_style == "indent"
        assert get_pattern_set("go").block_style == "braces"

    def test_keywords_are_not_builtins(self):
        """Control-flow keywords are filtered separately from builtins."""
        python = get_pattern_set("python")
        assert python.is_keyword("if")
        assert python.is_builtin("print")
        assert not python.is_builtin("if")

    def test_comment_prefixes(self):
        """Python comments start with '#'; brace languages with '//'."""
        assert get_pattern_set("python").comment_prefixes == ("#",)
        assert "//" in get_pattern_set("java").comment_prefixes
