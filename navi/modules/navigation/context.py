"""
Function context - the class and module surrounding a definition.

Provides documentation extraction, parameter parsing, import/export
discovery and the get_function_context operation.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import PurePosixPath
from typing import Any

from navi.adapters.corpus import SourceFile
from navi.adapters.languages import LanguagePatternSet, get_pattern_set

from .base import extract_signature, first_declaration, is_comment_line
from .body import isolate_body
from .models import (
    ClassContext,
    FunctionContext,
    FunctionDefinition,
    ModuleContext,
)
from .resolver import DeclarationMatch, FunctionResolver
from .scope import enclosing_class

logger = logging.getLogger(__name__)

DOC_LOOKBACK_LINES = 10


# =============================================================================
# Definition details
# =============================================================================


def extract_documentation(
    lines: Sequence[str], line_index: int, pattern_set: LanguagePatternSet
) -> str:
    """
    Extract the documentation attached to a declaration.

    Indentation-style languages use the docstring below the signature when
    there is one; otherwise, and for brace languages, the comment block
    directly above the declaration is used (annotation/decorator lines in
    between are skipped).

    Args:
        lines: File lines
        line_index: 0-indexed declaration line
        pattern_set: Language of the file

    Returns:
        Documentation text (may be empty)
    """
    if pattern_set.block_style == "indent":
        docstring = _docstring_below(lines, line_index)
        if docstring:
            return docstring

    doc_lines: list[str] = []
    i = line_index - 1
    while i >= 0 and i >= line_index - DOC_LOOKBACK_LINES:
        text = lines[i].strip()
        if not text and not doc_lines:
            i -= 1
            continue
        if text.startswith(("@", "#[")) and not doc_lines:
            i -= 1
            continue
        if text and is_comment_line(text, pattern_set):
            doc_lines.insert(0, text)
        elif text.endswith("*/"):
            doc_lines.insert(0, text)
        else:
            break
        i -= 1
    return "\n".join(doc_lines)


def _docstring_below(lines: Sequence[str], line_index: int) -> str:
    # Skip to the line ending the signature
    i = line_index
    depth = 0
    while i < len(lines):
        depth += lines[i].count("(") - lines[i].count(")")
        if depth <= 0 and lines[i].rstrip().endswith(":"):
            break
        i += 1
    i += 1
    while i < len(lines) and not lines[i].strip():
        i += 1
    if i >= len(lines):
        return ""

    first = lines[i].strip()
    quote = next((q for q in ('"""', "'''") if first.lstrip("rbuRBU").startswith(q)), None)
    if quote is None:
        return ""
    body = first.lstrip("rbuRBU")[3:]
    if quote in body:
        return body[: body.index(quote)].strip()

    doc = [body] if body else []
    for j in range(i + 1, len(lines)):
        text = lines[j].strip()
        if quote in text:
            tail = text[: text.index(quote)]
            if tail:
                doc.append(tail)
            break
        doc.append(text)
    return "\n".join(doc).strip()


def _split_top_level(text: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in "([{<":
            depth += 1
        elif char in ")]}>":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [p for p in parts if p]


def _without_receiver(signature: str, language: str) -> str:
    # Go methods: func (s *Server) Start(...)
    if language == "go":
        return re.sub(r"^\s*func\s*\([^)]*\)\s*", "func ", signature)
    return signature


def _parameter_span(signature: str) -> str | None:
    start = signature.find("(")
    if start < 0:
        return None
    depth = 0
    for i in range(start, len(signature)):
        if signature[i] == "(":
            depth += 1
        elif signature[i] == ")":
            depth -= 1
            if depth == 0:
                return signature[start + 1 : i]
    return signature[start + 1 :]


def extract_parameters(signature: str, language: str) -> list[dict[str, Any]]:
    """
    Parse the parameter list of a signature.

    Args:
        signature: Declaration signature
        language: Language of the declaration

    Returns:
        List of dicts with 'name', and 'type'/'optional'/'default' when known

    Examples:
        >>> extract_parameters("def f(a, b: int = 2):", "python")
        [{'name': 'a'}, {'name': 'b', 'type': 'int', 'default': '2'}]
    """
    signature = _without_receiver(signature, language)
    span = _parameter_span(signature)
    if not span or not span.strip():
        return []

    params: list[dict[str, Any]] = []
    for raw in _split_top_level(span):
        param: dict[str, Any] = {}
        text = raw
        if "=" in text and language in ("python", "javascript", "typescript", "csharp", "cpp", "c"):
            text, default = (part.strip() for part in text.split("=", 1))
            param["default"] = default

        if language in ("python", "typescript", "javascript", "rust"):
            name, sep, annotation = text.partition(":")
            name = name.strip()
            if name.endswith("?"):
                name = name[:-1]
                param["optional"] = True
            param = {"name": name, **({"type": annotation.strip()} if sep else {}), **param}
        elif language == "go":
            tokens = text.split(None, 1)
            param = {"name": tokens[0], **({"type": tokens[1]} if len(tokens) > 1 else {}), **param}
        else:
            # Type-first languages: 'final Map<K, V> name'
            tokens = text.replace("*", " * ").replace("&", " & ").split()
            name = tokens[-1] if tokens else text
            type_text = re.sub(r"\s+([*&])", r"\1", " ".join(tokens[:-1])).strip()
            param = {"name": name, **({"type": type_text} if type_text else {}), **param}
        params.append(param)
    return params


def extract_return_type(signature: str, language: str) -> str:
    """Extract the declared return type of a signature, if the syntax carries one."""
    signature = _without_receiver(signature, language)
    if language in ("python", "rust"):
        m = re.search(r"->\s*([^:{]+?)\s*(?:[:{]|where\b|$)", signature)
        return m.group(1).strip() if m else ""
    if language in ("typescript", "javascript"):
        span = _parameter_span(signature)
        if span is None:
            return ""
        after = signature[signature.find("(") + len(span) + 2 :]
        m = re.match(r"\s*:\s*([^{=]+?)\s*(?:\{|=>|;|$)", after)
        return m.group(1).strip() if m else ""
    if language == "go":
        span = _parameter_span(signature)
        if span is None:
            return ""
        after = signature[signature.find("(") + len(span) + 2 :]
        return after.split("{", 1)[0].strip()
    return ""


def build_definition(
    match: DeclarationMatch,
    lines: Sequence[str],
    include_documentation: bool = True,
    signature_lines: int = 3,
) -> FunctionDefinition:
    """Build a FunctionDefinition for a declaration line."""
    source_file = match.source_file
    pattern_set = get_pattern_set(source_file.language)
    signature = extract_signature(lines, match.line_index, signature_lines)
    parent = class_context(lines, match.line_index, source_file.language)
    return FunctionDefinition(
        name=match.name,
        file_path=source_file.relative_path,
        line=match.line_index + 1,
        column=match.column,
        language=source_file.language,
        signature=signature,
        kind=match.kind.value,
        documentation=(
            extract_documentation(lines, match.line_index, pattern_set) if include_documentation else ""
        ),
        parent_class=parent.name if parent else "",
        module=module_name(source_file),
        parameters=extract_parameters(signature, source_file.language),
        return_type=extract_return_type(signature, source_file.language),
    )


# =============================================================================
# Module and class context
# =============================================================================


def module_name(source_file: SourceFile) -> str:
    """Module name of a file: its name without extension."""
    return PurePosixPath(source_file.relative_path).stem


def find_imports(lines: Sequence[str], pattern_set: LanguagePatternSet) -> list[str]:
    """Find imported module names, deduplicated in order of appearance."""
    regexes = [re.compile(p) for p in pattern_set.import_patterns]
    imports: list[str] = []
    for line in lines:
        for regex in regexes:
            m = regex.search(line)
            if m and m.group("module") not in imports:
                imports.append(m.group("module"))
                break
    return imports


def find_exports(lines: Sequence[str], pattern_set: LanguagePatternSet) -> list[str]:
    """Find exported names, deduplicated in order of appearance."""
    regexes = [re.compile(p) for p in pattern_set.export_patterns]
    exports: list[str] = []
    for line in lines:
        for regex in regexes:
            m = regex.search(line)
            if not m:
                continue
            groups = m.groupdict()
            if groups.get("names"):
                names = [
                    item.strip().strip("'\"").split(" as ")[0].strip()
                    for item in groups["names"].split(",")
                ]
            else:
                names = [groups.get("name") or ""]
            for name in names:
                if name and name not in exports:
                    exports.append(name)
    return exports


def find_functions(
    lines: Sequence[str],
    pattern_set: LanguagePatternSet,
    start: int = 0,
    end: int | None = None,
) -> list[str]:
    """Find declared function names within a line range, in order."""
    rules = pattern_set.compile_declarations()
    stop = len(lines) if end is None else min(end + 1, len(lines))
    names: list[str] = []
    for i in range(start, stop):
        line = lines[i]
        if not line.strip() or is_comment_line(line, pattern_set):
            continue
        found = first_declaration(line, rules, pattern_set)
        if found and found[0] not in names:
            names.append(found[0])
    return names


def class_context(
    lines: Sequence[str], line_index: int, language: str
) -> ClassContext | None:
    """Describe the class whose body contains a line, with the methods it declares."""
    scope = enclosing_class(lines, line_index, language)
    if scope is None:
        return None
    pattern_set = get_pattern_set(language)
    class_start = scope.line - 1
    class_end, _ = isolate_body(lines, class_start, pattern_set.block_style)
    if line_index > class_end:
        return None
    return ClassContext(
        name=scope.name,
        line=scope.line,
        methods=find_functions(lines, pattern_set, class_start + 1, class_end),
    )


# =============================================================================
# Operation
# =============================================================================


def get_function_context(
    resolver: FunctionResolver,
    function_name: str,
    include_parent_class: bool = True,
    include_documentation: bool = True,
) -> FunctionContext | None:
    """
    Get a function's definition together with its class and module context.

    Args:
        resolver: Resolver bound to the request's corpus
        function_name: Exact function name
        include_parent_class: Describe the enclosing class
        include_documentation: Extract documentation

    Returns:
        FunctionContext, or None if the function is not defined in the corpus
    """
    match = next(resolver.iter_declarations(function_name), None)
    if match is None:
        logger.debug("No definition of %s for context", function_name)
        return None

    corpus = resolver.corpus
    lines = corpus.read_lines(match.source_file) or []
    pattern_set = get_pattern_set(match.source_file.language)
    definition = build_definition(match, lines, include_documentation, resolver.signature_lines)

    parent = class_context(lines, match.line_index, match.source_file.language) if include_parent_class else None

    related: list[str] = []
    if parent:
        related.extend(m for m in parent.methods if m != function_name)
    for name in find_functions(lines, pattern_set):
        if name != function_name and name not in related:
            related.append(name)

    return FunctionContext(
        definition=definition,
        module=ModuleContext(
            name=module_name(match.source_file),
            path=match.source_file.relative_path,
            imports=find_imports(lines, pattern_set),
            exports=find_exports(lines, pattern_set),
        ),
        parent_class=parent,
        related_functions=related,
    )


__all__ = [
    "extract_documentation",
    "extract_parameters",
    "extract_return_type",
    "build_definition",
    "module_name",
    "find_imports",
    "find_exports",
    "find_functions",
    "class_context",
    "get_function_context",
]
