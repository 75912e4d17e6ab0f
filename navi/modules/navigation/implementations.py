"""
Implementation search - the types that implement an interface or extend a base.

Nominal languages declare what they implement, so a class opening (found
with the language's class rules) is reported when its header names the
interface in an inheritance position. Structural languages (Go) declare
nothing: a struct implements an interface when its receiver methods cover
every method the interface lists. Structural matches are collected after
the nominal scan, because a type's methods may live in other files.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence

from navi.adapters.corpus import Corpus, SourceFile
from navi.adapters.languages import LanguagePatternSet, RuleKind, get_pattern_set

from .base import DEFAULT_SIGNATURE_LINES, extract_signature, first_declaration, is_comment_line
from .body import DEFAULT_FALLBACK_LINES, isolate_body
from .models import Implementation, ImplementationSearchResult, ImplementedMethod
from .references import DEFAULT_MAX_RESULTS

logger = logging.getLogger(__name__)

_ParsedFile = tuple[SourceFile, list[str], LanguagePatternSet]


def class_header(
    lines: Sequence[str], line_index: int, block_style: str, max_lines: int = DEFAULT_SIGNATURE_LINES
) -> str:
    """
    Join a class opening line with its continuation lines, up to the body opener.

    Examples:
        >>> class_header(["public class A", "    implements B {", "}"], 0, "braces")
        'public class A implements B'
    """
    parts: list[str] = []
    for i in range(line_index, min(line_index + max_lines, len(lines))):
        text = lines[i].strip()
        brace = text.find("{")
        if brace >= 0:
            parts.append(text[:brace].rstrip())
            break
        parts.append(text)
        if text.endswith(";") or (block_style == "indent" and text.endswith(":")):
            break
    return " ".join(part for part in parts if part)


def _methods_in(
    source_file: SourceFile,
    lines: Sequence[str],
    pattern_set: LanguagePatternSet,
    start: int,
    end: int,
    signature_lines: int,
) -> list[ImplementedMethod]:
    rules = pattern_set.compile_declarations()
    methods: list[ImplementedMethod] = []
    for i in range(start, min(end + 1, len(lines))):
        line = lines[i]
        if not line.strip() or is_comment_line(line, pattern_set):
            continue
        found = first_declaration(line, rules, pattern_set)
        if found:
            methods.append(
                ImplementedMethod(
                    name=found[0],
                    line=i + 1,
                    signature=extract_signature(lines, i, signature_lines),
                    file_path=source_file.relative_path,
                )
            )
    return methods


def _nominal_implementations(
    parsed: _ParsedFile,
    interface_name: str,
    signature_lines: int,
    body_fallback_lines: int,
) -> Iterator[Implementation]:
    source_file, lines, pattern_set = parsed
    class_rules = pattern_set.compile_classes()
    inheritance_rules = pattern_set.compile_inheritance(interface_name)
    if not class_rules or not inheritance_rules:
        return

    for i, line in enumerate(lines):
        if not line.strip() or is_comment_line(line, pattern_set):
            continue
        declared = first_declaration(line, class_rules, pattern_set)
        if declared is None or declared[0] == interface_name:
            continue
        name, rule, _ = declared
        header = class_header(lines, i, pattern_set.block_style, signature_lines)
        if not any(inheritance.match(header) for inheritance in inheritance_rules):
            continue

        end, _ = isolate_body(lines, i, pattern_set.block_style, body_fallback_lines)
        body = lines[i + 1 : end + 1]
        is_abstract = rule.kind is RuleKind.ABSTRACT_DECLARATION or any(
            marker in body_line for body_line in body for marker in pattern_set.abstract_markers
        )
        yield Implementation(
            name=name,
            file_path=source_file.relative_path,
            line=i + 1,
            language=source_file.language,
            signature=header,
            is_abstract=is_abstract,
            parent_interface=interface_name,
            methods=_methods_in(source_file, lines, pattern_set, i + 1, end, signature_lines),
        )


def _structural_implementations(
    parsed_files: Sequence[_ParsedFile],
    interface_name: str,
    signature_lines: int,
    body_fallback_lines: int,
) -> Iterator[Implementation]:
    required: set[str] = set()
    methods_by_type: dict[str, list[ImplementedMethod]] = {}

    for source_file, lines, pattern_set in parsed_files:
        receiver = re.compile(pattern_set.method_receiver_pattern or r"(?!)")
        member = re.compile(pattern_set.interface_member_pattern or r"(?!)")
        interface_rules = pattern_set.compile_classes(interface_name)
        for i, line in enumerate(lines):
            if is_comment_line(line, pattern_set):
                continue
            m = receiver.match(line)
            if m:
                methods_by_type.setdefault(m.group("type"), []).append(
                    ImplementedMethod(
                        name=m.group("name"),
                        line=i + 1,
                        signature=extract_signature(lines, i, signature_lines),
                        file_path=source_file.relative_path,
                    )
                )
                continue
            declared = first_declaration(line, interface_rules, pattern_set)
            if declared and declared[1].kind is RuleKind.ABSTRACT_DECLARATION and not required:
                end, _ = isolate_body(lines, i, pattern_set.block_style, body_fallback_lines)
                for member_line in lines[i + 1 : end + 1]:
                    mm = member.match(member_line)
                    if mm:
                        required.add(mm.group("name"))

    if not required:
        logger.debug("No structural interface %s with methods", interface_name)
        return

    for source_file, lines, pattern_set in parsed_files:
        class_rules = pattern_set.compile_classes()
        for i, line in enumerate(lines):
            declared = first_declaration(line, class_rules, pattern_set)
            if declared is None or declared[1].kind is RuleKind.ABSTRACT_DECLARATION:
                continue
            methods = methods_by_type.get(declared[0], [])
            if not required <= {method.name for method in methods}:
                continue
            yield Implementation(
                name=declared[0],
                file_path=source_file.relative_path,
                line=i + 1,
                language=source_file.language,
                signature=class_header(lines, i, pattern_set.block_style, signature_lines),
                parent_interface=interface_name,
                methods=methods,
            )


def _iter_implementations(
    corpus: Corpus,
    interface_name: str,
    signature_lines: int,
    body_fallback_lines: int,
) -> Iterator[Implementation]:
    structural: list[_ParsedFile] = []
    for source_file in corpus:
        lines = corpus.read_lines(source_file)
        if not lines:
            continue
        pattern_set = get_pattern_set(source_file.language)
        parsed = (source_file, lines, pattern_set)
        if pattern_set.is_structural:
            structural.append(parsed)
            continue
        yield from _nominal_implementations(parsed, interface_name, signature_lines, body_fallback_lines)
    yield from _structural_implementations(structural, interface_name, signature_lines, body_fallback_lines)


def find_implementations(
    corpus: Corpus,
    interface_name: str,
    include_abstract: bool = True,
    max_results: int = DEFAULT_MAX_RESULTS,
    signature_lines: int = DEFAULT_SIGNATURE_LINES,
    body_fallback_lines: int = DEFAULT_FALLBACK_LINES,
) -> ImplementationSearchResult:
    """
    Find the classes, structs and impl blocks implementing an interface.

    Args:
        corpus: Corpus of the request
        interface_name: Interface, trait or base class name
        include_abstract: Keep abstract implementations (abstract classes,
            sub-interfaces, classes carrying an abstract marker)
        max_results: Maximum number of implementations returned
        signature_lines: Lines joined when reading headers and signatures
        body_fallback_lines: Cap for brace bodies that never close

    Returns:
        ImplementationSearchResult, nominal matches in corpus order
        followed by structural ones
    """
    result = ImplementationSearchResult(
        interface_name=interface_name,
        search_path=corpus.root_path,
        include_abstract=include_abstract,
    )
    for implementation in _iter_implementations(corpus, interface_name, signature_lines, body_fallback_lines):
        if implementation.is_abstract and not include_abstract:
            continue
        result.implementations.append(implementation)
        if len(result.implementations) >= max_results:
            break

    logger.debug("find_implementations %s: %d found", interface_name, len(result.implementations))
    return result


__all__ = [
    "class_header",
    "find_implementations",
]
