"""
Plain-text printers for navigation results.
"""

from __future__ import annotations

import json
from typing import Any

import typer

from navi.modules.navigation import (
    FunctionCallsResult,
    FunctionContextResult,
    FunctionNode,
    FunctionSearchResult,
    ImplementationSearchResult,
    TraceResult,
)


def _echo_json(data: dict[str, Any]) -> None:
    typer.echo(json.dumps(data, indent=2))


def _location(node: FunctionNode) -> str:
    if node.is_external:
        return "external"
    return f"{node.file_path}:{node.line}"


def _print_tree(node: FunctionNode, indent: int = 1) -> None:
    pad = "  " * indent
    for caller in node.callers:
        typer.echo(f"{pad}<- {caller.function_name} ({_location(caller)})")
        _print_tree(caller, indent + 1)
    for callee in node.callees:
        typer.echo(f"{pad}-> {callee.function_name} ({_location(callee)})")
        _print_tree(callee, indent + 1)


def _print_trace_result(result: TraceResult) -> None:
    """Print a call-chain trace."""
    typer.echo(f"\n{'=' * 60}")
    typer.echo(f"CALL CHAIN: {result.function_name}")
    typer.echo(f"{'=' * 60}")
    typer.echo(f"  Search path: {result.search_path}")
    typer.echo(f"  Direction:   {result.direction.value}")
    typer.echo(f"  Max depth:   {result.max_depth}")

    if result.root is None:
        typer.echo(f"\nFunction '{result.function_name}' not found.")
        return

    typer.echo(f"  Total nodes: {result.total_nodes}")
    if result.truncated:
        typer.echo("  Truncated:   yes (timeout reached)")

    root = result.root
    typer.echo(f"\n{root.function_name} ({_location(root)})")
    typer.echo(f"  {root.signature}")
    _print_tree(root)


def _print_search_result(result: FunctionSearchResult) -> None:
    """Print a function search."""
    typer.echo(f"\n{'=' * 60}")
    typer.echo(f"FUNCTION SEARCH: {result.function_name}")
    typer.echo(f"{'=' * 60}")

    definition = result.definition
    if definition is None:
        typer.echo("\nNo definition found.")
    else:
        typer.echo(f"\nDefinition: {definition.file_path}:{definition.line}:{definition.column}")
        typer.echo(f"  Language:  {definition.language}")
        typer.echo(f"  Signature: {definition.signature}")
        if definition.parent_class:
            typer.echo(f"  Class:     {definition.parent_class}")

    if not result.references:
        typer.echo("\nNo references found.")
        return

    typer.echo(f"\nReferences ({len(result.references)}):")
    for ref in result.references:
        typer.echo(f"  [{ref.kind}] {ref.file_path}:{ref.line}:{ref.column}  {ref.context}")


def _print_calls_result(result: FunctionCallsResult) -> None:
    """Print the calls made inside a function."""
    typer.echo(f"\n{'=' * 60}")
    typer.echo(f"CALLS FROM: {result.function_name}")
    typer.echo(f"{'=' * 60}")

    if not result.calls:
        typer.echo("\nNo calls found.")
        return

    typer.echo(f"\nCalls ({len(result.calls)}):")
    for call in result.calls:
        typer.echo(f"  {call.qualified_name}  ({call.file_path}:{call.line})")


def _print_context_result(result: FunctionContextResult) -> None:
    """Print a function's context."""
    typer.echo(f"\n{'=' * 60}")
    typer.echo(f"FUNCTION CONTEXT: {result.function_name}")
    typer.echo(f"{'=' * 60}")

    context = result.context
    if context is None:
        typer.echo(f"\nFunction '{result.function_name}' not found.")
        return

    definition = context.definition
    typer.echo(f"\nLocation:  {definition.file_path}:{definition.line}:{definition.column}")
    typer.echo(f"Language:  {definition.language}")
    typer.echo(f"Signature: {definition.signature}")
    if definition.parameters:
        typer.echo("Parameters:")
        for param in definition.parameters:
            suffix = f": {param['type']}" if param.get("type") else ""
            typer.echo(f"  - {param['name']}{suffix}")
    if definition.return_type:
        typer.echo(f"Returns:   {definition.return_type}")
    if definition.documentation:
        typer.echo("Documentation:")
        for line in definition.documentation.splitlines():
            typer.echo(f"  {line}")

    if context.parent_class:
        parent = context.parent_class
        typer.echo(f"\nClass: {parent.name} (line {parent.line})")
        for method in parent.methods[:10]:
            typer.echo(f"  - {method}")
        if len(parent.methods) > 10:
            typer.echo(f"  ... and {len(parent.methods) - 10} more")

    module = context.module
    typer.echo(f"\nModule: {module.name} ({module.path})")
    if module.imports:
        typer.echo(f"  Imports: {', '.join(module.imports[:15])}")
    if module.exports:
        typer.echo(f"  Exports: {', '.join(module.exports[:15])}")
    if context.related_functions:
        typer.echo(f"  Related: {', '.join(context.related_functions[:15])}")


def _print_implementations_result(result: ImplementationSearchResult) -> None:
    """Print the implementations of an interface."""
    typer.echo(f"\n{'=' * 60}")
    typer.echo(f"IMPLEMENTATIONS: {result.interface_name}")
    typer.echo(f"{'=' * 60}")

    if not result.implementations:
        typer.echo("\nNo implementations found.")
        return

    typer.echo(f"\nImplementations ({len(result.implementations)}):")
    for impl in result.implementations:
        marker = " [abstract]" if impl.is_abstract else ""
        typer.echo(f"  {impl.name}{marker}  ({impl.file_path}:{impl.line}, {impl.language})")
        for method in impl.methods[:10]:
            typer.echo(f"    - {method.name}")
        if len(impl.methods) > 10:
            typer.echo(f"    ... and {len(impl.methods) - 10} more")


__all__ = [
    "_echo_json",
    "_print_trace_result",
    "_print_search_result",
    "_print_calls_result",
    "_print_context_result",
    "_print_implementations_result",
]
