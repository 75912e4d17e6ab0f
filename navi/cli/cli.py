"""
CLI entry point for NAVI.

Provides a command-line interface for lexical code navigation.
Uses Typer for modern CLI with auto-completion and help generation.

Usage:
    navi trace handle_request ./src --direction callees --max-depth 3
    navi trace parse_config ./src --languages python --json
    navi find "get*user" ./src
    navi calls main ./src --include-builtins
    navi context process ./src
    navi implementations Repository ./src --no-abstract
    navi languages
"""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from navi.adapters.corpus import Corpus
from navi.adapters.languages import is_registered, supported_languages
from navi.cli.commands.report import (
    _echo_json,
    _print_calls_result,
    _print_context_result,
    _print_implementations_result,
    _print_search_result,
    _print_trace_result,
)
from navi.common.exceptions import NaviError
from navi.modules.navigation import Direction
from navi.services import NaviSettings, NavigationService

# Create main app
app = typer.Typer(
    name="navi",
    help="NAVI - Lexical code navigation across multi-language source trees",
    no_args_is_help=True,
)

LanguagesOption = Annotated[
    str | None,
    typer.Option("-l", "--languages", help="Comma-separated language allow-list"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print the result as JSON")]


def _split_languages(languages: str | None) -> list[str] | None:
    if not languages:
        return None
    return [lang.strip() for lang in languages.split(",") if lang.strip()]


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("-v", "--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """Configure logging for every command."""
    level = logging.DEBUG if verbose else NaviSettings().log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("navi").setLevel(level)


# =============================================================================
# Navigation Commands
# =============================================================================


@app.command("trace")
def trace(
    function_name: Annotated[str, typer.Argument(help="Function to trace")],
    path: Annotated[str, typer.Argument(help="Root directory to search")] = ".",
    direction: Annotated[
        Direction, typer.Option("-d", "--direction", help="callers, callees or both")
    ] = Direction.BOTH,
    max_depth: Annotated[
        int | None, typer.Option("--max-depth", help="Maximum depth of the call tree")
    ] = None,
    languages: LanguagesOption = None,
    include_external: Annotated[
        bool, typer.Option("--include-external", help="Keep builtin/library callees")
    ] = False,
    timeout_ms: Annotated[
        int | None, typer.Option("--timeout-ms", help="Time budget in milliseconds")
    ] = None,
    as_json: JsonOption = False,
) -> None:
    """Trace the callers and/or callees of a function."""
    try:
        result = NavigationService().trace_call_chain(
            {
                "function_name": function_name,
                "path": path,
                "direction": direction,
                "max_depth": max_depth,
                "languages": _split_languages(languages),
                "include_external": include_external,
                "timeout_ms": timeout_ms,
            }
        )
    except NaviError as e:
        _fail(e)
        return

    if as_json:
        _echo_json(result.to_dict())
    else:
        _print_trace_result(result)


@app.command("find")
def find(
    function_name: Annotated[str, typer.Argument(help="Name or pattern ('*' wildcard)")],
    path: Annotated[str, typer.Argument(help="Root directory to search")] = ".",
    exact: Annotated[bool, typer.Option("--exact", help="Match the name verbatim")] = False,
    no_references: Annotated[
        bool, typer.Option("--no-references", help="Only report declarations")
    ] = False,
    max_results: Annotated[
        int | None, typer.Option("--max-results", help="Maximum references to report")
    ] = None,
    languages: LanguagesOption = None,
    as_json: JsonOption = False,
) -> None:
    """Find a function's definition and references."""
    try:
        result = NavigationService().find_function(
            {
                "function_name": function_name,
                "path": path,
                "exact_match": exact,
                "include_references": not no_references,
                "max_results": max_results,
                "languages": _split_languages(languages),
            }
        )
    except NaviError as e:
        _fail(e)
        return

    if as_json:
        _echo_json(result.to_dict())
    else:
        _print_search_result(result)


@app.command("calls")
def calls(
    function_name: Annotated[str, typer.Argument(help="Function whose body to inspect")],
    path: Annotated[str, typer.Argument(help="Root directory to search")] = ".",
    include_builtins: Annotated[
        bool, typer.Option("--include-builtins", help="Keep builtin/library calls")
    ] = False,
    max_results: Annotated[
        int | None, typer.Option("--max-results", help="Maximum calls to report")
    ] = None,
    languages: LanguagesOption = None,
    as_json: JsonOption = False,
) -> None:
    """List the calls made inside a function."""
    try:
        result = NavigationService().find_function_calls(
            {
                "function_name": function_name,
                "path": path,
                "include_builtins": include_builtins,
                "max_results": max_results,
                "languages": _split_languages(languages),
            }
        )
    except NaviError as e:
        _fail(e)
        return

    if as_json:
        _echo_json(result.to_dict())
    else:
        _print_calls_result(result)


@app.command("context")
def context(
    function_name: Annotated[str, typer.Argument(help="Function to describe")],
    path: Annotated[str, typer.Argument(help="Root directory to search")] = ".",
    no_class: Annotated[
        bool, typer.Option("--no-class", help="Skip the enclosing class")
    ] = False,
    no_docs: Annotated[
        bool, typer.Option("--no-docs", help="Skip documentation extraction")
    ] = False,
    languages: LanguagesOption = None,
    as_json: JsonOption = False,
) -> None:
    """Show a function's class and module context."""
    try:
        result = NavigationService().get_function_context(
            {
                "function_name": function_name,
                "path": path,
                "include_parent_class": not no_class,
                "include_documentation": not no_docs,
                "languages": _split_languages(languages),
            }
        )
    except NaviError as e:
        _fail(e)
        return

    if as_json:
        _echo_json(result.to_dict())
    else:
        _print_context_result(result)


@app.command("implementations")
def implementations(
    interface_name: Annotated[str, typer.Argument(help="Interface, trait or base class")],
    path: Annotated[str, typer.Argument(help="Root directory to search")] = ".",
    no_abstract: Annotated[
        bool, typer.Option("--no-abstract", help="Skip abstract implementations")
    ] = False,
    max_results: Annotated[
        int | None, typer.Option("--max-results", help="Maximum implementations to report")
    ] = None,
    languages: LanguagesOption = None,
    as_json: JsonOption = False,
) -> None:
    """Find the types implementing an interface or extending a base type."""
    try:
        result = NavigationService().find_implementations(
            {
                "interface_name": interface_name,
                "path": path,
                "include_abstract": not no_abstract,
                "max_results": max_results,
                "languages": _split_languages(languages),
            }
        )
    except NaviError as e:
        _fail(e)
        return

    if as_json:
        _echo_json(result.to_dict())
    else:
        _print_implementations_result(result)


@app.command("languages")
def languages(as_json: JsonOption = False) -> None:
    """List languages with dedicated patterns and their file extensions."""
    detected = sorted(set(Corpus.EXTENSION_MAP.values()))
    rows = {
        lang: {
            "extensions": Corpus.extensions_for_languages([lang]),
            "patterns": "dedicated" if is_registered(lang) else "generic",
        }
        for lang in detected
    }

    if as_json:
        _echo_json({"languages": rows, "registered": supported_languages()})
        return

    typer.echo(f"\n{'=' * 60}")
    typer.echo("SUPPORTED LANGUAGES")
    typer.echo(f"{'=' * 60}")
    for lang, info in rows.items():
        typer.echo(f"  {lang:<12} {info['patterns']:<10} {' '.join(info['extensions'])}")


def main() -> int:
    """Main entry point."""
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


if __name__ == "__main__":
    raise SystemExit(main())
