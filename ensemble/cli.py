#!/usr/bin/env python3
"""
Ensemble CLI - HTTP API Contract Testing Tool

Usage:
    ensemble run [SUITE_DIR] [OPTIONS]
    ensemble validate [SUITE_DIR]
    ensemble query <document> <path> [--expect VALUE]
    ensemble diff <expected> <actual> [--strict]
    ensemble --version
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .diffing import diff_bodies
from .query import QueryEngine, to_string
from .reporting import ConsoleReporter, JSONReporter, JUnitXMLReporter, MultiReporter
from .runner import SuiteRunner, run_parallel
from .schema_parsing import Suite, ValidationResult, load_suites, load_yaml
from .transport import DEFAULT_TIMEOUT_MS, UNLIMITED, HTTPTransport, Throttle

app = typer.Typer(
    name="ensemble",
    help="Ensemble - HTTP API Contract Testing Tool",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def version_callback(value: bool):
    if value:
        console.print(f"Ensemble v{__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Log debug output (requests, skipped files, dropped diffs)"
    ),
):
    """
    Ensemble - HTTP API Contract Testing Tool

    Test HTTP APIs with declarative JSON/YAML suites.
    """
    setup_logging(verbose)


def _load_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return json.loads(text)
    return load_yaml(text)


def _load_all(suite_dir: Path) -> tuple[list[Suite], list[tuple[Path, ValidationResult]]]:
    suites: list[Suite] = []
    invalid: list[tuple[Path, ValidationResult]] = []
    for path, suite, result in load_suites(suite_dir):
        if suite is None:
            invalid.append((path, result))
        else:
            suites.append(suite)
    return suites, invalid


def _print_invalid(invalid: list[tuple[Path, ValidationResult]]) -> None:
    for path, result in invalid:
        console.print(f"\n[red]❌ Invalid suite:[/red] {path}")
        console.print(str(result), markup=False)


async def run_suites_async(
    suites: list[Suite],
    host: str,
    workers: int,
    timeout_ms: int,
    throttle: Throttle | None,
    reporter: MultiReporter,
) -> None:
    """Run every suite over one shared HTTP transport."""
    transport = HTTPTransport(host, timeout_ms=timeout_ms, throttle=throttle)
    async with transport:
        runner = SuiteRunner(transport, base_url=host)
        await run_parallel(suites, runner.run_suite, reporter, workers=workers)


@app.command()
def run(
    suite_dir: Path = typer.Argument(
        Path("."),
        help="Directory with suite files (or a single suite file)",
        exists=True,
        readable=True,
    ),
    host: str = typer.Option(
        "http://localhost:8080", "--host", "-H",
        envvar="ENSEMBLE_HOST",
        help="Server under test; relative call URLs are joined to it"
    ),
    workers: int = typer.Option(
        1, "--workers", "-w",
        envvar="ENSEMBLE_WORKERS",
        min=1,
        help="Number of suites run concurrently"
    ),
    timeout_ms: int = typer.Option(
        DEFAULT_TIMEOUT_MS, "--timeout",
        envvar="ENSEMBLE_TIMEOUT_MS",
        min=1,
        help="Per-request timeout in milliseconds"
    ),
    throttle_limit: int = typer.Option(
        UNLIMITED, "--throttle",
        min=0,
        help="Max calls per throttle period (0 = unlimited)"
    ),
    throttle_period: float = typer.Option(
        1.0, "--throttle-period",
        help="Throttle window in seconds"
    ),
    log_http: bool = typer.Option(
        False, "--log-http",
        help="Show every call with request and response dumps"
    ),
    junit_dir: Optional[Path] = typer.Option(
        None, "--junit-dir",
        help="Write JUnit XML reports (one per suite) to this directory"
    ),
    json_report: Optional[Path] = typer.Option(
        None, "--json-report",
        help="Write a JSON run report to this file"
    ),
):
    """
    Run suites against a server.

    Cases run in order inside a suite; suites run on parallel workers.
    """
    suites, invalid = _load_all(suite_dir)
    if invalid:
        _print_invalid(invalid)
        raise typer.Exit(code=1)

    if not suites:
        console.print(f"[yellow]No suites found in {suite_dir}[/yellow]")
        raise typer.Exit(code=0)

    console_reporter = ConsoleReporter(console, log_http=log_http)
    reporters = [console_reporter]
    if junit_dir:
        reporters.append(JUnitXMLReporter(junit_dir))
    if json_report:
        reporters.append(JSONReporter(json_report, base_url=host))

    throttle = Throttle(throttle_limit, throttle_period) if throttle_limit else None
    asyncio.run(run_suites_async(
        suites, host, workers, timeout_ms, throttle, MultiReporter(*reporters),
    ))

    raise typer.Exit(code=console_reporter.exit_code)


@app.command()
def validate(
    suite_dir: Path = typer.Argument(
        Path("."),
        help="Directory with suite files (or a single suite file)",
        exists=True,
        readable=True,
    ),
):
    """
    Validate suite files without running them.
    """
    console.print(f"\n📄 Validating: {suite_dir}")

    suites, invalid = _load_all(suite_dir)
    if invalid:
        _print_invalid(invalid)
        raise typer.Exit(code=1)

    table = Table(title="Suites")
    table.add_column("Suite", style="cyan")
    table.add_column("Cases", justify="right")
    table.add_column("Calls", justify="right")
    table.add_column("Ignored", justify="right", style="yellow")

    for suite in suites:
        table.add_row(
            suite.full_name,
            str(len(suite.cases)),
            str(sum(len(case.calls) for case in suite.cases)),
            str(sum(1 for case in suite.cases if case.ignored)),
        )

    console.print(f"\n[green]✅ {len(suites)} valid suite(s)[/green]")
    console.print()
    console.print(table)


@app.command()
def query(
    document_file: Path = typer.Argument(
        ...,
        help="JSON or YAML document to query",
        exists=True,
        readable=True,
    ),
    path: str = typer.Argument(..., help="Dotted path; prefix with ~ for a recursive search"),
    expect: Optional[str] = typer.Option(
        None, "--expect", "-e",
        help="Expected value (YAML scalar or list); exit 1 when not found"
    ),
):
    """
    Evaluate a body path against a document.
    """
    document = _load_document(document_file)
    engine = QueryEngine()

    if expect is not None:
        expected = load_yaml(expect)
        result = engine.check(document, path, expected)
        if result.found:
            console.print(f"[green]✅ Found[/green] {escape(to_string(expected))} on path \"{escape(path)}\"")
            return
        console.print(f"[red]❌ Expected value {escape(to_string(expected))} on path \"{escape(path)}\" is not found[/red]")
        if result.error is not None:
            console.print(f"   {escape(str(result.error))}")
        raise typer.Exit(code=1)

    if engine.parse(path).is_recursive:
        for value in engine.collect(document, path):
            console.print(to_string(value), highlight=False, markup=False)
        return

    result = engine.resolve(document, path)
    if not result.found:
        console.print(f"[red]❌ {escape(str(result.error))}[/red]")
        raise typer.Exit(code=1)
    console.print(to_string(result.value), highlight=False, markup=False)


@app.command()
def diff(
    expected_file: Path = typer.Argument(..., exists=True, readable=True, help="Expected document"),
    actual_file: Path = typer.Argument(..., exists=True, readable=True, help="Actual document"),
    strict: bool = typer.Option(
        False, "--strict",
        help="Also report extra values and shifted array elements"
    ),
):
    """
    Compare two documents the way full-body expectations do.
    """
    recorder = diff_bodies(_load_document(expected_file), _load_document(actual_file), strict=strict)
    if not recorder.has_diffs:
        console.print("[green]✅ Documents match[/green]")
        return

    console.print(str(recorder), highlight=False, markup=False)
    raise typer.Exit(code=1)


@app.command()
def info():
    """
    Show information about Ensemble.
    """
    console.print(f"""
[bold]Ensemble[/bold] v{__version__}

HTTP API Contract Testing Tool

[bold]Features:[/bold]
  • Declarative JSON/YAML suites with variables and templates
  • Exact and recursive (~) body paths with size(), string(), sizeAsString()
  • Full-body diffs, JSON Schema validation
  • Parallel suites, rate limiting
  • Console, JSON and JUnit XML reports

[bold]Quick Start:[/bold]
  ensemble validate suites/
  ensemble run suites/ --host http://localhost:8080
""")


if __name__ == "__main__":
    app()
