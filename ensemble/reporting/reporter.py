"""
Reporters for run results.

A reporter is initialized once, receives one batch of case results per
finished suite, and is flushed at the end of the run.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import CaseResult, RunReport, RunStatus

logger = logging.getLogger(__name__)

INDENT_SIZE = 4
CARET_ICON = "└"


class Reporter(ABC):
    """Receives suite result batches during a run."""

    def init(self) -> None:
        pass

    @abstractmethod
    def report(self, results: list[CaseResult]) -> None:
        """Report the case results of one suite."""
        pass

    def flush(self) -> None:
        pass


class ConsoleReporter(Reporter):
    """
    Prints results as they come in, then a summary table.

    Call details are shown for failed cases, or for every case when
    ``log_http`` is set (which also prints request and response dumps).
    """

    def __init__(self, console: Console | None = None, log_http: bool = False):
        self.console = console or Console()
        self.log_http = log_http
        self.run = RunReport()

    @property
    def exit_code(self) -> int:
        return 1 if self.run.failed else 0

    def init(self) -> None:
        self.run.start()

    def _line(self, indent: int, content: str | Text = "") -> None:
        text = Text(" " * indent * INDENT_SIZE)
        text.append(content)
        self.console.print(text, highlight=False, soft_wrap=True)

    def _multiline(self, indent: int, content: str, style: str = "") -> None:
        for line in content.split("\n"):
            self._line(indent, Text(line, style=style))

    def report(self, results: list[CaseResult]) -> None:
        if not results:
            return
        self.run.add_results(results)

        self.console.print()
        self._line(0, results[0].suite.full_name)

        for result in results:
            if result.skipped:
                line = Text(f"{CARET_ICON} ")
                line.append("SKIPPED", style="bold yellow")
                line.append(f" {result.case.name}")
                line.append(f" ({result.skipped_msg})", style="bright_yellow")
                self._line(1, line)
                continue

            line = Text(f"{CARET_ICON} ")
            if result.has_error:
                line.append("FAILED", style="bold red")
            else:
                line.append("PASSED", style="bold green")
            line.append(f" {result.case.name} [{result.frame.duration_ms:.0f}ms]")
            self._line(1, line)

            if result.has_error or self.log_http:
                self._report_traces(result)

    def _report_traces(self, result: CaseResult) -> None:
        for trace in result.traces:
            if trace.terminated:
                self._multiline(3, trace.error_cause or "", style="red")
                continue

            self._line(2, f"{trace.method} {trace.url} [{trace.frame.duration_ms:.0f}ms]")

            for outcome in trace.expectations:
                line = Text()
                if outcome.passed:
                    line.append("√", style="bold green")
                else:
                    line.append("×", style="bold red")
                line.append(f" {outcome.description}")
                self._line(3, line)

            if trace.failure:
                self._multiline(4, trace.failure, style="red")

            if self.log_http:
                self.console.print()
                if trace.request_dump:
                    self._multiline(3, trace.request_dump, style="bright_black")
                    self.console.print()
                if trace.response_dump:
                    self._multiline(3, trace.response_dump, style="bright_black")
                    self.console.print()

    def flush(self) -> None:
        self.run.complete()

        overall = "PASSED" if self.run.status == RunStatus.PASSED else "FAILED"
        style = "bold green" if overall == "PASSED" else "bold red"

        table = Table(title="Test Run Summary", show_header=False)
        table.add_column("", justify="right")
        table.add_column("")
        table.add_row("Overall result:", Text(overall, style=style))
        table.add_row("Test count:", str(self.run.total))
        table.add_row("Passed:", str(self.run.passed))
        table.add_row("Failed:", str(self.run.failed))
        table.add_row("Skipped:", str(self.run.skipped))
        table.add_row("Start time:", self.run.frame.start.strftime("%Y-%m-%d %H:%M:%S UTC"))
        if self.run.frame.end:
            table.add_row("End time:", self.run.frame.end.strftime("%Y-%m-%d %H:%M:%S UTC"))
        table.add_row("Duration:", f"{self.run.frame.duration_ms:.0f}ms")

        self.console.print()
        self.console.print(table)


class JSONReporter(Reporter):
    """Collects every result and writes a ``RunReport`` as JSON on flush."""

    def __init__(self, path: str | Path, base_url: str = ""):
        self.path = Path(path)
        self.run = RunReport(base_url=base_url)

    def init(self) -> None:
        self.run.start()

    def report(self, results: list[CaseResult]) -> None:
        self.run.add_results(results)

    def flush(self) -> None:
        self.run.complete()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.run.to_json(), encoding="utf-8")
        logger.debug(f"JSON report written to {self.path}")


class MultiReporter(Reporter):
    """Broadcasts every event to several reporters."""

    def __init__(self, *reporters: Reporter):
        self.reporters = list(reporters)

    def init(self) -> None:
        for reporter in self.reporters:
            reporter.init()

    def report(self, results: list[CaseResult]) -> None:
        for reporter in self.reporters:
            reporter.report(results)

    def flush(self) -> None:
        for reporter in self.reporters:
            reporter.flush()
