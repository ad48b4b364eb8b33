# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Execution reports for commands run through a `Requisition`.

- `Report`: the record of one execution. It holds the command name, the typed
  input, the argument values, wall-clock and high-resolution timings, the
  output or error, and whether the execution has completed. Reports for
  commands returning an eventual result are created incomplete and finalised
  when the result settles.
- `ReportList`: a capped, in-memory history of reports (oldest dropped first)
  that publishes `EventType.REPORTS_CHANGE` whenever a report is added or
  updated, and can render itself as a rich table.

Example:
    reports = ReportList(max_reports=100)
    reports.add_report(report)
    reports.summary()
"""
from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from rich import box
from rich.console import Console
from rich.table import Table

from quill.console import console
from quill.events import EventManager, EventType, ReportsChangeEvent
from quill.logger import logger

DEFAULT_MAX_REPORTS = 100


class Report(BaseModel):
    """
    The outcome of one command execution.

    Attributes:
        command (str): Name of the executed command.
        typed (str): The input line as typed.
        args (dict): Parameter values passed to the action.
        output (Any): The action's result, or the exception when `error` is set.
        error (bool): Whether the action raised or its eventual result failed.
        completed (bool): Whether the output is final.
        start_time (float | None): High-resolution start time.
        end_time (float | None): High-resolution end time.
        start_wall (datetime | None): Wall-clock start.
        end_wall (datetime | None): Wall-clock end.
        index (int | None): Position assigned by the report list.

    Properties:
        duration (float | None): Execution time in seconds.
        status (str): "OK", "ERROR" or "PENDING".
    """

    command: str
    typed: str = ""
    args: dict[str, Any] = Field(default_factory=dict)
    output: Any | None = None
    error: bool = False
    completed: bool = False

    start_time: float | None = None
    end_time: float | None = None
    start_wall: datetime | None = None
    end_wall: datetime | None = None

    index: int | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def start_timer(self):
        self.start_wall = datetime.now()
        self.start_time = time.perf_counter()

    def stop_timer(self):
        self.end_time = time.perf_counter()
        self.end_wall = datetime.now()

    def complete(self, output: Any, error: bool = False) -> None:
        """Record the final output and stop the timer."""
        self.output = output
        self.error = error
        self.completed = True
        self.stop_timer()

    @property
    def duration(self) -> float | None:
        if self.start_time is None:
            return None
        if self.end_time is None:
            return time.perf_counter() - self.start_time
        return self.end_time - self.start_time

    @property
    def status(self) -> str:
        if not self.completed:
            return "PENDING"
        return "ERROR" if self.error else "OK"

    def to_log_line(self) -> str:
        """Structured flat-line format for logging."""
        duration_str = f"{self.duration:.3f}s" if self.duration is not None else "n/a"
        return (
            f"[{self.command}] status={self.status} duration={duration_str} "
            f"output={self.output!r}"
        )

    def __str__(self) -> str:
        duration_str = f"{self.duration:.3f}s" if self.duration is not None else "n/a"
        return (
            f"<Report '{self.command}' | {self.status} | "
            f"Duration: {duration_str} | Output: {self.output!r}>"
        )


class ReportList:
    """
    Capped history of execution reports.

    Args:
        max_reports (int): Number of reports kept; the oldest is dropped first.
    """

    def __init__(self, max_reports: int = DEFAULT_MAX_REPORTS) -> None:
        if max_reports < 1:
            raise ValueError("max_reports must be at least 1")
        self.max_reports = max_reports
        self.events = EventManager()
        self._reports: list[Report] = []
        self._index = 0

    def add_report(self, report: Report) -> None:
        """Append a report, dropping the oldest beyond `max_reports`."""
        report.index = self._index
        self._index += 1
        self._reports.append(report)
        while len(self._reports) > self.max_reports:
            dropped = self._reports.pop(0)
            logger.debug("Dropped report #%s for '%s'", dropped.index, dropped.command)
        self.events.publish(EventType.REPORTS_CHANGE, ReportsChangeEvent(self, report))

    def update_report(self, report: Report) -> None:
        """Announce that a report changed, e.g. its eventual result settled."""
        logger.debug(report.to_log_line())
        self.events.publish(EventType.REPORTS_CHANGE, ReportsChangeEvent(self, report))

    def get_reports(self) -> list[Report]:
        return list(self._reports)

    def get_latest(self) -> Report | None:
        return self._reports[-1] if self._reports else None

    def clear(self) -> None:
        self._reports.clear()

    def __len__(self) -> int:
        return len(self._reports)

    def __iter__(self):
        return iter(list(self._reports))

    def summary(
        self,
        status: Literal["all", "success", "error"] = "all",
        target: Console | None = None,
    ) -> Table:
        """
        Render the reports as a rich table and print it.

        Args:
            status (Literal): One of "all", "success" or "error" to filter rows.
            target (Console | None): Console to print to; the shared console by default.
        """
        table = Table(title="Command History", expand=True, box=box.SIMPLE)

        table.add_column("Index", justify="right", style="dim")
        table.add_column("Command", style="bold cyan")
        table.add_column("Start", justify="right", style="dim")
        table.add_column("End", justify="right", style="dim")
        table.add_column("Duration", justify="right")
        table.add_column("Status", style="bold")
        table.add_column("Output / Error", overflow="fold")

        for report in self._reports:
            start = report.start_wall.strftime("%H:%M:%S") if report.start_wall else "n/a"
            end = report.end_wall.strftime("%H:%M:%S") if report.end_wall else "n/a"
            duration = f"{report.duration:.3f}s" if report.duration else "n/a"

            if report.error and status.lower() in ["all", "error"]:
                final_status = "[status.error]❌ Error"
                final_output = repr(report.output)
            elif not report.error and status.lower() in ["all", "success"]:
                final_status = (
                    "[status.valid]✅ Success"
                    if report.completed
                    else "[status.incomplete]⏳ Pending"
                )
                final_output = repr(report.output)
                if len(final_output) > 50:
                    final_output = f"{final_output[:50]}..."
            else:
                continue

            table.add_row(
                str(report.index),
                report.command,
                start,
                end,
                duration,
                final_status,
                final_output,
            )

        (target or console).print(table)
        return table
