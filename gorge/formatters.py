"""Rich table rendering for gorge records."""

from collections.abc import Iterable
from datetime import datetime

from rich.markup import escape
from rich.table import Table

from gorge.arco.models import Accounting
from gorge.qstat.models import JobInfo, QueueJob
from gorge.qstat.task_range import TaskRangeError, count_tasks, parse_task_ranges

# State color mapping using Rich markup, checked in order
STATE_STYLES: tuple[tuple[str, str], ...] = (
    ("E", "bold red"),
    ("d", "bold magenta"),
    ("h", "yellow"),
    ("s", "yellow"),
    ("S", "yellow"),
    ("r", "bold green"),
    ("t", "green"),
    ("q", "bold yellow"),
)

MISSING = "-"


def state_style(state: str) -> str:
    """Return the Rich style for a GridEngine state string such as ``"Eqw"``."""
    for flag, style in STATE_STYLES:
        if flag in state:
            return style
    return ""


def _format_time(value: datetime | None) -> str:
    if value is None:
        return MISSING
    return value.strftime("%Y-%m-%d %H:%M:%S")


def _format_optional(value: object) -> str:
    return MISSING if value is None else str(value)


def queue_table(jobs: Iterable[QueueJob]) -> Table:
    """Build a table of queue jobs.

    Args:
        jobs: Jobs from a queue overview.

    Returns:
        A table with one row per job.
    """
    table = Table(title="GridEngine queue")
    table.add_column("Job", justify="right")
    table.add_column("Priority", justify="right")
    table.add_column("Name")
    table.add_column("Owner")
    table.add_column("State")
    table.add_column("Queue")
    table.add_column("Slots", justify="right")
    table.add_column("Tasks", justify="right")

    for job in jobs:
        style = state_style(job.state)
        state = escape(job.state)
        table.add_row(
            str(job.job_number),
            f"{job.normalized_priority:.5f}",
            escape(job.name),
            escape(job.owner),
            f"[{style}]{state}[/]" if style else state,
            escape(job.queue_name) or MISSING,
            str(job.slots),
            str(job.num_tasks),
        )
    return table


def job_table(jobs: Iterable[JobInfo]) -> Table:
    """Build a summary table of detailed job information."""
    table = Table(title="Jobs")
    table.add_column("Job", justify="right")
    table.add_column("Name")
    table.add_column("Owner")
    table.add_column("Project")
    table.add_column("Tasks", justify="right")
    table.add_column("Command")
    table.add_column("Stdout")

    for job in jobs:
        table.add_row(
            str(job.job_number),
            escape(job.job_name),
            escape(job.owner),
            escape(job.project) or MISSING,
            f"{job.job_array} ({job.num_tasks})",
            escape(job.command()),
            escape(", ".join(entry.path for entry in job.stdout_paths())) or MISSING,
        )
    return table


def accounting_table(records: Iterable[Accounting]) -> Table:
    """Build a table of accounting records."""
    table = Table(title="Accounting")
    table.add_column("Job", justify="right")
    table.add_column("Task", justify="right")
    table.add_column("Owner")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Wallclock (s)", justify="right")
    table.add_column("CPU (s)", justify="right")
    table.add_column("Max VMem", justify="right")
    table.add_column("Exit", justify="right")

    for record in records:
        exit_status = _format_optional(record.exit_status)
        table.add_row(
            str(record.job_number),
            str(record.task_number),
            escape(_format_optional(record.username)),
            _format_time(record.start_time),
            _format_time(record.end_time),
            _format_optional(record.wallclock_time),
            MISSING if record.cpu is None else f"{record.cpu:.1f}",
            MISSING if record.max_vmem is None else f"{record.max_vmem:.0f}",
            f"[bold red]{exit_status}[/]" if record.failed else exit_status,
        )
    return table


def task_range_table(expressions: Iterable[str]) -> Table:
    """Build a table describing task range expressions.

    Invalid expressions are listed with their parse error instead of a count.
    """
    table = Table(title="Task ranges")
    table.add_column("Expression")
    table.add_column("Ranges")
    table.add_column("Tasks", justify="right")

    for expression in expressions:
        try:
            ranges = parse_task_ranges(expression)
        except TaskRangeError as exc:
            table.add_row(escape(repr(expression)), f"[bold red]{escape(str(exc))}[/]", MISSING)
            continue
        table.add_row(
            escape(repr(expression)),
            ", ".join(f"{r.min}..{r.max} step {r.step}" for r in ranges),
            str(count_tasks(expression)),
        )
    return table
