"""Command-line reporting for GridEngine clusters."""

import argparse
from collections.abc import Sequence

from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from gorge.arco import ArcoConfigError, open_arco
from gorge.formatters import accounting_table, job_table, queue_table, task_range_table
from gorge.logger import add_stderr_sink, get_logger, remove_sink
from gorge.qstat import TaskRangeError, count_tasks, get_detailed_job_info, get_queue_info
from gorge.settings import LOG_LEVELS, Settings, load_settings

logger = get_logger(__name__)


def build_parser(version: str = "unknown") -> argparse.ArgumentParser:
    """Build the argument parser for the ``gorge`` command."""
    parser = argparse.ArgumentParser(prog="gorge", description="Report GridEngine job, queue and accounting data.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {version}")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Echo log messages of this level and above to stderr (default: from settings)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    queue = subparsers.add_parser("queue", help="Show queued and pending jobs")
    queue.add_argument("-u", "--user", default="", help="Only show jobs of this user (default: all users)")
    queue.add_argument("-f", "--full", action="store_true", help="Use the full per-queue format")

    job = subparsers.add_parser("job", help="Show detailed information for jobs matching a pattern")
    job.add_argument("pattern", help="Job ids or names, comma separated; wildcards allowed")

    accounting = subparsers.add_parser("accounting", help="Show accounting records from ARCo")
    accounting.add_argument("job_number", type=int)
    accounting.add_argument("--task", type=int, help="Only show this task")
    accounting.add_argument("--url", help="ARCo database URL (default: from settings)")

    tasks = subparsers.add_parser("tasks", help="Count the tasks described by task range expressions")
    tasks.add_argument("expressions", nargs="+", metavar="EXPR", help='e.g. "1-10:3,20"')

    return parser


def parse_args(argv: Sequence[str] | None = None, version: str = "unknown") -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse; defaults to ``sys.argv[1:]``.
        version: Version string reported by ``--version``.

    Returns:
        The parsed arguments.
    """
    return build_parser(version).parse_args(argv)


def _show_queue(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    info, error = get_queue_info(args.user, full=args.full, timeout=settings.qstat_timeout)
    if info is None:
        console.print(error, style="bold red", markup=False)
        return 1
    console.print(queue_table(info.jobs))
    return 0


def _show_job(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    info, error = get_detailed_job_info(args.pattern, timeout=settings.qstat_timeout)
    if info is None:
        console.print(error, style="bold red", markup=False)
        return 1
    console.print(job_table(info.jobs))
    for message in info.messages.messages:
        console.print(message.message, style="yellow", markup=False)
    return 0


def _show_accounting(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    try:
        with open_arco(args.url or settings.arco_url) as db:
            if args.task is None:
                records = db.query_accounting(args.job_number)
            else:
                record = db.query_accounting_task(args.job_number, args.task)
                records = [record] if record is not None else []
    except ArcoConfigError as exc:
        console.print(str(exc), style="bold red", markup=False)
        return 1
    except SQLAlchemyError as exc:
        logger.error(f"ARCo query failed: {exc}")
        console.print(f"ARCo query failed: {exc}", style="bold red", markup=False)
        return 1

    if not records:
        console.print(f"No accounting records for job {args.job_number}")
        return 1
    console.print(accounting_table(records))
    return 0


def _show_tasks(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    console.print(task_range_table(args.expressions))
    for expression in args.expressions:
        try:
            count_tasks(expression)
        except TaskRangeError:
            return 1
    return 0


_HANDLERS = {
    "queue": _show_queue,
    "job": _show_job,
    "accounting": _show_accounting,
    "tasks": _show_tasks,
}


def main(args: argparse.Namespace, console: Console | None = None) -> int:
    """Run a gorge command.

    Args:
        args: Parsed command-line arguments.
        console: Console to print to; defaults to stdout.

    Returns:
        Process exit code.
    """
    settings = load_settings()
    console = console or Console()

    sink_id = add_stderr_sink(args.log_level or settings.log_level)
    try:
        logger.debug(f"Running command {args.command}")
        return _HANDLERS[args.command](args, settings, console)
    finally:
        remove_sink(sink_id)
