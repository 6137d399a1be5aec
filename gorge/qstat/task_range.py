"""Task ID range parsing for GridEngine array jobs.

GridEngine describes the task identifiers of an array job with range
expressions of the form::

    ""        -> a non-array job (task 1 only)
    "n"       -> task n
    "n-m"     -> tasks n..m
    "n-m:s"   -> tasks n..m, every s-th task

``qstat`` joins several of them with commas, e.g. ``"1-10:3,20-22"``.
"""

import re
from dataclasses import dataclass

from gorge.logger import get_logger

logger = get_logger(__name__)

# Base-10 integers with an optional sign, ASCII digits only
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

RANGE_SEPARATOR = "-"
STEP_SEPARATOR = ":"
LIST_SEPARATOR = ","


class TaskRangeError(ValueError):
    """Raised when a task range expression cannot be parsed."""

    def __init__(self, message: str, expression: str) -> None:
        super().__init__(message)
        self.expression = expression


class InvalidBoundError(TaskRangeError):
    """A numeric token of a range expression is not a base-10 integer."""

    field = ""

    def __init__(self, token: str, expression: str) -> None:
        super().__init__(f"could not parse {expression!r}: invalid {self.field} ({token!r})", expression)
        self.token = token


class InvalidMinError(InvalidBoundError):
    """The first task ID is not a valid integer."""

    field = "min"


class InvalidMaxError(InvalidBoundError):
    """The last task ID is not a valid integer."""

    field = "max"


class InvalidStepError(InvalidBoundError):
    """The step is not a valid integer, or is smaller than 1."""

    field = "step"


class MalformedRangeError(TaskRangeError):
    """The expression has more than one ``-`` separator."""

    def __init__(self, expression: str) -> None:
        super().__init__(f"could not parse {expression!r}: too many {RANGE_SEPARATOR!r} separators", expression)


class MalformedStepError(TaskRangeError):
    """The range tail has more than one ``:`` separator."""

    def __init__(self, expression: str) -> None:
        super().__init__(f"could not parse {expression!r}: too many {STEP_SEPARATOR!r} separators", expression)


@dataclass(frozen=True)
class TaskRange:
    """A range of array job task identifiers.

    ``max`` is inclusive. A range whose ``max`` is below its ``min`` is kept
    as-is; its task count is zero or negative.
    """

    min: int
    max: int
    step: int = 1

    def __post_init__(self) -> None:
        if self.step < 1:
            expression = f"{self.min}{RANGE_SEPARATOR}{self.max}{STEP_SEPARATOR}{self.step}"
            raise InvalidStepError(str(self.step), expression)

    @property
    def num_tasks(self) -> int:
        """Number of task IDs in the range, ``ceil((max - min + 1) / step)``."""
        return -((self.min - self.max - 1) // self.step)

    def __str__(self) -> str:
        if self.step != 1:
            return f"{self.min}{RANGE_SEPARATOR}{self.max}{STEP_SEPARATOR}{self.step}"
        if self.min != self.max:
            return f"{self.min}{RANGE_SEPARATOR}{self.max}"
        return str(self.min)


# Returned for the empty expression
NON_ARRAY_RANGE = TaskRange(1, 1, 1)


def _parse_int(token: str, error: type[InvalidBoundError], expression: str) -> int:
    if not _INTEGER_PATTERN.fullmatch(token):
        raise error(token, expression)
    try:
        return int(token)
    except ValueError as exc:
        # int() refuses decimal strings longer than sys.get_int_max_str_digits()
        raise error(token, expression) from exc


def parse_task_range(expression: str) -> TaskRange:
    """Parse a single task range expression.

    Args:
        expression: One of ``""``, ``"n"``, ``"n-m"`` or ``"n-m:s"``.

    Returns:
        The parsed range. The empty string gives ``TaskRange(1, 1, 1)``.

    Raises:
        InvalidMinError: If the first task ID is not an integer.
        MalformedRangeError: If there is more than one ``-``.
        MalformedStepError: If there is more than one ``:`` after the ``-``.
        InvalidStepError: If the step is not an integer or is below 1.
        InvalidMaxError: If the last task ID is not an integer.
    """
    if expression == "":
        return NON_ARRAY_RANGE

    parts = expression.split(RANGE_SEPARATOR)

    first = _parse_int(parts[0], InvalidMinError, expression)
    last = first
    step = 1

    if len(parts) > 2:
        raise MalformedRangeError(expression)
    if len(parts) == 2:
        tail = parts[1].split(STEP_SEPARATOR)
        if len(tail) > 2:
            raise MalformedStepError(expression)
        if len(tail) == 2:
            step = _parse_int(tail[1], InvalidStepError, expression)
            if step < 1:
                raise InvalidStepError(tail[1], expression)
        last = _parse_int(tail[0], InvalidMaxError, expression)

    return TaskRange(first, last, step)


def parse_task_ranges(expression: str) -> list[TaskRange]:
    """Parse a comma-separated list of task range expressions.

    Args:
        expression: Range expressions joined by commas, e.g. ``"1-3,7,10-20:5"``.

    Returns:
        One range per segment, in order.

    Raises:
        TaskRangeError: The error of the first segment that fails to parse.
    """
    return [parse_task_range(segment) for segment in expression.split(LIST_SEPARATOR)]


def count_tasks(expression: str) -> int:
    """Count the task IDs described by a comma-separated range list.

    Overlapping segments are not de-duplicated.

    Args:
        expression: Range expressions joined by commas.

    Returns:
        The sum of the task counts of every segment.

    Raises:
        TaskRangeError: If any segment fails to parse.
    """
    return sum(task_range.num_tasks for task_range in parse_task_ranges(expression))


def total_tasks(expression: str) -> int:
    """Count the tasks of a job for reporting, treating bad input as one task.

    Use :func:`count_tasks` where invalid expressions must be rejected.

    Args:
        expression: Task list as reported by qstat.

    Returns:
        The number of tasks, or 1 if the expression cannot be parsed.
    """
    try:
        return count_tasks(expression)
    except TaskRangeError as exc:
        logger.debug(f"Treating unparseable task list as a single task: {exc}")
        return 1
