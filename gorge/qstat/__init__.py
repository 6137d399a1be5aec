"""GridEngine job and queue status via qstat."""

from gorge.qstat.commands import get_detailed_job_info, get_queue_info, run_qstat
from gorge.qstat.models import DetailedJobInfo, JobInfo, Queue, QueueInfo, QueueJob
from gorge.qstat.parser import (
    QstatDecodeError,
    QstatError,
    UnknownJobError,
    parse_detailed_job_info,
    parse_queue_info,
)
from gorge.qstat.task_range import (
    InvalidBoundError,
    InvalidMaxError,
    InvalidMinError,
    InvalidStepError,
    MalformedRangeError,
    MalformedStepError,
    TaskRange,
    TaskRangeError,
    count_tasks,
    parse_task_range,
    parse_task_ranges,
    total_tasks,
)

__all__ = [
    "DetailedJobInfo",
    "InvalidBoundError",
    "InvalidMaxError",
    "InvalidMinError",
    "InvalidStepError",
    "JobInfo",
    "MalformedRangeError",
    "MalformedStepError",
    "QstatDecodeError",
    "QstatError",
    "Queue",
    "QueueInfo",
    "QueueJob",
    "TaskRange",
    "TaskRangeError",
    "UnknownJobError",
    "count_tasks",
    "get_detailed_job_info",
    "get_queue_info",
    "parse_detailed_job_info",
    "parse_queue_info",
    "parse_task_range",
    "parse_task_ranges",
    "run_qstat",
    "total_tasks",
]
