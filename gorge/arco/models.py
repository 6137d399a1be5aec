"""Record types for the ARCo accounting database."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ArcoJob:
    """A job from the ``sge_job`` table."""

    job_number: int
    task_number: int
    pe_task_id: str | None
    job_name: str | None
    group: str | None
    owner: str | None
    account: str | None
    priority: int | None
    submission_time: datetime | None
    project: str | None
    department: str | None


@dataclass
class Accounting:
    """Accounting record of one job task, from ``view_accounting``."""

    job_number: int
    task_number: int
    pe_task_id: str | None
    name: str | None
    group: str | None
    username: str | None
    account: str | None
    project: str | None
    department: str | None
    submission_time: datetime | None
    ar_parent: int | None
    start_time: datetime | None
    end_time: datetime | None
    wallclock_time: int | None  # seconds
    cpu: float | None  # seconds
    memory: float | None  # GB * seconds
    io: float | None
    io_wait: float | None
    max_vmem: float | None  # bytes
    exit_status: int | None
    max_rss: int | None

    @property
    def failed(self) -> bool:
        return self.exit_status not in (None, 0)


@dataclass
class JobLog:
    """A job log entry from ``view_job_log_ordered``."""

    job_number: int
    task_number: int
    pe_task_id: str | None
    job_name: str | None
    user: str | None
    account: str | None
    project: str | None
    department: str | None
    time: datetime | None
    event: str | None
    state: str | None
    initiator: str | None
    host: str | None
    message: str | None
