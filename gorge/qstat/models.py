"""Record types for GridEngine ``qstat -xml`` output.

Each field carries the path of the XML element it is read from in its
``xml`` metadata (relative to the record's own element, ``/``-separated).
See ``man 5 sge_complex`` and ``man 1 qstat`` for the meaning of the fields.
"""

import posixpath
from dataclasses import dataclass, field

from gorge.qstat.task_range import NON_ARRAY_RANGE, TaskRange, total_tasks


def _xml(path: str, **kwargs: object) -> object:
    """Declare a dataclass field read from the XML element at ``path``."""
    return field(metadata={"xml": path}, **kwargs)  # type: ignore[call-overload]


@dataclass
class Resource:
    """A GridEngine resource request."""

    name: str = _xml("CE_name", default="")
    val_type: int = _xml("CE_valtype", default=0)
    string_val: str = _xml("CE_stringval", default="")
    double_val: float = _xml("CE_doubleval", default=0.0)
    rel_op: int = _xml("CE_relop", default=0)
    consumable: bool = _xml("CE_consumable", default=False)
    dominant: bool = _xml("CE_dominant", default=False)
    pj_double_val: float = _xml("CE_pj_doubleval", default=0.0)
    pj_dominant: bool = _xml("CE_pj_dominant", default=False)
    requestable: bool = _xml("CE_requestable", default=False)
    tagged: bool = _xml("CE_tagged", default=False)


@dataclass
class MailAddress:
    """A job notification address."""

    user: str = _xml("MR_user", default="")
    host: str = _xml("MR_host", default="")

    def __str__(self) -> str:
        return f"{self.user}@{self.host}"


@dataclass
class EnvVar:
    """A job environment variable."""

    variable: str = _xml("VA_variable", default="")
    value: str = _xml("VA_value", default="")


@dataclass
class PathEntry:
    """One entry of a job's stdout or stderr path list."""

    path: str = _xml("PN_path", default="")
    host: str = _xml("PN_host", default="")
    file_host: str = _xml("PN_file_host", default="")
    file_staging: bool = _xml("PN_file_staging", default=False)


@dataclass
class TaskMessage:
    type: int = _xml("QIM_type", default=0)
    message: str = _xml("QIM_message", default="")


@dataclass
class ArrayTask:
    """State of a single task of an array job."""

    status: int = _xml("JAT_status", default=0)
    task_number: int = _xml("JAT_task_number", default=0)
    message_list: list[TaskMessage] = _xml("JAT_message_list/ulong_sublist", default_factory=list)


@dataclass
class SchedulerMessage:
    """A scheduler message and the jobs it applies to."""

    job_numbers: list[int] = _xml("MES_job_number_list/ulong_sublist/ULNG_value", default_factory=list)
    number: int = _xml("MES_message_number", default=0)
    message: str = _xml("MES_message", default="")


@dataclass
class Messages:
    messages: list[SchedulerMessage] = _xml("SME_message_list/element", default_factory=list)
    global_messages: list[SchedulerMessage] = _xml("SME_global_message_list/element", default_factory=list)


def _absolute_paths(root: str, entries: list[PathEntry]) -> list[PathEntry]:
    """Resolve relative entries against ``root``, leaving the originals untouched."""
    paths = []
    for entry in entries:
        if not posixpath.isabs(entry.path):
            entry = PathEntry(
                path=posixpath.join(root, entry.path),
                host=entry.host,
                file_host=entry.file_host,
                file_staging=entry.file_staging,
            )
        paths.append(entry)
    return paths


@dataclass
class JobInfo:
    """Detailed job information as reported by ``qstat -j``."""

    job_number: int = _xml("JB_job_number", default=0)
    advance_reservation: int = _xml("JB_ar", default=0)
    exec_file: str = _xml("JB_exec_file", default="")
    submission_time: int = _xml("JB_submission_time", default=0)
    owner: str = _xml("JB_owner", default="")
    uid: int = _xml("JB_uid", default=0)
    group: str = _xml("JB_group", default="")
    gid: int = _xml("JB_gid", default=0)
    account: str = _xml("JB_account", default="")
    merge_stderr: bool = _xml("JB_merge_stderr", default=False)
    mail_list: list[MailAddress] = _xml("JB_mail_list/element", default_factory=list)
    project: str = _xml("JB_project", default="")
    notify: bool = _xml("JB_notify", default=False)
    job_name: str = _xml("JB_job_name", default="")
    stdout_path_list: list[PathEntry] = _xml("JB_stdout_path_list/path_list", default_factory=list)
    alt_stdout_path_list: list[PathEntry] = _xml("JB_stdout_path_list/stdout_path_list", default_factory=list)
    job_share: int = _xml("JB_jobshare", default=0)
    # qstat emits the hard resource list under two different element names
    qstat_hard_resource_list: list[Resource] = _xml("JB_hard_resource_list/qstat_l_requests", default_factory=list)
    element_hard_resource_list: list[Resource] = _xml("JB_hard_resource_list/element", default_factory=list)
    env_list: list[EnvVar] = _xml("JB_env_list/job_sublist", default_factory=list)
    job_args: list[str] = _xml("JB_job_args/element/ST_name", default_factory=list)
    script_file: str = _xml("JB_script_file", default="")
    ja_tasks: list[ArrayTask] = _xml("JB_ja_tasks/ulong_sublist", default_factory=list)
    cwd: str = _xml("JB_cwd", default="")
    stderr_path_list: list[PathEntry] = _xml("JB_stderr_path_list/path_list", default_factory=list)
    alt_stderr_path_list: list[PathEntry] = _xml("JB_stderr_path_list/stderr_path_list", default_factory=list)
    jid_request_list: list[str] = _xml("JB_jid_request_list/element/JRE_job_name", default_factory=list)
    jid_successor_list: list[int] = _xml("JB_jid_successor_list/ulong_sublist/JRE_job_number", default_factory=list)
    deadline: bool = _xml("JB_deadline", default=False)
    execution_time: int = _xml("JB_execution_time", default=0)
    checkpoint_attr: int = _xml("JB_checkpoint_attr", default=0)
    checkpoint_interval: int = _xml("JB_checkpoint_interval", default=0)
    reserve: bool = _xml("JB_reserve", default=False)
    mail_options: int = _xml("JB_mail_options", default=0)
    priority: int = _xml("JB_priority", default=0)
    restart: int = _xml("JB_restart", default=0)
    verify: bool = _xml("JB_verify", default=False)
    script_size: int = _xml("JB_script_size", default=0)
    verify_suitable_queues: bool = _xml("JB_verify_suitable_queues", default=False)
    soft_wallclock_gmt: int = _xml("JB_soft_wallclock_gmt", default=0)
    hard_wallclock_gmt: int = _xml("JB_hard_wallclock_gmt", default=0)
    override_tickets: int = _xml("JB_override_tickets", default=0)
    version: int = _xml("JB_version", default=0)
    job_array: TaskRange = _xml("JB_ja_structure/task_id_range", default=NON_ARRAY_RANGE)
    type: int = _xml("JB_type", default=0)

    @property
    def num_tasks(self) -> int:
        """Number of tasks of the job (1 for a non-array job)."""
        return self.job_array.num_tasks

    def hard_resource_request(self) -> list[Resource]:
        """Return the complete list of hard resource requests made by the job."""
        return [*self.qstat_hard_resource_list, *self.element_hard_resource_list]

    def stdout_paths(self) -> list[PathEntry]:
        """Return the stdout paths of the job, made absolute against its working directory."""
        return _absolute_paths(self.cwd, [*self.stdout_path_list, *self.alt_stdout_path_list])

    def stderr_paths(self) -> list[PathEntry]:
        """Return the stderr paths of the job.

        Empty when stderr is merged into stdout.
        """
        if self.merge_stderr:
            return []
        return _absolute_paths(self.cwd, [*self.stderr_path_list, *self.alt_stderr_path_list])

    def command(self) -> str:
        """Return the job script followed by its arguments."""
        return " ".join([self.script_file, *self.job_args])


@dataclass
class DetailedJobInfo:
    """Result of ``qstat -j <pattern>``."""

    jobs: list[JobInfo] = _xml("djob_info/element", default_factory=list)
    messages: Messages = _xml("messages/element", default_factory=Messages)


@dataclass
class QueueJob:
    """One job row of the queue overview (``qstat -pri -ext -urg``)."""

    job_number: int = _xml("JB_job_number", default=0)
    posix_priority: int = _xml("JB_priority", default=0)
    normalized_urgency: float = _xml("JB_nurg", default=0.0)
    normalized_priority: float = _xml("JAT_prio", default=0.0)
    normalized_tickets: float = _xml("JAT_ntix", default=0.0)
    resource_contribution: float = _xml("JB_rrcontr", default=0.0)
    deadline_contribution: float = _xml("JB_dlcontr", default=0.0)
    wait_time_contribution: float = _xml("JB_wtcontr", default=0.0)
    name: str = _xml("JB_name", default="")
    owner: str = _xml("JB_owner", default="")
    project: str = _xml("JB_project", default="")
    department: str = _xml("JB_department", default="")
    state: str = _xml("state", default="")
    start_time: str = _xml("JAT_start_time", default="")
    submission_time: str = _xml("JB_submission_time", default="")
    cpu_usage: float = _xml("cpu_usage", default=0.0)  # seconds
    mem_usage: float = _xml("mem_usage", default=0.0)  # MB * seconds
    io_usage: float = _xml("io_usage", default=0.0)  # MB
    tickets: int = _xml("tickets", default=0)
    override_tickets: int = _xml("otickets", default=0)
    fairshare_tickets: int = _xml("ftickets", default=0)
    share_tree_tickets: int = _xml("stickets", default=0)
    queue_name: str = _xml("queue_name", default="")
    slots: int = _xml("slots", default=0)
    tasks: str = _xml("tasks", default="")

    @property
    def num_tasks(self) -> int:
        """Number of tasks in the job's task list, 1 if it cannot be parsed."""
        return total_tasks(self.tasks)

    @property
    def deletion(self) -> bool:
        return "d" in self.state

    @property
    def error(self) -> bool:
        return "E" in self.state

    @property
    def hold(self) -> bool:
        return "h" in self.state

    @property
    def running(self) -> bool:
        return "r" in self.state

    @property
    def restarted(self) -> bool:
        return "R" in self.state

    @property
    def suspended(self) -> bool:
        return "s" in self.state

    @property
    def queue_suspended(self) -> bool:
        return "S" in self.state

    @property
    def transferring(self) -> bool:
        return "t" in self.state

    @property
    def threshold(self) -> bool:
        return "T" in self.state

    @property
    def waiting(self) -> bool:
        return "w" in self.state

    @property
    def queued(self) -> bool:
        return "q" in self.state


@dataclass
class Queue:
    """A queue instance from ``qstat -f``."""

    name: str = _xml("name", default="")
    qtype: str = _xml("qtype", default="")
    slots_used: int = _xml("slots_used", default=0)
    slots_reserved: int = _xml("slots_resv", default=0)
    slots_total: int = _xml("slots_total", default=0)
    arch: str = _xml("arch", default="")
    job_list: list[QueueJob] = _xml("job_list", default_factory=list)


@dataclass
class QueueInfo:
    """Current state of the GridEngine queue."""

    # Jobs assigned to queues, e.g. executing
    queued_jobs: list[QueueJob] = _xml("queue_info/job_list", default_factory=list)
    # Jobs not yet executing in any queue
    pending_jobs: list[QueueJob] = _xml("job_info/job_list", default_factory=list)
    # Only present in full (-f) output; the jobs are then nested in each queue
    queues: list[Queue] = _xml("queue_info/Queue-List", default_factory=list)

    @property
    def jobs(self) -> list[QueueJob]:
        """All jobs, running first, whichever output format was parsed."""
        nested = [job for queue in self.queues for job in queue.job_list]
        return [*self.queued_jobs, *nested, *self.pending_jobs]
