"""qstat command execution."""

import subprocess

from gorge.logger import get_logger
from gorge.qstat.models import DetailedJobInfo, QueueInfo
from gorge.qstat.parser import QstatError, UnknownJobError, parse_detailed_job_info, parse_queue_info
from gorge.qstat.validation import (
    ALL_USERS,
    ValidationError,
    resolve_executable,
    validate_job_pattern,
    validate_user,
)
from gorge.settings import DEFAULT_QSTAT_TIMEOUT

logger = get_logger(__name__)

# Priority, extended and urgency columns of the queue overview
QUEUE_INFO_ARGS = ["-pri", "-ext", "-urg"]


def run_qstat(*args: str, timeout: float = DEFAULT_QSTAT_TIMEOUT) -> tuple[bytes, str | None]:
    """Run ``qstat -xml`` with the given arguments and return raw output.

    Args:
        *args: Arguments passed to qstat after ``-xml``.
        timeout: Seconds to wait for qstat to finish.

    Returns:
        Tuple of (raw output, optional error message).
    """
    try:
        qstat = resolve_executable("qstat")
        command = [qstat, "-xml", *args]
        logger.debug(f"Running command: {' '.join(command)}")

        result = subprocess.run(  # noqa: S603
            command,
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as exc:
        logger.error(f"qstat not found: {exc}")
        return b"", f"qstat not found: {exc}"
    except subprocess.TimeoutExpired:
        logger.error(f"Timeout running qstat {' '.join(args)}")
        return b"", "Command timed out"
    except subprocess.SubprocessError as exc:
        logger.error(f"Error running qstat: {exc}")
        return b"", f"Error running qstat: {exc}"

    # qstat -j exits non-zero for unknown jobs but still prints XML on stdout
    if result.returncode != 0 and not result.stdout.strip():
        error_msg = result.stderr.decode("utf-8", errors="replace").strip() or "qstat failed"
        logger.warning(f"qstat returned error: {error_msg}")
        return b"", f"qstat error: {error_msg}"

    return result.stdout, None


def get_detailed_job_info(
    pattern: str, timeout: float = DEFAULT_QSTAT_TIMEOUT
) -> tuple[DetailedJobInfo | None, str | None]:
    """Get detailed information for all jobs matching a pattern.

    Args:
        pattern: A job list as accepted by ``qstat -j`` (``wc_job_list`` in
            ``man 1 sge_types``).
        timeout: Seconds to wait for qstat to finish.

    Returns:
        Tuple of (job information, optional error message).
    """
    try:
        validate_job_pattern(pattern)
    except ValidationError as exc:
        return None, str(exc)

    raw_output, error = run_qstat("-j", pattern, timeout=timeout)
    if error:
        return None, error

    try:
        info = parse_detailed_job_info(raw_output)
    except UnknownJobError:
        logger.info(f"qstat reported unknown job: {pattern}")
        return None, f"qstat: unknown job: {pattern}"
    except QstatError as exc:
        logger.error(f"Could not decode qstat -j output for {pattern}: {exc}")
        return None, f"qstat: {exc}"

    logger.info(f"Retrieved detailed info for {len(info.jobs)} jobs matching {pattern}")
    return info, None


def get_queue_info(
    user: str = "", full: bool = False, timeout: float = DEFAULT_QSTAT_TIMEOUT
) -> tuple[QueueInfo | None, str | None]:
    """Get the current state of the GridEngine queue.

    Args:
        user: Limit the results to this user. ``"*"`` or the empty string
            returns jobs of all users.
        full: Request the full (``-f``) format, which groups running jobs by
            queue instance.
        timeout: Seconds to wait for qstat to finish.

    Returns:
        Tuple of (queue information, optional error message).
    """
    user = user or ALL_USERS
    try:
        validate_user(user)
    except ValidationError as exc:
        return None, str(exc)

    args = [*QUEUE_INFO_ARGS, "-u", user]
    if full:
        args.insert(0, "-f")

    raw_output, error = run_qstat(*args, timeout=timeout)
    if error:
        return None, error

    try:
        info = parse_queue_info(raw_output)
    except QstatError as exc:
        logger.error(f"Could not decode qstat output: {exc}")
        return None, f"qstat: {exc}"

    logger.debug(f"Found {len(info.jobs)} jobs in queue for user {user}")
    return info, None
