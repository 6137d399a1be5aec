"""Validation utilities for qstat arguments."""

import re
import shutil

# "*" selects every user
ALL_USERS = "*"

# Patterns for input validation
SAFE_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
# wc_job_list (man 1 sge_types): job ids, job names and wildcards, comma separated
SAFE_JOB_PATTERN = re.compile(r"^[A-Za-z0-9_.*?\[\]-]+(,[A-Za-z0-9_.*?\[\]-]+)*$")


class ValidationError(Exception):
    """Raised when input validation fails."""


def validate_user(user: str) -> bool:
    """Validate that a user argument is safe for CLI usage.

    Args:
        user: A username, or ``"*"`` for all users.

    Returns:
        True if the user is safe.

    Raises:
        ValidationError: If the user is empty or contains unsafe characters.
    """
    if not user:
        raise ValidationError("Username cannot be empty")
    if user == ALL_USERS:
        return True
    if not SAFE_USERNAME_PATTERN.fullmatch(user):
        raise ValidationError(f"Unsafe characters detected in username: {user!r}")
    return True


def validate_job_pattern(pattern: str) -> bool:
    """Validate a job list pattern as accepted by ``qstat -j``.

    Args:
        pattern: Job ids, job names or wildcard patterns, separated by commas.

    Returns:
        True if the pattern is safe.

    Raises:
        ValidationError: If the pattern is empty or contains unsafe characters.
    """
    if not pattern:
        raise ValidationError("Job pattern cannot be empty")
    if not SAFE_JOB_PATTERN.fullmatch(pattern):
        raise ValidationError(f"Invalid job pattern: {pattern!r}")
    return True


def resolve_executable(executable: str) -> str:
    """Return the absolute path to an executable.

    Args:
        executable: The name of the executable to find.

    Returns:
        The absolute path to the executable.

    Raises:
        FileNotFoundError: If the executable is not found on PATH.
    """
    resolved = shutil.which(executable)
    if resolved is None:
        raise FileNotFoundError(f"Executable {executable!r} was not found on PATH")
    return resolved
