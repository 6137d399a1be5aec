"""Decoding of ``qstat -xml`` output into record types.

qstat does not always produce well-formed XML (unknown jobs are reported with
an empty ``<>`` element, and job fields may contain invalid UTF-8), so the
output is read leniently.
"""

import dataclasses
import typing
from typing import Any, TypeVar

from lxml import etree

from gorge.logger import get_logger
from gorge.qstat.models import DetailedJobInfo, QueueInfo
from gorge.qstat.task_range import TaskRange, TaskRangeError

logger = get_logger(__name__)

T = TypeVar("T")

# Root element qstat -j emits when no job matches the pattern
UNKNOWN_JOBS_TAG = "unknown_jobs"

_TRUE_VALUES = frozenset({"1", "t", "true"})
_FALSE_VALUES = frozenset({"0", "f", "false"})


class QstatError(Exception):
    """Base class for qstat output errors."""


class QstatDecodeError(QstatError):
    """Raised when qstat output cannot be decoded."""


class UnknownJobError(QstatError):
    """Raised when qstat reports that no job matches the requested pattern."""

    def __init__(self, jobs: list[str]) -> None:
        super().__init__(f"unknown job: {','.join(jobs)}" if jobs else "unknown job")
        self.jobs = jobs


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(recover=True, resolve_entities=False, no_network=True)


def parse_xml(raw: bytes | str) -> etree._Element:
    """Parse raw qstat output into an element tree.

    Args:
        raw: qstat output. Invalid UTF-8 sequences are replaced.

    Returns:
        The root element.

    Raises:
        QstatDecodeError: If the output contains no XML document.
        UnknownJobError: If qstat reported unknown jobs.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    # lxml refuses str input carrying an encoding declaration
    data = raw.encode("utf-8")

    try:
        root = etree.fromstring(data, _make_parser())
    except etree.XMLSyntaxError as exc:
        raise QstatDecodeError(f"could not decode output: {exc}") from exc
    if root is None:
        raise QstatDecodeError("could not decode output: no XML document")

    if root.tag == UNKNOWN_JOBS_TAG:
        raise UnknownJobError([text.strip() for text in root.xpath(".//ST_name/text()")])

    return root


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError as exc:
        raise QstatDecodeError(f"invalid integer value: {text!r}") from exc


def _to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise QstatDecodeError(f"invalid float value: {text!r}") from exc


def _to_bool(text: str) -> bool:
    value = text.lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise QstatDecodeError(f"invalid boolean value: {text!r}")


def _decode_scalar(kind: type, element: etree._Element) -> Any:
    text = element.text or ""
    if kind is str:
        return text
    # Empty numeric and boolean elements decode to the zero value
    text = text.strip()
    if kind is bool:
        return _to_bool(text) if text else False
    if kind is int:
        return _to_int(text) if text else 0
    if kind is float:
        return _to_float(text) if text else 0.0
    raise TypeError(f"Unsupported field type: {kind!r}")


def _child_int(element: etree._Element, tag: str, default: int) -> int:
    child = element.find(tag)
    if child is None:
        return default
    return _decode_scalar(int, child)


def decode_task_range(element: etree._Element) -> TaskRange:
    """Decode a ``task_id_range`` element (``RN_min``, ``RN_max``, ``RN_step``).

    Args:
        element: The ``task_id_range`` element.

    Returns:
        The task range.

    Raises:
        QstatDecodeError: If a bound is not an integer or the step is below 1.
    """
    first = _child_int(element, "RN_min", 1)
    last = _child_int(element, "RN_max", first)
    step = _child_int(element, "RN_step", 1)
    try:
        return TaskRange(first, last, step)
    except TaskRangeError as exc:
        raise QstatDecodeError(f"invalid task id range: {exc}") from exc


def _decode_value(kind: Any, element: etree._Element) -> Any:
    if kind is TaskRange:
        return decode_task_range(element)
    if dataclasses.is_dataclass(kind):
        return decode_record(kind, element)
    return _decode_scalar(kind, element)


def decode_record(cls: type[T], element: etree._Element) -> T:
    """Build a record from an XML element using the fields' ``xml`` paths.

    Fields whose element is missing keep their default value.

    Args:
        cls: A dataclass whose fields carry ``xml`` metadata.
        element: The element the paths are relative to.

    Returns:
        The decoded record.

    Raises:
        QstatDecodeError: If an element's text does not match its field type.
    """
    hints = typing.get_type_hints(cls)
    values: dict[str, Any] = {}

    for record_field in dataclasses.fields(cls):  # type: ignore[arg-type]
        path = record_field.metadata.get("xml")
        if path is None:
            continue
        kind = hints[record_field.name]

        if typing.get_origin(kind) is list:
            (item_kind,) = typing.get_args(kind)
            values[record_field.name] = [_decode_value(item_kind, child) for child in element.findall(path)]
            continue

        child = element.find(path)
        if child is not None:
            values[record_field.name] = _decode_value(kind, child)

    return cls(**values)


def parse_queue_info(raw: bytes | str) -> QueueInfo:
    """Parse the output of ``qstat -xml [-f] -pri -ext -urg``.

    Args:
        raw: qstat output.

    Returns:
        The decoded queue information.
    """
    info = decode_record(QueueInfo, parse_xml(raw))
    logger.debug(
        f"Decoded queue info: {len(info.queued_jobs)} queued, {len(info.pending_jobs)} pending, "
        f"{len(info.queues)} queues"
    )
    return info


def parse_detailed_job_info(raw: bytes | str) -> DetailedJobInfo:
    """Parse the output of ``qstat -xml -j <pattern>``.

    Args:
        raw: qstat output.

    Returns:
        The decoded job information.
    """
    info = decode_record(DetailedJobInfo, parse_xml(raw))
    logger.debug(f"Decoded detailed info for {len(info.jobs)} jobs")
    return info
