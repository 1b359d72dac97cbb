"""Strict decoders for literal values found in list requests."""

import re
from datetime import datetime, timedelta, timezone

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

_RFC3339_PATTERN = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"[Tt]"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]{1,9}))?"
    r"(?P<offset>[Zz]|[+-][0-9]{2}:[0-9]{2})"
)

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def quote(value: str) -> str:
    """Double-quote a value, escaping backslashes and quotes."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def parse_int(text: str) -> int:
    """
    Parse a signed base-10 integer that fits in 64 bits.

    Unlike `int()`, surrounding whitespace and digit separators are rejected.

    Raises:
        ValueError: If `text` is not such an integer.
    """
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"parsing {quote(text)}: invalid syntax")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"parsing {quote(text)}: value out of range")
    return value


def parse_bool(text: str) -> bool:
    """Parse a boolean literal such as `true`, `F` or `1`."""
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueError(f"parsing {quote(text)}: invalid syntax")


def _parse_offset(offset: str) -> timezone:
    if offset in ("Z", "z"):
        return timezone.utc
    hours, minutes = int(offset[1:3]), int(offset[4:6])
    if hours > 23 or minutes > 59:
        raise ValueError("time zone offset out of range")
    delta = timedelta(hours=hours, minutes=minutes)
    return timezone(-delta if offset[0] == "-" else delta)


def parse_rfc3339(text: str) -> datetime:
    """
    Parse an RFC3339 timestamp into a timezone-aware datetime.

    Fractional seconds beyond microsecond precision are truncated.

    Args:
        text: Timestamp such as `2023-01-01T00:00:00Z`.

    Returns:
        The parsed, timezone-aware datetime.

    Raises:
        ValueError: If `text` is not a valid RFC3339 timestamp.
    """
    match = _RFC3339_PATTERN.fullmatch(text)
    if match is None:
        raise ValueError(
            f"parsing time {quote(text)} as RFC3339: "
            "expected YYYY-MM-DDTHH:MM:SS[.fraction](Z|+HH:MM)"
        )

    fraction = match.group("fraction") or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0

    try:
        return datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            microsecond,
            tzinfo=_parse_offset(match.group("offset")),
        )
    except ValueError as exc:
        raise ValueError(f"parsing time {quote(text)} as RFC3339: {exc}") from exc
