"""
Type Casting Utilities
======================

Conservative conversions used by the typed configuration accessors.

Numbers convert between numeric types and numeric strings are parsed, but
there is no implicit truthiness: ``to_bool(1)`` and ``to_int(True)`` both
fail. Booleans are parsed from strings only through an explicit grammar
(``true/false``, ``yes/no``, ``on/off``, ``t/f``, ``1/0``), which is what
environment-variable overrides produce.
"""

import json
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Dict, List

import pytz
from dateutil import parser as date_parser

from ..config.errors import TypeMismatchError

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1
UINT32_MAX = 2 ** 32 - 1
UINT64_MAX = 2 ** 64 - 1

_TRUE_STRINGS = {'1', 't', 'true', 'yes', 'y', 'on'}
_FALSE_STRINGS = {'0', 'f', 'false', 'no', 'n', 'off'}

# Seconds per duration unit
_DURATION_UNITS = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,
    'μs': 1e-6,
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
    'd': 86400.0,
}
_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h|d)')


def to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return ''
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    raise TypeMismatchError(value, 'string')


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise TypeMismatchError(value, 'bool', "expected true/false, yes/no, on/off or 1/0")
    raise TypeMismatchError(value, 'bool')


def to_int(value: Any) -> int:
    """
    Convert to int.

    Floats are truncated. Strings may carry a base prefix (``0x1f``,
    ``0o17``, ``0b101``) or a zero fractional part (``"10.0"``).
    """
    if isinstance(value, bool):
        raise TypeMismatchError(value, 'int', "booleans are not numbers")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeMismatchError(value, 'int')
        return int(value)
    if isinstance(value, str):
        text = value.strip().replace('_', '')
        try:
            return int(text, 0)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise TypeMismatchError(value, 'int') from None
        if not number.is_integer():
            raise TypeMismatchError(value, 'int', "has a fractional part")
        return int(number)
    raise TypeMismatchError(value, 'int')


def _to_ranged_int(value: Any, target: str, minimum: int, maximum: int) -> int:
    number = to_int(value)
    if not minimum <= number <= maximum:
        raise TypeMismatchError(value, target, f"out of range [{minimum}, {maximum}]")
    return number


def to_int32(value: Any) -> int:
    return _to_ranged_int(value, 'int32', INT32_MIN, INT32_MAX)


def to_int64(value: Any) -> int:
    return _to_ranged_int(value, 'int64', INT64_MIN, INT64_MAX)


def to_uint(value: Any) -> int:
    return _to_ranged_int(value, 'uint', 0, UINT64_MAX)


def to_uint32(value: Any) -> int:
    return _to_ranged_int(value, 'uint32', 0, UINT32_MAX)


def to_uint64(value: Any) -> int:
    return _to_ranged_int(value, 'uint64', 0, UINT64_MAX)


def to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeMismatchError(value, 'float', "booleans are not numbers")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise TypeMismatchError(value, 'float') from None
    raise TypeMismatchError(value, 'float')


def to_time(value: Any) -> datetime:
    """
    Convert to a datetime.

    Numbers (and numeric strings) are Unix epoch seconds and dates are
    midnight UTC; both yield UTC-aware datetimes. Other strings go through
    ``dateutil``.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=pytz.utc)
    if isinstance(value, bool):
        raise TypeMismatchError(value, 'time')
    if isinstance(value, (int, float)):
        return _from_epoch(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return _from_epoch(float(text))
        except ValueError:
            pass
        try:
            return date_parser.parse(text)
        except (ValueError, OverflowError) as e:
            raise TypeMismatchError(value, 'time', str(e)) from e
    raise TypeMismatchError(value, 'time')


def _from_epoch(seconds: float) -> datetime:
    try:
        return datetime.fromtimestamp(seconds, tz=pytz.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise TypeMismatchError(seconds, 'time', str(e)) from e


def to_duration(value: Any) -> timedelta:
    """
    Convert to a timedelta.

    Numbers are seconds. Strings are either a bare number of seconds or a
    sequence of ``<number><unit>`` parts such as ``10h``, ``1h30m``,
    ``1.5s`` or ``300ms`` (units: ns, us, ms, s, m, h, d).
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise TypeMismatchError(value, 'duration')
    if isinstance(value, (int, float)):
        return _seconds(value, value)
    if not isinstance(value, str):
        raise TypeMismatchError(value, 'duration')

    text = value.strip().replace(' ', '')
    sign = 1
    if text[:1] in ('+', '-'):
        sign = -1 if text[0] == '-' else 1
        text = text[1:]
    if not text:
        raise TypeMismatchError(value, 'duration', "empty duration")

    try:
        total = float(text)
    except ValueError:
        total = 0.0
        pos = 0
        while pos < len(text):
            match = _DURATION_PART.match(text, pos)
            if match is None:
                raise TypeMismatchError(value, 'duration', f"invalid duration near {text[pos:]!r}")
            total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
            pos = match.end()

    return _seconds(sign * total, value)


def _seconds(seconds: float, original: Any) -> timedelta:
    if not math.isfinite(seconds):
        raise TypeMismatchError(original, 'duration')
    try:
        return timedelta(seconds=seconds)
    except OverflowError as e:
        raise TypeMismatchError(original, 'duration', str(e)) from e


def to_int_list(value: Any) -> List[int]:
    if not isinstance(value, (list, tuple)):
        raise TypeMismatchError(value, 'list of int')
    try:
        return [to_int(item) for item in value]
    except TypeMismatchError as e:
        raise TypeMismatchError(value, 'list of int', str(e)) from e


def to_string_list(value: Any) -> List[str]:
    """Convert to a list of strings; a plain string is split on whitespace."""
    if isinstance(value, str):
        return value.split()
    if not isinstance(value, (list, tuple)):
        raise TypeMismatchError(value, 'list of string')
    try:
        return [to_string(item) for item in value]
    except TypeMismatchError as e:
        raise TypeMismatchError(value, 'list of string', str(e)) from e


def to_string_map(value: Any) -> Dict[str, Any]:
    """Convert to a string-keyed dict; a JSON object string is decoded."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError as e:
            raise TypeMismatchError(value, 'map', str(e)) from e
    if not isinstance(value, dict):
        raise TypeMismatchError(value, 'map')
    return {str(key): item for key, item in value.items()}
