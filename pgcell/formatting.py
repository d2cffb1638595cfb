"""Small pure helpers turning decoded values into display text."""

import base64
import math
import re
import struct
from datetime import date, datetime, timezone
from typing import Iterable, Optional


# NUL and C0 controls other than tab/LF/CR, plus DEL.
_INVALID_CONTROL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

_PRINTABLE_BYTES = frozenset(range(0x20, 0x7F)) | {0x09, 0x0A, 0x0D}


def is_printable_byte(byte: int) -> bool:
    """ASCII 0x20-0x7E, or tab/LF/CR."""
    return byte in _PRINTABLE_BYTES


def count_printable(data: bytes) -> int:
    return sum(1 for b in data if b in _PRINTABLE_BYTES)


def contains_invalid_control_characters(text: str) -> bool:
    """Check whether text carries NUL or non-whitespace control characters.

    Such text is almost always a binary field that happened to be valid UTF-8.
    """
    return _INVALID_CONTROL.search(text) is not None


def decode_clean_utf8(data: bytes) -> str | None:
    """Decode as strict UTF-8, rejecting text with invalid control characters."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if contains_invalid_control_characters(text):
        return None
    return text


def format_timestamp(value: datetime | date) -> str:
    """Render an instant as ISO-8601 in UTC with milliseconds.

    Naive datetimes are taken to be UTC already; dates render as midnight UTC.

    Example:
        >>> format_timestamp(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00.000Z'
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def format_array(elements: Iterable[Optional[str]], quote: bool = False) -> str:
    """Render already-stringified elements as ``[e1, e2, ...]``.

    Args:
        elements: Element strings in order; ``None`` is a NULL element and
            renders as a bare ``NULL``.
        quote: Wrap every non-NULL element in double quotes (string-typed arrays).
    """
    rendered = []
    for element in elements:
        if element is None:
            rendered.append("NULL")
        elif quote:
            rendered.append(f'"{element}"')
        else:
            rendered.append(element)
    return "[" + ", ".join(rendered) + "]"


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _special_float(value: float) -> str | None:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return None


def format_float64(value: float) -> str:
    special = _special_float(value)
    if special is not None:
        return special
    return repr(value)


def format_float32(value: float) -> str:
    """Shortest text that reads back to the same single-precision value."""
    special = _special_float(value)
    if special is not None:
        return special

    packed = struct.pack(">f", value)
    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        try:
            if struct.pack(">f", float(text)) == packed:
                return repr(float(text))
        except OverflowError:
            continue
    return repr(value)
