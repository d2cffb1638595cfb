"""INTERVAL decoding.

Binary layout is 16 bytes, big-endian: ``[microseconds:i64][days:i32][months:i32]``.
Output follows the server's default ``postgres`` interval style, e.g.
``1 year 2 mons 3 days 04:05:06.5``.
"""

import struct
from typing import Optional

from .arrays import decode_array
from .types import TypeOid


_INTERVAL = struct.Struct(">qii")

INTERVAL_OIDS = (TypeOid.INTERVAL, TypeOid.INTERVAL_ARRAY)


def _split_toward_zero(value: int, divisor: int) -> tuple[int, int]:
    quotient, remainder = divmod(abs(value), divisor)
    if value < 0:
        return -quotient, -remainder
    return quotient, remainder


def _unit(value: int, singular: str, plural: str) -> str:
    return f"{value} {singular if abs(value) == 1 else plural}"


def format_time_part(microseconds: int) -> str:
    """``[-]HH:MM:SS[.ffffff]`` with trailing fractional zeros trimmed."""
    sign = "-" if microseconds < 0 else ""
    total_seconds, fraction = divmod(abs(microseconds), 1_000_000)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)

    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if fraction:
        text += "." + f"{fraction:06d}".rstrip("0")
    return text


def format_interval(microseconds: int, days: int, months: int) -> str:
    parts = []

    years, remaining_months = _split_toward_zero(months, 12)
    if years:
        parts.append(_unit(years, "year", "years"))
    if remaining_months:
        parts.append(_unit(remaining_months, "mon", "mons"))
    if days:
        parts.append(_unit(days, "day", "days"))
    if microseconds or not parts:
        parts.append(format_time_part(microseconds))

    return " ".join(parts)


def decode_interval(data: bytes) -> Optional[str]:
    if len(data) != _INTERVAL.size:
        return None
    microseconds, days, months = _INTERVAL.unpack(data)
    return format_interval(microseconds, days, months)


def decode(data: bytes, type_id: int) -> Optional[str]:
    """Decode an interval or interval array; None for other OIDs or bad bytes."""
    if type_id == TypeOid.INTERVAL:
        return decode_interval(data)
    if type_id == TypeOid.INTERVAL_ARRAY:
        return decode_array(
            data,
            type_id,
            array_oids=(TypeOid.INTERVAL_ARRAY,),
            element_oids=(TypeOid.INTERVAL,),
            element_decoder=decode_interval,
        )
    return None
