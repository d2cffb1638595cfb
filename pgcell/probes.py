"""Typed probes: pure ``bytes -> Optional[value]`` interpretations of a cell.

Every probe takes the raw bytes and the declared type OID (None when the row
source does not know it). With a declared type a binary probe only accepts
the OIDs it owns. Without one it falls back to the buffer's shape (exact
width for scalars, the element OID in the header for arrays). A probe that
cannot interpret the buffer returns None; none of them raise.
"""

import struct
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation, localcontext
from typing import Callable, List, Optional, Union
from uuid import UUID

from .arrays import read_array
from .formatting import decode_clean_utf8
from .types import TypeOid


TEXT_OIDS = frozenset({
    TypeOid.TEXT, TypeOid.VARCHAR, TypeOid.BPCHAR, TypeOid.NAME, TypeOid.CHAR,
    TypeOid.UNKNOWN, TypeOid.JSON, TypeOid.XML,
})
TEXT_ARRAY_OIDS = frozenset({
    TypeOid.TEXT_ARRAY, TypeOid.VARCHAR_ARRAY, TypeOid.BPCHAR_ARRAY,
    TypeOid.CHAR_ARRAY, TypeOid.NAME_ARRAY,
})

# OID -> struct format for the system integer aliases
_NATIVE_INTEGERS = {
    TypeOid.CHAR: ">b",
    TypeOid.REGPROC: ">I",
    TypeOid.OID: ">I",
    TypeOid.XID: ">I",
    TypeOid.CID: ">I",
    TypeOid.REGCLASS: ">I",
    TypeOid.REGTYPE: ">I",
    TypeOid.XID8: ">Q",
}

TIMESTAMP_OIDS = frozenset({TypeOid.TIMESTAMP, TypeOid.TIMESTAMPTZ, TypeOid.DATE})
TIMESTAMP_ARRAY_OIDS = frozenset({
    TypeOid.TIMESTAMP_ARRAY, TypeOid.TIMESTAMPTZ_ARRAY, TypeOid.DATE_ARRAY,
})

# PostgreSQL's epoch for timestamps and dates
PG_EPOCH = datetime(2000, 1, 1, tzinfo=timezone.utc)

_INT64_MAX = 2**63 - 1
_INT64_MIN = -(2**63)
_INT32_MAX = 2**31 - 1
_INT32_MIN = -(2**31)

INFINITY = "infinity"
NEGATIVE_INFINITY = "-infinity"

Timestamp = Union[datetime, date, str]


def _owns(type_id: Optional[int], *oids: int) -> bool:
    return type_id is None or type_id in oids


# =============================================================================
# Scalars
# =============================================================================


def decode_text(data: bytes, type_id: Optional[int] = None) -> Optional[str]:
    """UTF-8 text free of invalid control characters, whatever the declared type."""
    return decode_clean_utf8(data)


_TEXT_BOOLEANS = {"t": True, "true": True, "f": False, "false": False}


def decode_bool(data: bytes, type_id: Optional[int] = None) -> Optional[bool]:
    if not _owns(type_id, TypeOid.BOOL):
        return None
    if len(data) == 1 and data[0] in (0, 1):
        return data[0] == 1
    try:
        return _TEXT_BOOLEANS.get(data.decode("ascii").strip().lower())
    except UnicodeDecodeError:
        return None


def decode_uuid(data: bytes, type_id: Optional[int] = None) -> Optional[UUID]:
    if not _owns(type_id, TypeOid.UUID):
        return None
    if len(data) == 16:
        return UUID(bytes=data)
    if len(data) == 36:
        try:
            return UUID(data.decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            return None
    return None


def _fixed_int(fmt: str, oid: int) -> Callable[[bytes, Optional[int]], Optional[int]]:
    layout = struct.Struct(fmt)

    def decode(data: bytes, type_id: Optional[int] = None) -> Optional[int]:
        if not _owns(type_id, oid) or len(data) != layout.size:
            return None
        return layout.unpack(data)[0]

    decode.__name__ = f"decode_int{layout.size * 8}"
    return decode


decode_int16 = _fixed_int(">h", TypeOid.INT2)
decode_int32 = _fixed_int(">i", TypeOid.INT4)
decode_int64 = _fixed_int(">q", TypeOid.INT8)


def decode_native_int(data: bytes, type_id: Optional[int] = None) -> Optional[int]:
    """System integer aliases: signed one-byte ``"char"``, unsigned oid, xid, regclass, ..."""
    fmt = _NATIVE_INTEGERS.get(type_id)
    if fmt is None or len(data) != struct.calcsize(fmt):
        return None
    return struct.unpack(fmt, data)[0]


def decode_float32(data: bytes, type_id: Optional[int] = None) -> Optional[float]:
    if type_id != TypeOid.FLOAT4 or len(data) != 4:
        return None
    return struct.unpack(">f", data)[0]


_NUMERIC_HEADER = struct.Struct(">hhHH")
_NUMERIC_POS = 0x0000
_NUMERIC_NEG = 0x4000
_NUMERIC_DSCALE_MASK = 0x3FFF
_NUMERIC_SPECIALS = {
    0xC000: Decimal("NaN"),
    0xD000: Decimal("Infinity"),
    0xF000: Decimal("-Infinity"),
}


def decode_numeric(data: bytes) -> Optional[Decimal]:
    """Binary NUMERIC: ``[ndigits][weight][sign][dscale]`` then base-10000 digits."""
    if len(data) < _NUMERIC_HEADER.size:
        return None
    ndigits, weight, sign, dscale = _NUMERIC_HEADER.unpack_from(data, 0)
    if sign in _NUMERIC_SPECIALS:
        return _NUMERIC_SPECIALS[sign]
    if sign not in (_NUMERIC_POS, _NUMERIC_NEG) or ndigits < 0 or dscale > _NUMERIC_DSCALE_MASK:
        return None
    if len(data) != _NUMERIC_HEADER.size + 2 * ndigits:
        return None

    digits = struct.unpack_from(f">{ndigits}h", data, _NUMERIC_HEADER.size)
    coefficient = 0
    for digit in digits:
        if not 0 <= digit < 10000:
            return None
        coefficient = coefficient * 10000 + digit

    exponent = (weight - ndigits + 1) * 4
    with localcontext() as ctx:
        ctx.prec = len(str(coefficient)) + abs(exponent) + dscale + 10
        try:
            value = Decimal(coefficient).scaleb(exponent)
            value = value.quantize(Decimal(1).scaleb(-dscale))
        except InvalidOperation:
            return None
    if sign == _NUMERIC_NEG and value:
        return value.copy_negate()
    return value


def decode_float64(
    data: bytes, type_id: Optional[int] = None
) -> Optional[Union[float, Decimal]]:
    """Double precision, plus binary NUMERIC for display."""
    if type_id == TypeOid.FLOAT8 and len(data) == 8:
        return struct.unpack(">d", data)[0]
    if type_id == TypeOid.NUMERIC:
        return decode_numeric(data)
    return None


def _timestamp(micros: int) -> Optional[Timestamp]:
    if micros == _INT64_MAX:
        return INFINITY
    if micros == _INT64_MIN:
        return NEGATIVE_INFINITY
    try:
        return PG_EPOCH + timedelta(microseconds=micros)
    except OverflowError:
        return None


def _date(days: int) -> Optional[Timestamp]:
    if days == _INT32_MAX:
        return INFINITY
    if days == _INT32_MIN:
        return NEGATIVE_INFINITY
    try:
        return PG_EPOCH.date() + timedelta(days=days)
    except OverflowError:
        return None


def _decode_timestamp_as(data: bytes, oid: int) -> Optional[Timestamp]:
    if oid == TypeOid.DATE:
        if len(data) != 4:
            return None
        return _date(struct.unpack(">i", data)[0])
    if len(data) != 8:
        return None
    return _timestamp(struct.unpack(">q", data)[0])


def decode_timestamp(data: bytes, type_id: Optional[int] = None) -> Optional[Timestamp]:
    """timestamp, timestamptz or date; ``infinity`` sentinels come back as text."""
    if type_id not in TIMESTAMP_OIDS:
        return None
    return _decode_timestamp_as(data, type_id)


def decode_bytea(data: bytes, type_id: Optional[int] = None) -> Optional[bytes]:
    if type_id != TypeOid.BYTEA:
        return None
    return data


# =============================================================================
# Arrays
# =============================================================================


def decode_text_array(data: bytes, type_id: Optional[int] = None) -> Optional[List[Optional[str]]]:
    return read_array(data, type_id, TEXT_ARRAY_OIDS, TEXT_OIDS, decode_clean_utf8)


def _int_array(array_oid: int, element_oid: int, fmt: str):
    layout = struct.Struct(fmt)

    def element(data: bytes) -> Optional[int]:
        if len(data) != layout.size:
            return None
        return layout.unpack(data)[0]

    def decode(data: bytes, type_id: Optional[int] = None) -> Optional[List[Optional[int]]]:
        return read_array(data, type_id, (array_oid,), (element_oid,), element)

    decode.__name__ = f"decode_int{layout.size * 8}_array"
    return decode


decode_int16_array = _int_array(TypeOid.INT2_ARRAY, TypeOid.INT2, ">h")
decode_int32_array = _int_array(TypeOid.INT4_ARRAY, TypeOid.INT4, ">i")
decode_int64_array = _int_array(TypeOid.INT8_ARRAY, TypeOid.INT8, ">q")


def _float_element(fmt: str) -> Callable[[bytes], Optional[float]]:
    layout = struct.Struct(fmt)

    def element(data: bytes) -> Optional[float]:
        if len(data) != layout.size:
            return None
        return layout.unpack(data)[0]

    return element


_float32_element = _float_element(">f")
_float64_element = _float_element(">d")


def decode_float32_array(data: bytes, type_id: Optional[int] = None) -> Optional[List[Optional[float]]]:
    return read_array(
        data, type_id, (TypeOid.FLOAT4_ARRAY,), (TypeOid.FLOAT4,), _float32_element
    )


def decode_float64_array(data: bytes, type_id: Optional[int] = None) -> Optional[List[Optional[float]]]:
    return read_array(
        data, type_id, (TypeOid.FLOAT8_ARRAY,), (TypeOid.FLOAT8,), _float64_element
    )


def _bool_element(data: bytes) -> Optional[bool]:
    if len(data) != 1:
        return None
    return data[0] != 0


def decode_bool_array(data: bytes, type_id: Optional[int] = None) -> Optional[List[Optional[bool]]]:
    return read_array(data, type_id, (TypeOid.BOOL_ARRAY,), (TypeOid.BOOL,), _bool_element)


def _uuid_element(data: bytes) -> Optional[UUID]:
    if len(data) != 16:
        return None
    return UUID(bytes=data)


def decode_uuid_array(data: bytes, type_id: Optional[int] = None) -> Optional[List[Optional[UUID]]]:
    return read_array(data, type_id, (TypeOid.UUID_ARRAY,), (TypeOid.UUID,), _uuid_element)


def decode_timestamp_array(
    data: bytes, type_id: Optional[int] = None
) -> Optional[List[Optional[Timestamp]]]:
    # The element decoder depends on the element OID in the header.
    for element_oid in (TypeOid.TIMESTAMP, TypeOid.TIMESTAMPTZ, TypeOid.DATE):
        values = read_array(
            data,
            type_id,
            TIMESTAMP_ARRAY_OIDS,
            (element_oid,),
            lambda element, oid=element_oid: _decode_timestamp_as(element, oid),
        )
        if values is not None:
            return values
    return None
