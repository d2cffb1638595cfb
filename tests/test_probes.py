"""
Typed Probe Tests

Each probe is exercised with and without a declared type OID.
"""

import struct
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from pgcell import TypeOid
from pgcell import probes


SAMPLE_UUID = UUID("a0eebc99-9c0b-4ef8-bb6d-6bb9bd380a11")


def numeric(digits, weight, sign=0x0000, dscale=0) -> bytes:
    return struct.pack(">hhHH", len(digits), weight, sign, dscale) + struct.pack(
        f">{len(digits)}h", *digits
    )


# =============================================================================
# Scalars
# =============================================================================

class TestBool:
    """Tests for decode_bool."""

    def test_binary(self):
        """Single byte 0/1."""
        assert probes.decode_bool(b"\x01") is True
        assert probes.decode_bool(b"\x00") is False

    def test_other_byte(self):
        """Other single bytes are not booleans."""
        assert probes.decode_bool(b"\x02") is None

    def test_textual(self):
        """Text encodings."""
        assert probes.decode_bool(b"t", TypeOid.BOOL) is True
        assert probes.decode_bool(b"false", TypeOid.BOOL) is False
        assert probes.decode_bool(b"maybe", TypeOid.BOOL) is None

    def test_declared_other_type(self):
        """Other declared types are refused."""
        assert probes.decode_bool(b"\x01", TypeOid.INT2) is None


class TestUuid:
    """Tests for decode_uuid."""

    def test_binary(self):
        """Sixteen raw bytes."""
        assert probes.decode_uuid(SAMPLE_UUID.bytes) == SAMPLE_UUID

    def test_textual(self):
        """Canonical text."""
        assert probes.decode_uuid(str(SAMPLE_UUID).encode(), TypeOid.UUID) == SAMPLE_UUID

    def test_bad_text(self):
        """36 bytes that are not a UUID."""
        assert probes.decode_uuid(b"x" * 36, TypeOid.UUID) is None

    def test_wrong_length(self):
        """Other widths."""
        assert probes.decode_uuid(bytes(15)) is None


class TestIntegers:
    """Tests for the fixed-width and native integer probes."""

    def test_int16(self):
        """Signed big-endian."""
        assert probes.decode_int16(b"\xff\xfe") == -2
        assert probes.decode_int16(b"\x00\x2a", TypeOid.INT2) == 42

    def test_int32(self):
        """Four bytes."""
        assert probes.decode_int32(b"\x00\x00\x01\x00") == 256
        assert probes.decode_int32(b"\x00\x00\x01\x00", TypeOid.INT2) is None

    def test_int64(self):
        """Eight bytes."""
        assert probes.decode_int64(struct.pack(">q", -(2**40))) == -(2**40)

    def test_width_must_match(self):
        """Wrong widths are refused even when declared."""
        assert probes.decode_int16(b"\x00\x01\x00", TypeOid.INT2) is None
        assert probes.decode_int32(b"\x00\x01", TypeOid.INT4) is None

    def test_native_oid_unsigned(self):
        """oid is unsigned 32-bit."""
        assert probes.decode_native_int(b"\xff\xff\xff\xff", TypeOid.OID) == 4294967295

    def test_native_xid8(self):
        """xid8 is unsigned 64-bit."""
        assert probes.decode_native_int(struct.pack(">Q", 2**63), TypeOid.XID8) == 2**63

    def test_native_char_signed(self):
        """The "char" type is a signed byte."""
        assert probes.decode_native_int(b"\x05", TypeOid.CHAR) == 5
        assert probes.decode_native_int(b"\xfe", TypeOid.CHAR) == -2
        assert probes.decode_native_int(b"\x00\x05", TypeOid.CHAR) is None

    def test_native_requires_type(self):
        """Native aliases need a declared OID."""
        assert probes.decode_native_int(b"\x00\x00\x00\x01") is None


class TestFloats:
    """Tests for the float probes."""

    def test_float32(self):
        """float4 needs its OID."""
        assert probes.decode_float32(struct.pack(">f", 1.5), TypeOid.FLOAT4) == 1.5
        assert probes.decode_float32(struct.pack(">f", 1.5)) is None

    def test_float64(self):
        """float8 needs its OID."""
        assert probes.decode_float64(struct.pack(">d", 0.1), TypeOid.FLOAT8) == 0.1
        assert probes.decode_float64(struct.pack(">d", 0.1)) is None

    def test_numeric(self):
        """Binary NUMERIC honors the display scale."""
        assert probes.decode_float64(numeric([123, 4500], 0, dscale=2), TypeOid.NUMERIC) == Decimal("123.45")

    def test_numeric_negative(self):
        """Negative sign."""
        value = probes.decode_numeric(numeric([123, 4500], 0, sign=0x4000, dscale=2))
        assert str(value) == "-123.45"

    def test_numeric_large(self):
        """More digits than a double holds."""
        value = probes.decode_numeric(numeric([1234, 5678, 9012, 3456, 7890], 4))
        assert format(value, "f") == "12345678901234567890"

    def test_numeric_fraction(self):
        """Negative weight."""
        assert format(probes.decode_numeric(numeric([5000], -1, dscale=1)), "f") == "0.5"

    def test_numeric_zero(self):
        """No digits."""
        assert format(probes.decode_numeric(numeric([], 0, dscale=2)), "f") == "0.00"

    def test_numeric_nan(self):
        """Special values."""
        assert probes.decode_numeric(numeric([], 0, sign=0xC000)).is_nan()

    def test_numeric_malformed(self):
        """Digit out of range or length mismatch."""
        assert probes.decode_numeric(numeric([10000], 0)) is None
        assert probes.decode_numeric(numeric([1, 2], 0)[:-1]) is None
        assert probes.decode_numeric(b"\x00") is None


class TestTimestamp:
    """Tests for decode_timestamp."""

    def test_epoch(self):
        """Microseconds since 2000-01-01 UTC."""
        value = probes.decode_timestamp(struct.pack(">q", 1_500_000), TypeOid.TIMESTAMPTZ)
        assert value == datetime(2000, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc)

    def test_date(self):
        """Days since 2000-01-01."""
        assert probes.decode_timestamp(struct.pack(">i", -1), TypeOid.DATE) == date(1999, 12, 31)

    def test_infinity(self):
        """Sentinels."""
        assert probes.decode_timestamp(struct.pack(">q", 2**63 - 1), TypeOid.TIMESTAMP) == "infinity"
        assert probes.decode_timestamp(struct.pack(">i", -(2**31)), TypeOid.DATE) == "-infinity"

    def test_out_of_range(self):
        """Beyond datetime's range is a miss, not an error."""
        assert probes.decode_timestamp(struct.pack(">q", 2**62), TypeOid.TIMESTAMP) is None
        assert probes.decode_timestamp(struct.pack(">i", 2**31 - 2), TypeOid.DATE) is None

    def test_requires_type(self):
        """Untyped eight bytes are not timestamps."""
        assert probes.decode_timestamp(struct.pack(">q", 0)) is None


class TestBytea:
    """Tests for decode_bytea."""

    def test_declared(self):
        """bytea passes bytes through."""
        assert probes.decode_bytea(b"\x01\x02", TypeOid.BYTEA) == b"\x01\x02"

    def test_undeclared(self):
        """Anything else is refused."""
        assert probes.decode_bytea(b"\x01\x02") is None
        assert probes.decode_bytea(b"\x01\x02", TypeOid.TEXT) is None


# =============================================================================
# Arrays
# =============================================================================

class TestArrayProbes:
    """Tests for the array probes."""

    def test_text_array(self, pg_array):
        """Text elements decoded as UTF-8."""
        data = pg_array(TypeOid.VARCHAR, [b"a", "é".encode()])
        assert probes.decode_text_array(data) == ["a", "é"]

    def test_text_array_control_character(self, pg_array):
        """Control characters fail the array."""
        data = pg_array(TypeOid.TEXT, [b"ok", b"bad\x01"])
        assert probes.decode_text_array(data) is None

    def test_int_arrays(self, pg_array):
        """Each width claims only its element OID."""
        data = pg_array(TypeOid.INT4, [struct.pack(">i", 1), None, struct.pack(">i", 3)])
        assert probes.decode_int16_array(data) is None
        assert probes.decode_int32_array(data) == [1, None, 3]
        assert probes.decode_int64_array(data) is None

    def test_declared_array_type(self, pg_array):
        """A declared array OID must match."""
        data = pg_array(TypeOid.INT4, [struct.pack(">i", 1)])
        assert probes.decode_int32_array(data, TypeOid.INT4_ARRAY) == [1]
        assert probes.decode_int32_array(data, TypeOid.TEXT_ARRAY) is None

    def test_float_arrays(self, pg_array):
        """float4[] and float8[]."""
        data4 = pg_array(TypeOid.FLOAT4, [struct.pack(">f", 0.5)])
        data8 = pg_array(TypeOid.FLOAT8, [struct.pack(">d", 0.25)])
        assert probes.decode_float32_array(data4) == [0.5]
        assert probes.decode_float64_array(data8) == [0.25]

    def test_bool_array(self, pg_array):
        """bool[]."""
        data = pg_array(TypeOid.BOOL, [b"\x01", b"\x00"])
        assert probes.decode_bool_array(data) == [True, False]

    def test_uuid_array(self, pg_array):
        """uuid[]."""
        data = pg_array(TypeOid.UUID, [SAMPLE_UUID.bytes])
        assert probes.decode_uuid_array(data) == [SAMPLE_UUID]

    @pytest.mark.parametrize("element_oid, raw, expected", [
        (TypeOid.TIMESTAMP, struct.pack(">q", 0), datetime(2000, 1, 1, tzinfo=timezone.utc)),
        (TypeOid.TIMESTAMPTZ, struct.pack(">q", 0), datetime(2000, 1, 1, tzinfo=timezone.utc)),
        (TypeOid.DATE, struct.pack(">i", 0), date(2000, 1, 1)),
    ])
    def test_timestamp_array(self, pg_array, element_oid, raw, expected):
        """Element OID picks the element layout."""
        assert probes.decode_timestamp_array(pg_array(element_oid, [raw])) == [expected]

    def test_empty_array(self, pg_array):
        """ndim 0."""
        assert probes.decode_int32_array(pg_array(TypeOid.INT4, [], ndim=0)) == []
