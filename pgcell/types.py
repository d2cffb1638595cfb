"""Core types for cell decoding."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple


class TypeOid:
    """PostgreSQL type OIDs understood by the decoder.

    These are protocol constants from ``pg_type``; they never change at runtime.
    """

    BOOL = 16
    BYTEA = 17
    CHAR = 18
    NAME = 19
    INT8 = 20
    INT2 = 21
    INT4 = 23
    REGPROC = 24
    TEXT = 25
    OID = 26
    XID = 28
    CID = 29
    JSON = 114
    XML = 142
    CIDR = 650
    CIDR_ARRAY = 651
    FLOAT4 = 700
    FLOAT8 = 701
    UNKNOWN = 705
    MACADDR8 = 774
    MACADDR8_ARRAY = 775
    MACADDR = 829
    INET = 869
    BOOL_ARRAY = 1000
    CHAR_ARRAY = 1002
    NAME_ARRAY = 1003
    INT2_ARRAY = 1005
    INT4_ARRAY = 1007
    TEXT_ARRAY = 1009
    BPCHAR_ARRAY = 1014
    VARCHAR_ARRAY = 1015
    INT8_ARRAY = 1016
    FLOAT4_ARRAY = 1021
    FLOAT8_ARRAY = 1022
    MACADDR_ARRAY = 1040
    INET_ARRAY = 1041
    BPCHAR = 1042
    VARCHAR = 1043
    DATE = 1082
    TIME = 1083
    TIMESTAMP = 1114
    TIMESTAMP_ARRAY = 1115
    DATE_ARRAY = 1182
    TIMESTAMPTZ = 1184
    TIMESTAMPTZ_ARRAY = 1185
    INTERVAL = 1186
    INTERVAL_ARRAY = 1187
    NUMERIC = 1700
    REGCLASS = 2205
    REGTYPE = 2206
    UUID = 2950
    UUID_ARRAY = 2951
    JSONB = 3802
    XID8 = 5069


# Fixed OID table for network address types.
NETWORK_TYPE_OIDS = {
    "inet": TypeOid.INET,
    "cidr": TypeOid.CIDR,
    "macaddr": TypeOid.MACADDR,
    "macaddr8": TypeOid.MACADDR8,
}


@dataclass(frozen=True)
class RawCell:
    """One column value of one row, as it came off the wire.

    ``data`` is ``None`` for SQL NULL. ``type_id`` is the declared type OID
    when the row source knows it.
    """

    data: Optional[bytes]
    column_name: str = ""
    type_id: Optional[int] = None

    @property
    def is_null(self) -> bool:
        return self.data is None

    def __repr__(self) -> str:
        size = "NULL" if self.data is None else f"{len(self.data)} bytes"
        return f"RawCell({self.column_name!r}, {size}, type_id={self.type_id})"


class TableRow(dict):
    """Mapping of column name to display string (``None`` for NULL).

    Supports both dict-like access and attribute access.
    """

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"Column '{name}' not found") from None

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = value


@dataclass(frozen=True)
class ColumnInfo:
    """Column metadata as reported by ``information_schema.columns``."""

    name: str
    data_type: str
    is_nullable: bool
    default_value: Optional[str] = None
    is_primary_key: bool = False
    is_unique: bool = False
    is_foreign_key: bool = False

    @classmethod
    def from_row(cls, row: Tuple[str, str, str, Optional[str]]) -> "ColumnInfo":
        """Build from a ``(column_name, data_type, is_nullable, column_default)`` tuple.

        Args:
            row: Values in ``information_schema.columns`` order; ``is_nullable``
                is the SQL-standard ``'YES'``/``'NO'`` string.

        Returns:
            ColumnInfo with key flags unset.
        """
        name, data_type, is_nullable, default_value = row
        return cls(
            name=name,
            data_type=data_type,
            is_nullable=is_nullable.upper() == "YES",
            default_value=default_value,
        )
