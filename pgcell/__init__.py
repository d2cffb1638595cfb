"""pgcell - display decoding for PostgreSQL cell values.

Turns raw column values (text or binary wire format, with or without a
declared type OID) into safe display strings. A non-NULL cell always
decodes to some printable string; undecodable bytes become hex, extracted
strings, or a placeholder, never control-character garbage.

Example:
    from pgcell import RawCell, ValueDecoder

    decoder = ValueDecoder()
    decoder.decode(RawCell(bytes([2, 24, 0, 4, 192, 168, 1, 1]), "net", type_id=869))
    # "192.168.1.1/24"
"""

from .types import RawCell, TableRow, ColumnInfo, TypeOid, NETWORK_TYPE_OIDS
from .config import DecoderThresholds, DEFAULT_THRESHOLDS
from .exceptions import (
    PgCellError,
    ThresholdError,
    RowShapeError,
    SourceError,
)
from .binary import BinaryHeuristicClassifier, BINARY_DATA, LARGE_BINARY_DATA
from .decoder import ValueDecoder, decode_cell, UNKNOWN_DATA_TYPE
from .mapper import ResultMapper

__all__ = [
    "RawCell",
    "TableRow",
    "ColumnInfo",
    "TypeOid",
    "NETWORK_TYPE_OIDS",
    "DecoderThresholds",
    "DEFAULT_THRESHOLDS",
    "PgCellError",
    "ThresholdError",
    "RowShapeError",
    "SourceError",
    "BinaryHeuristicClassifier",
    "BINARY_DATA",
    "LARGE_BINARY_DATA",
    "ValueDecoder",
    "decode_cell",
    "UNKNOWN_DATA_TYPE",
    "ResultMapper",
]

__version__ = "0.1.0"
