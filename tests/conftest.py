"""pytest configuration and fixtures for pgcell tests."""

import struct
from typing import List, Optional

import pytest

from pgcell import DEFAULT_THRESHOLDS, ValueDecoder


def build_array(element_oid: int, elements: List[Optional[bytes]], ndim: int = 1) -> bytes:
    """Encode a PostgreSQL binary array (ndim 0 or 1)."""
    if ndim == 0:
        return struct.pack(">iiI", 0, 0, element_oid)

    has_null = int(any(e is None for e in elements))
    data = struct.pack(">iiI", ndim, has_null, element_oid)
    data += struct.pack(">ii", len(elements), 1)
    for element in elements:
        if element is None:
            data += struct.pack(">i", -1)
        else:
            data += struct.pack(">i", len(element)) + element
    return data


@pytest.fixture
def pg_array():
    return build_array


@pytest.fixture
def decoder() -> ValueDecoder:
    return ValueDecoder(DEFAULT_THRESHOLDS)
