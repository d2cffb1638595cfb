"""PostgreSQL binary array container parsing.

Wire layout (big-endian)::

    [ndim:i32][has_null:i32][element_oid:u32]
    ndim x [size:i32][lower_bound:i32]
    per element: [length:i32][bytes]     (length -1 marks a NULL element)

Only empty (ndim 0) and one-dimensional arrays are supported.
"""

import struct
from dataclasses import dataclass
from typing import Callable, Collection, List, Optional, TypeVar

from .formatting import format_array


_HEADER = struct.Struct(">iiI")
_DIMENSION = struct.Struct(">ii")
_LENGTH = struct.Struct(">i")

T = TypeVar("T")


@dataclass(frozen=True)
class BinaryArray:
    """A parsed one-dimensional array; ``None`` elements are SQL NULLs."""

    element_oid: int
    elements: List[Optional[bytes]]


def parse_array(data: bytes) -> Optional[BinaryArray]:
    """Parse the binary array container.

    Args:
        data: Raw cell bytes.

    Returns:
        BinaryArray, or None if the buffer is not a well-formed array with at
        most one dimension. Trailing bytes after the last element are rejected.
    """
    if len(data) < _HEADER.size:
        return None

    ndim, has_null, element_oid = _HEADER.unpack_from(data, 0)
    if has_null not in (0, 1):
        return None
    if ndim == 0:
        if len(data) != _HEADER.size:
            return None
        return BinaryArray(element_oid=element_oid, elements=[])
    if ndim != 1:
        return None

    if len(data) < _HEADER.size + _DIMENSION.size:
        return None
    size, _lower_bound = _DIMENSION.unpack_from(data, _HEADER.size)
    if size < 0:
        return None

    offset = _HEADER.size + _DIMENSION.size
    elements: List[Optional[bytes]] = []
    for _ in range(size):
        if offset + _LENGTH.size > len(data):
            return None
        (length,) = _LENGTH.unpack_from(data, offset)
        offset += _LENGTH.size

        if length == -1:
            elements.append(None)
            continue
        if length < 0 or offset + length > len(data):
            return None
        elements.append(data[offset:offset + length])
        offset += length

    if offset != len(data):
        return None
    if None in elements and not has_null:
        return None

    return BinaryArray(element_oid=element_oid, elements=elements)


def read_array(
    data: bytes,
    type_id: Optional[int],
    array_oids: Collection[int],
    element_oids: Collection[int],
    element_decoder: Callable[[bytes], Optional[T]],
) -> Optional[List[Optional[T]]]:
    """Decode a binary array whose elements share one decoder.

    Args:
        data: Raw cell bytes.
        type_id: Declared column OID, or None when unknown.
        array_oids: Array OIDs this decoder owns; checked against ``type_id``.
        element_oids: Element OIDs accepted in the array header.
        element_decoder: Decodes one non-NULL element, None on failure.

    Returns:
        Decoded elements (None for NULL elements), or None if the buffer is
        not such an array or any element fails to decode.
    """
    if type_id is not None and type_id not in array_oids:
        return None

    array = parse_array(data)
    if array is None or array.element_oid not in element_oids:
        return None

    values: List[Optional[T]] = []
    for element in array.elements:
        if element is None:
            values.append(None)
            continue
        value = element_decoder(element)
        if value is None:
            return None
        values.append(value)
    return values


def decode_array(
    data: bytes,
    type_id: Optional[int],
    array_oids: Collection[int],
    element_oids: Collection[int],
    element_decoder: Callable[[bytes], Optional[str]],
    quote: bool = False,
) -> Optional[str]:
    """Like :func:`read_array` for element decoders that already render text."""
    values = read_array(data, type_id, array_oids, element_oids, element_decoder)
    if values is None:
        return None
    return format_array(values, quote=quote)
