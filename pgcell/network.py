"""Network address decoding (inet, cidr, macaddr, macaddr8).

The binary layout for inet and cidr is::

    [family:1][prefix:1][is_cidr:1][length:1][address:length]

with family 2 for IPv4 (length 4) and 3 for IPv6 (length 16). All decoders
return None on malformed input so the caller can fall through.
"""

from typing import List, Optional

from .arrays import decode_array
from .types import TypeOid


AF_INET = 2
AF_INET6 = 3

_ADDRESS_LENGTHS = {AF_INET: 4, AF_INET6: 16}
_HOST_PREFIXES = {AF_INET: 32, AF_INET6: 128}


def format_ipv4(address: bytes) -> str:
    return ".".join(str(b) for b in address)


def format_ipv6(address: bytes) -> str:
    """Render 16 bytes as colon-hex, compressing the longest zero run.

    Runs shorter than two groups are never compressed; on equal lengths the
    first run wins.
    """
    groups = [(address[i] << 8) | address[i + 1] for i in range(0, 16, 2)]

    best_start, best_length = -1, 0
    run_start, run_length = -1, 0
    for i, group in enumerate(groups):
        if group == 0:
            if run_length == 0:
                run_start = i
            run_length += 1
            if run_length > best_length:
                best_start, best_length = run_start, run_length
        else:
            run_length = 0

    if best_length < 2:
        return ":".join(f"{g:x}" for g in groups)

    best_end = best_start + best_length
    if best_start == 0 and best_end == 8:
        return "::"

    head = ":".join(f"{g:x}" for g in groups[:best_start])
    tail = ":".join(f"{g:x}" for g in groups[best_end:])
    return f"{head}::{tail}"


def decode_inet_or_cidr(data: bytes) -> Optional[str]:
    """Decode an inet or cidr value.

    The ``/prefix`` suffix is omitted for inet host addresses (prefix equal
    to the full address width).

    Args:
        data: Raw bytes from the server.

    Returns:
        Text such as ``"192.168.1.1/24"`` or ``"::1"``, or None if invalid.
    """
    if len(data) < 4:
        return None

    family, prefix, is_cidr, length = data[0], data[1], data[2] != 0, data[3]

    expected = _ADDRESS_LENGTHS.get(family)
    if expected is None or length != expected:
        return None
    if len(data) < 4 + length:
        return None

    address = data[4:4 + length]
    if family == AF_INET:
        text = format_ipv4(address)
    else:
        text = format_ipv6(address)

    if not is_cidr and prefix == _HOST_PREFIXES[family]:
        return text
    return f"{text}/{prefix}"


def _format_octets(data: bytes) -> str:
    return ":".join(f"{b:02x}" for b in data)


def decode_macaddr(data: bytes) -> Optional[str]:
    """Six octets, e.g. ``08:00:2b:01:02:03``."""
    if len(data) != 6:
        return None
    return _format_octets(data)


def decode_macaddr8(data: bytes) -> Optional[str]:
    """Eight octets (EUI-64), e.g. ``08:00:2b:ff:fe:01:02:03``."""
    if len(data) != 8:
        return None
    return _format_octets(data)


_SCALAR_DECODERS = {
    TypeOid.INET: decode_inet_or_cidr,
    TypeOid.CIDR: decode_inet_or_cidr,
    TypeOid.MACADDR: decode_macaddr,
    TypeOid.MACADDR8: decode_macaddr8,
}

# array OID -> element OID
_ARRAY_ELEMENTS = {
    TypeOid.INET_ARRAY: TypeOid.INET,
    TypeOid.CIDR_ARRAY: TypeOid.CIDR,
    TypeOid.MACADDR_ARRAY: TypeOid.MACADDR,
    TypeOid.MACADDR8_ARRAY: TypeOid.MACADDR8,
}

NETWORK_OIDS: List[int] = list(_SCALAR_DECODERS) + list(_ARRAY_ELEMENTS)


def decode(data: bytes, type_id: int) -> Optional[str]:
    """Route by type OID to the matching network decoder.

    Args:
        data: Raw bytes from the server.
        type_id: Column type OID.

    Returns:
        Decoded text, or None if ``type_id`` is not a network type or the
        bytes are malformed.
    """
    decoder = _SCALAR_DECODERS.get(type_id)
    if decoder is not None:
        return decoder(data)

    element_oid = _ARRAY_ELEMENTS.get(type_id)
    if element_oid is not None:
        return decode_array(
            data,
            type_id,
            array_oids=(type_id,),
            element_oids=(element_oid,),
            element_decoder=_SCALAR_DECODERS[element_oid],
        )

    return None
