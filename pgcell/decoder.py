"""Cell value decoding.

``ValueDecoder.decode`` turns one raw cell into display text. It runs a fixed,
ordered list of typed probes and stops at the first that accepts the bytes:

    text -> bool -> uuid -> int16 -> int32 -> int64 -> native int
    -> float32 -> float64 -> timestamp
    -> text[] -> int16[] -> int32[] -> int64[] -> float32[] -> float64[]
    -> bool[] -> uuid[] -> timestamp[]
    -> bytea -> network / interval (by declared OID) -> binary classifier

Arrays come before bytea because binary array headers look like opaque blobs.
The order is policy: changing it changes what users see.

Example:
    from pgcell import RawCell, ValueDecoder

    decoder = ValueDecoder()
    decoder.decode(RawCell(b"hello world", "greeting"))   # "hello world"
    decoder.decode(RawCell(None, "missing"))              # None
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Optional, Tuple

from . import interval, network, probes
from .binary import LARGE_BINARY_DATA, BinaryHeuristicClassifier, extract_readable_strings
from .config import DEFAULT_THRESHOLDS, DecoderThresholds
from .formatting import format_array, format_float32, format_float64, format_timestamp, to_base64, to_hex
from .types import RawCell

logger = logging.getLogger(__name__)


UNKNOWN_DATA_TYPE = "(unknown data type)"


def render_bool(value: bool) -> str:
    return "true" if value else "false"


def render_double(value: Any) -> str:
    if isinstance(value, Decimal):
        if value.is_nan():
            return "NaN"
        if value.is_infinite():
            return "Infinity" if value > 0 else "-Infinity"
        return format(value, "f")
    return format_float64(value)


def render_timestamp(value: Any) -> str:
    if isinstance(value, str):
        return value
    return format_timestamp(value)


def _array_renderer(render: Callable[[Any], str], quote: bool = False) -> Callable[[Any], str]:
    def render_array(values: Any) -> str:
        return format_array(
            [None if v is None else render(v) for v in values], quote=quote
        )
    return render_array


@dataclass(frozen=True)
class Probe:
    """One typed interpretation attempt: decode, then render on success."""

    name: str
    decode: Callable[[bytes, Optional[int]], Any]
    render: Callable[[Any], str]


PROBES: Tuple[Probe, ...] = (
    Probe("text", probes.decode_text, str),
    Probe("bool", probes.decode_bool, render_bool),
    Probe("uuid", probes.decode_uuid, str),
    Probe("int16", probes.decode_int16, str),
    Probe("int32", probes.decode_int32, str),
    Probe("int64", probes.decode_int64, str),
    Probe("native_int", probes.decode_native_int, str),
    Probe("float32", probes.decode_float32, format_float32),
    Probe("float64", probes.decode_float64, render_double),
    Probe("timestamp", probes.decode_timestamp, render_timestamp),
    Probe("text[]", probes.decode_text_array, _array_renderer(str, quote=True)),
    Probe("int16[]", probes.decode_int16_array, _array_renderer(str)),
    Probe("int32[]", probes.decode_int32_array, _array_renderer(str)),
    Probe("int64[]", probes.decode_int64_array, _array_renderer(str)),
    Probe("float32[]", probes.decode_float32_array, _array_renderer(format_float32)),
    Probe("float64[]", probes.decode_float64_array, _array_renderer(format_float64)),
    Probe("bool[]", probes.decode_bool_array, _array_renderer(render_bool)),
    Probe("uuid[]", probes.decode_uuid_array, _array_renderer(str)),
    Probe("timestamp[]", probes.decode_timestamp_array, _array_renderer(render_timestamp)),
)

# Decoders keyed by declared OID, consulted after bytea and before the classifier
EXTENSION_DECODERS: Tuple[Callable[[bytes, int], Optional[str]], ...] = (
    network.decode,
    interval.decode,
)


class ValueDecoder:
    """Converts raw cells into display strings.

    Holds only immutable configuration, so a single instance can decode
    cells from any number of threads at once.
    """

    def __init__(
        self,
        thresholds: DecoderThresholds = DEFAULT_THRESHOLDS,
        probes: Tuple[Probe, ...] = PROBES,
    ):
        """Initialize decoder.

        Args:
            thresholds: Detection ratios and size limits.
            probes: Ordered typed probes; the first acceptance wins.
        """
        self.thresholds = thresholds
        self.probes = probes
        self.classifier = BinaryHeuristicClassifier(thresholds)

    def decode(self, cell: RawCell) -> Optional[str]:
        """Decode one cell.

        Args:
            cell: Raw cell from the row source.

        Returns:
            None for SQL NULL, otherwise display text free of NUL and
            non-whitespace control characters.
        """
        if cell.data is None:
            return None

        data = bytes(cell.data)
        type_id = cell.type_id

        for probe in self.probes:
            text = self._attempt(probe.name, lambda: self._run_probe(probe, data, type_id))
            if text is not None:
                logger.debug(f"Column {cell.column_name!r}: decoded as {probe.name}")
                return text

        blob = probes.decode_bytea(data, type_id)
        if blob is not None:
            return self.render_bytea(blob)

        if type_id is not None:
            for extension in EXTENSION_DECODERS:
                text = self._attempt(extension.__module__, lambda: extension(data, type_id))
                if text is not None:
                    return text

        logger.debug(
            f"Column {cell.column_name!r}: no typed decoder for {len(data)} bytes "
            f"(type_id={type_id}), classifying"
        )
        text = self.classifier.classify(data) if data else None
        return text or UNKNOWN_DATA_TYPE

    def decode_bytes(self, data: Optional[bytes], type_id: Optional[int] = None) -> Optional[str]:
        """Shortcut for :meth:`decode` without building a RawCell."""
        return self.decode(RawCell(data, type_id=type_id))

    def render_bytea(self, data: bytes) -> str:
        """Render a BYTEA value.

        Mostly printable content is mined for embedded strings first, whatever
        its size. Anything else falls back to hex, a placeholder or base64 by size.
        """
        if self.classifier.looks_textual(data):
            extracted = extract_readable_strings(data, self.thresholds)
            if extracted is not None:
                return extracted

        if len(data) <= self.thresholds.max_hex_display_bytes:
            return to_hex(data)
        if len(data) >= self.thresholds.max_binary_processing_bytes:
            return LARGE_BINARY_DATA
        return to_base64(data)

    @staticmethod
    def _run_probe(probe: Probe, data: bytes, type_id: Optional[int]) -> Optional[str]:
        value = probe.decode(data, type_id)
        if value is None:
            return None
        return probe.render(value)

    @staticmethod
    def _attempt(name: str, attempt: Callable[[], Optional[str]]) -> Optional[str]:
        # A probe that raises counts as a miss; decode() itself never raises.
        try:
            return attempt()
        except Exception as e:
            logger.debug(f"Decoder {name} failed: {e!r}")
            return None


_default_decoder = ValueDecoder()


def decode_cell(cell: RawCell) -> Optional[str]:
    """Decode one cell with the default thresholds."""
    return _default_decoder.decode(cell)
