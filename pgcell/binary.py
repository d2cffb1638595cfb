"""Best-effort classification of bytes no typed decoder understood.

Composite types, hstore-like structures and extension types usually end up
here. Output is always bounded and printable regardless of input size.
"""

import logging
from typing import List, Optional

from .config import DEFAULT_THRESHOLDS, DecoderThresholds
from .formatting import count_printable, decode_clean_utf8, format_array, is_printable_byte, to_hex

logger = logging.getLogger(__name__)


BINARY_DATA = "(binary data)"
LARGE_BINARY_DATA = "(large binary data)"


def _accept_run(run: bytearray, thresholds: DecoderThresholds) -> Optional[str]:
    if not run:
        return None
    if count_printable(run) / len(run) <= thresholds.valid_substring_ratio:
        return None
    text = decode_clean_utf8(bytes(run))
    return text or None


def extract_readable_strings(
    data: bytes, thresholds: DecoderThresholds = DEFAULT_THRESHOLDS
) -> Optional[str]:
    """Pull NUL-separated readable strings out of binary data.

    Non-printable bytes at the start of a run (length prefixes and similar
    metadata) are skipped; once a run has started they are kept and count
    against its printable ratio.

    Args:
        data: Raw bytes.
        thresholds: Decoder thresholds (``valid_substring_ratio`` applies).

    Returns:
        ``["a", "b", ...]`` text, or None if no run qualified.
    """
    strings: List[str] = []
    run = bytearray()

    for byte in data:
        if byte == 0:
            text = _accept_run(run, thresholds)
            if text is not None:
                strings.append(text)
            run = bytearray()
        elif run or is_printable_byte(byte):
            run.append(byte)

    text = _accept_run(run, thresholds)
    if text is not None:
        strings.append(text)

    if not strings:
        return None
    return format_array(strings, quote=True)


class BinaryHeuristicClassifier:
    """Decides how to show a byte buffer that no typed decoder accepted.

    Stateless apart from the (immutable) thresholds, so one instance can be
    shared across threads.
    """

    def __init__(self, thresholds: DecoderThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    def is_binary(self, data: bytes) -> bool:
        """Whether the NUL share of the peeked prefix exceeds the binary ratio."""
        peek = data[:self.thresholds.binary_peek_bytes]
        if not peek:
            return False
        return peek.count(0) / len(peek) > self.thresholds.binary_detection_ratio

    def looks_textual(self, data: bytes) -> bool:
        """Whether enough non-NUL bytes are printable to go looking for strings."""
        non_null = len(data) - data.count(0)
        if non_null == 0:
            return False
        return count_printable(data) / non_null > self.thresholds.text_detection_ratio

    def render_opaque(self, data: bytes) -> str:
        """Short buffers as hex, everything else as a placeholder."""
        if len(data) <= self.thresholds.max_hex_display_bytes:
            return to_hex(data)
        return BINARY_DATA

    def classify(self, data: bytes) -> str:
        """Render an undecoded buffer as safe display text.

        Args:
            data: Non-empty raw bytes.

        Returns:
            Text, extracted strings, hex, or a placeholder. Never None.
        """
        if len(data) >= self.thresholds.max_binary_processing_bytes:
            logger.debug(f"Classifier: {len(data)} bytes, too large to inspect")
            return LARGE_BINARY_DATA

        if self.is_binary(data):
            logger.debug(f"Classifier: {len(data)} bytes classified as binary")
            return self.render_opaque(data)

        text = decode_clean_utf8(data)
        if text:
            return text

        extracted = extract_readable_strings(data, self.thresholds)
        if extracted is not None:
            logger.debug(f"Classifier: extracted strings from {len(data)} bytes")
            return extracted

        return self.render_opaque(data)
