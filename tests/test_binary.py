"""
Binary Heuristic Classifier Tests
"""

import pytest

from pgcell import BINARY_DATA, LARGE_BINARY_DATA, BinaryHeuristicClassifier, DecoderThresholds
from pgcell.binary import extract_readable_strings


@pytest.fixture
def classifier() -> BinaryHeuristicClassifier:
    return BinaryHeuristicClassifier()


class TestClassify:
    """Tests for BinaryHeuristicClassifier.classify."""

    def test_large_dominates(self, classifier):
        """Size check comes before any inspection, even for text."""
        assert classifier.classify(b"a" * 10000) == LARGE_BINARY_DATA

    def test_just_below_large(self, classifier):
        """9999 bytes of text are still inspected."""
        assert classifier.classify(b"a" * 9999) == "a" * 9999

    def test_short_binary_hex(self, classifier):
        """NUL-heavy short data renders as hex."""
        assert classifier.classify(b"\x00\x01\x00\x02") == "0x00010002"

    def test_long_binary_placeholder(self, classifier):
        """NUL-heavy data past the hex limit gets a placeholder."""
        assert classifier.classify(b"\x00" * 50 + b"\x01" * 50) == BINARY_DATA

    def test_hex_limit_inclusive(self, classifier):
        """Exactly 32 bytes is still hex."""
        data = b"\x00\x01" * 16
        assert classifier.classify(data) == "0x" + data.hex()

    def test_text(self, classifier):
        """Clean UTF-8 is returned as-is."""
        assert classifier.classify("plain text ✓".encode()) == "plain text ✓"

    def test_extracts_strings(self, classifier):
        """Readable runs are pulled out of composite-like data."""
        data = b"\x03hello world\x00\x04second value"
        assert classifier.classify(data) == '["hello world", "second value"]'

    def test_peek_window(self, classifier):
        """Only the first binary_peek_bytes count toward the NUL ratio."""
        data = b"a" * 100 + b"\x00" * 100
        assert classifier.classify(data) == '["' + "a" * 100 + '"]'

    def test_run_with_control_character_rejected(self, classifier):
        """A run that would leak a control character is not accepted."""
        data = b"abcdefghij\x01k\x00"
        assert classifier.classify(data) == "0x" + data.hex()

    def test_invalid_utf8(self, classifier):
        """Non-UTF-8 bytes without NULs fall back to hex."""
        assert classifier.classify(b"\xff\xfe\xfd") == "0xfffefd"

    def test_custom_thresholds(self):
        """Thresholds are honored."""
        classifier = BinaryHeuristicClassifier(DecoderThresholds(max_hex_display_bytes=2))
        assert classifier.classify(b"\x00\x01\x02") == BINARY_DATA


class TestHeuristics:
    """Tests for the detection predicates."""

    def test_is_binary(self, classifier):
        """More than 10% NUL in the peek."""
        assert classifier.is_binary(b"\x00" + b"a" * 8)
        assert not classifier.is_binary(b"\x00" + b"a" * 9)

    def test_looks_textual(self, classifier):
        """Printable share of non-NUL bytes."""
        assert classifier.looks_textual(b"\x00\x00ab")
        assert not classifier.looks_textual(b"\x00\x00")
        assert not classifier.looks_textual(b"\x80\x81\x82a")


class TestExtraction:
    """Tests for extract_readable_strings."""

    def test_leading_metadata_skipped(self):
        """Length prefixes before a run are dropped."""
        assert extract_readable_strings(b"\x00\x00\x00\x05hello\x00\x00\x00\x05world") == '["hello", "world"]'

    def test_low_ratio_rejected(self):
        """Runs at or below 80% printable are dropped."""
        assert extract_readable_strings(b"abcd\x01\x02\x00") is None

    def test_utf8_run(self):
        """Multi-byte UTF-8 inside a run is kept when the ratio allows."""
        data = b"caf" + "é".encode() + b" au lait\x00"
        assert extract_readable_strings(data) == '["café au lait"]'

    def test_nothing(self):
        """No printable content."""
        assert extract_readable_strings(b"\x00\x01\x02\x00") is None
