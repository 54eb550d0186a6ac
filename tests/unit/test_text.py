"""Unit tests for the Huffman text codec."""

import pytest

from bsld.core.errors import BufferUnderrunError, TextDecodeError, TextEncodeError
from bsld.core.text import (
    ALPHABET,
    CODE_MAP,
    CODE_TABLE,
    TERMINAL,
    TRIE,
    build_trie,
    decode_text,
    encode_text,
    test_characters,
)

MANHATTAN_BYTES = bytes(
    [0x33, 0x58, 0xB8, 0x7D, 0x87, 0xED, 0xF7, 0xA7, 0x2D, 0xBC, 0x43, 0x96, 0x35, 0x40]
)


class TestCodeTable:
    """Test the fixed code table and trie."""

    def test_table_size(self):
        assert len(CODE_TABLE) == 62
        assert len(CODE_MAP) == 62
        assert len(ALPHABET) == 61
        assert TERMINAL not in ALPHABET

    def test_known_codes(self):
        assert CODE_MAP["E"] == "1111"
        assert CODE_MAP[" "] == "101"
        assert CODE_MAP[TERMINAL] == "01000"

    def test_trie_leaves_match_codes(self):
        """Walking each code from the root lands on its own symbol."""
        for symbol, code in CODE_TABLE:
            node = TRIE
            for bit in code:
                node = node.children[int(bit)]
            assert node.is_leaf
            assert node.symbol == symbol

    def test_trie_requires_one_terminal(self):
        with pytest.raises(ValueError, match="exactly one"):
            build_trie((("A", "0"), ("B", "1")))

    def test_trie_rejects_prefix(self):
        with pytest.raises(ValueError):
            build_trie(((TERMINAL, "0"), ("A", "01"), ("B", "1")))

    def test_trie_rejects_incomplete_code(self):
        """Every internal node needs both children."""
        with pytest.raises(ValueError, match="single child"):
            build_trie(((TERMINAL, "0"),))


class TestEncodeText:
    """Test encode_text()."""

    def test_known_vector(self):
        assert encode_text("1ST WE TAKE MANHATTAN…") == MANHATTAN_BYTES

    def test_lowercase_is_uppercased(self):
        assert encode_text("1st We Take Manhattan…") == MANHATTAN_BYTES

    def test_empty_string_is_terminal_only(self):
        """TERMINAL (01000) padded to one byte."""
        assert encode_text("") == b"\x40"

    def test_single_character(self):
        """A (0111) + TERMINAL (01000) + 7 padding bits."""
        assert encode_text("A") == b"\x74\x00"

    def test_unknown_character(self):
        with pytest.raises(TextEncodeError):
            encode_text("HELLO べ")

    def test_encode_error_is_lookup_error(self):
        with pytest.raises(LookupError):
            encode_text("~")


class TestDecodeText:
    """Test decode_text()."""

    def test_known_vector(self):
        data = MANHATTAN_BYTES + bytes([0x22, 0x84, 0xF3, 0xA2])
        decoded = decode_text(data)
        assert decoded.text == "1ST WE TAKE MANHATTAN…"
        assert decoded.bytes_used == 14
        assert decoded.remaining_bytes == bytes([0x22, 0x84, 0xF3, 0xA2])

    def test_terminator_ending_on_byte_boundary(self):
        """Space (101) + TERMINAL (01000) fills exactly one byte."""
        decoded = decode_text(b"\xa8\x11")
        assert decoded.text == " "
        assert decoded.bytes_used == 1
        assert decoded.remaining_bytes == b"\x11"

    def test_bytes_used_counts_padding(self):
        decoded = decode_text(b"\x74\x00\xab")
        assert decoded.text == "A"
        assert decoded.bytes_used == 2
        assert decoded.remaining_bytes == b"\xab"

    def test_empty_input(self):
        with pytest.raises(TextDecodeError, match="No bytes"):
            decode_text(b"")

    def test_missing_terminator(self):
        """E E ... runs out of data before any TERMINAL code."""
        with pytest.raises(BufferUnderrunError):
            decode_text(b"\xff")

    def test_truncated_stream(self):
        data = encode_text("BOSKEOPOLIS LAND")
        with pytest.raises(BufferUnderrunError):
            decode_text(data[:-1])

    def test_round_trip_alphabet(self):
        """Every encodable character decodes back."""
        text = "".join(sorted(ALPHABET))
        assert decode_text(encode_text(text)).text == text

    @pytest.mark.parametrize(
        "text", ["Sewer Slog", "Wasabi’s Tower!", "¡Hola! ¿Qué?".replace("é", "E"), "100% ₧ #1"]
    )
    def test_round_trip_names(self, text):
        decoded = decode_text(encode_text(text) + b"\x99")
        assert decoded.text == text.upper()
        assert decoded.remaining_bytes == b"\x99"


class TestTestCharacters:
    """Test test_characters()."""

    def test_valid(self):
        assert test_characters("1st We Take Manhattan…") is True

    def test_invalid(self):
        assert test_characters("1st We Take Manhattan… べ") is False

    def test_empty(self):
        assert test_characters("") is True
