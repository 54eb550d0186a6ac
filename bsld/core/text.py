"""
Boskeopolis Land Data - Text Codec

Huffman-style prefix code for level and palette names.

The code table is fixed data, not derived from input statistics: save
files depend on these exact bit codes. Text is uppercased, each character
is replaced by its code, a TERMINAL code marks the end, and the bit stream
is zero-padded to a whole byte.
"""

from dataclasses import dataclass
from typing import NamedTuple

from .byte_utils import byte_to_bits
from .errors import BufferUnderrunError, TextDecodeError, TextEncodeError

# Reserved end-of-text symbol
TERMINAL = "TERMINAL"

# (symbol, code) pairs, codes MSB first, in trie order (left = 0, right = 1)
CODE_TABLE: tuple[tuple[str, str], ...] = (
    ("R", "0000"),
    ("I", "0001"),
    ("N", "0010"),
    ("V", "0011000"),
    ("@", "001100100"),
    ("\n", "001100101"),
    ("1", "00110011"),
    ("F", "001101"),
    ("D", "00111"),
    (TERMINAL, "01000"),
    ("C", "01001"),
    ("S", "0101"),
    ("&", "01100000"),
    ("X", "011000010"),
    ("6", "01100001100"),
    ("8", "01100001101"),
    ("—", "01100001110"),
    ("7", "011000011110"),
    ("$", "0110000111110"),
    ("™", "0110000111111"),
    ("-", "01100010"),
    ("Z", "011000110"),
    ("0", "011000111"),
    ("B", "011001"),
    ("U", "01101"),
    ("A", "0111"),
    ("T", "1000"),
    ("O", "1001"),
    (" ", "101"),
    ("W", "110000"),
    (".", "1100010"),
    ("2", "1100011000"),
    ("3", "11000110010"),
    ("9", "11000110011"),
    ("Q", "11000110100"),
    ("…", "11000110101"),
    ("“", "11000110110"),
    ("”", "11000110111"),
    (",", "11000111"),
    ("G", "110010"),
    ("¡", "11001100"),
    ("!", "11001101"),
    ("5", "1100111000"),
    ("+", "1100111001000"),
    ("=", "1100111001001"),
    ("4", "110011100101"),
    ("%", "11001110011"),
    ("J", "110011101"),
    ("#", "1100111100"),
    ("/", "110011110100"),
    ("₧", "110011110101"),
    ("¿", "110011110110"),
    ("?", "110011110111"),
    (":", "110011111"),
    ("L", "11010"),
    ("H", "11011"),
    ("P", "111000"),
    ("Y", "111001"),
    ("M", "111010"),
    ("K", "1110110"),
    ("’", "1110111"),
    ("E", "1111"),
)


@dataclass(frozen=True)
class TrieNode:
    """
    Node of the binary code trie.

    Leaves carry a symbol and its code; internal nodes carry exactly two
    children (index 0 for bit 0, index 1 for bit 1).
    """

    symbol: str | None = None
    code: str | None = None
    children: tuple["TrieNode", "TrieNode"] | None = None

    @property
    def is_leaf(self) -> bool:
        return self.children is None


class DecodedText(NamedTuple):
    text: str
    bytes_used: int
    remaining_bytes: bytes


def build_trie(code_table: tuple[tuple[str, str], ...]) -> TrieNode:
    """
    Build the immutable decode trie from (symbol, code) pairs.

    Raises:
        ValueError: If the codes are not a complete prefix code with
            exactly one TERMINAL symbol
    """
    terminals = sum(1 for symbol, _ in code_table if symbol == TERMINAL)
    if terminals != 1:
        raise ValueError(f"Code table must contain exactly one {TERMINAL}, found {terminals}")

    # Nested dicts while building: {"0": ..., "1": ...} or a (symbol, code) leaf
    root: dict = {}
    for symbol, code in code_table:
        if not code or set(code) - {"0", "1"}:
            raise ValueError(f"Invalid code {code!r} for {symbol!r}")

        node = root
        for depth, bit in enumerate(code):
            if isinstance(node, tuple):
                raise ValueError(f"Code {code} for {symbol!r} extends code for {node[0]!r}")
            if depth == len(code) - 1:
                if bit in node:
                    raise ValueError(f"Code {code} for {symbol!r} is not a prefix-free code")
                node[bit] = (symbol, code)
            else:
                node = node.setdefault(bit, {})

    def freeze(node) -> TrieNode:
        if isinstance(node, tuple):
            return TrieNode(symbol=node[0], code=node[1])
        if set(node) != {"0", "1"}:
            raise ValueError("Code table leaves a trie node with a single child")
        return TrieNode(children=(freeze(node["0"]), freeze(node["1"])))

    return freeze(root)


TRIE = build_trie(CODE_TABLE)
CODE_MAP: dict[str, str] = dict(CODE_TABLE)
ALPHABET = frozenset(symbol for symbol, _ in CODE_TABLE if symbol != TERMINAL)


def encode_text(text: str) -> bytes:
    """
    Encode text into Huffman-coded bytes.

    Args:
        text: Text to encode (uppercased before lookup)

    Returns:
        Coded bytes ending with the TERMINAL code, zero-padded to a byte

    Raises:
        TextEncodeError: If a character is missing from the code table
    """
    codes = []
    for char in text.upper():
        if char not in ALPHABET:
            raise TextEncodeError(f"Character {char!r} cannot be encoded")
        codes.append(CODE_MAP[char])
    codes.append(CODE_MAP[TERMINAL])

    bits = "".join(codes)
    # Pad out bits to fill bytes
    bits += "0" * (-len(bits) % 8)

    return bytes(int(bits[i : i + 8], 2) for i in range(0, len(bits), 8))


def decode_text(data: bytes) -> DecodedText:
    """
    Decode Huffman-coded text from the start of a byte buffer.

    Walks the trie bit by bit, pulling in whole bytes only when the
    current byte is exhausted, and stops at the TERMINAL leaf.

    Args:
        data: Buffer starting with coded text

    Returns:
        DecodedText with the text, the number of bytes the text occupied
        (always >= 1), and the bytes after it

    Raises:
        TextDecodeError: If data is empty or the walk leaves the trie
        BufferUnderrunError: If data ends before the TERMINAL code
    """
    if len(data) < 1:
        raise TextDecodeError("No bytes to decode.")

    bytes_used = 1
    head = byte_to_bits(data[0])
    head_pos = 0
    node = TRIE
    chars = []

    while True:
        if node.is_leaf:
            if node.symbol == TERMINAL:
                break
            chars.append(node.symbol)
            node = TRIE
            continue

        if head_pos == len(head):
            if bytes_used >= len(data):
                raise BufferUnderrunError(
                    f"Text ran past end of data after {bytes_used} bytes without terminator"
                )
            head = byte_to_bits(data[bytes_used])
            head_pos = 0
            bytes_used += 1

        bit = head[head_pos]
        head_pos += 1
        node = node.children[bit]
        if node is None:
            raise TextDecodeError("No character.")

    return DecodedText(
        text="".join(chars),
        bytes_used=bytes_used,
        remaining_bytes=bytes(data[bytes_used:]),
    )


def test_characters(text: str) -> bool:
    """Check that every character of text (uppercased) can be encoded."""
    return all(char in ALPHABET for char in text.upper())


# Keep pytest from collecting it when imported into test modules
test_characters.__test__ = False
