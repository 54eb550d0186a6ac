"""
Boskeopolis Land Data - Hex String Utilities

Hex dump helpers for raw save data in tool output and project debug
sections.
"""

from typing import List


def format_hex_row(row: bytes) -> str:
    """
    Format bytes as space-separated uppercase hex.

    Example:
        >>> format_hex_row(bytes([1, 2, 163, 255]))
        '01 02 A3 FF'
    """
    return " ".join(f"{b:02X}" for b in row)


def format_hex_dump(data: bytes, width: int = 16) -> List[str]:
    """
    Split data into rows of `width` bytes, each formatted with format_hex_row.

    Example:
        >>> format_hex_dump(bytes(range(5)), width=2)
        ['00 01', '02 03', '04']
    """
    if width <= 0:
        raise ValueError(f"Row width must be positive, got {width}")
    return [format_hex_row(data[i : i + width]) for i in range(0, len(data), width)]
