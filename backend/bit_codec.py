"""
Bit Codec — Pack and unpack fixed-width fields in a 16-bit word.

Fields are laid out MSB-first: the first declared field occupies the most
significant bits. On the wire the word is two bytes, high byte first
(network order), which is how a community's Data half is carried.

    unpack_bits(0b01_00000000000001, [2, 14]) -> [1, 1]
    pack_bits([(1, 2), (1, 14)])              -> 16385
"""

from __future__ import annotations

from typing import Iterable, Sequence

WORD_BITS = 16
WORD_MASK = (1 << WORD_BITS) - 1


def _check_widths(widths: Sequence[int]) -> None:
    if any(w <= 0 for w in widths):
        raise ValueError(f"field widths must be positive: {list(widths)}")
    total = sum(widths)
    if total != WORD_BITS:
        raise ValueError(f"field widths must sum to {WORD_BITS}, got {total}")


def mask(width: int) -> int:
    """All-ones mask for a field of the given width."""
    return (1 << width) - 1


def unpack_bits(value: int, widths: Sequence[int]) -> list[int]:
    """Split a 16-bit value into fields, first width first (MSB side)."""
    _check_widths(widths)
    value &= WORD_MASK

    fields = []
    shift = WORD_BITS
    for width in widths:
        shift -= width
        fields.append((value >> shift) & mask(width))
    return fields


def pack_bits(fields: Iterable[tuple[int, int]]) -> int:
    """
    Join (value, width) pairs into one 16-bit value.

    Values wider than their field are truncated to the low bits; nothing
    is rejected.
    """
    fields = list(fields)
    _check_widths([width for _, width in fields])

    word = 0
    for value, width in fields:
        word = (word << width) | (value & mask(width))
    return word
