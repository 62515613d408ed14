"""Byte and word reordering of register words; IEEE-754 reassembly from register groups."""

import struct

from .types import ByteOrder


def reorder16(value: int, order: ByteOrder) -> int:
    """Swap the two bytes of a 16-bit word when the byte order asks for it."""
    value &= 0xFFFF
    if order.swap_bytes:
        return ((value & 0xFF) << 8) | (value >> 8)
    return value


def _assemble(words: tuple[int, ...], order: ByteOrder) -> int:
    """Concatenate byte-corrected words into one integer bit pattern."""
    corrected = [reorder16(w, order) for w in words]
    if not order.high_word_first:
        corrected.reverse()
    bits = 0
    for w in corrected:
        bits = (bits << 16) | w
    return bits


def _split(bits: int, count: int, order: ByteOrder) -> tuple[int, ...]:
    words = [(bits >> (16 * i)) & 0xFFFF for i in reversed(range(count))]
    if not order.high_word_first:
        words.reverse()
    return tuple(reorder16(w, order) for w in words)


def assemble_float32(w1: int, w2: int, order: ByteOrder) -> float:
    """Reinterpret two register words as an IEEE-754 binary32 value."""
    bits = _assemble((w1, w2), order)
    return struct.unpack(">f", struct.pack(">I", bits))[0]


def assemble_float64(w1: int, w2: int, w3: int, w4: int, order: ByteOrder) -> float:
    """Reinterpret four register words as an IEEE-754 binary64 value."""
    bits = _assemble((w1, w2, w3, w4), order)
    return struct.unpack(">d", struct.pack(">Q", bits))[0]


def float32_to_words(value: float, order: ByteOrder) -> tuple[int, int]:
    """Encode a float as the two words a device using `order` would send."""
    (bits,) = struct.unpack(">I", struct.pack(">f", value))
    return _split(bits, 2, order)  # type: ignore[return-value]


def float64_to_words(value: float, order: ByteOrder) -> tuple[int, int, int, int]:
    """Encode a double as the four words a device using `order` would send."""
    (bits,) = struct.unpack(">Q", struct.pack(">d", value))
    return _split(bits, 4, order)  # type: ignore[return-value]
