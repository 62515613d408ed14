"""
Display formatting of raw points: one formatter per display mode, address labels,
and the inverse parse used to replay captured text.

Every formatter returns FormattedValue(text, value) so callers needing the number
never parse the display string back.
"""

from typing import Callable, NamedTuple, Sequence

from .byteorder import assemble_float32, assemble_float64, reorder16
from .types import ByteOrder, DecodedValue, DisplayMode, PointKind


class FormattedValue(NamedTuple):
    text: str
    value: DecodedValue | None


_SKIPPED = FormattedValue("", None)

# Decimal address prefix per table (Modicon reference numbering)
_ADDRESS_PREFIX: dict[PointKind, str] = {
    PointKind.COIL: "0",
    PointKind.DISCRETE_INPUT: "1",
    PointKind.HOLDING_REGISTER: "4",
    PointKind.INPUT_REGISTER: "3",
}


def to_signed(value: int) -> int:
    """Convert unsigned 16-bit to signed."""
    if value > 32767:
        return value - 65536
    return value


def format_address(kind: PointKind, address: int, hex_format: bool = False) -> str:
    """Address label: '40007' style in decimal, '0007H' style (no table prefix) in hex."""
    if hex_format:
        return f"{address:04X}H"
    return f"{_ADDRESS_PREFIX[kind]}{address:04d}"


def format_real(value: float) -> str:
    """Float text with 6 significant digits ('3.25', '1.23457e+07', 'nan', 'inf')."""
    return f"{value:g}"


def _format_bit(value: int) -> FormattedValue:
    return FormattedValue(f"<{value}>", DecodedValue.unsigned(value))


def format_binary_value(kind: PointKind, value: int, order: ByteOrder) -> FormattedValue:
    if kind.is_bit:
        return _format_bit(value)
    value = reorder16(value, order)
    return FormattedValue(f"<{value:016b}>", DecodedValue.unsigned(value))


def format_decimal_value(kind: PointKind, value: int, order: ByteOrder) -> FormattedValue:
    if kind.is_bit:
        return _format_bit(value)
    value = reorder16(value, order)
    return FormattedValue(f"<{value:05d}>", DecodedValue.unsigned(value))


def format_integer_value(kind: PointKind, value: int, order: ByteOrder) -> FormattedValue:
    if kind.is_bit:
        return FormattedValue(f"<{value}>", DecodedValue.signed(value))
    value = to_signed(reorder16(value, order))
    return FormattedValue(f"<{value:5d}>", DecodedValue.signed(value))


def format_hex_value(kind: PointKind, value: int, order: ByteOrder) -> FormattedValue:
    if kind.is_bit:
        return _format_bit(value)
    value = reorder16(value, order)
    return FormattedValue(f"<{value:04X}H>", DecodedValue.unsigned(value))


def format_float_value(
    kind: PointKind,
    value1: int,
    value2: int,
    order: ByteOrder,
    skip: bool,
) -> FormattedValue:
    """
    Two words as binary32. Bit tables show value1 as a plain bit; register rows
    that do not start a complete pair (skip=True) render empty.
    """
    if kind.is_bit:
        return _format_bit(value1)
    if skip:
        return _SKIPPED
    value = assemble_float32(value1, value2, order)
    return FormattedValue(format_real(value), DecodedValue.float32(value))


def format_double_value(
    kind: PointKind,
    value1: int,
    value2: int,
    value3: int,
    value4: int,
    order: ByteOrder,
    skip: bool,
) -> FormattedValue:
    """Four words as binary64; same bit and skip rules as format_float_value."""
    if kind.is_bit:
        return _format_bit(value1)
    if skip:
        return _SKIPPED
    value = assemble_float64(value1, value2, value3, value4, order)
    return FormattedValue(format_real(value), DecodedValue.float64(value))


_SINGLE_WORD: dict[DisplayMode, Callable[[PointKind, int, ByteOrder], FormattedValue]] = {
    DisplayMode.BINARY: format_binary_value,
    DisplayMode.DECIMAL: format_decimal_value,
    DisplayMode.INTEGER: format_integer_value,
    DisplayMode.HEX: format_hex_value,
}


def format_value(
    kind: PointKind,
    mode: DisplayMode,
    words: Sequence[int],
    index: int,
    row_count: int,
    order: ByteOrder,
) -> FormattedValue:
    """
    Format row `index` of a table of `row_count` rows over `words`.

    Words missing from `words` read as 0. Multi-word modes only render on rows
    starting an aligned group that fits inside the table; a trailing incomplete
    group renders empty.
    """

    def word(i: int) -> int:
        return words[i] if 0 <= i < len(words) else 0

    if mode in _SINGLE_WORD:
        return _SINGLE_WORD[mode](kind, word(index), order)

    if kind.is_bit:
        # no reconstruction over bits: the row's own bit
        return _format_bit(word(index))

    if mode.word_count == 2:
        skip = bool(index % 2) or index + 1 >= row_count
        first, second = word(index), word(index + 1)
        if mode is DisplayMode.SWAPPED_FLOATING_POINT:
            first, second = second, first
        return format_float_value(kind, first, second, order, skip)

    skip = bool(index % 4) or index + 3 >= row_count
    group = [word(index + i) for i in range(4)]
    if mode is DisplayMode.SWAPPED_DOUBLE_FLOAT:
        group.reverse()
    return format_double_value(kind, *group, order, skip)


def parse_display_text(kind: PointKind, mode: DisplayMode, text: str) -> int:
    """
    Parse single-word display text (with or without brackets) back to its number.

    Returns the byte-order-corrected value the text shows: unsigned for binary,
    decimal and hex, signed for integer. Float and double modes are not
    reversible from text and raise ValueError.
    """
    s = text.strip().replace("<", "").replace(">", "").strip()
    if not s:
        raise ValueError("Empty display text")
    if kind.is_bit:
        return int(s, 10)
    if mode is DisplayMode.BINARY:
        return int(s, 2)
    if mode is DisplayMode.DECIMAL:
        return int(s, 10)
    if mode is DisplayMode.INTEGER:
        return int(s, 10)
    if mode is DisplayMode.HEX:
        if not s.upper().endswith("H"):
            raise ValueError(f"Hex display text must end with 'H': {text!r}")
        return int(s[:-1], 16)
    raise ValueError(f"{mode.value} display text cannot be parsed back to a register word")


def raw_word_from_text(kind: PointKind, mode: DisplayMode, text: str, order: ByteOrder) -> int:
    """Recover the word as received from the device from its display text."""
    value = parse_display_text(kind, mode, text)
    if kind.is_bit:
        if value not in (0, 1):
            raise ValueError(f"Bit value out of range: {value}")
        return value
    if not -32768 <= value <= 0xFFFF:
        raise ValueError(f"Register value out of range: {value}")
    return reorder16(value & 0xFFFF, order)
