"""Tests for display formatters, address labels and parsing display text back."""

import pytest

from pymodscan import ByteOrder, DecodedValue, DisplayMode, PointKind, ValueKind, reorder16
from pymodscan.formatting import (
    format_address,
    format_decimal_value,
    format_float_value,
    format_hex_value,
    format_integer_value,
    format_real,
    format_value,
    parse_display_text,
    raw_word_from_text,
    to_signed,
)

WORD_KINDS = [PointKind.HOLDING_REGISTER, PointKind.INPUT_REGISTER]
BIT_KINDS = [PointKind.COIL, PointKind.DISCRETE_INPUT]
SINGLE_WORD_MODES = [DisplayMode.BINARY, DisplayMode.DECIMAL, DisplayMode.INTEGER, DisplayMode.HEX]
LE = ByteOrder.LITTLE_ENDIAN


def fmt(kind: PointKind, mode: DisplayMode, words: list[int], index: int = 0, order: ByteOrder = LE):
    return format_value(kind, mode, words, index, len(words), order)


@pytest.mark.parametrize(
    ("mode", "word", "text"),
    [
        (DisplayMode.BINARY, 5, "<0000000000000101>"),
        (DisplayMode.DECIMAL, 42, "<00042>"),
        (DisplayMode.DECIMAL, 65535, "<65535>"),
        (DisplayMode.INTEGER, 42, "<   42>"),
        (DisplayMode.INTEGER, 0xFFFF, "<   -1>"),
        (DisplayMode.INTEGER, 0x8000, "<-32768>"),
        (DisplayMode.HEX, 0x00AB, "<00ABH>"),
        (DisplayMode.HEX, 0xABCD, "<ABCDH>"),
    ],
)
def test_word_formats(mode: DisplayMode, word: int, text: str) -> None:
    assert fmt(PointKind.HOLDING_REGISTER, mode, [word]).text == text


def test_hex_scenario() -> None:
    words = [0x0001, 0x0002, 0x0003, 0x0004]
    texts = [fmt(PointKind.HOLDING_REGISTER, DisplayMode.HEX, words, i).text for i in range(4)]
    assert texts == ["<0001H>", "<0002H>", "<0003H>", "<0004H>"]


def test_byte_order_applied_before_formatting() -> None:
    assert format_hex_value(PointKind.HOLDING_REGISTER, 0x1234, ByteOrder.BIG_ENDIAN).text == "<3412H>"
    assert format_decimal_value(PointKind.INPUT_REGISTER, 0x0100, ByteOrder.BIG_ENDIAN).text == "<00001>"
    assert format_integer_value(PointKind.HOLDING_REGISTER, 0xFF7F, ByteOrder.BIG_ENDIAN).value == DecodedValue.signed(32767)


def test_decoded_value_kinds() -> None:
    assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.HEX, [7]).value == DecodedValue.unsigned(7)
    assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.INTEGER, [0xFFFE]).value == DecodedValue.signed(-2)
    assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.FLOATING_POINT, [0, 0x4050]).value.kind == ValueKind.FLOAT32
    assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.DOUBLE_FLOAT, [0, 0, 0, 0x400A]).value == DecodedValue.float64(3.25)


@pytest.mark.parametrize("kind", BIT_KINDS)
@pytest.mark.parametrize("mode", list(DisplayMode))
def test_bit_kinds_render_plain_bit_in_every_mode(kind: PointKind, mode: DisplayMode) -> None:
    for order in ByteOrder:
        assert format_value(kind, mode, [1, 0, 1, 0], 0, 4, order).text == "<1>"
        assert format_value(kind, mode, [1, 0, 1, 0], 1, 4, order).text == "<0>"


def test_bit_value_in_float_formatter_is_not_reconstructed() -> None:
    result = format_float_value(PointKind.COIL, 1, 0, LE, skip=True)
    assert result.text == "<1>"
    assert result.value == DecodedValue.unsigned(1)


def test_float_scenario() -> None:
    words = [0x0000, 0x4050]
    row0 = fmt(PointKind.HOLDING_REGISTER, DisplayMode.FLOATING_POINT, words, 0)
    row1 = fmt(PointKind.HOLDING_REGISTER, DisplayMode.FLOATING_POINT, words, 1)
    assert row0.text == "3.25"
    assert row0.value == DecodedValue.float32(3.25)
    assert row1.text == ""
    assert row1.value is None


def test_swapped_float_reverses_operands() -> None:
    words = [0x4050, 0x0000]
    assert fmt(PointKind.INPUT_REGISTER, DisplayMode.SWAPPED_FLOATING_POINT, words, 0).text == "3.25"


def test_float_trailing_row_is_blank() -> None:
    words = [0x0000, 0x4050, 0x0000]
    assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.FLOATING_POINT, words, 2).text == ""


def test_double_and_swapped_double() -> None:
    words = [0x0000, 0x0000, 0x0000, 0x400A]
    assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.DOUBLE_FLOAT, words, 0).text == "3.25"
    assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.SWAPPED_DOUBLE_FLOAT, list(reversed(words)), 0).text == "3.25"
    for i in (1, 2, 3):
        assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.DOUBLE_FLOAT, words, i).text == ""


def test_double_incomplete_group_is_blank() -> None:
    words = [0, 0, 0, 0x400A, 0x1111]
    # row 4 starts a group but only one word remains in the table
    assert fmt(PointKind.HOLDING_REGISTER, DisplayMode.DOUBLE_FLOAT, words, 4).text == ""


def test_missing_words_read_as_zero() -> None:
    assert format_value(PointKind.HOLDING_REGISTER, DisplayMode.HEX, [], 2, 4, LE).text == "<0000H>"


def test_format_real() -> None:
    assert format_real(3.25) == "3.25"
    assert format_real(12345678.0) == "1.23457e+07"
    assert format_real(float("inf")) == "inf"
    assert format_real(-0.5) == "-0.5"


def test_to_signed() -> None:
    assert to_signed(0) == 0
    assert to_signed(32767) == 32767
    assert to_signed(32768) == -32768
    assert to_signed(65535) == -1


# ============================================================================
# Address labels
# ============================================================================


@pytest.mark.parametrize(
    ("kind", "address", "label"),
    [
        (PointKind.COIL, 0, "00000"),
        (PointKind.DISCRETE_INPUT, 12, "10012"),
        (PointKind.HOLDING_REGISTER, 7, "40007"),
        (PointKind.INPUT_REGISTER, 1, "30001"),
        (PointKind.HOLDING_REGISTER, 12345, "412345"),
    ],
)
def test_format_address_decimal(kind: PointKind, address: int, label: str) -> None:
    assert format_address(kind, address) == label


def test_format_address_hex_has_no_prefix() -> None:
    assert format_address(PointKind.HOLDING_REGISTER, 255, True) == "00FFH"
    assert format_address(PointKind.COIL, 255, True) == "00FFH"


def test_format_address_decimal_injective() -> None:
    labels = {format_address(kind, a) for kind in PointKind for a in range(0, 2000)}
    assert len(labels) == len(PointKind) * 2000


def test_format_address_hex_injective_per_table() -> None:
    for kind in PointKind:
        labels = {format_address(kind, a, True) for a in range(0, 2000)}
        assert len(labels) == 2000


# ============================================================================
# Parsing display text back
# ============================================================================


@pytest.mark.parametrize("kind", WORD_KINDS)
@pytest.mark.parametrize("mode", SINGLE_WORD_MODES)
@pytest.mark.parametrize("order", list(ByteOrder))
def test_parse_inverts_format(kind: PointKind, mode: DisplayMode, order: ByteOrder) -> None:
    for w in (0x0000, 0x0001, 0x00FF, 0x1234, 0x7FFF, 0x8000, 0xFFFF):
        text = format_value(kind, mode, [w], 0, 1, order).text
        expected = reorder16(w, order)
        if mode is DisplayMode.INTEGER:
            expected = to_signed(expected)
        assert parse_display_text(kind, mode, text) == expected
        assert raw_word_from_text(kind, mode, text, order) == w


def test_parse_accepts_capture_tokens() -> None:
    assert parse_display_text(PointKind.HOLDING_REGISTER, DisplayMode.HEX, "00ABH") == 0xAB
    assert parse_display_text(PointKind.HOLDING_REGISTER, DisplayMode.INTEGER, "   -1") == -1
    assert parse_display_text(PointKind.COIL, DisplayMode.HEX, "1") == 1


@pytest.mark.parametrize(
    "mode",
    [DisplayMode.FLOATING_POINT, DisplayMode.SWAPPED_FLOATING_POINT, DisplayMode.DOUBLE_FLOAT, DisplayMode.SWAPPED_DOUBLE_FLOAT],
)
def test_parse_float_modes_rejected(mode: DisplayMode) -> None:
    with pytest.raises(ValueError):
        parse_display_text(PointKind.HOLDING_REGISTER, mode, "3.25")


def test_parse_invalid_text() -> None:
    with pytest.raises(ValueError):
        parse_display_text(PointKind.HOLDING_REGISTER, DisplayMode.HEX, "<00AB>")
    with pytest.raises(ValueError):
        parse_display_text(PointKind.HOLDING_REGISTER, DisplayMode.DECIMAL, "")
    with pytest.raises(ValueError):
        raw_word_from_text(PointKind.COIL, DisplayMode.DECIMAL, "2", LE)
