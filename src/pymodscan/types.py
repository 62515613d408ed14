"""Core data model: point kinds, byte orders, display modes, decoded values, point ranges and rows."""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class PointKind(str, Enum):
    """Modbus data tables a display can be set up against."""

    COIL = "coil"
    DISCRETE_INPUT = "discrete_input"
    INPUT_REGISTER = "input_register"
    HOLDING_REGISTER = "holding_register"

    @property
    def is_bit(self) -> bool:
        return self in (PointKind.COIL, PointKind.DISCRETE_INPUT)


class ByteOrder(str, Enum):
    """
    Byte/word ordering conventions for reinterpreting register words.

    Each convention is a combination of two axes: whether the two bytes of
    every word are swapped, and whether the first word of a group holds the
    most significant bits. LITTLE_ENDIAN leaves words exactly as received.
    """

    LITTLE_ENDIAN = "little_endian"
    BIG_ENDIAN = "big_endian"
    LITTLE_ENDIAN_BYTE_SWAPPED = "little_endian_byte_swapped"
    BIG_ENDIAN_BYTE_SWAPPED = "big_endian_byte_swapped"

    @property
    def swap_bytes(self) -> bool:
        return self in (ByteOrder.BIG_ENDIAN, ByteOrder.LITTLE_ENDIAN_BYTE_SWAPPED)

    @property
    def high_word_first(self) -> bool:
        return self in (ByteOrder.BIG_ENDIAN, ByteOrder.BIG_ENDIAN_BYTE_SWAPPED)


class DisplayMode(str, Enum):
    """How raw words are rendered as text."""

    BINARY = "binary"
    DECIMAL = "decimal"
    INTEGER = "integer"
    HEX = "hex"
    FLOATING_POINT = "float"
    SWAPPED_FLOATING_POINT = "swapped_float"
    DOUBLE_FLOAT = "double"
    SWAPPED_DOUBLE_FLOAT = "swapped_double"

    @property
    def word_count(self) -> int:
        """Number of consecutive words that make up one value."""
        if self in (DisplayMode.FLOATING_POINT, DisplayMode.SWAPPED_FLOATING_POINT):
            return 2
        if self in (DisplayMode.DOUBLE_FLOAT, DisplayMode.SWAPPED_DOUBLE_FLOAT):
            return 4
        return 1

    @property
    def is_decimal_family(self) -> bool:
        return self in (DisplayMode.DECIMAL, DisplayMode.INTEGER)


class ValueKind(str, Enum):
    """Tag of a DecodedValue."""

    SIGNED = "signed"
    UNSIGNED = "unsigned"
    FLOAT32 = "float32"
    FLOAT64 = "float64"


@dataclass(frozen=True)
class DecodedValue:
    """Numeric value behind a display string, tagged with how it was decoded."""

    kind: ValueKind
    value: int | float

    def __post_init__(self) -> None:
        if self.kind in (ValueKind.FLOAT32, ValueKind.FLOAT64):
            if not isinstance(self.value, float):
                raise TypeError(f"{self.kind.value} value must be float, got {type(self.value).__name__}")
        elif not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError(f"{self.kind.value} value must be int, got {type(self.value).__name__}")

    @classmethod
    def signed(cls, value: int) -> "DecodedValue":
        return cls(ValueKind.SIGNED, int(value))

    @classmethod
    def unsigned(cls, value: int) -> "DecodedValue":
        return cls(ValueKind.UNSIGNED, int(value))

    @classmethod
    def float32(cls, value: float) -> "DecodedValue":
        return cls(ValueKind.FLOAT32, float(value))

    @classmethod
    def float64(cls, value: float) -> "DecodedValue":
        return cls(ValueKind.FLOAT64, float(value))

    @property
    def is_float(self) -> bool:
        return self.kind in (ValueKind.FLOAT32, ValueKind.FLOAT64)


@dataclass(frozen=True)
class DisplayDefinition:
    """Point range a display is set up against: kind, base address, number of points, device id."""

    kind: PointKind
    address: int
    length: int
    device_id: int = 1

    def __post_init__(self) -> None:
        if self.address < 0:
            raise ValueError(f"address must be >= 0, got {self.address}")
        if self.length < 0:
            raise ValueError(f"length must be >= 0, got {self.length}")
        if not 0 <= self.device_id <= 255:
            raise ValueError(f"device_id must be 0..255, got {self.device_id}")

    def contains(self, kind: PointKind, address: int) -> bool:
        return kind == self.kind and self.address <= address < self.address + self.length


@dataclass(frozen=True)
class Snapshot:
    """One raw read result: the point range and the words (or bits) delivered for it."""

    definition: DisplayDefinition
    values: Sequence[int]

    def __post_init__(self) -> None:
        values = tuple(int(v) for v in self.values)
        for v in values:
            if not 0 <= v <= 0xFFFF:
                raise ValueError(f"register value out of range 0..65535: {v}")
        object.__setattr__(self, "values", values)

    def value(self, index: int) -> int:
        """Word at index; 0 when the read delivered fewer words."""
        if 0 <= index < len(self.values):
            return self.values[index]
        return 0

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class RegisterRow:
    """One display slot: values derived from the snapshot merged with user annotations."""

    index: int
    address: int
    address_label: str
    raw_value: int
    value: DecodedValue | None
    text: str
    description: str = ""
    simulated: bool = False

    @property
    def capture_text(self) -> str:
        return self.text.replace("<", "").replace(">", "")

    @property
    def display_line(self) -> str:
        """Row as listed: 'address: value; description', descriptions over 20 chars shortened."""
        line = f"{self.address_label}: {self.text}"
        width = len(line) + 16
        descr = f"{self.description[:18]}..." if len(self.description) > 20 else self.description
        if descr:
            line += f"; {descr}"
        return line.ljust(width)
