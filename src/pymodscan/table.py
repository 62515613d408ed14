"""RegisterTable: rows of a point range, recomputed from the last snapshot on every mode/order change."""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, NamedTuple, Sequence

from .formatting import format_address, format_value
from .types import ByteOrder, DecodedValue, DisplayDefinition, DisplayMode, PointKind, RegisterRow, Snapshot

logger = logging.getLogger(__name__)


class RowsChanged(NamedTuple):
    """Notification sent to observers: inclusive row range and what changed."""

    first: int
    last: int
    reason: str  # "values" | "simulated" | "description"


Observer = Callable[[RowsChanged], None]


@dataclass(frozen=True)
class _Derived:
    """Part of a row computed from the snapshot; replaced on every recompute."""

    address: int
    raw_value: int
    text: str
    value: DecodedValue | None


@dataclass
class _Annotation:
    """Part of a row authored by the user; kept across recomputes, cleared by reset."""

    description: str = ""
    simulated: bool = False


class RegisterTable:
    """
    View model of one point range.

    Holds the last snapshot and re-renders every row from it whenever the display
    mode, byte order or address format changes, so a new interpretation never needs
    a new device read. Derived values and user annotations live in two parallel
    lists and are merged into RegisterRow on read.
    """

    def __init__(
        self,
        definition: DisplayDefinition | None = None,
        mode: DisplayMode = DisplayMode.BINARY,
        byte_order: ByteOrder = ByteOrder.LITTLE_ENDIAN,
        hex_addresses: bool = False,
    ) -> None:
        self._mode = mode
        self._byte_order = byte_order
        self._hex_addresses = hex_addresses
        self._observers: list[Observer] = []
        self._definition = definition or DisplayDefinition(PointKind.HOLDING_REGISTER, 0, 0)
        self._snapshot: Snapshot | None = None
        self._derived: list[_Derived] = []
        self._annotations: list[_Annotation] = []
        self.reset(self._definition)

    # ------------------------------------------------------------------
    # configuration

    @property
    def definition(self) -> DisplayDefinition:
        return self._definition

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def display_mode(self) -> DisplayMode:
        return self._mode

    @display_mode.setter
    def display_mode(self, mode: DisplayMode) -> None:
        self._mode = mode
        self.refresh()

    @property
    def byte_order(self) -> ByteOrder:
        return self._byte_order

    @byte_order.setter
    def byte_order(self, order: ByteOrder) -> None:
        self._byte_order = order
        self.refresh()

    @property
    def hex_addresses(self) -> bool:
        return self._hex_addresses

    @hex_addresses.setter
    def hex_addresses(self, on: bool) -> None:
        self._hex_addresses = on
        self.refresh()

    # ------------------------------------------------------------------
    # observers

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a rows-changed callback; returns a function that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, first: int, last: int, reason: str) -> None:
        change = RowsChanged(first, last, reason)
        for observer in list(self._observers):
            observer(change)

    # ------------------------------------------------------------------
    # snapshot and recompute

    def reset(
        self,
        definition: DisplayDefinition,
        simulations: Iterable[tuple[PointKind, int]] = (),
    ) -> None:
        """
        Set up a new point range: drops the snapshot and every annotation, then
        marks the given (kind, address) points as simulated and re-renders.
        """
        self._definition = definition
        self._snapshot = None
        self._annotations = [_Annotation() for _ in range(definition.length)]
        for kind, address in simulations:
            row = self.find_row(kind, address)
            if row is not None:
                self._annotations[row].simulated = True
        logger.debug(
            "Table reset: %s @ %d, %d rows", definition.kind.value, definition.address, definition.length
        )
        self.refresh()

    def apply_snapshot(self, words: Sequence[int]) -> None:
        """Store newly read words and recompute every row."""
        self._snapshot = Snapshot(self._definition, words)
        self.refresh()

    def refresh(self) -> None:
        """Recompute all rows from the current snapshot (no new read needed)."""
        words = self._snapshot.values if self._snapshot is not None else ()
        kind = self._definition.kind
        count = self.row_count
        derived: list[_Derived] = []
        for i in range(count):
            formatted = format_value(kind, self._mode, words, i, count, self._byte_order)
            raw = words[i] if i < len(words) else 0
            derived.append(_Derived(self._definition.address + i, raw, formatted.text, formatted.value))

        # rows inside a multi-word group mirror the value rendered at the group start
        n = self._mode.word_count
        if n > 1 and not kind.is_bit:
            for i, item in enumerate(derived):
                if item.value is None and i % n:
                    leader = derived[i - i % n]
                    derived[i] = _Derived(item.address, item.raw_value, item.text, leader.value)

        self._derived = derived
        if count:
            self._notify(0, count - 1, "values")

    # ------------------------------------------------------------------
    # annotations and lookups

    def find_row(self, kind: PointKind, address: int) -> int | None:
        """Row index of (kind, address), or None on kind mismatch or out of range."""
        if not self._definition.contains(kind, address):
            return None
        return address - self._definition.address

    def set_simulated(self, kind: PointKind, address: int, on: bool) -> bool:
        row = self.find_row(kind, address)
        if row is None:
            return False
        self._annotations[row].simulated = on
        self._notify(row, row, "simulated")
        return True

    def set_description(self, index: int, text: str) -> bool:
        if not 0 <= index < self.row_count:
            return False
        self._annotations[index].description = text
        self._notify(index, index, "description")
        return True

    def is_initialized(self) -> bool:
        return self._snapshot is not None

    def values(self) -> tuple[int, ...]:
        """Words of the last snapshot (empty when uninitialized)."""
        return tuple(self._snapshot.values) if self._snapshot is not None else ()

    def group_start(self, index: int) -> int:
        """First row of the multi-word group containing `index` (itself in single-word modes)."""
        if self._definition.kind.is_bit:
            return index
        return index - index % self._mode.word_count

    def lookup(self, index: int) -> tuple[int, DecodedValue | None]:
        """(address, value) of the value shown at or spanning row `index`."""
        row = self.row(self.group_start(index))
        return row.address, row.value

    # ------------------------------------------------------------------
    # reading

    @property
    def row_count(self) -> int:
        return self._definition.length

    def __len__(self) -> int:
        return self.row_count

    def row(self, index: int) -> RegisterRow:
        derived = self._derived[index]
        note = self._annotations[index]
        return RegisterRow(
            index=index,
            address=derived.address,
            address_label=format_address(self._definition.kind, derived.address, self._hex_addresses),
            raw_value=derived.raw_value,
            value=derived.value,
            text=derived.text,
            description=note.description,
            simulated=note.simulated,
        )

    def rows(self) -> list[RegisterRow]:
        return [self.row(i) for i in range(self.row_count)]

    def __iter__(self) -> Iterator[RegisterRow]:
        return iter(self.rows())

    def __getitem__(self, index: int) -> RegisterRow:
        if index < 0:
            index += self.row_count
        if not 0 <= index < self.row_count:
            raise IndexError(f"row index out of range: {index}")
        return self.row(index)

    def capture_line(self) -> str:
        """Bracket-stripped row texts joined by single spaces, in row order."""
        return " ".join(self.row(i).capture_text for i in range(self.row_count))
