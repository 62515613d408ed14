"""DataDisplay: register table, status line, text capture and traffic log of one point range."""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from .capture import CaptureSink
from .errors import CaptureError
from .formatting import format_address
from .table import RegisterTable
from .traffic import TrafficFrame, TrafficLog, TrafficSegment
from .types import ByteOrder, DecodedValue, DisplayDefinition, DisplayMode, PointKind, Snapshot

logger = logging.getLogger(__name__)

UNINITIALIZED_STATUS = "Data Uninitialized"


class CaptureMode(str, Enum):
    OFF = "off"
    TEXT_CAPTURE = "text_capture"


class DataDisplay:
    """
    Non-visual display of one point range.

    Snapshots from the poller go through update_data(); the presentation layer reads
    `table` and `status` and forwards user actions (mode, byte order, simulation,
    descriptions). While a capture is running, every update and every status change
    is written to the capture file.
    """

    def __init__(
        self,
        definition: DisplayDefinition | None = None,
        *,
        mode: DisplayMode = DisplayMode.BINARY,
        byte_order: ByteOrder = ByteOrder.LITTLE_ENDIAN,
        hex_addresses: bool = False,
        capture: CaptureSink | None = None,
    ) -> None:
        self.table = RegisterTable(definition, mode, byte_order, hex_addresses)
        self.traffic = TrafficLog(mode)
        self._capture = capture or CaptureSink()
        self._status = ""
        self.set_uninitialized_status()

    @property
    def definition(self) -> DisplayDefinition:
        return self.table.definition

    def setup(self, definition: DisplayDefinition, simulations: Iterable[tuple[PointKind, int]] = ()) -> None:
        """Switch to a new point range; annotations are cleared, simulated points re-applied."""
        self.table.reset(definition, simulations)
        self.set_uninitialized_status()

    def update_data(self, snapshot: Snapshot) -> None:
        """Render a poll result and capture it when capture is on."""
        if snapshot.definition != self.table.definition:
            logger.debug("Dropping snapshot for %s, display is set up for %s", snapshot.definition, self.definition)
            return
        self.table.apply_snapshot(snapshot.values)
        if self.capture_mode is CaptureMode.TEXT_CAPTURE:
            self._capture_string(self.table.capture_line())

    # ------------------------------------------------------------------
    # status line

    @property
    def status(self) -> str:
        return self._status

    def set_status(self, status: str) -> None:
        """Show an out-of-band status ('** status **'); empty string clears it."""
        if not status:
            self._status = ""
            return
        info = f"** {status} **"
        if info != self._status:
            self._status = info
            self._capture_string(info)

    def set_uninitialized_status(self) -> None:
        if not self.table.is_initialized():
            self.set_status(UNINITIALIZED_STATUS)

    # ------------------------------------------------------------------
    # presentation settings

    @property
    def display_mode(self) -> DisplayMode:
        return self.table.display_mode

    def set_display_mode(self, mode: DisplayMode) -> None:
        self.traffic.display_mode = mode
        self.table.display_mode = mode

    @property
    def byte_order(self) -> ByteOrder:
        return self.table.byte_order

    def set_byte_order(self, order: ByteOrder) -> None:
        self.table.byte_order = order

    def set_display_hex_addresses(self, on: bool) -> None:
        self.table.hex_addresses = on

    def set_simulated(self, kind: PointKind, address: int, on: bool) -> bool:
        return self.table.set_simulated(kind, address, on)

    def set_description(self, index: int, text: str) -> bool:
        return self.table.set_description(index, text)

    def item_at(self, index: int) -> tuple[int, DecodedValue | None]:
        """Address and value behind a row, as reported when the row is activated."""
        return self.table.lookup(index)

    # ------------------------------------------------------------------
    # capture

    @property
    def capture_mode(self) -> CaptureMode:
        return CaptureMode.TEXT_CAPTURE if self._capture.is_open else CaptureMode.OFF

    def start_text_capture(self, path: str | Path) -> bool:
        """Start capturing to `path`; returns False (and logs) when the file cannot be opened."""
        try:
            self._capture.start(path)
        except CaptureError as e:
            logger.warning("%s", e)
            return False
        return True

    def stop_text_capture(self) -> None:
        self._capture.stop()

    def _capture_string(self, s: str) -> None:
        if not self._capture.is_open:
            return
        address = format_address(self.definition.kind, self.definition.address, False)
        try:
            self._capture.record(s, address)
        except CaptureError as e:
            logger.warning("%s; capture stopped", e)
            self._capture.stop()

    # ------------------------------------------------------------------
    # traffic

    def update_traffic(self, frame: TrafficFrame) -> TrafficSegment | None:
        return self.traffic.append(frame)

    def close(self) -> None:
        self.stop_text_capture()

    def __enter__(self) -> "DataDisplay":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
