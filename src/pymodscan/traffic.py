"""TrafficLog: bounded text buffer of raw request/response frames."""

import logging
from dataclasses import dataclass
from enum import Enum

from .types import DisplayMode

logger = logging.getLogger(__name__)

EXCEPTION_BIT = 0x80


class Direction(str, Enum):
    REQUEST = "request"
    RESPONSE = "response"


@dataclass(frozen=True)
class TrafficFrame:
    """A Modbus PDU seen on the wire, tagged with direction and device id."""

    direction: Direction
    device_id: int
    function_code: int
    data: bytes = b""
    is_exception: bool = False

    def raw(self) -> bytes:
        """Device id, function code (exception bit set on exceptions), then PDU data."""
        fc = self.function_code | (EXCEPTION_BIT if self.is_exception else 0)
        return bytes([self.device_id & 0xFF, fc & 0xFF]) + bytes(self.data)


@dataclass(frozen=True)
class TrafficSegment:
    direction: Direction
    text: str

    @property
    def foreground(self) -> str:
        return "default" if self.direction is Direction.REQUEST else "white"

    @property
    def background(self) -> str:
        return "transparent" if self.direction is Direction.REQUEST else "black"


def format_frame_bytes(raw: bytes, mode: DisplayMode) -> str:
    """'[001][003]...' in decimal and integer modes, '[01][03]...' otherwise."""
    if mode.is_decimal_family:
        return "".join(f"[{b:03d}]" for b in raw)
    return "".join(f"[{b:02x}]" for b in raw)


class TrafficLog:
    """
    Append-only list of styled frame segments. Once the buffered text exceeds
    MAX_TEXT_LENGTH, the next request clears the buffer before it is appended.
    """

    MAX_TEXT_LENGTH = 22000

    def __init__(self, display_mode: DisplayMode = DisplayMode.HEX) -> None:
        self.display_mode = display_mode
        self._segments: list[TrafficSegment] = []
        self._length = 0

    @property
    def segments(self) -> tuple[TrafficSegment, ...]:
        return tuple(self._segments)

    def append(self, frame: TrafficFrame) -> TrafficSegment | None:
        text = format_frame_bytes(frame.raw(), self.display_mode)
        if not text:
            return None
        if frame.direction is Direction.REQUEST and self._length > self.MAX_TEXT_LENGTH:
            logger.debug("Traffic buffer over %d chars, clearing", self.MAX_TEXT_LENGTH)
            self.clear()
        segment = TrafficSegment(frame.direction, text)
        self._segments.append(segment)
        self._length += len(text)
        return segment

    def text(self) -> str:
        return "".join(s.text for s in self._segments)

    def clear(self) -> None:
        self._segments.clear()
        self._length = 0

    def __len__(self) -> int:
        return self._length
