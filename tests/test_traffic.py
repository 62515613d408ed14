"""Tests for traffic frame rendering and the bounded traffic log."""

from pymodscan import Direction, DisplayMode, TrafficFrame, TrafficLog
from pymodscan.traffic import format_frame_bytes

REQUEST = TrafficFrame(Direction.REQUEST, 1, 3, b"\x00\x00\x00\x0a")


def test_raw_frame() -> None:
    assert REQUEST.raw() == b"\x01\x03\x00\x00\x00\x0a"
    exc = TrafficFrame(Direction.RESPONSE, 17, 3, b"\x02", is_exception=True)
    assert exc.raw() == b"\x11\x83\x02"


def test_format_frame_bytes_hex_and_decimal() -> None:
    raw = REQUEST.raw()
    assert format_frame_bytes(raw, DisplayMode.HEX) == "[01][03][00][00][00][0a]"
    assert format_frame_bytes(raw, DisplayMode.FLOATING_POINT) == "[01][03][00][00][00][0a]"
    assert format_frame_bytes(raw, DisplayMode.DECIMAL) == "[001][003][000][000][000][010]"
    assert format_frame_bytes(raw, DisplayMode.INTEGER) == "[001][003][000][000][000][010]"


def test_append_segments_carry_direction_and_style() -> None:
    log = TrafficLog()
    req = log.append(REQUEST)
    resp = log.append(TrafficFrame(Direction.RESPONSE, 1, 3, b"\x02\x00\x2a"))
    assert req is not None and resp is not None
    assert req.direction is Direction.REQUEST
    assert (req.foreground, req.background) == ("default", "transparent")
    assert (resp.foreground, resp.background) == ("white", "black")
    assert log.text() == "[01][03][00][00][00][0a][01][03][02][00][2a]"
    assert len(log) == len(log.text())
    assert len(log.segments) == 2


def test_display_mode_switch_applies_to_new_frames() -> None:
    log = TrafficLog(DisplayMode.DECIMAL)
    log.append(TrafficFrame(Direction.REQUEST, 1, 1))
    log.display_mode = DisplayMode.BINARY
    log.append(TrafficFrame(Direction.REQUEST, 1, 1))
    assert log.text() == "[001][001][01][01]"


def test_buffer_cleared_on_request_after_threshold() -> None:
    log = TrafficLog()
    big_request = TrafficFrame(Direction.REQUEST, 1, 16, bytes(1000))
    big_response = TrafficFrame(Direction.RESPONSE, 1, 3, bytes(1000))
    for _ in range(6):
        log.append(big_request)
    assert len(log) > TrafficLog.MAX_TEXT_LENGTH
    # a response never clears
    log.append(big_response)
    assert len(log.segments) == 7
    # the next request does
    segment = log.append(REQUEST)
    assert log.segments == (segment,)
    assert len(log) == len(segment.text)


def test_no_clear_at_threshold() -> None:
    log = TrafficLog()
    log.append(TrafficFrame(Direction.REQUEST, 1, 3, bytes(4998)))  # 5000 bytes -> 20000 chars
    log.append(REQUEST)
    assert len(log.segments) == 2


def test_clear() -> None:
    log = TrafficLog()
    log.append(REQUEST)
    log.clear()
    assert log.text() == ""
    assert len(log) == 0
