"""Text capture: timestamped append-only log of decoded rows, and a reader for replaying it."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Callable, Iterator

from .errors import CaptureError, CaptureFormatError

logger = logging.getLogger(__name__)


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 local time with milliseconds, e.g. 2024-05-01T12:30:00.125."""
    return ts.isoformat(timespec="milliseconds")


class CaptureSink:
    """
    Scoped capture file. While open, every record() appends
    '<timestamp> <address> <line>' and is flushed immediately; stop() syncs and closes.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or datetime.now
        self._file: IO[str] | None = None
        self._path: Path | None = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    @property
    def path(self) -> Path | None:
        return self._path

    def start(self, path: str | Path) -> None:
        """Open (truncate) the capture file; a different file already open is stopped first."""
        path = Path(path)
        if self._file is not None:
            if self._path == path:
                return
            self.stop()
        try:
            self._file = open(path, "w", encoding="utf-8", newline="\n")
        except OSError as e:
            raise CaptureError(str(path), f"Cannot open capture file {str(path)!r}: {e}", cause=e) from e
        self._path = path
        logger.debug("Capture started: %s", path)

    def stop(self) -> None:
        """Flush, sync and close the capture file; no-op when not capturing."""
        if self._file is None:
            return
        f, self._file = self._file, None
        try:
            f.flush()
            os.fsync(f.fileno())
        except OSError as e:
            logger.warning("Error syncing capture file %s: %s", self._path, e)
        finally:
            f.close()
        logger.debug("Capture stopped: %s", self._path)

    def record(self, line: str, address: str) -> bool:
        """Append one timestamped line; returns False when not capturing."""
        if self._file is None:
            return False
        entry = f"{format_timestamp(self._clock())} {address} {line}\n"
        try:
            self._file.write(entry)
            self._file.flush()
        except OSError as e:
            raise CaptureError(str(self._path), f"Cannot write capture file {str(self._path)!r}: {e}", cause=e) from e
        return True

    def __enter__(self) -> "CaptureSink":
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()


@dataclass(frozen=True)
class CaptureRecord:
    """One parsed capture line: either row tokens or a status message."""

    timestamp: datetime
    address: str
    tokens: tuple[str, ...] = ()
    status: str | None = None


def parse_capture_line(line: str, lineno: int | None = None) -> CaptureRecord:
    """Parse '<timestamp> <address> <payload>' into a CaptureRecord."""
    parts = line.rstrip("\n").split(" ", 2)
    if len(parts) < 2:
        raise CaptureFormatError(line, lineno=lineno)
    try:
        timestamp = datetime.fromisoformat(parts[0])
    except ValueError:
        raise CaptureFormatError(line, f"Bad capture timestamp: {parts[0]!r}", lineno=lineno) from None
    payload = parts[2] if len(parts) > 2 else ""
    stripped = payload.strip()
    if stripped.startswith("** ") and stripped.endswith(" **"):
        return CaptureRecord(timestamp, parts[1], status=stripped[3:-3])
    return CaptureRecord(timestamp, parts[1], tuple(payload.split()))


def read_capture(path: str | Path) -> Iterator[CaptureRecord]:
    """Yield records of a capture file in order; blank lines are skipped."""
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            yield parse_capture_line(line, lineno)
