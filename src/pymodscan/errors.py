"""Exceptions for pymodscan: capture file failures and Modbus I/O errors."""


class PyModscanError(Exception):
    """Base exception for pymodscan."""

    pass


class CaptureError(PyModscanError):
    """Raised when the capture file cannot be opened or written."""

    def __init__(self, path: str, message: str | None = None, *, cause: BaseException | None = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message or f"Capture failed: {path!r}")


class CaptureFormatError(PyModscanError):
    """Raised when a capture file line or display token cannot be parsed back."""

    def __init__(self, line: str, message: str | None = None, *, lineno: int | None = None) -> None:
        self.line = line
        self.lineno = lineno
        super().__init__(message or f"Malformed capture line: {line!r}")


class ModbusIOError(PyModscanError):
    """Raised when a Modbus read fails (wraps pymodbus or connection errors)."""

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        offset: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.table = table
        self.offset = offset
        self.cause = cause
        super().__init__(message)
