"""pymodscan: Modbus register value codec, register table, text capture and traffic log."""

__version__ = "0.1.0"

from .byteorder import assemble_float32, assemble_float64, float32_to_words, float64_to_words, reorder16
from .capture import CaptureRecord, CaptureSink, read_capture
from .client import ModbusPoller
from .display import CaptureMode, DataDisplay
from .errors import CaptureError, CaptureFormatError, ModbusIOError, PyModscanError
from .formatting import FormattedValue, format_address, format_value, parse_display_text
from .table import RegisterTable, RowsChanged
from .traffic import Direction, TrafficFrame, TrafficLog, TrafficSegment
from .types import (
    ByteOrder,
    DecodedValue,
    DisplayDefinition,
    DisplayMode,
    PointKind,
    RegisterRow,
    Snapshot,
    ValueKind,
)

__all__ = [
    "__version__",
    "assemble_float32",
    "assemble_float64",
    "float32_to_words",
    "float64_to_words",
    "reorder16",
    "CaptureRecord",
    "CaptureSink",
    "read_capture",
    "ModbusPoller",
    "CaptureMode",
    "DataDisplay",
    "CaptureError",
    "CaptureFormatError",
    "ModbusIOError",
    "PyModscanError",
    "FormattedValue",
    "format_address",
    "format_value",
    "parse_display_text",
    "RegisterTable",
    "RowsChanged",
    "Direction",
    "TrafficFrame",
    "TrafficLog",
    "TrafficSegment",
    "ByteOrder",
    "DecodedValue",
    "DisplayDefinition",
    "DisplayMode",
    "PointKind",
    "RegisterRow",
    "Snapshot",
    "ValueKind",
]
