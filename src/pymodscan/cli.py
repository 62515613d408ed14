#!/usr/bin/env python3
"""Command-line front end for pymodscan using Typer."""

import json
import logging
import time
from pathlib import Path
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .capture import read_capture
from .client import ModbusPoller
from .display import DataDisplay
from .errors import CaptureFormatError, ModbusIOError
from .formatting import raw_word_from_text
from .table import RegisterTable
from .types import ByteOrder, DisplayDefinition, DisplayMode, PointKind, RegisterRow

app = typer.Typer(
    name="pymodscan",
    help="Modbus register monitor: poll, decode and replay register values in any display mode.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Shared options and helpers
# ============================================================================

HostOption = Annotated[
    Optional[str],
    typer.Option("--host", "-h", help="Device hostname or IP address", envvar="PYMODSCAN_HOST"),
]
PortOption = Annotated[
    int,
    typer.Option("--port", "-p", help="Modbus TCP port", envvar="PYMODSCAN_PORT"),
]
UnitIdOption = Annotated[
    int,
    typer.Option("--unit-id", "-u", help="Modbus unit (device) ID", envvar="PYMODSCAN_UNIT_ID"),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", "-t", help="Connection timeout in seconds", envvar="PYMODSCAN_TIMEOUT"),
]
RetriesOption = Annotated[
    int,
    typer.Option("--retries", "-r", help="Number of retries on failure", envvar="PYMODSCAN_RETRIES"),
]
KindOption = Annotated[
    PointKind,
    typer.Option("--kind", "-k", help="Point table", case_sensitive=False),
]
AddressOption = Annotated[
    int,
    typer.Option("--address", "-a", help="Base address (0-based offset)"),
]
ModeOption = Annotated[
    DisplayMode,
    typer.Option("--mode", "-m", help="Display mode", case_sensitive=False),
]
ByteOrderOption = Annotated[
    ByteOrder,
    typer.Option("--byte-order", "-b", help="Byte/word order", case_sensitive=False, envvar="PYMODSCAN_BYTE_ORDER"),
]
HexAddressOption = Annotated[
    bool,
    typer.Option("--hex-addresses", help="Show addresses in hex"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def parse_int(value: str) -> int:
    """Parse an unsigned 16-bit word from decimal or 0x hex."""
    v = value.strip()
    if v.lower().startswith("0x"):
        num = int(v, 16)
    else:
        num = int(v)
    if not (0 <= num <= 65535):
        raise ValueError(f"Unsigned 16-bit integer out of range: {num}")
    return num


def row_to_dict(row: RegisterRow) -> dict[str, Any]:
    """Row as a JSON-friendly dict."""
    return {
        "address": row.address_label,
        "raw": row.raw_value,
        "text": row.text,
        "value": row.value.value if row.value is not None else None,
        "type": row.value.kind.value if row.value is not None else None,
        "description": row.description,
        "simulated": row.simulated,
    }


def echo_rows(rows: list[RegisterRow], json_output: bool, **extra: Any) -> None:
    if json_output:
        typer.echo(json.dumps({**extra, "rows": [row_to_dict(r) for r in rows]}))
    else:
        for row in rows:
            typer.echo(row.display_line.rstrip())


# ============================================================================
# Commands
# ============================================================================

@app.command()
def decode(
    words: Annotated[list[str], typer.Argument(help="Raw words (decimal or 0x hex), one per point")],
    kind: KindOption = PointKind.HOLDING_REGISTER,
    address: AddressOption = 0,
    mode: ModeOption = DisplayMode.HEX,
    byte_order: ByteOrderOption = ByteOrder.LITTLE_ENDIAN,
    hex_addresses: HexAddressOption = False,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Render raw words as a register table without talking to a device.

    Example: pymodscan decode 0x0000 0x4050 --mode float
    """
    setup_logging(verbose)

    try:
        values = [parse_int(w) for w in words]
        if kind.is_bit and any(v > 1 for v in values):
            raise ValueError("Coil and discrete input values must be 0 or 1")
        table = RegisterTable(
            DisplayDefinition(kind, address, len(values)),
            mode=mode,
            byte_order=byte_order,
            hex_addresses=hex_addresses,
        )
        table.apply_snapshot(values)
        echo_rows(table.rows(), json_output)
    except ValueError as e:
        typer.echo(f"Error: Invalid value: {e}", err=True)
        raise typer.Exit(2)
    except Exception as e:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(4)


@app.command()
def poll(
    host: HostOption = None,
    port: PortOption = 502,
    unit_id: UnitIdOption = 1,
    timeout: TimeoutOption = 3.0,
    retries: RetriesOption = 1,
    kind: KindOption = PointKind.HOLDING_REGISTER,
    address: AddressOption = 0,
    length: Annotated[int, typer.Option("--length", "-l", help="Number of points")] = 10,
    mode: ModeOption = DisplayMode.HEX,
    byte_order: ByteOrderOption = ByteOrder.LITTLE_ENDIAN,
    hex_addresses: HexAddressOption = False,
    interval: Annotated[float, typer.Option("--interval", "-i", help="Polling interval in seconds")] = 1.0,
    once: Annotated[bool, typer.Option("--once", help="Poll once and exit")] = False,
    capture: Annotated[Optional[Path], typer.Option("--capture", "-c", help="Append decoded rows to this text capture file")] = None,
    traffic: Annotated[bool, typer.Option("--traffic", help="Print raw request/response frames")] = False,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Continuously poll a point range and print the decoded rows.

    Read failures are shown as a status line (and captured) and polling continues,
    unless --once is given. Press Ctrl+C to stop.
    """
    setup_logging(verbose)

    if not host:
        typer.echo("Error: --host is required for this command", err=True)
        raise typer.Exit(2)
    if interval <= 0:
        typer.echo(f"Error: Interval must be positive, got {interval}", err=True)
        raise typer.Exit(2)
    if length <= 0:
        typer.echo(f"Error: Length must be positive, got {length}", err=True)
        raise typer.Exit(2)

    try:
        definition = DisplayDefinition(kind, address, length, device_id=unit_id)
    except ValueError as e:
        typer.echo(f"Error: Invalid point range: {e}", err=True)
        raise typer.Exit(2)

    display = DataDisplay(definition, mode=mode, byte_order=byte_order, hex_addresses=hex_addresses)
    if capture is not None and not display.start_text_capture(capture):
        typer.echo(f"Error: Cannot open capture file: {capture}", err=True)
        raise typer.Exit(2)

    poller = ModbusPoller(host=host, port=port, timeout=timeout, retries=retries)
    if traffic:
        def show_frame(frame: Any) -> None:
            segment = display.update_traffic(frame)
            if segment is not None:
                typer.echo(f"{segment.direction.value[:3].upper()} {segment.text}")

        poller.add_traffic_listener(show_frame)

    try:
        with display, poller:
            while True:
                try:
                    snapshot = poller.read(definition)
                except ModbusIOError as e:
                    display.set_status(str(e))
                    typer.echo(f"Error: Connection/Modbus error: {e}", err=True)
                    if once:
                        raise typer.Exit(3)
                else:
                    display.set_status("")
                    display.update_data(snapshot)
                    echo_rows(
                        display.table.rows(),
                        json_output,
                        polls=poller.polls,
                        responses=poller.valid_responses,
                    )
                    if once:
                        break
                time.sleep(interval)
    except ModbusIOError as e:
        typer.echo(f"Error: Connection/Modbus error: {e}", err=True)
        raise typer.Exit(3)
    except KeyboardInterrupt:
        typer.echo("\nStopped by user", err=True)
        raise typer.Exit(0)
    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(4)


@app.command()
def replay(
    capture_file: Annotated[Path, typer.Argument(help="Capture file written by poll --capture")],
    kind: KindOption = PointKind.HOLDING_REGISTER,
    from_mode: Annotated[
        DisplayMode,
        typer.Option("--from-mode", help="Display mode the capture was recorded in", case_sensitive=False),
    ] = DisplayMode.HEX,
    from_byte_order: Annotated[
        ByteOrder,
        typer.Option("--from-byte-order", help="Byte order the capture was recorded with", case_sensitive=False),
    ] = ByteOrder.LITTLE_ENDIAN,
    mode: ModeOption = DisplayMode.DECIMAL,
    byte_order: ByteOrderOption = ByteOrder.LITTLE_ENDIAN,
    hex_addresses: HexAddressOption = False,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Re-render a text capture under another display mode or byte order.

    Captures recorded in binary, decimal, integer or hex mode can be replayed;
    float captures are not reversible. The base address is taken from the capture.
    """
    setup_logging(verbose)

    if not capture_file.is_file():
        typer.echo(f"Error: Capture file not found: {capture_file}", err=True)
        raise typer.Exit(2)

    table: RegisterTable | None = None
    try:
        for record in read_capture(capture_file):
            if record.status is not None:
                if not json_output:
                    typer.echo(f"{record.timestamp.isoformat(timespec='milliseconds')} ** {record.status} **")
                continue
            try:
                words = [raw_word_from_text(kind, from_mode, t, from_byte_order) for t in record.tokens]
            except ValueError as e:
                raise CaptureFormatError(" ".join(record.tokens), str(e)) from e
            base = int(record.address[1:]) if not record.address.upper().endswith("H") else int(record.address[:-1], 16)
            definition = DisplayDefinition(kind, base, len(words))
            if table is None or table.definition != definition:
                table = RegisterTable(definition, mode=mode, byte_order=byte_order, hex_addresses=hex_addresses)
            table.apply_snapshot(words)
            stamp = record.timestamp.isoformat(timespec="milliseconds")
            if json_output:
                echo_rows(table.rows(), True, timestamp=stamp)
            else:
                typer.echo(stamp)
                echo_rows(table.rows(), False)
    except CaptureFormatError as e:
        typer.echo(f"Error: Invalid capture: {e}", err=True)
        raise typer.Exit(2)
    except ValueError as e:
        typer.echo(f"Error: Invalid capture: {e}", err=True)
        raise typer.Exit(2)
    except Exception as e:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(4)


@app.command()
def info(
    json_output: JsonOption = False,
) -> None:
    """Show package version and the supported display modes and byte orders."""
    info_data = {
        "version": __version__,
        "kinds": [k.value for k in PointKind],
        "modes": [m.value for m in DisplayMode],
        "byte_orders": [b.value for b in ByteOrder],
    }
    if json_output:
        typer.echo(json.dumps(info_data, indent=2))
    else:
        typer.echo(f"pymodscan version: {info_data['version']}")
        typer.echo(f"Kinds:       {', '.join(info_data['kinds'])}")
        typer.echo(f"Modes:       {', '.join(info_data['modes'])}")
        typer.echo(f"Byte orders: {', '.join(info_data['byte_orders'])}")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pymodscan {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """pymodscan - Modbus register monitor and value decoder."""
    pass


if __name__ == "__main__":
    app()
