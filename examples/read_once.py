#!/usr/bin/env python3
"""Example: read a holding register range once and show it as floats and as hex words."""

import sys

from pymodscan import ByteOrder, DataDisplay, DisplayDefinition, DisplayMode, ModbusPoller, PointKind
from pymodscan.errors import ModbusIOError


def main() -> None:
    host = "192.168.1.10"  # change to your device IP
    port = 502
    unit_id = 1
    definition = DisplayDefinition(PointKind.HOLDING_REGISTER, 0, 8, device_id=unit_id)

    display = DataDisplay(definition, mode=DisplayMode.FLOATING_POINT, byte_order=ByteOrder.BIG_ENDIAN)
    try:
        with ModbusPoller(host=host, port=port) as poller:
            display.update_data(poller.read(definition))
    except ModbusIOError as e:
        print(f"Modbus/connection error: {e}", file=sys.stderr)
        sys.exit(1)

    for row in display.table:
        print(row.display_line)

    # Same data, different presentation; no new read needed
    display.set_display_mode(DisplayMode.HEX)
    print(display.table.capture_line())

    # Row activation reports the address and value behind a row
    print(f"item_at(1): {display.item_at(1)}")


if __name__ == "__main__":
    main()
