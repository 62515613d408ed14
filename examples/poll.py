#!/usr/bin/env python3
"""Example: poll a register range using poll_iter, capture every update to a text file; Ctrl+C to stop."""

import sys

from pymodscan import DataDisplay, DisplayDefinition, DisplayMode, ModbusPoller, PointKind
from pymodscan.errors import ModbusIOError


def main() -> None:
    host = "192.168.1.10"  # change to your device IP
    port = 502
    definition = DisplayDefinition(PointKind.INPUT_REGISTER, 100, 10, device_id=1)
    interval_s = 1.0

    with DataDisplay(definition, mode=DisplayMode.INTEGER) as display:
        if not display.start_text_capture("capture.txt"):
            print("Cannot open capture.txt", file=sys.stderr)
            sys.exit(1)
        try:
            with ModbusPoller(host=host, port=port) as poller:
                poller.add_traffic_listener(display.update_traffic)
                print(f"Polling {definition} every {interval_s}s (Ctrl+C to stop)...")
                for snapshot in poller.poll_iter(definition, interval_s):
                    display.update_data(snapshot)
                    print(display.table.capture_line())
        except KeyboardInterrupt:
            print("\nStopped.")
        except ModbusIOError as e:
            display.set_status(str(e))
            print(f"Modbus/connection error: {e}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
