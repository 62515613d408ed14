"""ModbusPoller: reads a point range over pymodbus and delivers it as a Snapshot."""

import logging
import struct
import time
from typing import Any, Callable, Iterator

from pymodbus.client import ModbusTcpClient
from pymodbus.exceptions import ModbusException as PymodbusException

from .errors import ModbusIOError
from .traffic import Direction, TrafficFrame
from .types import DisplayDefinition, PointKind, Snapshot

logger = logging.getLogger(__name__)

_FUNCTION_CODE: dict[PointKind, int] = {
    PointKind.COIL: 1,
    PointKind.DISCRETE_INPUT: 2,
    PointKind.HOLDING_REGISTER: 3,
    PointKind.INPUT_REGISTER: 4,
}

TrafficListener = Callable[[TrafficFrame], None]


class ModbusPoller:
    """
    Reads the point range of a DisplayDefinition from a Modbus TCP device.
    Keeps poll/response counters and reports every request and response frame
    to traffic listeners.
    """

    def __init__(
        self,
        host: str,
        port: int = 502,
        timeout: float = 3.0,
        retries: int = 3,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._retries = retries
        self._client: ModbusTcpClient | None = None
        self._listeners: list[TrafficListener] = []
        self.polls = 0
        self.valid_responses = 0

    def _get_client(self) -> ModbusTcpClient:
        if self._client is None:
            self._client = ModbusTcpClient(
                host=self._host,
                port=self._port,
                timeout=self._timeout,
                retries=self._retries,
            )
            if not self._client.connect():
                raise ModbusIOError(
                    f"Failed to connect to {self._host}:{self._port}",
                    cause=None,
                )
        return self._client

    def add_traffic_listener(self, listener: TrafficListener) -> None:
        self._listeners.append(listener)

    def _emit(self, frame: TrafficFrame) -> None:
        for listener in self._listeners:
            listener(frame)

    def _read_raw(self, client: ModbusTcpClient, definition: DisplayDefinition) -> Any:
        addr, count, device_id = definition.address, definition.length, definition.device_id
        kind = definition.kind
        if kind == PointKind.COIL:
            return client.read_coils(addr, count=count, device_id=device_id)
        if kind == PointKind.DISCRETE_INPUT:
            return client.read_discrete_inputs(addr, count=count, device_id=device_id)
        if kind == PointKind.INPUT_REGISTER:
            return client.read_input_registers(addr, count=count, device_id=device_id)
        if kind == PointKind.HOLDING_REGISTER:
            return client.read_holding_registers(addr, count=count, device_id=device_id)
        raise ModbusIOError(f"Unknown table: {kind}", table=kind.value, offset=addr)

    def read(self, definition: DisplayDefinition) -> Snapshot:
        """Read the whole point range; raises ModbusIOError on failure or short response."""
        client = self._get_client()
        kind = definition.kind
        addr = definition.address
        fc = _FUNCTION_CODE[kind]

        self.polls += 1
        self._emit(
            TrafficFrame(
                Direction.REQUEST,
                definition.device_id,
                fc,
                struct.pack(">HH", addr, definition.length),
            )
        )
        try:
            rr = self._read_raw(client, definition)
        except PymodbusException as e:
            raise ModbusIOError(str(e), table=kind.value, offset=addr, cause=e) from e

        self._emit(
            TrafficFrame(
                Direction.RESPONSE,
                definition.device_id,
                fc,
                bytes(rr.encode()),
                is_exception=rr.isError(),
            )
        )
        if rr.isError():
            raise ModbusIOError(
                str(rr),
                table=kind.value,
                offset=addr,
                cause=getattr(rr, "exception", None),
            )

        if kind.is_bit:
            bits = getattr(rr, "bits", None)
            if bits is None or len(bits) < definition.length:
                raise ModbusIOError("Short bit response", table=kind.value, offset=addr)
            values = [int(bool(b)) for b in bits[: definition.length]]
        else:
            registers = getattr(rr, "registers", None)
            if registers is None or len(registers) < definition.length:
                raise ModbusIOError("Short register response", table=kind.value, offset=addr)
            values = [int(r) for r in registers[: definition.length]]

        self.valid_responses += 1
        logger.debug("Read %d %s points @ %d", len(values), kind.value, addr)
        return Snapshot(definition, values)

    def connect(self) -> None:
        """Establish TCP connection to the device."""
        self._get_client()

    def close(self) -> None:
        """Close the TCP connection."""
        if self._client is not None:
            try:
                self._client.close()
            except Exception as e:
                logger.warning("Error closing Modbus client: %s", e)
            self._client = None

    def __enter__(self) -> "ModbusPoller":
        self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def poll_iter(self, definition: DisplayDefinition, interval_s: float) -> Iterator[Snapshot]:
        """Yield read(definition) every interval_s seconds indefinitely."""
        while True:
            yield self.read(definition)
            time.sleep(interval_s)
