"""The SPI master, clocking an emulated medium on a background thread."""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta

from .spi_slave import SpiSlave
from .spi_wire import SpiMedium
from .wire import Port

_POLL_INTERVAL = 0.05


class NotConnectedError(RuntimeError):
    """Raised when a transfer is attempted on a master that is not connected."""


@dataclass
class _Write:
    port: Port


@dataclass
class _Read:
    remaining: int
    first_clear: bool = True


@dataclass
class _Wake:
    event: threading.Event


_Instruction = _Write | _Read | _Wake


def _seconds(clock_speed: float | timedelta) -> float:
    if isinstance(clock_speed, timedelta):
        return clock_speed.total_seconds()
    return float(clock_speed)


class SpiMaster:
    """Drives the clock, chip select and MOSI lines of an SPI medium."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._instructions: deque[_Instruction] = deque()
        self._read_buf = Port()
        self._read_lock = threading.Lock()
        self._kill = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def _connected(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._kill.is_set()
        )

    def connect(
        self, slave: SpiSlave, clock_speed: float | timedelta
    ) -> tuple[SpiMaster, SpiSlave]:
        """Connect to ``slave``, ticking the clock every ``clock_speed`` seconds."""
        if self._connected:
            raise RuntimeError("master is already connected")
        period = _seconds(clock_speed)
        if period < 0:
            raise ValueError("clock speed must not be negative")

        medium = SpiMedium()
        medium.cs_select.pull(True)
        slave.accept_medium(medium)

        self._kill.clear()
        with self._lock:
            self._instructions.clear()
        with self._read_lock:
            self._read_buf.clear()
        self._thread = threading.Thread(
            target=self._drive, args=(medium, period), name="spi-master", daemon=True
        )
        self._thread.start()
        return self, slave

    def write_register(self, reg: int, data: Sequence[int]) -> None:
        """Write ``data`` to register ``reg`` and wait until it has been sent."""
        self._ensure_connected()
        ports = [Port.from_byte(reg)] + [Port.from_byte(byte) for byte in data]
        waker = threading.Event()
        with self._lock:
            self._instructions.extend(_Write(port) for port in ports)
            self._instructions.append(_Wake(waker))
        self._await(waker)

    def read_register(self, reg: int, count: int) -> list[int]:
        """Read ``count`` bytes from register ``reg``."""
        self._ensure_connected()
        if count < 0:
            raise ValueError("count must not be negative")
        command = Port.from_byte(reg | 0x80)
        waker = threading.Event()
        with self._lock:
            self._instructions.append(_Write(command))
            self._instructions.append(_Read(count * 8))
            self._instructions.append(_Wake(waker))
        self._await(waker)

        result: list[int] = []
        with self._read_lock:
            for _ in range(count):
                byte = self._read_buf.read_byte()
                if byte is None:
                    raise RuntimeError("fewer bytes were read than requested")
                result.append(byte)
        return result

    def disconnect(self) -> SpiMaster:
        """Stop the clock and release the slave."""
        self._ensure_connected()
        self._kill.set()
        if self._thread is not None:
            self._thread.join()
        return self

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise NotConnectedError("the SPI master is not connected")

    def _await(self, event: threading.Event) -> None:
        while not event.wait(_POLL_INTERVAL):
            if self._thread is None or not self._thread.is_alive():
                raise NotConnectedError("the SPI master stopped before finishing")

    def _drive(self, medium: SpiMedium, period: float) -> None:
        current: _Instruction | None = None
        while True:
            medium.clock.tick()
            if self._kill.is_set():
                medium.kill.pull(True)
                medium.clock.tick()
                break
            if not medium.clock.line_value():
                current = self._on_low(medium, current)
            time.sleep(period)

    def _on_low(
        self, medium: SpiMedium, current: _Instruction | None
    ) -> _Instruction | None:
        if isinstance(current, _Write) and not current.port:
            current = None
        if current is None:
            with self._lock:
                current = self._instructions.popleft() if self._instructions else None

        if isinstance(current, _Read):
            if current.first_clear:
                current.first_clear = False
            else:
                medium.cs_select.pull(False)
                if current.remaining:
                    with self._read_lock:
                        self._read_buf.write(medium.miso.read())
                    current.remaining -= 1
                    if current.remaining == 0:
                        current = None
                else:
                    current = None
        elif isinstance(current, _Write):
            if not current.port:
                current = None
            else:
                medium.cs_select.pull(False)
                medium.mosi.pull(bool(current.port.read()))
        elif isinstance(current, _Wake):
            current.event.set()
            current = None

        if current is None:
            medium.cs_select.pull(True)
        return current