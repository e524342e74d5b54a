"""The shared I2C bus connecting a master with its slaves."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from .i2c_device import I2CSlave

_T = TypeVar("_T")


class LineCondition(enum.Enum):
    """Condition of the bus while a bit is being clocked."""

    START = "start"
    IN_PROGRESS = "in_progress"
    STOP = "stop"


class BusContentionError(RuntimeError):
    """Raised when more than one device drives the bus at once."""


def _drive(values: Iterable[_T | None]) -> _T | None:
    """Return the single value driven onto the line, or ``None`` if there is none."""
    line: _T | None = None
    for value in values:
        if value is None:
            continue
        if line is not None:
            raise BusContentionError("multiple devices are writing to the bus")
        line = value
    return line


class I2CBus:
    """A bus that broadcasts writes to every device and collects their replies."""

    def __init__(self) -> None:
        self._devices: list[I2CSlave] = []

    def add_device(self, device: I2CSlave) -> None:
        self._devices.append(device)

    def write_byte(self, value: int, condition: LineCondition) -> None:
        """Send a byte to every device and require an acknowledgement."""
        for device in self._devices:
            device.write_byte(value, condition)
        if self.read_bit() is not False:
            raise RuntimeError(f"no acknowledgement for byte {value:#04x}")

    def write_bit(self, bit: bool, condition: LineCondition) -> None:
        for device in self._devices:
            device.write_bit(bit, condition)

    def read_bit(self) -> bool | None:
        """Read the bit driven onto the bus, or ``None`` if nobody drives it."""
        return _drive(device.read_bit() for device in self._devices)

    def read_byte(self) -> int | None:
        """Read the byte driven onto the bus, or ``None`` if nobody drives it."""
        return _drive(device.read_byte() for device in self._devices)