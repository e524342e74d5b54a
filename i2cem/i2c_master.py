"""The I2C bus master that performs register block transfers."""

from __future__ import annotations

from collections.abc import Sequence

from .i2c_bus import I2CBus, LineCondition
from .i2c_device import I2CSlave


def _check_address(value: int) -> None:
    if not 0 <= value < 0x80:
        raise ValueError("Only 7-bit addressing is supported.")


class Master:
    """Drives an I2C bus and the slaves attached to it."""

    def __init__(self) -> None:
        self._bus = I2CBus()

    def add_device(self, device: I2CSlave) -> None:
        self._bus.add_device(device)

    def write_block(self, device_addr: int, reg_addr: int, data: Sequence[int]) -> None:
        """Write ``data`` to a register; bytes go out last first."""
        _check_address(device_addr)
        _check_address(reg_addr)
        data = list(data)
        if not data:
            raise ValueError("nothing to write")
        self._bus.write_byte(device_addr << 1, LineCondition.START)
        self._bus.write_byte(reg_addr, LineCondition.IN_PROGRESS)
        for byte in reversed(data[1:]):
            self._bus.write_byte(byte, LineCondition.IN_PROGRESS)
        self._bus.write_byte(data[0], LineCondition.STOP)

    def read_block(self, device_addr: int, reg_addr: int, count: int) -> list[int]:
        """Read ``count`` bytes from a register of the addressed device."""
        _check_address(device_addr)
        _check_address(reg_addr)
        if count < 0:
            raise ValueError("count must not be negative")
        self._bus.write_byte(device_addr << 1, LineCondition.START)
        self._bus.write_byte(reg_addr, LineCondition.IN_PROGRESS)
        self._bus.write_byte((device_addr << 1) | 0x01, LineCondition.START)

        result: list[int] = []
        for index in range(count):
            byte = self._bus.read_byte()
            if byte is None:
                raise RuntimeError("no device drove the bus")
            result.append(byte)
            if index == count - 1:
                self._bus.write_bit(True, LineCondition.STOP)
            else:
                self._bus.write_bit(False, LineCondition.IN_PROGRESS)
        return result