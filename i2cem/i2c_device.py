"""An emulated I2C slave device with a register map."""

from __future__ import annotations

import enum
import logging

from .i2c_bus import LineCondition
from .register import Register
from .wire import Port, byte_to_bits

logger = logging.getLogger(__name__)


class SlaveState(enum.Enum):
    IDLE = enum.auto()
    READING_ADDRESS = enum.auto()
    WAITING_FOR_REGISTER_ADDRESS = enum.auto()
    WAITING_FOR_CONTINUATION = enum.auto()
    START_READ = enum.auto()
    START_WRITE = enum.auto()
    WAITING_ACK_READ = enum.auto()


class I2CSlave:
    """A 7-bit addressed I2C slave driven one bit at a time."""

    def __init__(self, address: int) -> None:
        if not 0 <= address < 0x80:
            raise ValueError("7-bit addressing is the only mode supported.")
        self.address = address
        self.state = SlaveState.IDLE
        self._registers: dict[int, Register] = {}
        self._output = Port()
        self._input = Port()
        self._selected: int | None = None
        self._disengaged = False

    def create_register(self, address: int, register: Register) -> None:
        self._registers[address] = register

    @property
    def _register(self) -> Register:
        assert self._selected is not None
        return self._registers[self._selected]

    def write_byte(self, value: int, condition: LineCondition) -> None:
        """Clock in a byte; ignored while disengaged unless it starts a transfer."""
        if self._disengaged and condition is not LineCondition.START:
            return
        for bit in byte_to_bits(value):
            self.write_bit(bit, condition)

    def write_bit(self, bit: bool, condition: LineCondition) -> None:
        """Clock in one bit and advance the state machine."""
        match self.state:
            case SlaveState.IDLE:
                self._on_idle(bit, condition)
            case SlaveState.READING_ADDRESS:
                self._on_address(bit)
            case SlaveState.WAITING_FOR_REGISTER_ADDRESS:
                self._on_register_address(bit)
            case SlaveState.WAITING_FOR_CONTINUATION:
                self._on_continuation(bit, condition)
            case SlaveState.START_READ:
                self._output.write_byte(self._register.read_byte())
                self.state = SlaveState.WAITING_ACK_READ
            case SlaveState.START_WRITE:
                self._on_write(bit, condition)
            case SlaveState.WAITING_ACK_READ:
                self._on_read_ack(bit, condition)

    def read_bit(self) -> bool | None:
        return self._output.read()

    def read_byte(self) -> int | None:
        return self._output.read_byte()

    def _on_idle(self, bit: bool, condition: LineCondition) -> None:
        if self._disengaged:
            if condition is not LineCondition.START:
                return
            self._disengaged = False
            logger.debug("[%#x] re-engaging the bus", self.address)
        self.state = SlaveState.READING_ADDRESS
        logger.debug("[%#x] beginning to receive data", self.address)
        self.write_bit(bit, condition)

    def _on_address(self, bit: bool) -> None:
        self._input.write(bit)
        if len(self._input) != 8:
            return
        requested = self._input.read_byte()
        assert requested is not None
        logger.debug("[%#x] requested address %08b", self.address, requested)
        if requested >> 1 == self.address:
            self.state = SlaveState.WAITING_FOR_REGISTER_ADDRESS
            self._output.write(False)
            if requested & 0x01:
                raise RuntimeError("The R/W bit should have been zero.")
        else:
            logger.debug("[%#x] disengaging the bus", self.address)
            self._disengaged = True
            self.state = SlaveState.IDLE

    def _on_register_address(self, bit: bool) -> None:
        self._input.write(bit)
        if len(self._input) != 8:
            return
        register_address = self._input.read_byte()
        assert register_address is not None
        logger.debug("[%#x] requested register %#x", self.address, register_address)
        if register_address not in self._registers:
            raise LookupError(f"no register {register_address:#x} on device {self.address:#x}")
        self._selected = register_address
        self._output.write(False)
        self.state = SlaveState.WAITING_FOR_CONTINUATION

    def _on_continuation(self, bit: bool, condition: LineCondition) -> None:
        if condition is LineCondition.IN_PROGRESS:
            logger.debug("[%#x] starting write", self.address)
            self.state = SlaveState.START_WRITE
            self.write_bit(bit, condition)
            return
        self._input.write(bit)
        if len(self._input) != 8:
            return
        received = self._input.read_byte()
        assert received is not None
        if received >> 1 != self.address:
            raise RuntimeError("The I2C slave did not receive the correct address.")
        self._output.write(False)
        if received & 0x01:
            logger.debug("[%#x] starting read on register %#x", self.address, self._selected)
            self._register.start_read()
            self.state = SlaveState.START_READ
            self.write_bit(False, condition)

    def _on_write(self, bit: bool, condition: LineCondition) -> None:
        self._register.write(bit)
        self._input.write(False)
        if len(self._input) == 8:
            self._output.write(False)
            self._input.clear()
            if condition is LineCondition.STOP:
                logger.debug("[%#x] stop received, write complete", self.address)
                self.state = SlaveState.IDLE

    def _on_read_ack(self, bit: bool, condition: LineCondition) -> None:
        if bit:
            logger.debug("[%#x] NACK from master", self.address)
            self._register.finish_read()
            self.state = SlaveState.IDLE
        else:
            self.state = SlaveState.START_READ
            self.write_bit(False, condition)