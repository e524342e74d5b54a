"""Emulated device registers."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .wire import Port

Populator = Callable[[], Sequence[int]]


class Register:
    """A device register, either read-only and filled by a populator or writeable.

    A writeable register starts out holding a single zero byte and keeps a
    backing copy so that its contents survive being read out.
    """

    def __init__(self, populator: Populator | None = None) -> None:
        self._populator = populator
        self._buffer = Port()
        self._backing = Port()
        if populator is None:
            self._backing.write_byte(0x00)
            self._refill_buffers()

    @classmethod
    def read_only(cls, populator: Populator) -> Register:
        """Create a register whose contents come from ``populator`` on each read."""
        if not callable(populator):
            raise TypeError("a read-only register needs a callable populator")
        return cls(populator)

    @classmethod
    def writeable(cls) -> Register:
        """Create a writeable register holding a zero byte."""
        return cls()

    @property
    def is_read_only(self) -> bool:
        return self._populator is not None

    def start_write(self) -> None:
        """Discard the current contents before a write; ignored if read-only."""
        if self.is_read_only:
            return
        self._buffer.clear()
        self._backing.clear()

    def is_done(self) -> bool:
        """Whether the readable buffer has been drained."""
        return len(self._buffer) == 0

    def write_byte(self, value: int) -> None:
        for bit in Port.from_byte(value)._bits and _bits_of(value):
            self.write(bit)

    def write(self, bit: bool) -> None:
        """Store one bit; read-only registers ignore writes."""
        if not self.is_read_only:
            self._backing.write(bit)
            self._buffer.write(bit)

    def start_read(self) -> None:
        """Prepare the register for being read out."""
        if self._populator is not None:
            for byte in reversed(list(self._populator())):
                self._buffer.write_byte(byte)

    def read_bit(self) -> bool | None:
        """Take the next bit, or ``None`` once the buffer is empty."""
        if self.is_done():
            return None
        return self._buffer.read()

    def read_byte(self) -> int:
        """Take the next byte; an empty register yields zero."""
        if self.is_done():
            return 0x00
        value = self._buffer.read_byte()
        return 0x00 if value is None else value

    def finish_read(self) -> None:
        """Restore the readable buffer from the backing copy."""
        self._refill_buffers()

    def _refill_buffers(self) -> None:
        self._buffer.clear()
        values: list[int] = []
        while len(self._backing):
            byte = self._backing.read_byte()
            values.insert(0, 0 if byte is None else byte)
        for value in values:
            self._buffer.write_byte(value)
            self._backing.write_byte(value)


def _bits_of(value: int) -> list[bool]:
    from .wire import byte_to_bits

    return byte_to_bits(value)