"""Bit-level port used as the storage medium of emulated devices."""

from __future__ import annotations

from collections import deque


def byte_to_bits(value: int) -> list[bool]:
    """Return the eight bits of ``value``, most significant bit first."""
    if not 0 <= value <= 0xFF:
        raise ValueError(f"byte value out of range: {value!r}")
    return [bool((value >> shift) & 1) for shift in range(7, -1, -1)]


class Port:
    """A buffer of bits.

    Bits are pushed onto the front. ``read`` takes the oldest bit from the
    back, while ``read_byte`` takes up to eight of the most recently written
    bits from the front, the newest bit becoming the least significant one.
    """

    def __init__(self) -> None:
        self._bits: deque[bool] = deque()

    @classmethod
    def from_byte(cls, value: int) -> Port:
        """Create a port holding the bits of a single byte."""
        port = cls()
        port.write_byte(value)
        return port

    def write(self, bit: bool) -> None:
        """Push one bit onto the front of the port."""
        self._bits.appendleft(bool(bit))

    def read(self) -> bool | None:
        """Take the oldest bit, or ``None`` when the port is empty."""
        return self._bits.pop() if self._bits else None

    def write_byte(self, value: int) -> None:
        """Push the bits of ``value``, most significant bit first."""
        for bit in byte_to_bits(value):
            self.write(bit)

    def read_byte(self) -> int | None:
        """Take up to eight of the newest bits as a byte, or ``None`` if empty."""
        if not self._bits:
            return None
        value = 0
        for position in range(min(8, len(self._bits))):
            if self._bits.popleft():
                value |= 1 << position
        return value

    def clear(self) -> None:
        """Drop every bit held."""
        self._bits.clear()

    def __len__(self) -> int:
        return len(self._bits)

    def __repr__(self) -> str:
        bits = "".join("1" if bit else "0" for bit in self._bits)
        return f"Port({bits!r})"