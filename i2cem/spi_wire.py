"""Wires and the clock that make up an emulated SPI medium."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


class LiveWire:
    """A single signal line that can be driven from any thread."""

    def __init__(self) -> None:
        self._signal = False
        self._lock = threading.Lock()

    def flip(self) -> None:
        """Invert the level of the line."""
        with self._lock:
            self._signal = not self._signal

    def pull(self, signal: bool) -> None:
        """Drive the line to ``signal``."""
        with self._lock:
            self._signal = bool(signal)

    def read(self) -> bool:
        with self._lock:
            return self._signal

    def __repr__(self) -> str:
        return f"LiveWire({self.read()!r})"


class Clock:
    """The SPI clock line with an auto-resetting tick notification."""

    def __init__(self) -> None:
        self._line = LiveWire()
        self._condition = threading.Condition()
        self._signalled = False

    def line_value(self) -> bool:
        """The current clock level, without waiting."""
        return self._line.read()

    def wait_tick(self, timeout: float | None = None) -> bool | None:
        """Wait for the next tick and return the clock level.

        Returns ``None`` if no tick arrived within ``timeout`` seconds.
        """
        with self._condition:
            if not self._condition.wait_for(lambda: self._signalled, timeout):
                return None
            self._signalled = False
        return self.line_value()

    def tick(self) -> None:
        """Flip the clock line and wake one waiter."""
        self._line.flip()
        with self._condition:
            self._signalled = True
            self._condition.notify()


@dataclass
class SpiMedium:
    """The set of lines shared by an SPI master and its slave."""

    mosi: LiveWire = field(default_factory=LiveWire)
    miso: LiveWire = field(default_factory=LiveWire)
    cs_select: LiveWire = field(default_factory=LiveWire)
    kill: LiveWire = field(default_factory=LiveWire)
    clock: Clock = field(default_factory=Clock)