"""An emulated SPI slave device with a register map."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from .register import Register
from .spi_wire import SpiMedium
from .wire import Port

logger = logging.getLogger(__name__)

_WAIT_TIMEOUT = 0.1


class SpiSlave:
    """A slave that samples MOSI and drives MISO on rising clock edges.

    The first byte of a transfer selects a register: with the top bit set it
    is a read, otherwise the following bytes are written to the register
    until chip select goes high.
    """

    def __init__(self, registers: Mapping[int, Register]) -> None:
        self._registers: dict[int, Register] = dict(registers)
        self._port = Port()
        self._output = Port()
        self._writing: int | None = None
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    def accept_medium(self, medium: SpiMedium) -> SpiSlave:
        """Attach to ``medium`` and start serving it on a background thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("slave is already connected")
        self._thread = threading.Thread(
            target=self._serve, args=(medium,), name="spi-slave", daemon=True
        )
        self._thread.start()
        return self

    def on_rising_edge(self, medium: SpiMedium) -> None:
        """Handle one rising clock edge on ``medium``."""
        with self._lock:
            if medium.cs_select.read():
                self._writing = None
                return
            if self._output:
                medium.miso.pull(bool(self._output.read()))
                return
            self._port.write(medium.mosi.read())
            if len(self._port) == 8:
                value = self._port.read_byte()
                if value is not None:
                    self._handle_byte(value)

    def _serve(self, medium: SpiMedium) -> None:
        previous = False
        while True:
            level = medium.clock.wait_tick(_WAIT_TIMEOUT)
            if medium.kill.read():
                break
            if level is None:
                continue
            if level and not previous:
                self.on_rising_edge(medium)
            previous = level

    def _handle_byte(self, value: int) -> None:
        logger.debug("byte read %08b", value)
        if self._writing is not None:
            register = self._registers.get(self._writing)
            if register is None:
                logger.warning("no such register %#x", self._writing)
                return
            logger.debug("writing byte %#x to register %#x", value, self._writing)
            register.write_byte(value)
            return

        address = value & 0b0011_1111
        register = self._registers.get(address)
        if register is None:
            logger.warning("no such register %#x", address)
            return
        if value & 0x80:
            logger.debug("read call for register %#x", address)
            register.start_read()
            while not register.is_done():
                bit = register.read_bit()
                if bit is None:
                    break
                self._output.write(bit)
            register.finish_read()
        else:
            logger.debug("write call for register %#x", address)
            register.start_write()
            self._writing = address