"""Demonstration of a write and read-back over the emulated SPI bus."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from datetime import timedelta

from .register import Register
from .spi_master import SpiMaster
from .spi_slave import SpiSlave

_REGISTER = 0xF
_VALUE = 0x21


def main(argv: Sequence[str] | None = None) -> int:
    """Write a byte to a register over SPI, read it back and compare."""
    parser = argparse.ArgumentParser(
        prog="i2cem", description="Write and read back a register over emulated SPI."
    )
    parser.add_argument(
        "--period-ms",
        type=float,
        default=5.0,
        help="clock tick period in milliseconds (default: 5)",
    )
    args = parser.parse_args(argv)
    if args.period_ms < 0:
        parser.error("--period-ms must not be negative")

    master = SpiMaster()
    slave = SpiSlave({_REGISTER: Register.writeable()})
    master, _slave = master.connect(slave, timedelta(milliseconds=args.period_ms))
    try:
        master.write_register(_REGISTER, [_VALUE])
        value = master.read_register(_REGISTER, 1)
    finally:
        master.disconnect()

    if value != [_VALUE]:
        print(f"read back {value!r}, expected {[_VALUE]!r}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())