"""Bit-level emulation of I2C and SPI buses with register-backed slave devices."""

__version__ = "0.1.0"