# i2cem

An emulator for I2C and SPI buses that works at the level of single bits.
Slave devices hold registers. A master drives the bus and clocks bytes in and
out one bit at a time, as it would on real wires. You can use it to test
driver logic against simulated sensors without any hardware.

## Installation

```
pip install .
```

## Registers

`i2cem.register.Register` is either read-only or writeable. A read-only
register has a populator function, which supplies its bytes each time the
register is read. A writeable register starts out holding a single zero byte
and keeps what is written to it:

```python
from i2cem.register import Register

temp = Register.read_only(lambda: [0x21, 0x22])
scratch = Register.writeable()
```

Writes to a read-only register are ignored. When a register has no more bits
to give, `read_byte` returns `0`.

The bit buffer underneath is `i2cem.wire.Port`. `byte_to_bits` in the same
module turns a byte into its eight bits, most significant bit first.

## I2C

```python
from i2cem.i2c_device import I2CSlave
from i2cem.i2c_master import Master
from i2cem.register import Register

sensor = I2CSlave(0x68)
sensor.create_register(0x12, Register.read_only(lambda: [0x21, 0x22]))
sensor.create_register(0x13, Register.writeable())

master = Master()
master.add_device(sensor)

master.read_block(0x68, 0x12, 2)        # [0x21, 0x22]
master.write_block(0x68, 0x13, [0x23, 0x48])
master.read_block(0x68, 0x13, 2)        # [0x23, 0x48]
```

A master can hold several devices. Each device ignores transfers that are
addressed to another device. A device's current state is in `I2CSlave.state`,
a `SlaveState` member.

Errors:

- Device and register addresses outside the 7-bit range raise `ValueError`.
- Selecting a register that the device does not have raises `LookupError`.
- `BusContentionError` (from `i2cem.i2c_bus`) is raised when two devices drive the bus at once.
- `RuntimeError` is raised when a byte goes unacknowledged.

Devices log their progress through the `logging` module at debug level.

## SPI

The SPI master and slave each run on a background thread and share a clocked
medium (`i2cem.spi_wire.SpiMedium`). The clock, chip-select, MOSI and MISO are
all `LiveWire` lines.

```python
from i2cem.register import Register
from i2cem.spi_master import SpiMaster
from i2cem.spi_slave import SpiSlave

slave = SpiSlave({0x15: Register.writeable()})
master = SpiMaster()
master.connect(slave, 0.001)            # seconds between clock ticks (or a timedelta)

master.write_register(0x15, [0x21])
master.read_register(0x15, 1)           # [0x21]
master.disconnect()
```

The first byte of a transfer selects the register by its low six bits. When
the top bit is set, the transfer is a read. Otherwise the bytes that follow
are written to the register. The slave logs a warning for an unknown register.
A transfer method called on a master that is not connected raises
`NotConnectedError`.

## Demo

This command writes `0x21` to a register over emulated SPI and reads it back:

```
i2cem-demo
i2cem-demo --period-ms 1
```

`--period-ms` sets the time between clock ticks in milliseconds. The default
is 5. The command exits with status 0 when the value read back matches, and
with status 1 otherwise.

## What it does not do

- It does not talk to real hardware. Every bus and device is simulated in memory.
- Only 7-bit I2C addressing is supported.
- An SPI master connects to a single slave at a time.

## Running the tests

```
pip install .[test]
pytest
```