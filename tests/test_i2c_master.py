import pytest

from i2cem.i2c_device import I2CSlave
from i2cem.i2c_master import Master
from i2cem.register import Register


def _master(registers):
    """Build a master whose bus holds one slave per address in ``registers``."""
    master = Master()
    for address, entries in registers.items():
        slave = I2CSlave(address)
        for reg, register in entries.items():
            slave.create_register(reg, register)
        master.add_device(slave)
    return master


def test_bus_read():
    master = _master(
        {
            0x68: {0x12: Register.read_only(lambda: [0x21, 0x22])},
            0x32: {0x29: Register.read_only(lambda: [0x48, 0x29])},
        }
    )
    expected = [
        (0x68, 0x12, [0x21, 0x22]),
        (0x32, 0x29, [0x48, 0x29]),
        (0x68, 0x12, [0x21, 0x22]),
    ]
    for device, reg, values in expected:
        assert master.read_block(device, reg, 2) == values


def test_read_bmi270():
    real_temp = 0.1234
    raw = round(real_temp * 10000.0).to_bytes(2, "big")
    master = _master(
        {
            0x68: {
                0x22: Register.read_only(lambda: [raw[0]]),
                0x23: Register.read_only(lambda: [raw[1]]),
            }
        }
    )
    fst, snd = (master.read_block(0x68, reg, 1)[0] for reg in (0x22, 0x23))
    assert (snd | (fst << 8)) / 10000.0 == real_temp


def test_basic_write():
    master = _master({0x68: {0x12: Register.writeable()}})
    for values, reads in (([0x23, 0x48], 2), ([0x24, 0x58], 1)):
        master.write_block(0x68, 0x12, values)
        for _ in range(reads):
            assert master.read_block(0x68, 0x12, 2) == values


@pytest.mark.parametrize(
    "call, error",
    [
        pytest.param(lambda m: m.read_block(0x80, 0x12, 1), ValueError, id="device-address"),
        pytest.param(lambda m: m.write_block(0x68, 0x80, [0x01]), ValueError, id="register-address"),
        pytest.param(lambda m: m.write_block(0x68, 0x12, []), ValueError, id="empty-write"),
        pytest.param(lambda m: m.read_block(0x32, 0x12, 1), RuntimeError, id="absent-device"),
    ],
)
def test_invalid_transfers_raise(call, error):
    master = _master({0x68: {0x12: Register.writeable()}})
    with pytest.raises(error):
        call(master)
    # The failed transfer leaves the register untouched and the bus usable.
    assert master.read_block(0x68, 0x12, 1) == [0x00]