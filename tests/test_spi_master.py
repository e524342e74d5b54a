from datetime import timedelta

import pytest

from i2cem.register import Register
from i2cem.spi_master import NotConnectedError, SpiMaster
from i2cem.spi_slave import SpiSlave

PERIOD = 0.002
REG = 0x15

TRANSFERS = [
    pytest.param(lambda master: master.write_register(REG, [0x21]), id="write"),
    pytest.param(lambda master: master.read_register(REG, 1), id="read"),
]


@pytest.fixture
def connect():
    masters = []

    def _connect(registers, period=PERIOD):
        master, slave = SpiMaster().connect(SpiSlave(registers), period)
        masters.append(master)
        return master, slave

    yield _connect
    for master in masters:
        try:
            master.disconnect()
        except NotConnectedError:
            pass


def _write_and_check(master, reads=1):
    master.write_register(REG, [0x21])
    for _ in range(reads):
        assert master.read_register(REG, 1) == [0x21]


@pytest.mark.parametrize("period", [PERIOD, timedelta(milliseconds=2)])
def test_basic_spi_write(connect, period):
    master, _ = connect({REG: Register.writeable()}, period)
    _write_and_check(master)


def test_basic_spi_write_readonly_register(connect):
    master, _ = connect({REG: Register.read_only(lambda: [0x21, 0x59])})
    assert master.read_register(REG, 2) == [0x21, 0x59]


def test_repeated_reads_return_same_value(connect):
    master, _ = connect({REG: Register.writeable()})
    _write_and_check(master, reads=2)


def test_writeable_register_reads_zero_initially(connect):
    master, _ = connect({REG: Register.writeable()})
    assert master.read_register(REG, 1) == [0x00]


def test_connect_returns_master_and_slave():
    master = SpiMaster()
    slave = SpiSlave({})
    result = master.connect(slave, PERIOD)
    try:
        assert result == (master, slave)
    finally:
        master.disconnect()


@pytest.mark.parametrize("transfer", TRANSFERS)
def test_transfer_before_connect_is_rejected(transfer):
    with pytest.raises(NotConnectedError):
        transfer(SpiMaster())


@pytest.mark.parametrize("transfer", TRANSFERS)
def test_disconnect_stops_transfers(transfer):
    master, _ = SpiMaster().connect(SpiSlave({REG: Register.writeable()}), PERIOD)
    assert master.disconnect() is master
    with pytest.raises(NotConnectedError):
        transfer(master)
    with pytest.raises(NotConnectedError):
        master.disconnect()


def test_connect_twice_is_rejected(connect):
    master, _ = connect({})
    with pytest.raises(RuntimeError):
        master.connect(SpiSlave({}), PERIOD)


def test_reconnect_after_disconnect(connect):
    master, _ = connect({})
    master.disconnect()
    master.connect(SpiSlave({REG: Register.writeable()}), PERIOD)
    _write_and_check(master)


def test_negative_clock_speed_is_rejected():
    with pytest.raises(ValueError):
        SpiMaster().connect(SpiSlave({}), -1)


@pytest.mark.parametrize(
    "transfer",
    [
        pytest.param(lambda master: master.write_register(REG, [0x100]), id="byte-range"),
        pytest.param(lambda master: master.read_register(REG, -1), id="negative-count"),
    ],
)
def test_invalid_arguments_are_rejected(connect, transfer):
    master, _ = connect({REG: Register.writeable()})
    with pytest.raises(ValueError):
        transfer(master)
    assert master.read_register(REG, 1) == [0x00]