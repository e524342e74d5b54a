import threading

from i2cem.spi_wire import Clock, LiveWire, SpiMedium


def test_live_wire_starts_low():
    assert LiveWire().read() is False


def test_live_wire_pull_sets_level():
    wire = LiveWire()
    wire.pull(True)
    assert wire.read() is True
    wire.pull(False)
    assert wire.read() is False


def test_live_wire_flip_twice_restores_level():
    wire = LiveWire()
    wire.flip()
    assert wire.read() is True
    wire.flip()
    assert wire.read() is False


def test_clock_tick_flips_line():
    clock = Clock()
    assert clock.line_value() is False
    clock.tick()
    assert clock.line_value() is True
    clock.tick()
    assert clock.line_value() is False


def test_wait_tick_returns_level_after_tick():
    clock = Clock()
    clock.tick()
    assert clock.wait_tick(0.5) is True


def test_wait_tick_auto_resets():
    clock = Clock()
    clock.tick()
    assert clock.wait_tick(0.5) is True
    assert clock.wait_tick(0.01) is None


def test_wait_tick_times_out_without_tick():
    assert Clock().wait_tick(0.01) is None


def test_wait_tick_wakes_on_tick_from_other_thread():
    clock = Clock()
    timer = threading.Timer(0.02, clock.tick)
    timer.start()
    try:
        assert clock.wait_tick(2.0) is True
    finally:
        timer.join()


def test_medium_lines_are_independent():
    medium = SpiMedium()
    medium.mosi.pull(True)
    assert medium.mosi.read() is True
    assert medium.miso.read() is False
    assert medium.cs_select.read() is False
    assert medium.kill.read() is False