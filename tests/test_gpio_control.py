import threading
import time

import pytest
from gpiod.line import Value

from system.gpio import gpio_control
from system.gpio.gpio_control import GPIOController, PIN_MAP


class FakeEdgeEvent:
    class Type:
        RISING_EDGE = "rising"
        FALLING_EDGE = "falling"

    def __init__(self, event_type):
        self.event_type = event_type


class FakeLineRequest:
    def __init__(self, chip, lines, consumer):
        self.chip = chip
        self.lines = lines
        self.consumer = consumer
        self.events = []
        self.released = False

    def get_value(self, line):
        return self.chip.levels.get(line, Value.INACTIVE)

    def wait_edge_events(self, timeout):
        time.sleep(0.01)
        return bool(self.events)

    def read_edge_events(self):
        events, self.events = self.events, []
        return events

    def release(self):
        self.released = True
        self.chip.held.difference_update(self.lines)


class FakeChip:
    """Hands out line requests; like the kernel, a held line cannot be requested again."""

    def __init__(self):
        self.levels = {}
        self.held = set()
        self.requests = []

    def request_lines(self, path, consumer=None, config=None):
        lines = set(config)
        if lines & self.held:
            raise OSError(16, "Device or resource busy")
        self.held |= lines
        request = FakeLineRequest(self, lines, consumer)
        self.requests.append(request)
        return request


@pytest.fixture
def chip(monkeypatch):
    fake = FakeChip()
    monkeypatch.setattr(gpio_control, "find_gpiochip_by_line_count", lambda *a, **k: "/dev/gpiochip-test")
    monkeypatch.setattr(gpio_control.gpiod, "request_lines", fake.request_lines)
    return fake


@pytest.fixture
def gpio(chip):
    controller = GPIOController()
    yield controller
    controller.close()


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


def test_read_unwatched_pin_releases_its_request(chip, gpio):
    chip.levels[PIN_MAP["PC7"]] = Value.ACTIVE

    assert gpio.read("PC7") == 1
    assert gpio.read("PC7") == 1
    assert [r.consumer for r in chip.requests] == ["washer-read", "washer-read"]
    assert all(r.released for r in chip.requests)


def test_read_watched_pin_uses_the_watch_request(chip, gpio):
    door = PIN_MAP["PC14"]
    chip.levels[door] = Value.ACTIVE
    gpio.watch("PC14", lambda pin, value: None, edge="falling")

    assert gpio.read("PC14") == 1
    chip.levels[door] = Value.INACTIVE
    assert gpio.read("PC14") == 0

    assert [r.consumer for r in chip.requests] == ["washer-watch"]
    assert gpio.pin_states[door] == 0


def test_watch_seeds_current_level(chip, gpio):
    chip.levels[PIN_MAP["PC14"]] = Value.ACTIVE
    gpio.watch("PC14", lambda pin, value: None)

    assert gpio.pin_states[PIN_MAP["PC14"]] == 1


def test_handler_reading_its_own_pin_keeps_watching(chip, gpio):
    stop = PIN_MAP["PC15"]
    seen = []
    second = threading.Event()

    def on_edge(pin, value):
        seen.append((value, gpio.read(pin)))
        if len(seen) == 1:
            raise RuntimeError("handler bug")
        second.set()

    gpio.watch("PC15", on_edge, edge="rising")
    request = chip.requests[0]

    chip.levels[stop] = Value.ACTIVE
    request.events.append(FakeEdgeEvent(FakeEdgeEvent.Type.RISING_EDGE))
    assert wait_until(lambda: len(seen) == 1)

    request.events.append(FakeEdgeEvent(FakeEdgeEvent.Type.RISING_EDGE))
    assert second.wait(2.0)
    assert seen == [(1, 1), (1, 1)]
    assert len(chip.requests) == 1


def test_close_releases_watch_requests(chip, gpio):
    gpio.watch("PC15", lambda pin, value: None)
    gpio.close()

    assert chip.requests[0].released
    assert chip.held == set()
    # line is free again for a plain read
    assert gpio.read("PC15") == 0
