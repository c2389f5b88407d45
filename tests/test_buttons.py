from system.gpio.sim_gpio import SimGPIO
from system.input.abort_buttons import AbortButtonMonitor
from system.input.button import InputButton
from washer.abort_signal import AbortSignal

STOP = "PC15"
DOOR = "PC14"


def make_monitor():
    gpio = SimGPIO({DOOR: 1})
    abort = AbortSignal()
    AbortButtonMonitor(gpio, abort, stop_pin=STOP, door_pin=DOOR).start()
    return gpio, abort


def test_stop_press_raises_abort():
    gpio, abort = make_monitor()
    gpio.set_level(STOP, 1)
    assert abort.is_raised()


def test_stop_release_alone_does_not_raise():
    gpio, abort = make_monitor()
    gpio.set_level(STOP, 1)
    abort.consume_and_reset()

    gpio.set_level(STOP, 0)
    assert not abort.is_raised()


def test_door_open_raises_abort_but_closing_does_not():
    gpio, abort = make_monitor()
    gpio.set_level(DOOR, 0)
    assert abort.is_raised()

    abort.consume_and_reset()
    gpio.set_level(DOOR, 1)
    assert not abort.is_raised()


def test_input_button_fires_once_per_press():
    gpio = SimGPIO()
    presses = []
    releases = []
    InputButton(gpio, "PH8", debounce_ms=0, on_press=lambda: presses.append(1),
                on_release=lambda: releases.append(1)).start()

    gpio.press("PH8")
    gpio.press("PH8")

    assert len(presses) == 2
    assert len(releases) == 2


def test_input_button_drops_bounce_inside_window():
    gpio = SimGPIO()
    presses = []
    InputButton(gpio, "PH8", debounce_ms=10_000, on_press=lambda: presses.append(1)).start()

    gpio.press("PH8")
    gpio.press("PH8")

    assert len(presses) == 1


def test_sim_gpio_read_reflects_level():
    gpio = SimGPIO()
    assert gpio.read("PC7") == 0
    gpio.set_level("PC7", 1)
    assert gpio.read("PC7") == 1
