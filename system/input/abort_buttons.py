# system/input/abort_buttons.py
from system.log_utils import debug
from washer.abort_signal import AbortSignal
from washer.iface import ButtonEventSource


class AbortButtonMonitor:
    """
    Edge watcher for the stop button and the door switch.

    Edge semantics:
      - stop button rising edge (pressed)  -> abort.raise_()
      - door falling edge (door opened)    -> abort.raise_()

    The handlers run on the GPIO watcher thread. They:
      - only raise the abort signal and return
      - do NOT touch the motor
      - do NOT block
    """

    def __init__(self, gpio: ButtonEventSource, abort_signal: AbortSignal, *, stop_pin, door_pin):
        self.gpio = gpio
        self.abort = abort_signal
        self.pin_map = {
            stop_pin: "rising",
            door_pin: "falling",
        }

    def start(self):
        """Register GPIO edge watchers."""
        for pin, edge in self.pin_map.items():
            self.gpio.watch(pin, self._on_edge, edge=edge)
        debug(f"[BUTTON] abort inputs armed: {sorted(self.pin_map)}")

    def _on_edge(self, _pin, _value):
        self.abort.raise_()
