# system/input/button.py
import time
import threading


class InputButton:
    """
    Active-high push button with debounce.

    - on_press fires once per debounced press (rising edge)
    - on_release fires on the matching falling edge
    """

    def __init__(self, gpio, pin, *, debounce_ms=50, on_press=None, on_release=None):
        self.gpio = gpio
        self.pin = pin
        self.debounce = debounce_ms / 1000.0
        self.on_press = on_press
        self.on_release = on_release

        self._last_press = float("-inf")
        self._pressed = False
        self._lock = threading.RLock()

    def start(self):
        self.gpio.watch(self.pin, self._on_edge, edge="both")

    def _on_edge(self, _, val):
        now = time.monotonic()
        val = 1 if int(val) != 0 else 0

        with self._lock:
            if val == 1 and not self._pressed:
                # bounce: a new press inside the window of the last one is dropped
                if now - self._last_press < self.debounce:
                    return
                self._last_press = now
                self._pressed = True
                cb = self.on_press
            elif val == 0 and self._pressed:
                self._pressed = False
                cb = self.on_release
            else:
                return

        if cb:
            cb()
