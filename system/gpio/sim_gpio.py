import threading

from system.log_utils import debug


class SimGPIO:
    """
    In-memory GPIO used in simulator mode and tests.
    set_level() plays the role of the wire: it fires registered watchers
    synchronously, on the caller's thread.
    """

    def __init__(self, levels=None):
        self.levels = dict(levels or {})
        self._watchers = {}
        self._lock = threading.Lock()

    def read(self, pin_name) -> int:
        return self.levels.get(pin_name, 0)

    def watch(self, pin_name, callback, edge="both"):
        with self._lock:
            self._watchers.setdefault(pin_name, []).append((edge, callback))
        debug(f"[SIMGPIO] watching {pin_name} ({edge})")

    def set_level(self, pin_name, value):
        value = 1 if value else 0
        with self._lock:
            previous = self.levels.get(pin_name, 0)
            self.levels[pin_name] = value
            watchers = list(self._watchers.get(pin_name, []))

        if previous == value:
            return

        rising = value == 1
        for edge, callback in watchers:
            if edge == "both" or (edge == "rising") == rising:
                callback(pin_name, value)

    def press(self, pin_name):
        """Press and release an active-high button."""
        self.set_level(pin_name, 1)
        self.set_level(pin_name, 0)

    def close(self):
        with self._lock:
            self._watchers.clear()
