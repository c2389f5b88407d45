import threading
from datetime import timedelta

import gpiod
from gpiod.line import Direction, Edge, Value

from system.log_utils import debug, warn

# Common pin map
# PI16 works on armbian but marked as 'used' on debian bookworm, do not use it.

PIN_MAP = {
    "PC1": 65, "PC5": 69, "PC6": 70, "PC7": 71, "PC8": 72, "PC9": 73, "PC10": 74, "PC11": 75, "PC14": 78, "PC15": 79,
    "PH2": 226, "PH3": 227, "PH4": 228, "PH5": 229, "PH6": 230, "PH7": 231, "PH8": 232, "PH9": 233,
    "PI6": 262,
}

_EDGES = {
    "rising": Edge.RISING,
    "falling": Edge.FALLING,
    "both": Edge.BOTH,
}


def _level(value) -> int:
    return 1 if value == Value.ACTIVE else 0


def find_gpiochip_by_line_count(target_lines=288, fallback="/dev/gpiochip0"):
    """Finds the correct gpiochip by checking number of lines."""
    for i in range(2):  # Increase range if needed
        path = f"/dev/gpiochip{i}"
        try:
            with gpiod.Chip(path) as chip:
                if chip.get_info().num_lines == target_lines:
                    return path
        except OSError:
            continue
    return fallback


class GPIOController:
    """Real GPIO inputs using gpiod (libgpiod v2 bindings) on Linux."""

    def __init__(self):
        self.chip_path = find_gpiochip_by_line_count(288)
        self.pin_states = {}
        self._requests = {}     # line_num -> edge request owned by a watcher
        self._stop = threading.Event()
        self._threads = []

    def read(self, pin_name) -> int:
        line_num = PIN_MAP[pin_name]
        # a watched line is already held by its edge request; the kernel refuses a second one
        watched = self._requests.get(line_num)
        if watched is not None:
            val = _level(watched.get_value(line_num))
            self.pin_states[line_num] = val
            return val

        request = gpiod.request_lines(
            self.chip_path,
            consumer="washer-read",
            config={line_num: gpiod.LineSettings(direction=Direction.INPUT)},
        )
        try:
            val = _level(request.get_value(line_num))
        finally:
            request.release()
        self.pin_states[line_num] = val
        return val

    # --------------------------------------------------------------
    # Event-based watcher (edge detection)
    # --------------------------------------------------------------
    def watch(self, pin_name, callback, edge="both"):
        """
        Starts a background thread that calls callback(pin_name, value)
        on every matching edge. Uses hardware edge detection.
        """
        line_num = PIN_MAP[pin_name]
        request = gpiod.request_lines(
            self.chip_path,
            consumer="washer-watch",
            config={
                line_num: gpiod.LineSettings(
                    direction=Direction.INPUT,
                    edge_detection=_EDGES.get(edge, Edge.BOTH),
                    debounce_period=timedelta(milliseconds=5),
                )
            },
        )
        self._requests[line_num] = request
        self.pin_states[line_num] = _level(request.get_value(line_num))

        def monitor():
            try:
                while not self._stop.is_set():
                    if not request.wait_edge_events(timedelta(seconds=1)):
                        continue
                    for event in request.read_edge_events():
                        value = 1 if event.event_type == event.Type.RISING_EDGE else 0
                        self.pin_states[line_num] = value
                        try:
                            callback(pin_name, value)
                        except Exception as e:
                            warn(f"[GPIO] {pin_name} handler failed: {e}")
            except OSError as e:
                warn(f"[GPIO] watcher for {pin_name} stopped: {e}")
            finally:
                self._requests.pop(line_num, None)
                request.release()

        t = threading.Thread(target=monitor, daemon=True, name=f"gpio-watch-{pin_name}")
        t.start()
        self._threads.append(t)
        debug(f"[GPIO] watching {pin_name} ({edge})")
        return t

    def close(self):
        self._stop.set()
        for t in self._threads:
            t.join(timeout=2.0)
        self._threads.clear()
