import time


class MonotonicClock:
    """
    Millisecond clock.
    - Monotonic time source, never decreases
    - sleep_ms() is the only blocking primitive used by the engine
    """

    def now(self) -> int:
        return int(time.monotonic() * 1000)

    def sleep_ms(self, ms: int) -> None:
        if ms > 0:
            time.sleep(ms / 1000.0)
