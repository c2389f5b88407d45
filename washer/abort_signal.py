# washer/abort_signal.py

import threading


class AbortSignal:
    """
    Cancellation token shared between button/door edge callbacks and the
    phase runner.

    - Writer: GPIO watcher thread, calls raise_() and returns immediately
    - Reader: engine worker, polls is_raised() each countdown tick
    - Cleared by consume_and_reset() at the start of every phase

    threading.Event set/clear/is_set are atomic; no extra lock.
    """

    def __init__(self):
        self._flag = threading.Event()

    def raise_(self) -> None:
        self._flag.set()

    def consume_and_reset(self) -> None:
        self._flag.clear()

    def is_raised(self) -> bool:
        return self._flag.is_set()

    def __repr__(self):
        return f"AbortSignal(raised={self.is_raised()})"
