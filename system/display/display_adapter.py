# system/display/display_adapter.py

from typing import Dict, Optional

from system.log_utils import debug
from washer.errors import DriverUnavailable
from washer.task_event import TaskEvent


# Text shown when a run ends; phase-level events leave the countdown alone.
_RUN_END_TEXT: Dict[TaskEvent, Optional[str]] = {
    TaskEvent.RUN_STARTED: None,
    TaskEvent.PHASE_STARTED: None,
    TaskEvent.PHASE_COMPLETED: None,
    TaskEvent.PHASE_ABORTED: None,
    TaskEvent.RUN_FINISHED: "Done",
    TaskEvent.RUN_STOPPED: "Stopped",
    TaskEvent.RUN_FAILED: "Error",
}


class DisplayAdapter:
    """
    Countdown display capability on top of DisplayDriver.

    Without a driver:
      - simulator mode: every call is only logged
      - hardware mode (``missing`` holds the probe error): countdown calls
        raise DriverUnavailable so the running phase fails
    Status text (program label, run end) is never fatal.
    """

    def __init__(self, driver=None, *, missing: Optional[str] = None):
        self.driver = driver
        self.missing = missing
        self.current: Optional[str] = None

    # ------------------------------------------------------------------
    # Countdown capability
    # ------------------------------------------------------------------
    def show_number(self, n: int) -> None:
        self._require()
        self.show_text(str(int(n)))

    def show_text(self, text: str) -> None:
        self.current = text
        if self.driver is None:
            debug(f"[DISPLAY] {text}")
            return
        self.driver.draw_text(text)

    def clear(self) -> None:
        self._require()
        self.current = None
        if self.driver is None:
            debug("[DISPLAY] clear")
            return
        self.driver.clear()

    def _require(self) -> None:
        if self.driver is None and self.missing is not None:
            raise DriverUnavailable(f"display unavailable: {self.missing}")

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------
    def attach_engine(self, engine) -> None:
        engine.subscribe_task_event(self.from_task_event)

    def from_task_event(self, event: TaskEvent) -> None:
        text = _RUN_END_TEXT[event]
        if text is not None:
            self.show_text(text)
