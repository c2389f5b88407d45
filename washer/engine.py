# washer/engine.py
# Run lifecycle around PhaseRunner: worker thread, run-level stop, progress
# and task-event fan-out.
#
# Notes:
# - Abort (stop button / door) ends the current phase only; the run moves on
#   to the next phase. This is the chosen pattern behaviour.
# - stop() cancels the whole run. It raises the abort signal so the running
#   phase ends at its next poll, and sets a run-level event that is not
#   cleared by the next phase start.

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from system.log_utils import debug, info, warn, error
from washer.abort_signal import AbortSignal
from washer.clock import MonotonicClock
from washer.errors import DriverUnavailable, EngineBusy
from washer.iface import Clock, CountdownDisplay, MotorDriver
from washer.patterns import generate_phases, program_phases
from washer.phase_runner import (
    BRAKE_SETTLE_MS,
    DEFAULT_POLL_INTERVAL_MS,
    ExecutionContext,
    PhaseRunner,
)
from washer.progress import Progress, RunState
from washer.task_event import TaskEvent
from washer.types import PatternDescriptor, Phase, PhaseOutcome, Program

STOP_JOIN_TIMEOUT = 5.0


@dataclass(frozen=True)
class RunResult:
    outcomes: Tuple[PhaseOutcome, ...]
    stopped: bool = False

    @property
    def completed(self) -> int:
        return sum(1 for o in self.outcomes if o == PhaseOutcome.COMPLETED)

    @property
    def aborted(self) -> int:
        return sum(1 for o in self.outcomes if o == PhaseOutcome.ABORTED)

    def to_dict(self) -> dict:
        return {
            "outcomes": [o.value for o in self.outcomes],
            "completed": self.completed,
            "aborted": self.aborted,
            "stopped": self.stopped,
        }


class WasherEngine:
    """
    Single-motor run engine.

    State machine per run: IDLE -> RUNNING(i) -> RUNNING(i+1) | FINISHED,
    with STOPPED / FAILED as the run-level exits.
    """

    def __init__(
        self,
        driver: MotorDriver,
        display: CountdownDisplay,
        clock: Optional[Clock] = None,
        abort_signal: Optional[AbortSignal] = None,
        *,
        brake_settle_ms: int = BRAKE_SETTLE_MS,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ):
        self.driver = driver
        self.display = display
        self.clock = clock or MonotonicClock()
        self.abort_signal = abort_signal or AbortSignal()
        self.brake_settle_ms = brake_settle_ms
        self.poll_interval_ms = poll_interval_ms

        self._owner: Optional[threading.Thread] = None     # thread executing the active run
        self._idle = threading.Event()
        self._idle.set()
        self._stop_event = threading.Event()
        self._lock = threading.RLock()
        self._busy = False

        self.progress = Progress()
        self.last_result: Optional[RunResult] = None

        self._progress_subs: List[Callable] = []
        self._task_subs: List[Callable] = []

    def subscribe(self, cb: Callable[[Progress], None]) -> None:
        self._progress_subs.append(cb)

    def subscribe_task_event(self, cb: Callable[[TaskEvent], None]) -> None:
        self._task_subs.append(cb)

    def _emit_progress_event(self):
        for cb in self._progress_subs:
            try:
                cb(self.progress)
            except Exception as e:
                warn(f"[ENGINE] notify error: {e}")

    def _emit_task_event(self, event: TaskEvent):
        for cb in self._task_subs:
            try:
                cb(event)
            except Exception as e:
                warn(f"[ENGINE] task event subscriber failed: {e}")

    # -----------------------------
    # Blocking API
    # -----------------------------
    def execute_phases(self, phases: Sequence[Phase], label: str = "Run") -> RunResult:
        """Run phases in the caller's thread. DriverUnavailable propagates."""
        self._claim(label)
        try:
            return self._run_phases(tuple(phases), label)
        finally:
            self._release()

    def execute_pattern(self, descriptor: PatternDescriptor) -> RunResult:
        return self.execute_phases(generate_phases(descriptor), _pattern_label(descriptor))

    def run_program(self, program: Program) -> RunResult:
        return self.execute_phases(program_phases(program), program.name)

    # -----------------------------
    # Background API
    # -----------------------------
    def start_phases(self, phases: Sequence[Phase], label: str = "Run") -> tuple[bool, str]:
        phases = tuple(phases)
        try:
            self._claim(label)
        except EngineBusy as e:
            return False, str(e)

        worker = threading.Thread(
            target=self._worker_main,
            args=(phases, label),
            daemon=True,
            name="washer-engine",
        )
        with self._lock:
            self._owner = worker
        worker.start()
        return True, f"{label} started"

    def start_pattern(self, descriptor: PatternDescriptor) -> tuple[bool, str]:
        return self.start_phases(generate_phases(descriptor), _pattern_label(descriptor))

    def start_program(self, program: Program) -> tuple[bool, str]:
        return self.start_phases(program_phases(program), program.name)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the active run ends, whichever thread executes it. True once idle."""
        if self._owner is threading.current_thread():
            return not self.is_running()
        self._idle.wait(timeout)
        return not self.is_running()

    def stop(self) -> tuple[bool, str]:
        """Cancel the whole run, not just the current phase."""
        if not self.is_running():
            return False, "Not running"

        self._stop_event.set()
        self.abort_signal.raise_()
        info("[ENGINE] stop requested")
        if self._owner is threading.current_thread():
            # called from inside the run (e.g. a subscriber); it ends at the next poll
            return True, "Stop requested"
        if not self.wait(STOP_JOIN_TIMEOUT):
            warn("[ENGINE] run did not stop in time")
            return False, "Stop timed out"
        return True, "Stopped"

    def abort(self) -> tuple[bool, str]:
        """Same effect as the stop button: end the current phase."""
        self.abort_signal.raise_()
        if not self.is_running():
            return False, "Not running"
        return True, "Phase aborted"

    def is_running(self) -> bool:
        return self._busy

    # -----------------------------
    # Internals
    # -----------------------------
    def _claim(self, label: str) -> None:
        with self._lock:
            if self._busy:
                warn(f"[ENGINE] {label} requested but a run is active")
                raise EngineBusy("Washer already running")
            self._busy = True
            self._owner = threading.current_thread()
            self._idle.clear()
            self._stop_event.clear()

    def _release(self) -> None:
        with self._lock:
            self._busy = False
            self._owner = None
            self._idle.set()

    def _worker_main(self, phases: Tuple[Phase, ...], label: str) -> None:
        try:
            self._run_phases(phases, label)
        except DriverUnavailable:
            # already recorded in progress and logged by _run_phases
            pass
        finally:
            self._release()

    def _run_phases(self, phases: Tuple[Phase, ...], label: str) -> RunResult:
        ctx = ExecutionContext(
            self.driver,
            self.clock,
            self.display,
            self.abort_signal,
            cancel=self._stop_event,
        )
        runner = PhaseRunner(
            ctx,
            brake_settle_ms=self.brake_settle_ms,
            poll_interval_ms=self.poll_interval_ms,
        )

        with self._lock:
            self.progress.reset(label=label, total_phases=len(phases))
            self.progress.state = RunState.RUNNING
        info(f"[ENGINE] {label} started", phases=len(phases))
        self._emit_task_event(TaskEvent.RUN_STARTED)

        outcomes: List[PhaseOutcome] = []
        stopped = False
        try:
            for index, phase in enumerate(phases):
                if self._stop_event.is_set():
                    stopped = True
                    break

                with self._lock:
                    self.progress.phase_index = index
                    self.progress.speed = phase.speed
                    self.progress.direction = phase.direction.value
                self._emit_progress_event()
                self._emit_task_event(TaskEvent.PHASE_STARTED)

                outcome = runner.run_phase(phase)
                outcomes.append(outcome)

                if outcome == PhaseOutcome.ABORTED:
                    with self._lock:
                        self.progress.aborted_phases += 1
                    if self._stop_event.is_set():
                        stopped = True
                        break
                    self._emit_task_event(TaskEvent.PHASE_ABORTED)
                    debug(f"[ENGINE] phase {index} aborted, continuing")
                else:
                    with self._lock:
                        self.progress.completed_phases += 1
                    self._emit_task_event(TaskEvent.PHASE_COMPLETED)
        except DriverUnavailable as e:
            with self._lock:
                self.progress.state = RunState.FAILED
                self.progress.error = str(e)
                self.progress.speed = None
            error(f"[ENGINE] {label} failed: {e}")
            self.last_result = RunResult(tuple(outcomes))
            self._emit_progress_event()
            self._emit_task_event(TaskEvent.RUN_FAILED)
            raise

        result = RunResult(tuple(outcomes), stopped=stopped)
        self.last_result = result
        with self._lock:
            self.progress.state = RunState.STOPPED if stopped else RunState.FINISHED
            self.progress.speed = None

        self._emit_progress_event()
        if stopped:
            self._emit_task_event(TaskEvent.RUN_STOPPED)
            info(f"[ENGINE] {label} stopped", completed=result.completed, aborted=result.aborted)
        else:
            self._emit_task_event(TaskEvent.RUN_FINISHED)
            info(f"[ENGINE] {label} finished", completed=result.completed, aborted=result.aborted)
        return result


def _pattern_label(descriptor: PatternDescriptor) -> str:
    return f"{descriptor.mode.value.capitalize()} pattern"
