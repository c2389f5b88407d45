# washer/phase_runner.py
"""
Single-phase executor.

Start motor -> countdown poll until expiry or abort -> stop motor ->
optional brake settle -> clear display.

Abort granularity is one phase: the signal is cleared when every phase
starts, so a multi-phase run carries on with the next phase after an abort.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Optional

from system.log_utils import debug, info, warn, error
from washer.abort_signal import AbortSignal
from washer.errors import DriverUnavailable
from washer.iface import Clock, CountdownDisplay, MotorDriver
from washer.types import BrakeOption, Phase, PhaseOutcome

BRAKE_SETTLE_MS = 1800          # mechanical settle after stop, not part of the countdown
DEFAULT_POLL_INTERVAL_MS = 50


@dataclass
class CountdownState:
    start_ms: int
    last_displayed: Optional[int] = None


class ExecutionContext:
    """
    Everything one run owns: capabilities, abort token and the transient
    countdown state. Nothing here is module-global.
    """

    def __init__(
        self,
        driver: MotorDriver,
        clock: Clock,
        display: CountdownDisplay,
        abort: Optional[AbortSignal] = None,
        cancel: Optional[threading.Event] = None,
    ):
        self.driver = driver
        self.clock = clock
        self.display = display
        self.abort = abort or AbortSignal()
        # run-level stop; unlike abort it is never cleared by a phase start
        self.cancel = cancel or threading.Event()
        self.countdown: Optional[CountdownState] = None

    def interrupted(self) -> bool:
        return self.abort.is_raised() or self.cancel.is_set()


class PhaseRunner:
    def __init__(
        self,
        ctx: ExecutionContext,
        *,
        brake_settle_ms: int = BRAKE_SETTLE_MS,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    ):
        self.ctx = ctx
        self.brake_settle_ms = max(0, int(brake_settle_ms))
        self.poll_interval_ms = max(0, int(poll_interval_ms))

    def run_phase(self, phase: Phase) -> PhaseOutcome:
        ctx = self.ctx
        ctx.abort.consume_and_reset()

        debug(
            "[PHASE] start",
            direction=phase.direction.value,
            speed=phase.speed,
            seconds=phase.duration_seconds,
        )

        try:
            ctx.driver.run(phase.direction, phase.speed)
            outcome = self._countdown(phase)
        except DriverUnavailable as e:
            error(f"[PHASE] driver failure, stopping motor: {e}")
            self._safe_stop()
            ctx.countdown = None
            raise

        try:
            ctx.driver.stop()
            if phase.brake == BrakeOption.BRAKE:
                ctx.clock.sleep_ms(self.brake_settle_ms)
            ctx.display.clear()
        finally:
            ctx.countdown = None

        if outcome == PhaseOutcome.ABORTED:
            info("[PHASE] aborted", speed=phase.speed)
        else:
            debug("[PHASE] completed", speed=phase.speed)
        return outcome

    def _countdown(self, phase: Phase) -> PhaseOutcome:
        ctx = self.ctx
        duration_ms = phase.duration_seconds * 1000
        state = CountdownState(start_ms=ctx.clock.now())
        ctx.countdown = state

        while True:
            elapsed_ms = ctx.clock.now() - state.start_ms
            # whole seconds still to run, rounded up so "1" stays on until expiry
            remaining = math.ceil((duration_ms - elapsed_ms) / 1000)

            if remaining > 0 and remaining != state.last_displayed:
                ctx.display.show_number(remaining)
                state.last_displayed = remaining

            if remaining <= 0:
                return PhaseOutcome.COMPLETED
            if ctx.interrupted():
                return PhaseOutcome.ABORTED

            if self.poll_interval_ms:
                ctx.clock.sleep_ms(self.poll_interval_ms)

    def _safe_stop(self) -> None:
        try:
            self.ctx.driver.stop()
        except DriverUnavailable as e:
            warn(f"[PHASE] motor stop failed, state unknown: {e}")
