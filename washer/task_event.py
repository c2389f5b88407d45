# washer/task_event.py

from enum import Enum, auto


class TaskEvent(Enum):
    """
    Discrete moments emitted by the engine for display/UI subscribers.
    NOT continuous state.
    """
    RUN_STARTED = auto()

    PHASE_STARTED = auto()
    PHASE_COMPLETED = auto()
    PHASE_ABORTED = auto()     # stop button / door, run carries on

    RUN_FINISHED = auto()      # all phases done
    RUN_STOPPED = auto()       # whole run cancelled via stop()
    RUN_FAILED = auto()        # driver unavailable
