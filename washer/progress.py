from typing import Optional


class RunState:
    IDLE = "IDLE"           # engine ready
    RUNNING = "RUNNING"     # a phase is spinning
    FINISHED = "FINISHED"   # last run went through every phase
    STOPPED = "STOPPED"     # last run cancelled as a whole
    FAILED = "FAILED"       # driver error


class Progress:
    """
    Status contract for /washer/status (keep stable).
    Snapshot-safe: do NOT add non-serializable fields.
    """

    def __init__(self):
        self.reset()

    def reset(self, label: Optional[str] = None, total_phases: int = 0):
        self.state = RunState.IDLE
        self.label = label
        self.total_phases = total_phases
        # phase_index: 0-based index of the phase running now (or last run)
        self.phase_index = 0
        self.completed_phases = 0
        self.aborted_phases = 0
        self.speed: Optional[int] = None
        self.direction: Optional[str] = None
        self.error: Optional[str] = None

    def to_dict(self) -> dict:
        return dict(self.__dict__)
