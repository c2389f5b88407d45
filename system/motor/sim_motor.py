from typing import Optional

from system.log_utils import info
from washer.types import Direction, check_speed


class SimMotorDriver:
    """Motor stand-in for simulator mode: logs and remembers the last command."""

    def __init__(self):
        self.direction: Optional[Direction] = None
        self.speed = 0

    @property
    def is_moving(self) -> bool:
        return self.speed > 0

    def run(self, direction: Direction, speed: int) -> None:
        check_speed("speed", speed)
        self.direction = direction
        self.speed = speed
        info(f"[SIMMOTOR] run {direction.value} speed={speed}")

    def stop(self) -> None:
        self.speed = 0
        info("[SIMMOTOR] stop")
