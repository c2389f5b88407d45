# washer/types.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from washer.errors import InvalidParameter

SPEED_MIN = 0
SPEED_MAX = 255


class Direction(Enum):
    CLOCKWISE = "cw"
    COUNTER_CLOCKWISE = "ccw"


class BrakeOption(Enum):
    BRAKE = "brake"
    NO_BRAKE = "no_brake"


class PatternMode(Enum):
    PULSE = "pulse"
    STEPS = "steps"
    PYRAMID = "pyramid"


class PhaseOutcome(Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


# ------------------------------------------------------------
# Validation helpers
# ------------------------------------------------------------

def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_speed(name: str, value) -> None:
    if not _is_int(value) or not SPEED_MIN <= value <= SPEED_MAX:
        raise InvalidParameter(f"{name} must be an integer in [{SPEED_MIN}, {SPEED_MAX}], got {value!r}")


def check_positive(name: str, value) -> None:
    if not _is_int(value) or value <= 0:
        raise InvalidParameter(f"{name} must be a positive integer, got {value!r}")


def check_enum(name: str, value, enum_type) -> None:
    if not isinstance(value, enum_type):
        raise InvalidParameter(f"{name} must be a {enum_type.__name__}, got {value!r}")


def parse_enum(enum_type, raw, name: str):
    """Resolve an enum member from its value or (case-insensitive) member name."""
    if isinstance(raw, enum_type):
        return raw
    if isinstance(raw, str):
        text = raw.strip().lower()
        for member in enum_type:
            if text in (member.value, member.name.lower()):
                return member
    raise InvalidParameter(f"unknown {name}: {raw!r}")


# ------------------------------------------------------------
# Entities
# ------------------------------------------------------------

@dataclass(frozen=True)
class Phase:
    """One uninterrupted motor actuation at a fixed direction and speed."""
    direction: Direction
    speed: int
    duration_seconds: int
    brake: BrakeOption = BrakeOption.NO_BRAKE

    def __post_init__(self):
        check_enum("direction", self.direction, Direction)
        check_speed("speed", self.speed)
        check_positive("duration_seconds", self.duration_seconds)
        check_enum("brake", self.brake, BrakeOption)

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "speed": self.speed,
            "duration_seconds": self.duration_seconds,
            "brake": self.brake.value,
        }


@dataclass(frozen=True)
class PatternDescriptor:
    mode: PatternMode
    step_count: int
    step_time: int
    direction: Direction
    speed_a: int
    speed_b: int

    def __post_init__(self):
        check_enum("mode", self.mode, PatternMode)
        # step_count >= 1 keeps the step interpolation away from a zero divisor
        check_positive("step_count", self.step_count)
        check_positive("step_time", self.step_time)
        check_enum("direction", self.direction, Direction)
        check_speed("speed_a", self.speed_a)
        check_speed("speed_b", self.speed_b)

    @classmethod
    def from_dict(cls, d: dict) -> "PatternDescriptor":
        try:
            return cls(
                mode=parse_enum(PatternMode, d.get("mode"), "mode"),
                step_count=d.get("step_count"),
                step_time=d.get("step_time"),
                direction=parse_enum(Direction, d.get("direction", Direction.CLOCKWISE.value), "direction"),
                speed_a=d.get("speed_a"),
                speed_b=d.get("speed_b"),
            )
        except AttributeError:
            raise InvalidParameter("pattern must be a JSON object")

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "step_count": self.step_count,
            "step_time": self.step_time,
            "direction": self.direction.value,
            "speed_a": self.speed_a,
            "speed_b": self.speed_b,
        }


@dataclass(frozen=True)
class Program:
    """A single fixed phase, user-authored."""
    direction: Direction
    speed: int
    spin_time_seconds: int
    brake_option: BrakeOption = BrakeOption.NO_BRAKE
    name: str = "Custom"

    def __post_init__(self):
        check_enum("direction", self.direction, Direction)
        check_speed("speed", self.speed)
        check_positive("spin_time_seconds", self.spin_time_seconds)
        check_enum("brake_option", self.brake_option, BrakeOption)

    @classmethod
    def from_dict(cls, d: dict) -> "Program":
        try:
            return cls(
                direction=parse_enum(Direction, d.get("direction", Direction.CLOCKWISE.value), "direction"),
                speed=d.get("speed"),
                spin_time_seconds=d.get("spin_time"),
                brake_option=parse_enum(BrakeOption, d.get("brake", BrakeOption.NO_BRAKE.value), "brake"),
                name=str(d.get("name") or "Custom"),
            )
        except AttributeError:
            raise InvalidParameter("program must be a JSON object")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "direction": self.direction.value,
            "speed": self.speed,
            "spin_time": self.spin_time_seconds,
            "brake": self.brake_option.value,
        }
