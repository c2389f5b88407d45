# washer/patterns.py
"""Speed profile generation: pattern descriptors and programs to phase sequences."""

from typing import Callable, Dict, List, Tuple

from washer.errors import InvalidParameter
from washer.types import (
    Direction,
    PatternDescriptor,
    PatternMode,
    Phase,
    Program,
    check_positive,
    check_speed,
)


def _step_speeds(speed_a: int, speed_b: int, step_count: int) -> List[int]:
    """
    Linear ladder from speed_a toward speed_b.

    The first step is speed_a, each next step adds (speed_b - speed_a) / step_count
    (truncated toward zero), so speed_b itself is never reached.
    """
    check_positive("step_count", step_count)
    check_speed("speed_a", speed_a)
    check_speed("speed_b", speed_b)
    span = speed_b - speed_a
    return [speed_a + int(i * span / step_count) for i in range(step_count)]


def steps_phases(d: PatternDescriptor) -> Tuple[Phase, ...]:
    return tuple(
        Phase(d.direction, speed, d.step_time)
        for speed in _step_speeds(d.speed_a, d.speed_b, d.step_count)
    )


def pyramid_phases(d: PatternDescriptor) -> Tuple[Phase, ...]:
    # walking the ladder back down holds the top step for two step times
    up = steps_phases(d)
    return up + tuple(reversed(up))


def pulse_phases(d: PatternDescriptor) -> Tuple[Phase, ...]:
    phases = []
    for _ in range(d.step_count):
        phases.append(Phase(d.direction, d.speed_a, d.step_time))
        phases.append(Phase(d.direction, d.speed_b, d.step_time))
    return tuple(phases)


PATTERN_GENERATORS: Dict[PatternMode, Callable[[PatternDescriptor], Tuple[Phase, ...]]] = {
    PatternMode.STEPS: steps_phases,
    PatternMode.PYRAMID: pyramid_phases,
    PatternMode.PULSE: pulse_phases,
}


def generate_phases(descriptor: PatternDescriptor) -> Tuple[Phase, ...]:
    """Expand a pattern descriptor into its ordered, immutable phase sequence."""
    if not isinstance(descriptor, PatternDescriptor):
        raise InvalidParameter(f"expected PatternDescriptor, got {type(descriptor).__name__}")
    generator = PATTERN_GENERATORS.get(descriptor.mode)
    if generator is None:
        raise InvalidParameter(f"unsupported pattern mode: {descriptor.mode!r}")
    return generator(descriptor)


def program_phases(program: Program) -> Tuple[Phase, ...]:
    return (
        Phase(
            program.direction,
            program.speed,
            program.spin_time_seconds,
            program.brake_option,
        ),
    )


def describe(phases) -> str:
    arrow = {Direction.CLOCKWISE: "cw", Direction.COUNTER_CLOCKWISE: "ccw"}
    return " ".join(f"{arrow[p.direction]}:{p.speed}/{p.duration_seconds}s" for p in phases)
