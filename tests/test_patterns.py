import dataclasses

import pytest

from washer.errors import InvalidParameter
from washer.patterns import PATTERN_GENERATORS, generate_phases, program_phases
from washer.types import BrakeOption, Direction, PatternDescriptor, PatternMode, Phase, Program


def pattern(mode, a=0, b=255, count=5, step_time=4, direction=Direction.CLOCKWISE):
    return PatternDescriptor(mode, count, step_time, direction, a, b)


def speeds(phases):
    return [p.speed for p in phases]


def test_steps_ramp_up():
    phases = generate_phases(pattern(PatternMode.STEPS))

    assert speeds(phases) == [0, 51, 102, 153, 204]
    assert all(p.duration_seconds == 4 for p in phases)
    assert all(p.direction == Direction.CLOCKWISE for p in phases)
    assert all(p.brake == BrakeOption.NO_BRAKE for p in phases)


def test_steps_ramp_down_uses_negative_delta():
    phases = generate_phases(pattern(PatternMode.STEPS, a=255, b=0))
    assert speeds(phases) == [255, 204, 153, 102, 51]


def test_steps_truncate_toward_zero():
    assert speeds(generate_phases(pattern(PatternMode.STEPS, a=0, b=100, count=3))) == [0, 33, 66]
    assert speeds(generate_phases(pattern(PatternMode.STEPS, a=10, b=0, count=3))) == [10, 7, 4]


def test_single_step_is_speed_a():
    phases = generate_phases(pattern(PatternMode.STEPS, a=80, b=200, count=1))
    assert speeds(phases) == [80]


def test_pyramid_holds_peak_for_two_steps():
    phases = generate_phases(pattern(PatternMode.PYRAMID))

    assert len(phases) == 10
    assert phases[4].speed == phases[5].speed == 204
    assert speeds(phases) == [0, 51, 102, 153, 204, 204, 153, 102, 51, 0]


def test_pulse_alternates_without_interpolation():
    phases = generate_phases(pattern(PatternMode.PULSE, a=50, b=200, count=3, direction=Direction.COUNTER_CLOCKWISE))

    assert speeds(phases) == [50, 200, 50, 200, 50, 200]
    assert {p.direction for p in phases} == {Direction.COUNTER_CLOCKWISE}


@pytest.mark.parametrize("mode", list(PatternMode))
def test_zero_step_count_rejected_for_every_mode(mode):
    with pytest.raises(InvalidParameter):
        generate_phases(pattern(mode, count=0))


@pytest.mark.parametrize("kwargs", [
    {"a": 256},
    {"b": -1},
    {"step_time": 0},
    {"step_time": -3},
    {"count": -1},
    {"a": 12.5},
])
def test_invalid_descriptor_rejected(kwargs):
    with pytest.raises(InvalidParameter):
        pattern(PatternMode.STEPS, **kwargs)


def test_every_mode_has_a_generator():
    assert set(PATTERN_GENERATORS) == set(PatternMode)


def test_generate_rejects_non_descriptor():
    with pytest.raises(InvalidParameter):
        generate_phases({"mode": "steps"})


def test_phases_are_immutable():
    phase = generate_phases(pattern(PatternMode.STEPS))[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        phase.speed = 10


def test_program_is_a_single_phase():
    program = Program(Direction.COUNTER_CLOCKWISE, 90, 7, BrakeOption.BRAKE)

    assert program_phases(program) == (Phase(Direction.COUNTER_CLOCKWISE, 90, 7, BrakeOption.BRAKE),)


def test_descriptor_from_dict():
    d = PatternDescriptor.from_dict({
        "mode": "Pyramid",
        "step_count": 2,
        "step_time": 3,
        "direction": "ccw",
        "speed_a": 10,
        "speed_b": 110,
    })

    assert d.mode == PatternMode.PYRAMID
    assert d.direction == Direction.COUNTER_CLOCKWISE
    assert d.to_dict()["mode"] == "pyramid"


@pytest.mark.parametrize("body", [
    {},
    {"mode": "zigzag", "step_count": 2, "step_time": 3, "speed_a": 0, "speed_b": 10},
    {"mode": "steps", "step_count": "2", "step_time": 3, "speed_a": 0, "speed_b": 10},
])
def test_descriptor_from_bad_dict(body):
    with pytest.raises(InvalidParameter):
        PatternDescriptor.from_dict(body)
