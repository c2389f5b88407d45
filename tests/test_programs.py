import pytest

from system.gpio.sim_gpio import SimGPIO
from washer.errors import InvalidParameter
from washer.programs import (
    DEFAULT_SPEED,
    PROGRAM_LABELS,
    ProgramSelector,
    WashProgram,
    builtin_phases,
    doors_closed,
    find_program,
    spin_cycle,
)
from washer.types import BrakeOption, Direction, Program


def test_cycle_wraps_after_last_program():
    selector = ProgramSelector()
    seen = [selector.cycle() for _ in range(4)]
    assert seen == [WashProgram.GENTLE_WASH, WashProgram.SPIN, WashProgram.NORMAL_WASH, WashProgram.GENTLE_WASH]


def test_each_program_has_exactly_one_label():
    assert set(PROGRAM_LABELS) == set(WashProgram)
    labels = []
    selector = ProgramSelector()
    for _ in WashProgram:
        labels.append(selector.label())
        selector.cycle()
    assert labels == ["Normal", "Gentle", "Spin"]


def test_on_change_called_on_cycle_and_select():
    changes = []
    selector = ProgramSelector(on_change=changes.append)
    selector.cycle()
    selector.select("spin")
    assert changes == [WashProgram.GENTLE_WASH, WashProgram.SPIN]


def test_normal_wash_is_default_speed_clockwise():
    (phase,) = builtin_phases(WashProgram.NORMAL_WASH)
    assert phase.direction == Direction.CLOCKWISE
    assert phase.speed == DEFAULT_SPEED == 128
    assert phase.duration_seconds == 2


def test_gentle_wash_runs_at_half_speed():
    (phase,) = builtin_phases(WashProgram.GENTLE_WASH, 200)
    assert phase.speed == 100


def test_spin_cycle_reverses_and_brakes_after_each_direction():
    phases = spin_cycle(180)
    assert [p.direction for p in phases] == [Direction.CLOCKWISE, Direction.COUNTER_CLOCKWISE]
    assert all(p.speed == 180 and p.brake == BrakeOption.BRAKE for p in phases)


def test_spin_cycle_rejects_bad_speed():
    with pytest.raises(InvalidParameter):
        spin_cycle(300)


@pytest.mark.parametrize("name,expected", [
    (3, WashProgram.SPIN),
    ("gentle", WashProgram.GENTLE_WASH),
    ("NORMAL_WASH", WashProgram.NORMAL_WASH),
    ("2", WashProgram.GENTLE_WASH),
])
def test_find_program(name, expected):
    assert find_program(name) == expected


def test_find_unknown_program():
    with pytest.raises(ValueError):
        find_program("delicates")


def test_selector_rejects_bad_default_speed():
    with pytest.raises(InvalidParameter):
        ProgramSelector(default_speed=999)


def test_doors_closed_reads_door_line():
    gpio = SimGPIO({"PC14": 1})
    assert doors_closed(gpio, "PC14")
    gpio.set_level("PC14", 0)
    assert not doors_closed(gpio, "PC14")


def test_program_from_dict_defaults():
    program = Program.from_dict({"speed": 90, "spin_time": 4})
    assert program.direction == Direction.CLOCKWISE
    assert program.brake_option == BrakeOption.NO_BRAKE
    assert program.name == "Custom"


@pytest.mark.parametrize("body", [
    {"speed": 90},
    {"speed": 256, "spin_time": 4},
    {"speed": 90, "spin_time": 4, "brake": "sometimes"},
])
def test_program_from_bad_dict(body):
    with pytest.raises(InvalidParameter):
        Program.from_dict(body)
