# washer/programs.py
"""Built-in wash programs and the program-button selector."""

from enum import IntEnum
from typing import Callable, Dict, Optional, Tuple

from system.log_utils import info
from washer.iface import ButtonPoll
from washer.types import BrakeOption, Direction, Phase, Program, check_speed

DEFAULT_SPEED = 128
WASH_SECONDS = 2
SPIN_SECONDS = 2


class WashProgram(IntEnum):
    NORMAL_WASH = 1
    GENTLE_WASH = 2
    SPIN = 3


PROGRAM_LABELS: Dict[WashProgram, str] = {
    WashProgram.NORMAL_WASH: "Normal",
    WashProgram.GENTLE_WASH: "Gentle",
    WashProgram.SPIN: "Spin",
}


def washing_cycle(speed: int = DEFAULT_SPEED) -> Program:
    """Plain clockwise wash at the given speed."""
    return Program(Direction.CLOCKWISE, speed, WASH_SECONDS, BrakeOption.NO_BRAKE, name="Normal")


def gentle_cycle(speed: int = DEFAULT_SPEED) -> Program:
    return Program(Direction.CLOCKWISE, speed // 2, WASH_SECONDS, BrakeOption.NO_BRAKE, name="Gentle")


def spin_cycle(speed: int) -> Tuple[Phase, ...]:
    """Clockwise then counter-clockwise, braking after each direction."""
    check_speed("speed", speed)
    return (
        Phase(Direction.CLOCKWISE, speed, SPIN_SECONDS, BrakeOption.BRAKE),
        Phase(Direction.COUNTER_CLOCKWISE, speed, SPIN_SECONDS, BrakeOption.BRAKE),
    )


_PROGRAM_PHASES: Dict[WashProgram, Callable[[int], Tuple[Phase, ...]]] = {
    WashProgram.NORMAL_WASH: lambda speed: (_as_phase(washing_cycle(speed)),),
    WashProgram.GENTLE_WASH: lambda speed: (_as_phase(gentle_cycle(speed)),),
    WashProgram.SPIN: spin_cycle,
}


def _as_phase(program: Program) -> Phase:
    return Phase(program.direction, program.speed, program.spin_time_seconds, program.brake_option)


def program_label(program: WashProgram) -> str:
    return PROGRAM_LABELS[WashProgram(program)]


def builtin_phases(program: WashProgram, speed: int = DEFAULT_SPEED) -> Tuple[Phase, ...]:
    return _PROGRAM_PHASES[WashProgram(program)](speed)


def find_program(name) -> WashProgram:
    """Resolve a program by number, enum name or label ("spin", "GENTLE_WASH", 3)."""
    if isinstance(name, WashProgram):
        return name
    if isinstance(name, int) and not isinstance(name, bool):
        return WashProgram(name)
    text = str(name).strip().lower()
    for program, label in PROGRAM_LABELS.items():
        if text in (program.name.lower(), label.lower(), str(program.value)):
            return program
    raise ValueError(f"unknown program: {name!r}")


class ProgramSelector:
    """
    Program button state.
    - cycle() steps NORMAL -> GENTLE -> SPIN -> NORMAL
    - on_change is called with the newly selected program
    """

    def __init__(
        self,
        program: WashProgram = WashProgram.NORMAL_WASH,
        default_speed: int = DEFAULT_SPEED,
        on_change: Optional[Callable[[WashProgram], None]] = None,
    ):
        check_speed("default_speed", default_speed)
        self.program = WashProgram(program)
        self.default_speed = default_speed
        self.max_programs = len(WashProgram)
        self.on_change = on_change

    def cycle(self) -> WashProgram:
        if self.program < self.max_programs:
            self.program = WashProgram(self.program + 1)
        else:
            self.program = WashProgram(1)

        info(f"[PROGRAM] selected {self.label()}")
        if self.on_change:
            self.on_change(self.program)
        return self.program

    def select(self, program) -> WashProgram:
        self.program = find_program(program)
        if self.on_change:
            self.on_change(self.program)
        return self.program

    def label(self) -> str:
        return program_label(self.program)

    def phases(self) -> Tuple[Phase, ...]:
        return builtin_phases(self.program, self.default_speed)

    def to_dict(self) -> dict:
        return {
            "selected": self.program.value,
            "label": self.label(),
            "default_speed": self.default_speed,
            "programs": [
                {"id": p.value, "name": p.name, "label": PROGRAM_LABELS[p]}
                for p in WashProgram
            ],
        }


def doors_closed(buttons: ButtonPoll, pin_name: str) -> bool:
    return buttons.read(pin_name) == 1
