from typing import Callable, Protocol

from washer.types import Direction


class MotorDriver(Protocol):
    def run(self, direction: Direction, speed: int) -> None:
        """Spin the drum motor at speed 0..255. Raises DriverUnavailable."""

    def stop(self) -> None:
        """Stop the motor immediately. Raises DriverUnavailable."""


class Clock(Protocol):
    def now(self) -> int:
        """Monotonic milliseconds."""

    def sleep_ms(self, ms: int) -> None:
        """Block for ms milliseconds."""


class CountdownDisplay(Protocol):
    def show_number(self, n: int) -> None:
        """Show the remaining whole seconds."""

    def clear(self) -> None:
        """Blank the display."""


class ButtonEventSource(Protocol):
    def watch(self, pin_name: str, callback: Callable[[str, int], None], edge: str = "both"):
        """Call callback(pin_name, value) on every edge of the pin."""


class ButtonPoll(Protocol):
    def read(self, pin_name: str) -> int:
        """Current level of the pin, 0 or 1."""
