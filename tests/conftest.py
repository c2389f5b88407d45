import pytest

from washer.abort_signal import AbortSignal
from washer.errors import DriverUnavailable
from washer.phase_runner import ExecutionContext, PhaseRunner


class FakeClock:
    """Manual clock: time only moves inside sleep_ms(); scheduled callbacks fire as it passes them."""

    def __init__(self, start=0):
        self.t = start
        self.sleeps = []
        self._scheduled = []

    def now(self):
        return self.t

    def sleep_ms(self, ms):
        self.sleeps.append(ms)
        target = self.t + ms
        while True:
            due = [item for item in self._scheduled if item[0] <= target]
            if not due:
                break
            item = min(due, key=lambda x: x[0])
            self._scheduled.remove(item)
            self.t = max(self.t, item[0])
            item[1]()
        self.t = target

    def at(self, ms, fn):
        self._scheduled.append((ms, fn))


class FakeMotor:
    def __init__(self, fail_on_run=False, fail_on_stop=False):
        self.calls = []
        self.fail_on_run = fail_on_run
        self.fail_on_stop = fail_on_stop

    def run(self, direction, speed):
        if self.fail_on_run:
            raise DriverUnavailable("motor unplugged")
        self.calls.append(("run", direction, speed))

    def stop(self):
        self.calls.append(("stop",))
        if self.fail_on_stop:
            raise DriverUnavailable("motor unplugged")

    @property
    def speeds(self):
        return [c[2] for c in self.calls if c[0] == "run"]


class FakeDisplay:
    def __init__(self, fail_on_show=False):
        self.shown = []
        self.texts = []
        self.clears = 0
        self.fail_on_show = fail_on_show

    def show_number(self, n):
        if self.fail_on_show:
            raise DriverUnavailable("display gone")
        self.shown.append(n)

    def show_text(self, text):
        self.texts.append(text)

    def clear(self):
        self.clears += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def motor():
    return FakeMotor()


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def abort():
    return AbortSignal()


@pytest.fixture
def ctx(motor, clock, display, abort):
    return ExecutionContext(motor, clock, display, abort)


@pytest.fixture
def runner(ctx):
    return PhaseRunner(ctx, poll_interval_ms=500)
