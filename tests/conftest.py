"""Shared fakes for the tracker, pipeline and runner tests."""
import pytest
from restore_monitor.operations.base import RestoreOperations, ValidationReport
from restore_monitor.schemas.jobs import RestoreRequest
from restore_monitor.tracking.tracker import JobTracker


class FakeClock:
    """Monotonic nanosecond clock that only moves when told to."""
    def __init__(self):
        self.now = 0

    def __call__(self) -> int:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms * 1_000_000


class FakeOperations(RestoreOperations):
    """Scripted restore operations.

    ``durations`` maps validate/restore/configure to how many milliseconds
    the fake clock advances while that operation runs. ``errors`` maps the
    same names to the exception the operation raises.
    """
    def __init__(self, clock=None, durations=None, errors=None, report=None, sleep=None):
        self.clock = clock
        self.durations = durations or {}
        self.errors = errors or {}
        self.report = report or ValidationReport(True, "backup.fbk: 4096 bytes")
        self.sleep = sleep
        self.calls = []

    def _tick(self, name):
        self.calls.append(name)
        if self.clock is not None:
            self.clock.advance_ms(self.durations.get(name, 0))
        if self.sleep:
            self.sleep()
        if name in self.errors:
            raise self.errors[name]

    def validate(self, path):
        self._tick("validate")
        return self.report

    def restore(self, source_path, target_path):
        self._tick("restore")
        return f"gbak: restored {source_path} -> {target_path}"

    def configure(self, target_path):
        self._tick("configure")


@pytest.fixture
def tracker():
    return JobTracker()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def restore_request():
    return RestoreRequest(
        file_name="clientes.fbk",
        source_path="/data/uploads/clientes.fbk",
        target_path="/data/restored/clientes.fdb",
    )


@pytest.fixture
def fake_operations_cls():
    return FakeOperations

