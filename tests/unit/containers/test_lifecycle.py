import pytest

from sitebox.errors import ContainerTimeoutError, ExternalToolError, SiteboxIOError
from sitebox.integrations.containers.lifecycle import ReadinessWaiter, WaitState
from tests.helpers.fakes import FakeClock

MARKER = "Web Server is available"


def test_ready_once_marker_appears(clock: FakeClock):
    def fetch_logs(name):
        return f"Building sites...\n{MARKER} at //localhost:1313/" if clock.now >= 3 else "Building sites..."

    waiter = ReadinessWaiter(fetch_logs, clock=clock, sleep=clock.sleep)
    waiter.wait("example-site", MARKER)

    assert waiter.state is WaitState.READY
    assert clock.now <= 4
    assert clock.sleeps == [1.0, 1.0, 1.0]


def test_ready_immediately_does_not_sleep(clock: FakeClock):
    waiter = ReadinessWaiter(lambda name: MARKER, clock=clock, sleep=clock.sleep)
    waiter.wait("example-site", MARKER)
    assert waiter.state is WaitState.READY
    assert clock.sleeps == []


def test_timeout_after_one_minute(clock: FakeClock):
    calls = []

    def fetch_logs(name):
        calls.append(clock.now)
        return "Building sites..."

    waiter = ReadinessWaiter(fetch_logs, clock=clock, sleep=clock.sleep)
    with pytest.raises(ContainerTimeoutError, match="example-site"):
        waiter.wait("example-site", MARKER)

    assert waiter.state is WaitState.TIMEOUT
    assert 59 <= clock.now <= 65
    assert len(calls) == 60
    assert set(clock.sleeps) == {1.0}


def test_timeout_is_a_builtin_timeout(clock: FakeClock):
    waiter = ReadinessWaiter(lambda name: "", timeout=5, clock=clock, sleep=clock.sleep)
    with pytest.raises(TimeoutError):
        waiter.wait("web", MARKER)
    assert clock.now == 5


def test_log_failure_aborts_without_retry(clock: FakeClock):
    calls = []

    def fetch_logs(name):
        calls.append(name)
        raise ExternalToolError("Error: No such container: web", returncode=1)

    waiter = ReadinessWaiter(fetch_logs, clock=clock, sleep=clock.sleep)
    with pytest.raises(SiteboxIOError, match="could not get logs for container web") as exc:
        waiter.wait("web", MARKER)

    assert isinstance(exc.value, OSError)
    assert isinstance(exc.value.__cause__, ExternalToolError)
    assert calls == ["web"]
    assert clock.sleeps == []


def test_custom_interval(clock: FakeClock):
    waiter = ReadinessWaiter(
        lambda name: MARKER if clock.now >= 1 else "",
        interval=0.25,
        clock=clock,
        sleep=clock.sleep,
    )
    waiter.wait("web", MARKER)
    assert clock.sleeps == [0.25] * 4
