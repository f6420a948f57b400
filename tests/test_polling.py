from __future__ import annotations

import asyncio
from typing import Any

import pytest

from riow_client.errors import MalformedStatus, PollFailed, PollTimeout
from riow_client.jobs.polling import PollPolicy, wait_until_ready
from riow_client.jobs.status import JobHandle, Queued, Ready, Rendering

HANDLE = JobHandle(id="abc", status_url="https://svc/status/abc")


class ScriptedPoll:
    def __init__(self, *results: Any) -> None:
        self.results = list(results)
        self.calls = 0

    async def __call__(self, handle: JobHandle) -> Any:
        assert handle == HANDLE
        self.calls += 1
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _run(poll: ScriptedPoll, policy: PollPolicy, clock: FakeClock, **kwargs: Any) -> Ready:
    return asyncio.run(wait_until_ready(poll, HANDLE, policy, sleep=clock.sleep, clock=clock, **kwargs))


def test_stops_at_ready_and_reports_each_status() -> None:
    poll = ScriptedPoll(
        Queued(),
        Rendering(cur_pixel=100, max_pixels=150000),
        Rendering(cur_pixel=90000, max_pixels=150000),
        Ready(download_url="https://svc/img/abc.png"),
        Rendering(cur_pixel=0, max_pixels=1),
    )
    clock = FakeClock()
    seen: list[Any] = []

    ready = _run(poll, PollPolicy(interval=1.0, max_interval=10.0, backoff=2.0), clock, on_status=seen.append)

    assert ready == Ready(download_url="https://svc/img/abc.png")
    assert poll.calls == 4
    assert seen[-1] == ready
    assert len(seen) == 4
    assert clock.sleeps == [1.0, 2.0, 4.0]


def test_backoff_is_capped() -> None:
    poll = ScriptedPoll(*([Queued()] * 5), Ready(download_url="https://svc/img/abc.png"))
    clock = FakeClock()
    _run(poll, PollPolicy(interval=1.0, max_interval=3.0, backoff=2.0, timeout=None, max_attempts=10), clock)
    assert clock.sleeps == [1.0, 2.0, 3.0, 3.0, 3.0]


def test_max_attempts_raises_timeout_with_last_status() -> None:
    last = Rendering(cur_pixel=5, max_pixels=10)
    poll = ScriptedPoll(Queued(), Rendering(cur_pixel=1, max_pixels=10), last)
    clock = FakeClock()
    with pytest.raises(PollTimeout) as excinfo:
        _run(poll, PollPolicy(interval=0.5, backoff=1.0, max_attempts=3, timeout=None), clock)
    assert excinfo.value.attempts == 3
    assert excinfo.value.last_status == last
    assert poll.calls == 3


def test_wall_clock_timeout() -> None:
    poll = ScriptedPoll(*([Queued()] * 20))
    clock = FakeClock()
    with pytest.raises(PollTimeout) as excinfo:
        _run(poll, PollPolicy(interval=1.0, max_interval=1.0, backoff=1.0, timeout=3.5), clock)
    assert excinfo.value.attempts == 4
    assert clock.now <= 3.5
    assert excinfo.value.last_status == Queued()


def test_tolerates_transient_failures() -> None:
    poll = ScriptedPoll(
        Rendering(cur_pixel=1, max_pixels=10),
        PollFailed(502, "bad gateway"),
        MalformedStatus("garbled"),
        Ready(download_url="https://svc/img/abc.png"),
    )
    clock = FakeClock()
    failures: list[tuple[str, int]] = []
    ready = _run(
        poll,
        PollPolicy(interval=0.1, max_failures=2),
        clock,
        on_failure=lambda exc, count: failures.append((type(exc).__name__, count)),
    )
    assert ready.download_url == "https://svc/img/abc.png"
    assert failures == [("PollFailed", 1), ("MalformedStatus", 2)]


def test_failure_budget_exhausted_reraises() -> None:
    poll = ScriptedPoll(PollFailed(500, "boom"), PollFailed(500, "boom again"))
    clock = FakeClock()
    with pytest.raises(PollFailed) as excinfo:
        _run(poll, PollPolicy(interval=0.1, max_failures=1), clock)
    assert excinfo.value.body == "boom again"
    assert poll.calls == 2


def test_zero_failure_budget_fails_fast() -> None:
    poll = ScriptedPoll(MalformedStatus("garbled"))
    with pytest.raises(MalformedStatus):
        _run(poll, PollPolicy(max_failures=0), FakeClock())


def test_cancellation_abandons_job() -> None:
    async def _scenario() -> int:
        calls = 0

        async def poll(handle: JobHandle) -> Any:
            nonlocal calls
            calls += 1
            return Queued()

        task = asyncio.create_task(wait_until_ready(poll, HANDLE, PollPolicy(interval=0.01, timeout=60)))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return calls

    assert asyncio.run(_scenario()) >= 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"interval": -1},
        {"interval": 2.0, "max_interval": 1.0},
        {"backoff": 0.5},
        {"max_attempts": 0},
        {"timeout": 0},
        {"max_failures": -1},
        {"timeout": None, "max_attempts": None},
    ],
)
def test_policy_validation(kwargs: dict[str, Any]) -> None:
    with pytest.raises(ValueError):
        PollPolicy(**kwargs)
