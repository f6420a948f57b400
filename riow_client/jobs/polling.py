"""Polling loop with backoff and an upper bound.

The render service has no terminal failure status: a job that never reaches
``Ready`` just keeps reporting progress (or nothing). The loop therefore
always runs under a budget and gives up with :class:`PollTimeout`.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from ..errors import MalformedStatus, PollFailed, PollTimeout
from .status import JobHandle, JobStatus, Queued, Ready

PollFn = Callable[[JobHandle], Awaitable[JobStatus]]
StatusCallback = Callable[[JobStatus], None]
FailureCallback = Callable[[Exception, int], None]


@dataclass(frozen=True)
class PollPolicy:
    interval: float = 0.5
    max_interval: float = 5.0
    backoff: float = 1.5
    max_attempts: Optional[int] = None
    timeout: Optional[float] = 120.0
    max_failures: int = 3

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise ValueError("interval must be >= 0")
        if self.max_interval < self.interval:
            raise ValueError("max_interval must be >= interval")
        if self.backoff < 1.0:
            raise ValueError("backoff must be >= 1.0")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_failures < 0:
            raise ValueError("max_failures must be >= 0")
        if self.max_attempts is None and self.timeout is None:
            raise ValueError("either max_attempts or timeout must bound polling")

    def next_interval(self, current: float) -> float:
        return min(self.max_interval, current * self.backoff)


async def wait_until_ready(
    poll: PollFn,
    handle: JobHandle,
    policy: PollPolicy | None = None,
    *,
    on_status: StatusCallback | None = None,
    on_failure: FailureCallback | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> Ready:
    """Poll ``handle`` until it reports :class:`Ready`.

    Up to ``policy.max_failures`` consecutive poll errors are tolerated; the
    next one propagates. Cancelling the awaiting task abandons the job.
    """
    policy = policy or PollPolicy()
    started = clock()
    interval = policy.interval
    attempts = 0
    failures = 0
    last_status: JobStatus = Queued()
    while True:
        attempts += 1
        try:
            status = await poll(handle)
        except (PollFailed, MalformedStatus) as exc:
            failures += 1
            if on_failure is not None:
                on_failure(exc, failures)
            if failures > policy.max_failures:
                raise
        else:
            failures = 0
            last_status = status
            if on_status is not None:
                on_status(status)
            if isinstance(status, Ready):
                return status

        elapsed = clock() - started
        if policy.max_attempts is not None and attempts >= policy.max_attempts:
            raise PollTimeout(attempts, elapsed, last_status)
        if policy.timeout is not None and elapsed + interval > policy.timeout:
            raise PollTimeout(attempts, elapsed, last_status)
        await sleep(interval)
        interval = policy.next_interval(interval)
