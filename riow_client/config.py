"""Client settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any

from .jobs.polling import PollPolicy
from .utils import getenv_flag, getenv_float, getenv_int

SHUTTLE_URL = "https://raytracing-iow.shuttleapp.rs"
LOCAL_URL = "http://localhost:8000"


@dataclass(frozen=True)
class ClientSettings:
    base_url: str = LOCAL_URL
    request_timeout: float = 30.0
    download_timeout: float = 60.0
    poll_interval: float = 0.5
    poll_max_interval: float = 5.0
    poll_timeout: float | None = 120.0
    max_polls: int | None = None

    @classmethod
    def from_env(cls) -> "ClientSettings":
        base_url = os.getenv("RIOW_BASE_URL") or (SHUTTLE_URL if getenv_flag("RIOW_SHUTTLE") else LOCAL_URL)
        defaults = cls()
        return cls(
            base_url=base_url.strip(),
            request_timeout=getenv_float("RIOW_REQUEST_TIMEOUT", defaults.request_timeout),
            download_timeout=getenv_float("RIOW_DOWNLOAD_TIMEOUT", defaults.download_timeout),
            poll_interval=getenv_float("RIOW_POLL_INTERVAL", defaults.poll_interval),
            poll_max_interval=getenv_float("RIOW_POLL_MAX_INTERVAL", defaults.poll_max_interval),
            poll_timeout=getenv_float("RIOW_POLL_TIMEOUT", defaults.poll_timeout),
            max_polls=getenv_int("RIOW_MAX_POLLS", defaults.max_polls),
        )

    def override(self, **values: Any) -> "ClientSettings":
        """Return a copy with every non-None value applied."""
        changes = {key: value for key, value in values.items() if value is not None}
        return replace(self, **changes)

    def poll_policy(self) -> PollPolicy:
        return PollPolicy(
            interval=self.poll_interval,
            max_interval=max(self.poll_interval, self.poll_max_interval),
            max_attempts=self.max_polls,
            timeout=self.poll_timeout,
        )
