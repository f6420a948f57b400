"""Error taxonomy for the render client."""

from __future__ import annotations

from typing import Any


class RiowError(RuntimeError):
    """Base class for every failure raised by riow_client."""


class NotAColor(RiowError, ValueError):
    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Not a hex color: {value!r}")


class InvalidScene(RiowError, ValueError):
    pass


class SceneRejected(RiowError, ValueError):
    """Scene is well-formed but outside what the render service accepts."""


class UnsupportedMaterial(RiowError):
    def __init__(self, material: Any) -> None:
        self.material = material
        super().__init__(f"Unsupported material: {material!r}")


class UnsupportedShape(RiowError):
    def __init__(self, shape: Any) -> None:
        self.shape = shape
        super().__init__(f"Unsupported shape: {shape!r}")


class _HttpFailure(RiowError):
    action = "request"

    def __init__(self, status_code: int | None, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        code = f" ({status_code})" if status_code is not None else ""
        detail = f": {body}" if body else ""
        super().__init__(f"Render {self.action} failed{code}{detail}")


class SubmissionFailed(_HttpFailure):
    action = "submission"


class PollFailed(_HttpFailure):
    action = "poll"


class DownloadFailed(_HttpFailure):
    action = "download"


class MalformedStatus(RiowError):
    def __init__(self, message: str, payload: Any = None) -> None:
        self.payload = payload
        super().__init__(message)


class PollTimeout(RiowError):
    """Polling budget ran out before the job reported ``Ready``."""

    def __init__(self, attempts: int, elapsed: float, last_status: Any = None) -> None:
        self.attempts = attempts
        self.elapsed = elapsed
        self.last_status = last_status
        super().__init__(
            f"Render job not ready after {attempts} polls ({elapsed:.1f}s); last status: {last_status!r}"
        )


class TransportError(RiowError):
    """No HTTP response was received (DNS, refused connection, timeout)."""
