"""Check results and error classification."""

from __future__ import annotations

import asyncio
import socket
import ssl
from dataclasses import dataclass
from datetime import datetime

# Status category constants.
STATUS_OK = "ok"
STATUS_TIMEOUT = "timeout"
STATUS_CONNECTION_ERROR = "connection_error"
STATUS_DNS_ERROR = "dns_error"
STATUS_TLS_ERROR = "tls_error"
STATUS_UNHEALTHY = "unhealthy"
STATUS_ERROR = "error"

ALL_STATUS_CATEGORIES = (
    STATUS_OK,
    STATUS_TIMEOUT,
    STATUS_CONNECTION_ERROR,
    STATUS_DNS_ERROR,
    STATUS_TLS_ERROR,
    STATUS_UNHEALTHY,
    STATUS_ERROR,
)

# Result.status values as seen by renderers.
RESULT_SUCCESS = "success"
RESULT_ERROR = "error"


def classify_error(err: BaseException | None) -> str:
    """Classify a check error into a status category.

    Classification chain:
    1. CheckError with its status_category
    2. Standard library error types (TimeoutError, socket errors, SSL errors)
    3. Wrapped cause, if any
    4. Fallback → error
    """
    if err is None:
        return STATUS_OK

    # Deferred import keeps checker.py free of result types.
    from urlhealth.checker import CheckError

    if isinstance(err, CheckError) and err.status_category != STATUS_ERROR:
        return err.status_category

    if isinstance(err, (TimeoutError, asyncio.TimeoutError)):
        return STATUS_TIMEOUT
    if isinstance(err, socket.gaierror):
        return STATUS_DNS_ERROR
    if isinstance(err, ConnectionError):
        return STATUS_CONNECTION_ERROR
    if isinstance(err, ssl.SSLError):
        return STATUS_TLS_ERROR

    cause = getattr(err, "__cause__", None) or getattr(err, "__context__", None)
    if cause is not None and cause is not err:
        inner = classify_error(cause)
        if inner != STATUS_ERROR:
            return inner

    return STATUS_ERROR


@dataclass(frozen=True)
class Success:
    """A response with status code < 400 was received."""

    status_code: int


@dataclass(frozen=True)
class Failure:
    """The check failed.

    ``status_code`` is set only when a response with code >= 400 arrived;
    transport failures and timeouts carry the cause in ``error`` instead.
    ``deadline_exceeded`` marks checks cut short by the batch deadline.
    """

    error: str
    status_code: int | None = None
    category: str = STATUS_ERROR
    deadline_exceeded: bool = False


Outcome = Success | Failure


@dataclass(frozen=True)
class Result:
    """Outcome of one endpoint check, produced exactly once per endpoint."""

    endpoint: str
    outcome: Outcome
    duration: float
    completed_at: datetime
    attempts: int

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Success)

    @property
    def status(self) -> str:
        return RESULT_SUCCESS if self.ok else RESULT_ERROR

    @property
    def status_code(self) -> int:
        """Return the HTTP status code, or 0 when no response was classified."""
        return self.outcome.status_code or 0

    @property
    def error(self) -> str:
        if isinstance(self.outcome, Failure):
            return self.outcome.error
        return ""

    @property
    def category(self) -> str:
        if isinstance(self.outcome, Failure):
            return self.outcome.category
        return STATUS_OK

    @property
    def deadline_exceeded(self) -> bool:
        return isinstance(self.outcome, Failure) and self.outcome.deadline_exceeded

    def duration_ms(self) -> float:
        """Return the duration in milliseconds."""
        return self.duration * 1000.0

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dictionary.

        Duration is serialized as ``duration_ms`` (milliseconds float),
        completed_at as an RFC 3339 string. ``error`` is omitted when empty.
        """
        data: dict[str, object] = {
            "url": self.endpoint,
            "status": self.status,
            "status_code": self.status_code,
            "category": self.category,
            "duration_ms": round(self.duration_ms(), 3),
            "timestamp": self.completed_at.isoformat(),
            "attempts": self.attempts,
        }
        if self.error:
            data["error"] = self.error
        return data


__all__ = [
    "ALL_STATUS_CATEGORIES",
    "RESULT_ERROR",
    "RESULT_SUCCESS",
    "STATUS_CONNECTION_ERROR",
    "STATUS_DNS_ERROR",
    "STATUS_ERROR",
    "STATUS_OK",
    "STATUS_TIMEOUT",
    "STATUS_TLS_ERROR",
    "STATUS_UNHEALTHY",
    "Failure",
    "Outcome",
    "Result",
    "Success",
    "classify_error",
]
