"""Transport interface and check error types."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class ConfigurationError(ValueError):
    """Invalid check policy or endpoint list; raised before any work starts."""


class CheckError(Exception):
    """Base transport-level check error with optional status classification."""

    def __init__(self, *args: object, status_category: str = "error") -> None:
        super().__init__(*args)
        self._status_category = status_category

    @property
    def status_category(self) -> str:
        """Return the status category for this error."""
        return self._status_category

    @property
    def retryable(self) -> bool:
        """Whether another attempt may follow this error."""
        return True


class CheckTimeoutError(CheckError):
    """A single attempt ran past the per-attempt timeout."""

    def __init__(self, *args: object) -> None:
        super().__init__(*args, status_category="timeout")

    @property
    def retryable(self) -> bool:
        return False


class DeadlineExceededError(CheckError):
    """The overall batch deadline expired."""

    def __init__(self, *args: object) -> None:
        super().__init__(*args, status_category="timeout")

    @property
    def retryable(self) -> bool:
        return False


class CheckConnectionRefusedError(CheckError):
    """Connection refused."""

    def __init__(self, *args: object) -> None:
        super().__init__(*args, status_category="connection_error")


class CheckDnsError(CheckError):
    """DNS resolution failure."""

    def __init__(self, *args: object) -> None:
        super().__init__(*args, status_category="dns_error")


class CheckTlsError(CheckError):
    """TLS/SSL error."""

    def __init__(self, *args: object) -> None:
        super().__init__(*args, status_category="tls_error")


class Transport(Protocol):
    """Protocol for the outbound HTTP capability shared by all workers."""

    async def get(self, url: str, headers: Mapping[str, str], timeout: float) -> int:
        """Issue one GET, drain a bounded body prefix and return the status code.

        Raises CheckError (or a subclass) when no response could be obtained.
        """
        ...
