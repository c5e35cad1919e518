"""Single-check executor: one retry-aware probe of one endpoint."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from urlhealth.check_result import STATUS_UNHEALTHY, Failure, Result, Success, classify_error
from urlhealth.checker import CheckError, CheckTimeoutError, DeadlineExceededError, Transport
from urlhealth.policy import CheckPolicy

logger = logging.getLogger("urlhealth.executor")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

DEADLINE_EXCEEDED_MESSAGE = "overall deadline exceeded"


class CheckExecutor:
    """Runs the attempts of one check sequentially.

    ``clock`` and ``sleep`` are injectable so tests can drive backoff and
    deadlines without real waiting. Deadlines are absolute ``clock()`` values.
    The executor keeps no per-check state and is safe to share between
    concurrent workers.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        log: logging.Logger | None = None,
    ) -> None:
        self._transport = transport
        self._clock = clock
        self._sleep = sleep
        self._log = log or logger

    async def check(self, endpoint: str, policy: CheckPolicy, deadline: float) -> Result:
        """Probe ``endpoint`` (already normalized) and return its Result."""
        headers = {"User-Agent": policy.user_agent}
        start = self._clock()
        attempts = 0

        while True:
            attempts += 1
            try:
                status = await self._attempt(endpoint, headers, policy.timeout, deadline)
            except CheckError as e:
                last_attempt = attempts >= policy.max_attempts
                self._log.debug(
                    "Attempt %d/%d for %s failed: %s", attempts, policy.max_attempts, endpoint, e
                )
                if last_attempt or not e.retryable:
                    return self._failure(endpoint, e, start, attempts)

                backoff = attempts * policy.backoff_step
                remaining = deadline - self._clock()
                if backoff >= remaining:
                    await self._sleep(max(remaining, 0.0))
                    expired = DeadlineExceededError(DEADLINE_EXCEEDED_MESSAGE)
                    return self._failure(endpoint, expired, start, attempts)
                await self._sleep(backoff)
                continue

            if status < 400:
                outcome: Success | Failure = Success(status_code=status)
            else:
                outcome = Failure(error="", status_code=status, category=STATUS_UNHEALTHY)
            return self._result(endpoint, outcome, start, attempts)

    async def _attempt(
        self, endpoint: str, headers: dict[str, str], timeout: float, deadline: float
    ) -> int:
        """Issue one GET bounded by both the attempt timeout and the deadline."""
        remaining = deadline - self._clock()
        if remaining <= 0:
            raise DeadlineExceededError(DEADLINE_EXCEEDED_MESSAGE)

        bound = min(timeout, remaining)
        try:
            return await asyncio.wait_for(
                self._transport.get(endpoint, headers, timeout), timeout=bound
            )
        except CheckError:
            raise
        except TimeoutError as exc:
            if bound < timeout:
                raise DeadlineExceededError(DEADLINE_EXCEEDED_MESSAGE) from exc
            msg = f"HTTP request to {endpoint} timed out after {timeout:g}s"
            raise CheckTimeoutError(msg) from exc
        except Exception as e:
            # Raw socket errors or request-construction bugs from other transports.
            msg = str(e) or type(e).__name__
            raise CheckError(msg, status_category=classify_error(e)) from e

    def _failure(self, endpoint: str, err: CheckError, start: float, attempts: int) -> Result:
        outcome = Failure(
            error=str(err),
            category=classify_error(err),
            deadline_exceeded=isinstance(err, DeadlineExceededError),
        )
        return self._result(endpoint, outcome, start, attempts)

    def _result(
        self, endpoint: str, outcome: Success | Failure, start: float, attempts: int
    ) -> Result:
        return Result(
            endpoint=endpoint,
            outcome=outcome,
            duration=self._clock() - start,
            completed_at=datetime.now(UTC),
            attempts=attempts,
        )
