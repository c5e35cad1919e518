"""Check scheduler: bounded-concurrency fan-out of endpoint checks."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from datetime import UTC, datetime

from urlhealth.check_result import Failure, Result, classify_error
from urlhealth.checker import ConfigurationError, Transport
from urlhealth.executor import CheckExecutor, Clock, Sleep
from urlhealth.metrics import MetricsExporter
from urlhealth.parser import normalize_url
from urlhealth.policy import CheckPolicy

logger = logging.getLogger("urlhealth.scheduler")


class CheckScheduler:
    """Runs one batch of endpoint checks on a fixed pool of asyncio workers.

    Every worker pulls the next pending endpoint from a shared queue and runs
    it through the admission gate (a semaphore of ``max_concurrency`` slots).
    Results travel back through a second queue and are drained once all
    workers have finished, so each endpoint yields exactly one Result.

    Example:

        async with AiohttpTransport() as transport:
            scheduler = CheckScheduler(transport)
            results = await scheduler.check_all(["example.com"], CheckPolicy())
    """

    def __init__(
        self,
        transport: Transport,
        *,
        metrics: MetricsExporter | None = None,
        log: logging.Logger | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._log = log or logger
        self._metrics = metrics
        self._clock = clock
        self._executor = CheckExecutor(transport, clock=clock, sleep=sleep, log=self._log)

    async def check_all(self, endpoints: Sequence[str], policy: CheckPolicy) -> list[Result]:
        """Check every endpoint and return the Results in completion order.

        Raises ConfigurationError before dispatching anything when the policy
        is invalid or ``endpoints`` is empty.
        """
        policy.validate()
        if not endpoints:
            msg = "at least one endpoint required"
            raise ConfigurationError(msg)

        # Conservative ceiling for the whole batch; grows with the batch size.
        deadline = self._clock() + policy.timeout * len(endpoints)

        pending: asyncio.Queue[str] = asyncio.Queue()
        for raw in endpoints:
            pending.put_nowait(normalize_url(raw))

        results: asyncio.Queue[Result] = asyncio.Queue()
        gate = asyncio.Semaphore(policy.max_concurrency)
        worker_count = min(policy.max_concurrency, len(endpoints))

        self._log.info(
            "Checking %d endpoints (concurrency=%d, timeout=%gs, retries=%d)",
            len(endpoints),
            policy.max_concurrency,
            policy.timeout,
            policy.max_retries,
        )

        workers = [
            asyncio.create_task(self._worker(pending, results, gate, policy, deadline))
            for _ in range(worker_count)
        ]
        try:
            await asyncio.gather(*workers)
        finally:
            for task in workers:
                task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

        collected: list[Result] = []
        while not results.empty():
            collected.append(results.get_nowait())

        failed = sum(1 for r in collected if not r.ok)
        self._log.info(
            "Checked %d endpoints: %d ok, %d failed",
            len(collected),
            len(collected) - failed,
            failed,
        )
        return collected

    async def _worker(
        self,
        pending: asyncio.Queue[str],
        results: asyncio.Queue[Result],
        gate: asyncio.Semaphore,
        policy: CheckPolicy,
        deadline: float,
    ) -> None:
        """Pull endpoints until the queue is empty."""
        while True:
            try:
                endpoint = pending.get_nowait()
            except asyncio.QueueEmpty:
                return
            async with gate:
                result = await self._check_once(endpoint, policy, deadline)
            results.put_nowait(result)

    async def _check_once(self, endpoint: str, policy: CheckPolicy, deadline: float) -> Result:
        """Run one check; any error escaping the executor becomes a Failure.

        Transport errors are reported by the executor with their attempt
        count; this guard only covers failures inside the executor itself.
        """
        if self._metrics is not None:
            self._metrics.check_started()
        start = self._clock()
        try:
            result = await self._executor.check(endpoint, policy, deadline)
        except Exception as e:
            self._log.warning("Check for %s aborted: %s", endpoint, e)
            result = Result(
                endpoint=endpoint,
                outcome=Failure(error=str(e) or type(e).__name__, category=classify_error(e)),
                duration=self._clock() - start,
                completed_at=datetime.now(UTC),
                attempts=1,
            )
        finally:
            if self._metrics is not None:
                self._metrics.check_finished()

        if result.deadline_exceeded:
            self._log.warning("Deadline exceeded while checking %s", endpoint)
        elif not result.ok and result.outcome.status_code is None:
            self._log.debug("Check failed for %s: %s", endpoint, result.error)
        if self._metrics is not None:
            self._metrics.observe_result(result)
        return result
