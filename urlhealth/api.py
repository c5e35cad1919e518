"""Public API: one-call batch checks over a managed aiohttp transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from urlhealth.check_result import Result
from urlhealth.metrics import MetricsExporter
from urlhealth.policy import CheckPolicy
from urlhealth.scheduler import CheckScheduler
from urlhealth.transport import AiohttpTransport

logger = logging.getLogger("urlhealth")


async def check_urls(
    endpoints: Sequence[str],
    policy: CheckPolicy | None = None,
    *,
    metrics: MetricsExporter | None = None,
    log: logging.Logger | None = None,
) -> list[Result]:
    """Check ``endpoints`` concurrently and return one Result per endpoint.

    Opens an AiohttpTransport for the duration of the batch.

        results = await check_urls(["example.com", "http://localhost:8080"])
    """
    policy = policy or CheckPolicy()
    async with AiohttpTransport() as transport:
        scheduler = CheckScheduler(transport, metrics=metrics, log=log or logger)
        return await scheduler.check_all(endpoints, policy)


def check_urls_sync(
    endpoints: Sequence[str],
    policy: CheckPolicy | None = None,
    *,
    metrics: MetricsExporter | None = None,
    log: logging.Logger | None = None,
) -> list[Result]:
    """Blocking variant of check_urls for code without an event loop."""
    return asyncio.run(check_urls(endpoints, policy, metrics=metrics, log=log))
