"""Aggregate statistics over a batch of Results."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from urlhealth.check_result import Result


@dataclass(frozen=True)
class Stats:
    total: int = 0
    success_count: int = 0
    error_count: int = 0
    average: float = 0.0
    total_duration: float = 0.0
    success_rate: float = 0.0


def compute_stats(results: Sequence[Result]) -> Stats:
    """Count successes and errors and sum durations (seconds)."""
    if not results:
        return Stats()

    total_duration = sum(r.duration for r in results)
    success_count = sum(1 for r in results if r.ok)
    return Stats(
        total=len(results),
        success_count=success_count,
        error_count=len(results) - success_count,
        average=total_duration / len(results),
        total_duration=total_duration,
        success_rate=success_count / len(results) * 100.0,
    )
