"""CheckPolicy: per-run configuration of the checking engine."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

from urlhealth.checker import ConfigurationError

DEFAULT_TIMEOUT: float = 10.0
DEFAULT_CONCURRENCY: int = 5
DEFAULT_RETRIES: int = 1
DEFAULT_USER_AGENT: str = "HealthChecker/1.0"
DEFAULT_BACKOFF_STEP: float = 0.5

ENV_PREFIX = "URLHEALTH_"

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS: dict[str, float] = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


@dataclass(frozen=True)
class CheckPolicy:
    """Timeouts, concurrency and retry settings for one batch of checks."""

    timeout: float = DEFAULT_TIMEOUT
    max_concurrency: int = DEFAULT_CONCURRENCY
    max_retries: int = DEFAULT_RETRIES
    user_agent: str = DEFAULT_USER_AGENT
    backoff_step: float = DEFAULT_BACKOFF_STEP

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def validate(self) -> None:
        """Validate the policy values."""
        if self.max_concurrency <= 0:
            msg = f"max_concurrency must be positive, got {self.max_concurrency}"
            raise ConfigurationError(msg)
        if self.max_retries < 0:
            msg = f"max_retries must not be negative, got {self.max_retries}"
            raise ConfigurationError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be positive, got {self.timeout}"
            raise ConfigurationError(msg)
        if self.backoff_step < 0:
            msg = f"backoff_step must not be negative, got {self.backoff_step}"
            raise ConfigurationError(msg)


def parse_duration(value: str) -> float:
    """Parse ``500ms``, ``10s``, ``1.5m``, ``1h`` or a bare number of seconds."""
    match = _DURATION_PATTERN.match(value)
    if match is None:
        msg = f"invalid duration {value!r}: expected a number with optional ms/s/m/h unit"
        raise ConfigurationError(msg)
    amount, unit = match.groups()
    return float(amount) * _DURATION_UNITS[unit or "s"]


def policy_from_env(environ: Mapping[str, str] | None = None) -> CheckPolicy:
    """Build a CheckPolicy from URLHEALTH_* environment variables.

    Recognized: URLHEALTH_TIMEOUT, URLHEALTH_CONCURRENCY, URLHEALTH_RETRIES,
    URLHEALTH_USER_AGENT. Unset variables keep the defaults.
    """
    env = os.environ if environ is None else environ
    kwargs: dict[str, object] = {}

    timeout = env.get(f"{ENV_PREFIX}TIMEOUT")
    if timeout is not None:
        kwargs["timeout"] = parse_duration(timeout)

    for key, field_name in (("CONCURRENCY", "max_concurrency"), ("RETRIES", "max_retries")):
        raw = env.get(f"{ENV_PREFIX}{key}")
        if raw is None:
            continue
        try:
            kwargs[field_name] = int(raw)
        except ValueError:
            msg = f"invalid value for {ENV_PREFIX}{key}: {raw!r}, expected an integer"
            raise ConfigurationError(msg) from None

    user_agent = env.get(f"{ENV_PREFIX}USER_AGENT")
    if user_agent:
        kwargs["user_agent"] = user_agent

    return CheckPolicy(**kwargs)  # type: ignore[arg-type]


def default_policy() -> CheckPolicy:
    """Return a policy with default values."""
    return CheckPolicy()
