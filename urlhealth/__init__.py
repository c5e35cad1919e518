"""urlhealth — concurrent availability checks for lists of URLs."""

from __future__ import annotations

from urlhealth.api import check_urls, check_urls_sync
from urlhealth.check_result import (
    ALL_STATUS_CATEGORIES,
    STATUS_CONNECTION_ERROR,
    STATUS_DNS_ERROR,
    STATUS_ERROR,
    STATUS_OK,
    STATUS_TIMEOUT,
    STATUS_TLS_ERROR,
    STATUS_UNHEALTHY,
    Failure,
    Outcome,
    Result,
    Success,
    classify_error,
)
from urlhealth.checker import (
    CheckConnectionRefusedError,
    CheckDnsError,
    CheckError,
    CheckTimeoutError,
    CheckTlsError,
    ConfigurationError,
    DeadlineExceededError,
    Transport,
)
from urlhealth.executor import CheckExecutor
from urlhealth.parser import load_url_file, normalize_url, parse_url_list
from urlhealth.policy import CheckPolicy, default_policy, parse_duration, policy_from_env
from urlhealth.scheduler import CheckScheduler
from urlhealth.stats import Stats, compute_stats
from urlhealth.transport import AiohttpTransport

__all__ = [
    "ALL_STATUS_CATEGORIES",
    "AiohttpTransport",
    "CheckConnectionRefusedError",
    "CheckDnsError",
    "CheckError",
    "CheckExecutor",
    "CheckPolicy",
    "CheckScheduler",
    "CheckTimeoutError",
    "CheckTlsError",
    "ConfigurationError",
    "DeadlineExceededError",
    "Failure",
    "Outcome",
    "Result",
    "STATUS_CONNECTION_ERROR",
    "STATUS_DNS_ERROR",
    "STATUS_ERROR",
    "STATUS_OK",
    "STATUS_TIMEOUT",
    "STATUS_TLS_ERROR",
    "STATUS_UNHEALTHY",
    "Stats",
    "Success",
    "Transport",
    "check_urls",
    "check_urls_sync",
    "classify_error",
    "compute_stats",
    "default_policy",
    "load_url_file",
    "normalize_url",
    "parse_duration",
    "parse_url_list",
    "policy_from_env",
]
