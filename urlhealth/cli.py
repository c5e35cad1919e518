"""Command-line entry point: urlhealth [options] <url1> <url2> ..."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from prometheus_client import CollectorRegistry

from urlhealth.api import check_urls_sync
from urlhealth.checker import ConfigurationError
from urlhealth.metrics import MetricsExporter
from urlhealth.parser import load_url_file
from urlhealth.policy import CheckPolicy, parse_duration, policy_from_env
from urlhealth.render import FORMATS, get_renderer, render_stats

logger = logging.getLogger("urlhealth.cli")

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_CONFIG = 2

USAGE_EXAMPLES = """\
examples:
  urlhealth https://google.com https://github.com
  urlhealth --file urls.txt --concurrent 10
  urlhealth --timeout 5s --format json https://example.com
"""


def _duration_arg(value: str) -> float:
    try:
        return parse_duration(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser(defaults: CheckPolicy) -> argparse.ArgumentParser:
    """Build the argument parser; ``defaults`` supplies the policy defaults."""
    parser = argparse.ArgumentParser(
        prog="urlhealth",
        description="Concurrent availability checks for a list of URLs",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("urls", nargs="*", help="URLs to check (scheme defaults to https://)")
    parser.add_argument(
        "--file",
        help="File with URLs, one per line; blank lines and # comments are ignored",
    )
    parser.add_argument(
        "--timeout",
        type=_duration_arg,
        default=defaults.timeout,
        help=f"Timeout per request, e.g. 500ms, 10s (default: {defaults.timeout:g}s)",
    )
    parser.add_argument(
        "--concurrent",
        type=int,
        default=defaults.max_concurrency,
        help=f"Number of simultaneous checks (default: {defaults.max_concurrency})",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=defaults.max_retries,
        help=f"Retries after a transport error (default: {defaults.max_retries})",
    )
    parser.add_argument(
        "--user-agent",
        default=defaults.user_agent,
        help=f"User-Agent header (default: {defaults.user_agent})",
    )
    parser.add_argument(
        "--format",
        default="table",
        help=f"Output format: {', '.join(FORMATS)} (default: table)",
    )
    parser.add_argument(
        "--metrics-file",
        help="Write Prometheus metrics in text format to this file after the run",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored table output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    out = out or sys.stdout
    try:
        defaults = policy_from_env()
    except ConfigurationError as e:
        print(f"urlhealth: {e}", file=sys.stderr)
        return EXIT_CONFIG

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
    )

    if args.file:
        try:
            urls = load_url_file(args.file)
        except OSError as e:
            print(f"urlhealth: cannot read {args.file}: {e}", file=sys.stderr)
            return EXIT_USAGE
    else:
        urls = list(args.urls)

    if not urls:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    policy = CheckPolicy(
        timeout=args.timeout,
        max_concurrency=args.concurrent,
        max_retries=args.retries,
        user_agent=args.user_agent,
    )

    metrics = MetricsExporter(registry=CollectorRegistry()) if args.metrics_file else None

    try:
        results = check_urls_sync(urls, policy, metrics=metrics)
    except ConfigurationError as e:
        print(f"urlhealth: {e}", file=sys.stderr)
        return EXIT_CONFIG

    color = not args.no_color and out.isatty()
    get_renderer(args.format, color=color)(results, out)
    render_stats(results, out)

    if metrics is not None:
        metrics.write_textfile(args.metrics_file)
        logger.info("metrics written to %s", args.metrics_file)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
