"""Tests for cli.py — argument handling, exit codes and output."""

import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from urlhealth.cli import EXIT_CONFIG, EXIT_OK, EXIT_USAGE, main
from urlhealth.policy import CheckPolicy


@pytest.fixture()
def results(make_result):
    return [
        make_result(endpoint="https://a.io", ok=True, duration=0.1),
        make_result(
            endpoint="https://b.io", ok=False, status_code=503, duration=0.2, category="unhealthy"
        ),
    ]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("TIMEOUT", "CONCURRENCY", "RETRIES", "USER_AGENT"):
        monkeypatch.delenv(f"URLHEALTH_{key}", raising=False)


class TestMain:
    def test_json_output(self, results) -> None:
        out = io.StringIO()
        with patch("urlhealth.cli.check_urls_sync", return_value=results) as check:
            code = main(["--format", "json", "a.io", "b.io"], out=out)

        assert code == EXIT_OK
        urls, policy = check.call_args.args
        assert urls == ["a.io", "b.io"]
        assert policy == CheckPolicy()
        text = out.getvalue()
        payload = text[: text.index("\n=")]
        assert [d["url"] for d in json.loads(payload)] == ["https://a.io", "https://b.io"]
        assert "Success rate: 50.0%" in text

    def test_flags_build_policy(self, results) -> None:
        argv = [
            "--timeout", "500ms",
            "--concurrent", "8",
            "--retries", "0",
            "--user-agent", "probe/9",
            "a.io",
        ]
        with patch("urlhealth.cli.check_urls_sync", return_value=results) as check:
            main(argv, out=io.StringIO())

        policy = check.call_args.args[1]
        assert policy == CheckPolicy(
            timeout=0.5, max_concurrency=8, max_retries=0, user_agent="probe/9"
        )

    def test_env_defaults(self, results, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("URLHEALTH_CONCURRENCY", "12")
        monkeypatch.setenv("URLHEALTH_TIMEOUT", "3s")
        with patch("urlhealth.cli.check_urls_sync", return_value=results) as check:
            main(["a.io"], out=io.StringIO())

        policy = check.call_args.args[1]
        assert policy.max_concurrency == 12
        assert policy.timeout == 3.0

    def test_invalid_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("URLHEALTH_RETRIES", "lots")
        assert main(["a.io"], out=io.StringIO()) == EXIT_CONFIG

    def test_file_overrides_args(self, results, tmp_path: Path) -> None:
        path = tmp_path / "urls.txt"
        path.write_text("# list\nfrom-file.io\n\nhttp://second.io\n", encoding="utf-8")
        with patch("urlhealth.cli.check_urls_sync", return_value=results) as check:
            code = main(["--file", str(path), "ignored.io"], out=io.StringIO())

        assert code == EXIT_OK
        assert check.call_args.args[0] == ["from-file.io", "http://second.io"]

    def test_missing_file(self, tmp_path: Path) -> None:
        code = main(["--file", str(tmp_path / "nope.txt")], out=io.StringIO())
        assert code == EXIT_USAGE

    def test_no_urls(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("urlhealth.cli.check_urls_sync") as check:
            code = main([], out=io.StringIO())

        assert code == EXIT_USAGE
        check.assert_not_called()
        assert "usage: urlhealth" in capsys.readouterr().err

    def test_zero_concurrency_is_config_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["--concurrent", "0", "a.io"], out=io.StringIO())
        assert code == EXIT_CONFIG
        assert "max_concurrency" in capsys.readouterr().err

    def test_invalid_timeout(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--timeout", "soon", "a.io"], out=io.StringIO())
        assert exc_info.value.code == 2

    def test_simple_format(self, results) -> None:
        out = io.StringIO()
        with patch("urlhealth.cli.check_urls_sync", return_value=results):
            main(["--format", "simple", "a.io"], out=out)
        assert out.getvalue().startswith("✓ https://a.io - success")

    def test_table_is_default(self, results) -> None:
        out = io.StringIO()
        with patch("urlhealth.cli.check_urls_sync", return_value=results):
            main(["a.io"], out=out)
        first = out.getvalue().splitlines()[0]
        assert first.split() == ["URL", "Status", "Code", "Duration", "Retries"]

    def test_metrics_file(self, results, tmp_path: Path) -> None:
        path = tmp_path / "metrics.prom"

        def fake_check(urls, policy, *, metrics):
            for r in results:
                metrics.observe_result(r)
            return results

        with patch("urlhealth.cli.check_urls_sync", side_effect=fake_check):
            code = main(["--metrics-file", str(path), "a.io"], out=io.StringIO())

        assert code == EXIT_OK
        text = path.read_text()
        assert 'urlhealth_check_results_total{endpoint="https://b.io",status="unhealthy"}' in text
