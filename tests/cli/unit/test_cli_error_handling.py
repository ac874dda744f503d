"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from bulk_json_submitter.cli import main
from bulk_json_submitter.run_execution import bulk_submission_use_case


def _stub_client_factory(handler):
    return lambda config: httpx.Client(transport=httpx.MockTransport(handler))


def test_missing_required_flags_print_usage_and_exit_1(capsys) -> None:
    exit_code = main([])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "missing required parameters: method, url, input, email, password" in captured.err
    assert "Usage:" in captured.err
    assert "Traceback" not in captured.err


def test_invalid_method_exits_1(capsys, tmp_path: Path) -> None:
    exit_code = main(
        [
            "--method",
            "GET",
            "--url",
            "http://localhost/api",
            "--input",
            str(tmp_path / "in.json"),
            "--email",
            "a@example.com",
            "--password",
            "pw",
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "invalid method: GET. Must be POST or PUT" in captured.err


@pytest.mark.parametrize("url", ["http://[::1/items", "http://localhost:abc/items"])
def test_unparseable_url_prints_usage_and_exits_1(capsys, tmp_path: Path, url: str) -> None:
    exit_code = main(
        [
            "--method",
            "POST",
            "--url",
            url,
            "--input",
            str(tmp_path / "in.json"),
            "--email",
            "a@example.com",
            "--password",
            "pw",
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "invalid url" in captured.err
    assert "Usage:" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_login_failure_reports_error_without_dispatching(
    capsys, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    input_path = tmp_path / "in.json"
    input_path.write_text('[{"a":1}]', encoding="utf-8")
    target_calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/users/login":
            return httpx.Response(401, json={"error": "bad credentials"})
        target_calls.append(request)
        return httpx.Response(200)

    monkeypatch.setattr(
        bulk_submission_use_case,
        "create_http_client",
        _stub_client_factory(handler),
    )

    exit_code = main(
        [
            "--method",
            "POST",
            "--url",
            "http://stub.local/api",
            "--input",
            str(input_path),
            "--email",
            "a@example.com",
            "--password",
            "wrong",
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 0
    assert "Error logging in: login failed with status code: 401" in captured.err
    assert "Execution Summary" not in captured.out
    assert target_calls == []


def test_unreadable_token_file_reports_error(
    capsys, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    input_path = tmp_path / "in.json"
    input_path.write_text("[1]", encoding="utf-8")
    monkeypatch.setattr(
        bulk_submission_use_case,
        "create_http_client",
        _stub_client_factory(lambda request: httpx.Response(200)),
    )

    exit_code = main(
        [
            "--method",
            "PUT",
            "--url",
            "http://stub.local/api",
            "--input",
            str(input_path),
            "--token",
            str(tmp_path / "missing-token.txt"),
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 0
    assert "error reading token file" in captured.err


def test_write_config_refuses_to_overwrite(capsys, tmp_path: Path) -> None:
    output_path = tmp_path / "bulk-submit.yaml"
    output_path.write_text("already-there", encoding="utf-8")

    exit_code = main(["--write-config", str(output_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "already exists" in captured.err
    assert output_path.read_text(encoding="utf-8") == "already-there"
