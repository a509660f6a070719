"""Unit tests for the src.cli.tracker command-line tool.

Commands run against a temporary SQLite file selected through
FEEDBACK_DB_PATH, with no pollen API key so no network calls happen.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from src.api.auth import verify_owner_token
from src.cli.tracker import _build_parser, _format_text_output, main
from src.models.analysis import CategoryStat, CorrelationResult


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("FEEDBACK_DB_PATH", str(tmp_path / "feedback.db"))
    monkeypatch.setenv("GOOGLE_POLLEN_API_KEY", "")
    monkeypatch.setenv("AUTH_SECRET", "")
    return tmp_path


class TestParser:
    def test_submit_arguments(self):
        args = _build_parser().parse_args(
            ["submit", "--owner", "alice", "--feedback", "3", "--lat", "51.5", "--lng", "-0.12"],
        )
        assert args.command == "submit"
        assert args.owner == "alice"
        assert args.lng == "-0.12"
        assert args.json_output is False

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])


class TestTokenCommand:
    def test_signed_token(self, cli_env, monkeypatch, capsys):
        monkeypatch.setenv("AUTH_SECRET", "cli-secret")
        assert main(["--quiet", "token", "--owner", "alice"]) == 0
        token = capsys.readouterr().out.strip()
        assert verify_owner_token(token, "cli-secret") == "alice"

    def test_dev_mode_token(self, cli_env, capsys):
        assert main(["--quiet", "token", "--owner", "alice"]) == 0
        captured = capsys.readouterr()
        assert captured.out.strip() == "alice"
        assert "AUTH_SECRET is not set" in captured.err


class TestSubmitAndAnalyze:
    def test_submit_then_analyze(self, cli_env, capsys):
        for score in ("1", "2", "3"):
            code = main([
                "submit", "--owner", "alice", "--feedback", score,
                "--lat", "51.5", "--lng", "-0.12", "--json",
            ])
            assert code == 0
        assert capsys.readouterr().out.count('"success": true') == 3

        assert main(["analyze", "--owner", "alice", "--json"]) == 0
        out = capsys.readouterr().out
        result = json.loads(out[out.index("{\n"):])
        assert result["owner_id"] == "alice"
        assert result["data_points"] == 3
        assert result["correlations"] == {}

    def test_invalid_coordinates_exit_nonzero(self, cli_env, capsys):
        code = main([
            "--quiet", "submit", "--owner", "alice", "--feedback", "2",
            "--lat", "north", "--lng", "0",
        ])
        assert code == 1
        assert "invalid-argument" in capsys.readouterr().err


class TestFormatTextOutput:
    def test_lists_categories(self):
        result = CorrelationResult(
            owner_id="alice",
            data_points=5,
            correlations={
                "oak": CategoryStat(correlation=0.98, significance=0.0, significant=True),
                "grass": CategoryStat(correlation=0.0, significance=0.0, error="zero variance"),
            },
            analyzed_at=datetime(2026, 5, 1, tzinfo=timezone.utc),
        )
        text = _format_text_output(result)
        assert "Data points: 5" in text
        assert "oak" in text and "yes" in text
        assert "(zero variance)" in text

    def test_no_categories(self):
        result = CorrelationResult(
            owner_id="alice",
            data_points=1,
            analyzed_at=datetime(2026, 5, 1, tzinfo=timezone.utc),
        )
        assert "Not enough data" in _format_text_output(result)
