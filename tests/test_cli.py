"""Tests for the click command line."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from focusflow.cli import main
from focusflow.config import Config

NOW = "2025-01-15T10:00:00Z"


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "tasks": [
                    {"id": "1", "title": "Fix outage", "priority": "high", "dueDate": "2025-01-14", "category": "work"},
                    {"id": "2", "title": "Reply to Sam", "priority": "low", "estimatedTime": 10},
                    {"id": "3", "title": "Ship", "status": "completed", "completedAt": "2025-01-15T08:00:00Z"},
                ],
                "sessions": [
                    {"id": "s1", "type": "focus", "duration": 25, "completedAt": "2025-01-15T09:00:00Z"},
                ],
            }
        )
    )
    return path


@pytest.fixture
def config(snapshot_file):
    return Config(snapshot_file=str(snapshot_file))


@pytest.fixture
def run(config):
    runner = CliRunner()

    def invoke(*args):
        with patch("focusflow.cli.load_config", return_value=config):
            return runner.invoke(main, list(args))

    return invoke


class TestScore:
    def test_json_output_sorted(self, run):
        result = run("score", "--now", NOW, "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [t["id"] for t in data][0] == "1"
        assert data[0]["priorityScore"] == 75

    def test_text_output(self, run):
        result = run("score", "--now", NOW)
        assert result.exit_code == 0
        assert "[ 75] Fix outage (pending)" in result.output

    def test_invalid_now(self, run):
        result = run("score", "--now", "yesterday")
        assert result.exit_code == 1
        assert "Error: Invalid --now timestamp" in result.output


class TestSnapshotOption:
    def test_explicit_snapshot_overrides_config(self, tmp_path, run):
        other = tmp_path / "other.json"
        other.write_text(json.dumps({"tasks": [], "sessions": []}))
        result = run("--snapshot", str(other), "score")
        assert result.exit_code == 0
        assert "No tasks." in result.output

    def test_missing_snapshot(self, tmp_path, run):
        result = run("--snapshot", str(tmp_path / "missing.json"), "dashboard")
        assert result.exit_code == 1
        assert "Error: Snapshot file not found" in result.output


class TestAnalyticsCommands:
    def test_dashboard(self, run):
        result = run("dashboard", "--now", NOW)
        assert result.exit_code == 0
        assert "Productivity score:" in result.output
        assert "Streak: 1 days" in result.output

    def test_trends_json(self, run):
        result = run("trends", "--now", NOW, "--days", "7", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data["dailyData"]) == 7
        assert data["summary"]["totalCompleted"] == 1

    def test_trends_rejects_zero_days(self, run):
        result = run("trends", "--days", "0")
        assert result.exit_code == 1
        assert "days must be a positive integer" in result.output

    def test_suggestions(self, run):
        result = run("suggestions", "--now", NOW)
        assert result.exit_code == 0
        assert "Overdue Tasks Alert" in result.output

    def test_enriched_suggestions_without_key_fall_back(self, run):
        result = run("suggestions", "--now", NOW, "--enrich", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["isAIPowered"] is False

    def test_plan(self, run):
        result = run("plan", "--now", NOW)
        assert result.exit_code == 0
        assert "Recommended order:" in result.output
        assert "1. Fix outage - Overdue - needs immediate attention" in result.output
        assert "Deep Work" in result.output

    def test_recommend(self, run):
        result = run("recommend", "--now", NOW)
        assert result.exit_code == 0
        assert "Next: Fix outage" in result.output
        assert "quick win: Reply to Sam (10 min)" in result.output

    def test_timer_stats(self, run):
        result = run("timer-stats", "--now", NOW, "--json")
        assert json.loads(result.output)["today"] == {"sessions": 1, "minutes": 25}

    def test_time_distribution(self, run):
        result = run("time-distribution", "--json")
        assert result.exit_code == 0
        assert len(json.loads(result.output)["hourlyDistribution"]) == 24

    def test_motivate(self, run):
        result = run("motivate", "--now", NOW, "--json")
        assert json.loads(result.output)["tasksCompletedToday"] == 1


class TestTaskTextCommands:
    def test_analyze(self, run):
        result = run("analyze", "Prepare client report")
        assert result.exit_code == 0
        assert json.loads(result.output)["suggestedCategory"] == "work"

    def test_parse(self, run):
        result = run("parse", "Buy milk")
        assert json.loads(result.output)["title"] == "Buy milk"

    def test_parse_rejects_short_text(self, run):
        result = run("parse", "ab")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_tips(self, run):
        result = run("tips", "--count", "2", "--json")
        assert result.exit_code == 0
        assert 1 <= len(json.loads(result.output)["tips"]) <= 2


class TestSessionCommands:
    def test_record_session(self, run, snapshot_file):
        result = run("record-session", "--duration", "50", "--task-id", "1")
        assert result.exit_code == 0
        assert "Recorded 50-minute focus session" in result.output
        sessions = json.loads(snapshot_file.read_text())["sessions"]
        assert sessions[-1]["duration"] == 50
        assert sessions[-1]["taskId"] == "1"

    def test_record_session_rejects_zero(self, run, snapshot_file):
        result = run("record-session", "--duration", "0")
        assert result.exit_code == 1
        assert len(json.loads(snapshot_file.read_text())["sessions"]) == 1

    def test_timer_runs_one_interval(self, snapshot_file):
        config = Config(snapshot_file=str(snapshot_file), focus_duration=1)
        with patch("focusflow.cli.load_config", return_value=config), patch("focusflow.workflows.time.sleep") as sleep:
            result = CliRunner().invoke(main, ["timer", "--task-id", "2"])
        assert result.exit_code == 0
        assert sleep.call_count == 60
        assert "Started 1-minute focus on Reply to Sam" in result.output
        sessions = json.loads(snapshot_file.read_text())["sessions"]
        assert sessions[-1]["taskId"] == "2"
        assert sessions[-1]["notes"] == "Worked on: Reply to Sam"

    def test_timer_unknown_task(self, run):
        result = run("timer", "--task-id", "nope")
        assert result.exit_code == 1
        assert "No task with id nope" in result.output
