"""Tests for omnitrace/cli.py

Commands run end to end through main() against a temporary SQLite file and
an empty config directory, so the shipped args/ and data/ are never touched.
"""

import argparse
import json
import sys
from datetime import datetime

import pytest

from omnitrace import __version__, cli
from omnitrace.privacy.private_mode import MASK
from omnitrace.timeutil import from_local_datetime


@pytest.fixture
def run_cli(monkeypatch, capsys, tmp_path):
    """Run `omnitrace <argv>` and return (exit_code, parsed JSON output)."""
    db_path = tmp_path / "omnitrace.db"

    def runner(*argv: str):
        monkeypatch.setattr(
            sys, "argv",
            ["omnitrace", "--config-dir", str(tmp_path), "--db", str(db_path), *argv],
        )
        code = 0
        try:
            cli.main()
        except SystemExit as e:
            code = e.code
        out = capsys.readouterr().out
        return code, json.loads(out)

    return runner


@pytest.fixture
def logged(run_cli):
    """One 30-minute study entry at 9:00 on 2026-03-10."""
    code, output = run_cli(
        "log", "--title", "Thesis", "--category", "study", "--duration", "30",
        "--keywords", "draft, chapter 2", "--at", "2026-03-10T09:00",
    )
    assert code == 0
    return output["data"]


# ─────────────────────────────────────────────────────────────────────────────
# Argument helpers
# ─────────────────────────────────────────────────────────────────────────────


class TestParseTime:
    """Tests for --start/--end/--at parsing."""

    def test_epoch_ms(self):
        assert cli.parse_time("1700000000000") == 1700000000000

    def test_iso_local(self):
        assert cli.parse_time("2026-03-10T09:30") == from_local_datetime(datetime(2026, 3, 10, 9, 30))

    def test_invalid(self):
        with pytest.raises(argparse.ArgumentTypeError):
            cli.parse_time("yesterday")


def test_parse_keywords():
    assert cli.parse_keywords(" a, ,b ,c") == ("a", "b", "c")


def test_version(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["omnitrace", "--version"])

    cli.main()

    assert capsys.readouterr().out.strip() == f"omnitrace {__version__}"


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────


class TestLogAndTimeline:
    """Tests for log, segments, merge and at."""

    def test_log_manual_event(self, logged):
        assert logged["type"] == "manual_event"
        assert logged["confidence"] == "manual"
        assert logged["duration"] == 30 * 60_000
        assert logged["keywords"] == ["draft", "chapter 2"]
        assert logged["context"]["screen"] == "cli"

    def test_negative_duration(self, run_cli):
        code, output = run_cli("log", "--title", "X", "--duration", "-5")

        assert code == 1
        assert output["success"] is False
        assert "negative" in output["error"]

    def test_segments(self, run_cli, logged):
        code, output = run_cli("segments", "--scope", "all")

        assert code == 0
        assert [(s["activity"], s["endTime"] - s["startTime"]) for s in output["data"]] == [
            ("Thesis", 30 * 60_000)
        ]

    def test_explicit_window(self, run_cli, logged):
        _, output = run_cli("segments", "--start", "2026-03-11T00:00", "--end", "2026-03-12T00:00")

        assert output["data"] == []

    def test_half_window_rejected(self, run_cli):
        code, output = run_cli("segments", "--start", "2026-03-11T00:00")

        assert code == 1
        assert "together" in output["error"]

    def test_merge_uses_configured_mode(self, run_cli, logged):
        _, output = run_cli("merge", "--scope", "all")

        assert output["data"]["mode"] == "focus"
        assert len(output["data"]["segments"]) == 1

    def test_at(self, run_cli, logged):
        _, output = run_cli("at", "2026-03-10T09:10")

        assert output["data"]["activity"]["activity"] == "Thesis"
        assert output["data"]["nearestEvent"]["id"] == logged["id"]


class TestAnalytics:
    """Tests for the analytics commands."""

    def test_heatmap_bins(self, run_cli, logged):
        _, output = run_cli("heatmap", "--scope", "all", "--bins", "4")

        assert len(output["data"]["bins"]) == 4

    def test_score_gated_without_data(self, run_cli):
        _, output = run_cli("score", "--scope", "all")

        assert output["success"] is True

    def test_reconstruct_rejects_reversed_window(self, run_cli):
        code, output = run_cli("reconstruct", "--start", "2026-03-10T12:00", "--end", "2026-03-10T09:00")

        assert code == 1
        assert output["success"] is False

    def test_reconstruct(self, run_cli, logged):
        _, output = run_cli("reconstruct", "--start", "2026-03-10T08:00", "--end", "2026-03-10T12:00")

        assert [e["id"] for e in output["data"]["rawEvents"]] == [logged["id"]]


class TestSearch:
    """Tests for the search command."""

    def test_keyword(self, run_cli, logged):
        _, output = run_cli("search", "--keyword", "chapter")

        assert output["data"]["count"] == 1

    def test_min_duration_in_minutes(self, run_cli, logged):
        _, output = run_cli("search", "--min-duration", "31")

        assert output["data"]["count"] == 0

    def test_list_presets(self, run_cli):
        _, output = run_cli("search", "--list-presets")

        assert [p["name"] for p in output["data"]] == ["Long Idle Periods", "Manual Events", "Today"]

    def test_unknown_preset(self, run_cli):
        code, output = run_cli("search", "--preset", "Yesterday")

        assert code == 1
        assert "Unknown preset" in output["error"]


class TestAsk:
    """Tests for the OMNIBRAIN command."""

    def test_records_open_and_submit(self, run_cli):
        _, output = run_cli("ask", "What", "happened", "today?")

        assert output["data"]["scope"] == "today"
        assert output["data"]["mode"] == "explain"
        assert output["data"]["text"].startswith("📊 Your data (computed):")

        _, search = run_cli("search")
        assert sorted(e["type"] for e in search["data"]["events"]) == ["button_click", "navigation"]

    def test_no_record(self, run_cli):
        run_cli("ask", "--no-record", "When do I focus best?")

        _, search = run_cli("search")
        assert search["data"]["count"] == 0

    def test_suggestions(self, run_cli):
        _, output = run_cli("ask", "--suggestions")

        assert "When do I focus best?" in output["data"]["suggestedQuestions"]

    def test_requires_question(self, run_cli):
        code, _ = run_cli("ask")

        assert code == 1


class TestSessions:
    """Tests for session and recover."""

    def test_start_end_list(self, run_cli):
        _, started = run_cli("session", "start")
        _, ended = run_cli("session", "end")
        _, listed = run_cli("session", "list")

        assert ended["data"]["id"] == started["data"]["id"]
        assert "endTime" in ended["data"]
        assert [s["id"] for s in listed["data"]] == [started["data"]["id"]]

    def test_end_without_open_session(self, run_cli):
        code, output = run_cli("session", "end")

        assert code == 1
        assert "No open session" in output["error"]

    def test_recover_nothing(self, run_cli):
        _, output = run_cli("recover")

        assert output["data"] == {"recovered": False, "session": None}


class TestPrivacy:
    """Tests for export, wipe and Private Mode."""

    def test_export_csv(self, run_cli, logged, tmp_path):
        target = tmp_path / "out" / "backup.csv"

        _, output = run_cli("export", "--format", "csv", "--output", str(target))

        assert output["data"]["path"] == str(target)
        assert target.read_text(encoding="utf-8").splitlines()[1].startswith(f'"{logged["id"]}"')

    def test_wipe_requires_yes(self, run_cli, logged):
        code, _ = run_cli("wipe")
        _, search = run_cli("search")

        assert code == 1
        assert search["data"]["count"] == 1

    def test_wipe(self, run_cli, logged):
        code, output = run_cli("wipe", "--yes")
        _, search = run_cli("search")

        assert code == 0
        assert output["data"] == {"wiped": True}
        assert search["data"]["count"] == 0

    def test_force_wipe_deletes_corrupt_database(self, run_cli, tmp_path):
        db_path = tmp_path / "omnitrace.db"
        db_path.write_bytes(b"garbage")

        code, _ = run_cli("wipe", "--yes", "--force")

        assert code == 0
        assert not db_path.exists()

    def test_private_flag_masks_titles(self, run_cli, logged):
        _, output = run_cli("--private", "segments", "--scope", "all")

        assert output["data"][0]["activity"] == MASK

    def test_private_mode_from_config(self, run_cli, logged, tmp_path):
        (tmp_path / "omnitrace.yaml").write_text("privacy:\n  private_mode: true\n")

        _, output = run_cli("search")

        event = output["data"]["events"][0]
        assert event["title"] == MASK
        assert event["keywords"] == [MASK, MASK]

    def test_private_flag_masks_insight_values(self, run_cli, logged):
        _, output = run_cli("--private", "insights", "--scope", "all")

        cards = {card["title"]: card["value"] for card in output["data"]}
        assert cards["Most Frequent Activity"] == f"{MASK} (1 times)"
        assert "Thesis" not in json.dumps(output)
