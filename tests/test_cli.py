from datetime import datetime

import pytest
from click.testing import CliRunner

from overunder import main
from overunder.database import get_connection, init_database, insert_match_record
from overunder.models import BettingLine, MatchRecord, MatchSummary, OVER


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "matches.db"
    monkeypatch.setattr(main, "DB_PATH", path)
    monkeypatch.setattr(main, "get_connection", lambda *args: get_connection(path))
    monkeypatch.setattr(main.console, "width", 300)
    return path


def seed(path):
    conn = get_connection(path)
    init_database(conn)
    summary = MatchSummary("Salı 30.09.2025", "Anadolu Efes", "Fenerbahçe Beko", "85", "78", "MS")
    insert_match_record(conn, MatchRecord.build(
        summary, week=1, line=BettingLine(160.5, 1.85), total_score=163, result=OVER,
        match_timestamp=datetime(2025, 9, 30, 12), recorded_at=datetime(2025, 10, 1, 8),
    ))
    conn.close()


def test_show_results_empty(db_path):
    result = CliRunner().invoke(main.cli, ["show-results"])

    assert result.exit_code == 0
    assert "No records found" in result.output


def test_show_results_lists_records(db_path):
    seed(db_path)

    result = CliRunner().invoke(main.cli, ["show-results", "--week", "1"])

    assert result.exit_code == 0
    assert "Anadolu Efes" in result.output
    assert "160.5" in result.output
    assert "1.85" in result.output


def test_clear_db_without_database(db_path):
    result = CliRunner().invoke(main.cli, ["clear-db", "--yes"])

    assert result.exit_code == 1
    assert "Nothing to clear" in result.output


def test_clear_db(db_path):
    seed(db_path)

    result = CliRunner().invoke(main.cli, ["clear-db", "--yes"])

    assert result.exit_code == 0
    assert "Cleared 1 matches" in result.output


def test_scrape_dry_run_prints_summary(db_path, monkeypatch):
    captured = {}

    class StubScraper:
        def __init__(self, config, sink):
            captured["config"] = config
            captured["sink"] = sink
            self.aborted = None

        def run(self):
            return [{"week": 1, "matches": 4, "finished": 3, "scheduled": 1,
                     "saved": 0, "errors": 0, "confirmed": True}]

    monkeypatch.setattr(main, "SeasonScraper", StubScraper)

    result = CliRunner().invoke(main.cli, ["scrape", "--dry-run", "--weeks", "1"])

    assert result.exit_code == 0
    assert captured["config"].dry_run is True
    assert captured["config"].weeks == 1
    assert captured["sink"] is None
    assert "Scraping complete" in result.output


def test_scrape_reports_early_stop(db_path, monkeypatch):
    class StoppedScraper:
        def __init__(self, config, sink):
            self.aborted = "net::ERR_NAME_NOT_RESOLVED"

        def run(self):
            return []

    monkeypatch.setattr(main, "SeasonScraper", StoppedScraper)

    result = CliRunner().invoke(main.cli, ["scrape", "--dry-run"])

    assert result.exit_code == 1
    assert "stopped early" in result.output


def test_show_results_filters_by_result(db_path):
    seed(db_path)

    over = CliRunner().invoke(main.cli, ["show-results", "--result", "Over"])
    under = CliRunner().invoke(main.cli, ["show-results", "--result", "Under"])
    invalid = CliRunner().invoke(main.cli, ["show-results", "--result", "Push"])

    assert "Anadolu Efes" in over.output
    assert "No records found" in under.output
    assert invalid.exit_code == 2
