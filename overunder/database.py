"""Database connection, record storage and persistence sinks."""
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional, List

from .config import DB_PATH, UNKNOWN_VALUE
from .models import MatchRecord

logger = logging.getLogger(__name__)


def get_connection(db_path: Path = DB_PATH) -> sqlite3.Connection:
    """Create a database connection with row factory enabled."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database transactions."""
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def init_database(conn: sqlite3.Connection) -> None:
    """Initialize the database schema."""
    conn.executescript("""
        -- One row per match per scrape run (append only)
        CREATE TABLE IF NOT EXISTS matches (
            id INTEGER PRIMARY KEY,
            week INTEGER NOT NULL,
            date TEXT,
            home_team TEXT NOT NULL,
            away_team TEXT NOT NULL,
            score_home TEXT,
            score_away TEXT,
            status TEXT,
            detail_link TEXT,
            betting_limit REAL,
            over_payout REAL,
            total_score INTEGER,
            result TEXT NOT NULL,
            match_timestamp DATETIME,
            recorded_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );

        -- Per-team history, pointing at the season rows
        CREATE TABLE IF NOT EXISTS team_history (
            id INTEGER PRIMARY KEY,
            team TEXT NOT NULL,
            match_id INTEGER REFERENCES matches(id) ON DELETE CASCADE
        );

        -- Indexes
        CREATE INDEX IF NOT EXISTS idx_matches_week ON matches(week);
        CREATE INDEX IF NOT EXISTS idx_matches_time ON matches(match_timestamp);
        CREATE INDEX IF NOT EXISTS idx_team_history_team ON team_history(team);
    """)
    conn.commit()


def _known(value):
    """Map the 'TBD' sentinel to NULL for storage."""
    return None if value == UNKNOWN_VALUE else value


def insert_match_record(conn: sqlite3.Connection, record: MatchRecord) -> int:
    """Append a match record and its two team history entries."""
    with transaction(conn):
        cursor = conn.execute(
            """
            INSERT INTO matches (
                week, date, home_team, away_team, score_home, score_away, status,
                detail_link, betting_limit, over_payout, total_score, result,
                match_timestamp, recorded_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.week,
                record.date,
                record.home_team,
                record.away_team,
                record.score_home,
                record.score_away,
                record.status,
                record.detail_link,
                _known(record.limit),
                _known(record.over_payout),
                record.total_score,
                record.result,
                record.match_timestamp.isoformat() if record.match_timestamp else None,
                record.recorded_at.isoformat(),
            )
        )
        match_id = cursor.lastrowid
        conn.executemany(
            "INSERT INTO team_history (team, match_id) VALUES (?, ?)",
            [(record.home_team, match_id), (record.away_team, match_id)]
        )
    return match_id


def _row_to_record(row: sqlite3.Row) -> MatchRecord:
    return MatchRecord(
        date=row["date"],
        home_team=row["home_team"],
        away_team=row["away_team"],
        score_home=row["score_home"],
        score_away=row["score_away"],
        status=row["status"],
        detail_link=row["detail_link"],
        week=row["week"],
        limit=row["betting_limit"] if row["betting_limit"] is not None else UNKNOWN_VALUE,
        over_payout=row["over_payout"] if row["over_payout"] is not None else UNKNOWN_VALUE,
        total_score=row["total_score"],
        result=row["result"],
        match_timestamp=datetime.fromisoformat(row["match_timestamp"]) if row["match_timestamp"] else None,
        recorded_at=datetime.fromisoformat(row["recorded_at"]),
    )


def get_match_records(
    conn: sqlite3.Connection,
    week: Optional[int] = None,
    team: Optional[str] = None,
    limit: Optional[int] = None,
    result: Optional[str] = None
) -> List[MatchRecord]:
    """Get stored records ordered by kickoff, optionally for one week, team or result."""
    query = "SELECT m.* FROM matches m"
    clauses = []
    params: list = []

    if team:
        query += " JOIN team_history t ON t.match_id = m.id"
        clauses.append("t.team = ?")
        params.append(team)
    if week is not None:
        clauses.append("m.week = ?")
        params.append(week)
    if result:
        clauses.append("m.result = ?")
        params.append(result)
    if clauses:
        query += " WHERE " + " AND ".join(clauses)

    query += " ORDER BY m.match_timestamp, m.week, m.id"
    if limit:
        query += " LIMIT ?"
        params.append(limit)

    cursor = conn.execute(query, params)
    return [_row_to_record(row) for row in cursor.fetchall()]


def get_week_stats(conn: sqlite3.Connection) -> List[dict]:
    """Get record counts and over/under tallies per week."""
    cursor = conn.execute(
        """
        SELECT
            week,
            COUNT(*) as matches,
            SUM(CASE WHEN result = 'Over' THEN 1 ELSE 0 END) as overs,
            SUM(CASE WHEN result = 'Under' THEN 1 ELSE 0 END) as unders,
            SUM(CASE WHEN result = 'No Betting Data' THEN 1 ELSE 0 END) as no_data,
            SUM(CASE WHEN result = 'Scheduled' THEN 1 ELSE 0 END) as scheduled
        FROM matches
        GROUP BY week
        ORDER BY week
        """
    )
    return [dict(row) for row in cursor.fetchall()]


def clear_matches(conn: sqlite3.Connection) -> int:
    """Delete all stored records, returning how many matches were removed."""
    with transaction(conn):
        conn.execute("DELETE FROM team_history")
        cursor = conn.execute("DELETE FROM matches")
    return cursor.rowcount


class NullSink:
    """Sink used for dry runs: records are logged and dropped."""

    def append(self, record: MatchRecord) -> None:
        logger.debug(f"Dry run, not saving {record.home_team} vs {record.away_team}")
        return None


class SqliteSink:
    """Appends match records to the sqlite database."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        init_database(conn)

    def append(self, record: MatchRecord) -> int:
        match_id = insert_match_record(self.conn, record)
        logger.debug(f"Saved {record.home_team} vs {record.away_team} as match {match_id}")
        return match_id
