"""Export stored match records to CSV and Parquet for analysis."""
import sqlite3
from pathlib import Path
from typing import Optional

import pandas as pd

from .config import EXPORT_DIR

COLUMNS = [
    "week", "date", "match_timestamp", "home_team", "away_team",
    "score_home", "score_away", "status", "betting_limit", "over_payout",
    "total_score", "result", "recorded_at",
]


def load_records_frame(conn: sqlite3.Connection) -> pd.DataFrame:
    """Load all stored records into a DataFrame ordered by kickoff."""
    query = f"""
        SELECT {", ".join(COLUMNS)}
        FROM matches
        ORDER BY match_timestamp, week, id
    """
    df = pd.read_sql_query(query, conn)

    # Convert datetime columns
    df["match_timestamp"] = pd.to_datetime(df["match_timestamp"])
    df["recorded_at"] = pd.to_datetime(df["recorded_at"])

    # Margin of the total over the line, only for graded matches
    df["margin"] = df["total_score"] - df["betting_limit"]
    return df


def export_records_csv(conn: sqlite3.Connection, output_path: Optional[Path] = None) -> Path:
    """Export all records to CSV.

    Args:
        conn: Database connection
        output_path: Output file path. Defaults to data/exports/matches.csv

    Returns:
        Path to the created CSV file.
    """
    if output_path is None:
        output_path = EXPORT_DIR / "matches.csv"

    df = load_records_frame(conn)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    return output_path


def export_records_parquet(conn: sqlite3.Connection, output_path: Optional[Path] = None) -> Path:
    """Export all records to Parquet.

    Returns:
        Path to the created Parquet file.
    """
    if output_path is None:
        output_path = EXPORT_DIR / "matches.parquet"

    df = load_records_frame(conn)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(output_path, index=False)
    return output_path
