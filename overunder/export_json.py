"""Export stored match records to JSON for the dashboard."""
import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import EXPORT_DIR, SEASON_WEEKS
from .database import get_match_records
from .models import OVER, UNDER


def summarize_team(records: list, team: str) -> dict:
    """Over/under tally for one team across its finished matches with a line."""
    graded = [
        r for r in records
        if team in (r.home_team, r.away_team) and r.has_line and r.result in (OVER, UNDER)
    ]
    overs = sum(1 for r in graded if r.result == OVER)
    return {
        "team": team,
        "matches": len(graded),
        "overs": overs,
        "unders": len(graded) - overs,
        "over_rate": round(overs / len(graded), 4) if graded else None,
    }


def export_data(conn: sqlite3.Connection, output_path: Optional[Path] = None) -> Path:
    """Write every stored record plus per-team tallies to a JSON file.

    Returns:
        Path to the created JSON file.
    """
    if output_path is None:
        output_path = EXPORT_DIR / "matches.json"

    records = get_match_records(conn)
    teams = sorted({r.home_team for r in records} | {r.away_team for r in records})

    export = {
        "generated_at": datetime.now().isoformat(),
        "weeks": list(range(1, SEASON_WEEKS + 1)),
        "matches": [r.to_dict() for r in records],
        "teams": [summarize_team(records, team) for team in teams],
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(export, f, indent=2, ensure_ascii=False)

    return output_path
