"""Data models for the season scraper.

Result values are stored as the dashboard displays them, so the missing-line
result is spelled "No Betting Data" rather than "NoBettingData".
"""
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional, Union

from .config import FINISHED_STATUS, UNKNOWN_VALUE

# Result values
OVER = "Over"
UNDER = "Under"
PENDING = "Pending"
SCHEDULED = "Scheduled"
NO_BETTING_DATA = "No Betting Data"

RESULTS = (OVER, UNDER, PENDING, SCHEDULED, NO_BETTING_DATA)


@dataclass
class MatchSummary:
    """A single row from a week's fixture list."""
    date: str
    home_team: str
    away_team: str
    score_home: Optional[str] = None
    score_away: Optional[str] = None
    status: Optional[str] = None
    detail_link: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        return self.status == FINISHED_STATUS

    @classmethod
    def from_row(cls, row: dict) -> Optional["MatchSummary"]:
        """Build a summary from a raw row dict, or None if a team is missing."""
        home_team = (row.get("homeTeam") or "").strip()
        away_team = (row.get("awayTeam") or "").strip()
        if not home_team or not away_team:
            return None
        return cls(
            date=(row.get("date") or "").strip(),
            home_team=home_team,
            away_team=away_team,
            score_home=row.get("scoreHome"),
            score_away=row.get("scoreAway"),
            status=row.get("status"),
            detail_link=row.get("matchLink") or None,
        )


@dataclass(frozen=True)
class BettingLine:
    """Over/under line of a match: threshold and the payout for 'over'."""
    limit: float
    over_payout: float


@dataclass
class MatchRecord:
    """The persisted unit: one match as seen by one scrape run."""
    date: str
    home_team: str
    away_team: str
    score_home: Optional[str]
    score_away: Optional[str]
    status: Optional[str]
    detail_link: Optional[str]
    week: int
    limit: Union[float, str]
    over_payout: Union[float, str]
    total_score: Optional[int]
    result: str
    match_timestamp: Optional[datetime]
    recorded_at: datetime

    @classmethod
    def build(
        cls,
        summary: MatchSummary,
        week: int,
        line: Optional[BettingLine],
        total_score: Optional[int],
        result: str,
        match_timestamp: Optional[datetime],
        recorded_at: Optional[datetime] = None,
    ) -> "MatchRecord":
        return cls(
            date=summary.date,
            home_team=summary.home_team,
            away_team=summary.away_team,
            score_home=summary.score_home,
            score_away=summary.score_away,
            status=summary.status,
            detail_link=summary.detail_link,
            week=week,
            limit=line.limit if line else UNKNOWN_VALUE,
            over_payout=line.over_payout if line else UNKNOWN_VALUE,
            total_score=total_score,
            result=result,
            match_timestamp=match_timestamp,
            recorded_at=recorded_at or datetime.now(),
        )

    @property
    def has_line(self) -> bool:
        return self.limit != UNKNOWN_VALUE and self.over_payout != UNKNOWN_VALUE

    def to_dict(self) -> dict:
        data = asdict(self)
        data["match_timestamp"] = self.match_timestamp.isoformat() if self.match_timestamp else None
        data["recorded_at"] = self.recorded_at.isoformat()
        return data
