"""Over/under result classification."""
from typing import Optional, Tuple

from .config import FINISHED_STATUS
from .models import BettingLine, OVER, UNDER, SCHEDULED, NO_BETTING_DATA
from .parsing import parse_score


def classify_result(
    status: Optional[str],
    score_home: Optional[str],
    score_away: Optional[str],
    line: Optional[BettingLine],
) -> Tuple[Optional[int], str]:
    """
    Classify a match against its over/under line.

    A total equal to the limit counts as Under: only a total strictly
    above the limit is Over.

    Args:
        status: Status token from the fixture list ('MS' when finished)
        score_home: Home score text
        score_away: Away score text
        line: Extracted betting line, or None when unavailable

    Returns:
        Tuple of (total_score, result)

    Raises:
        ValueError: if the match is finished with a line but a score is not a number
    """
    if status != FINISHED_STATUS:
        return None, SCHEDULED

    if line is None:
        return None, NO_BETTING_DATA

    home = parse_score(score_home)
    away = parse_score(score_away)
    if home is None or away is None:
        raise ValueError(f"Unparsable final score {score_home!r}-{score_away!r}")

    total_score = home + away
    return total_score, OVER if total_score > line.limit else UNDER
