"""Season scrape orchestration."""
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from selenium.common.exceptions import TimeoutException, WebDriverException

from .browser import SeleniumPage
from .classifier import classify_result
from .config import (
    ScraperConfig,
    CONSENT_BUTTON_TEXT,
    CONSENT_TIMEOUT,
    ROOT_NAVIGATION_TIMEOUT,
    DETAIL_NAVIGATION_TIMEOUT,
)
from .database import NullSink
from .extractors import MatchListExtractor, OddsExtractor
from .models import MatchSummary, MatchRecord, BettingLine
from .navigator import WeekNavigator, NavState
from .parsing import parse_match_date

logger = logging.getLogger(__name__)


class SeasonScraper:
    """
    Walks every week of the season and stores one record per match.

    A failure while processing a single match is logged and counted, and
    the scraper moves on to the next match. Browser errors outside the
    per-match loop end the run early. The browser is always closed.
    """

    def __init__(
        self,
        config: ScraperConfig,
        sink=None,
        page=None,
        navigator: Optional[WeekNavigator] = None,
        match_extractor: Optional[MatchListExtractor] = None,
        odds_extractor: Optional[OddsExtractor] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.sink = sink if sink is not None and not config.dry_run else NullSink()
        self.page = page if page is not None else SeleniumPage(headless=config.headless)
        self.navigator = navigator or WeekNavigator(
            self.page,
            rewind_attempts=config.rewind_attempts,
            label_attempts=config.label_attempts,
            label_poll=config.label_poll,
            animation_wait=config.week_animation,
        )
        self.match_extractor = match_extractor or MatchListExtractor(config.lazy_load)
        self.odds_extractor = odds_extractor or OddsExtractor(config.market_filter)
        self.clock = clock
        self.week_stats: List[Dict] = []
        self.aborted: Optional[str] = None

    def run(self) -> List[Dict]:
        """
        Scrape the whole season.

        Returns:
            List of per-week stats dicts
        """
        self.week_stats = []
        self.aborted = None

        try:
            logger.info(f"Navigating to {self.config.season_url}")
            self.page.goto(self.config.season_url, ROOT_NAVIGATION_TIMEOUT)
            self.dismiss_consent()
            self.navigator.rewind()

            for week in range(1, self.config.weeks + 1):
                state = self.navigator.await_week(week)
                stats = self.scrape_week(week)
                stats["confirmed"] = state == NavState.CONFIRMED
                self.week_stats.append(stats)

                if week < self.config.weeks:
                    self.navigator.next_week()

        except WebDriverException as e:
            self.aborted = e.msg or type(e).__name__
            logger.error(f"Season scrape stopped at week {self.navigator.week}: {self.aborted}")
        finally:
            logger.info("Scraping complete or stopped, closing browser")
            self.page.close()

        return self.week_stats

    def dismiss_consent(self) -> bool:
        """Close the cookie consent modal if it shows up."""
        try:
            self.page.click_button_text(CONSENT_BUTTON_TEXT, CONSENT_TIMEOUT)
        except (TimeoutException, WebDriverException):
            logger.info("No cookie modal found")
            return False
        logger.info("Cookie modal closed")
        return True

    def scrape_week(self, week: int) -> Dict:
        """Extract, classify and store every match of the displayed week."""
        logger.info(f"Scraping week {week}...")
        summaries = self.match_extractor.extract(self.page)

        finished = sum(1 for s in summaries if s.is_finished)
        stats = {
            "week": week,
            "matches": len(summaries),
            "finished": finished,
            "scheduled": len(summaries) - finished,
            "saved": 0,
            "errors": 0,
        }
        logger.info(
            f"Found {stats['matches']} matches for week {week} "
            f"({stats['finished']} finished, {stats['scheduled']} scheduled)"
        )

        for summary in summaries:
            try:
                record = self.process_match(summary, week)
                if self.sink.append(record) is not None:
                    stats["saved"] += 1
            except Exception as e:
                logger.error(f"Error scraping match {summary.home_team} vs {summary.away_team}: {e}")
                stats["errors"] += 1

            self.page.sleep(self.config.match_delay)

        logger.info(f"Week {week} done: {stats['saved']} saved, {stats['errors']} errors")
        return stats

    def fetch_line(self, summary: MatchSummary) -> Optional[BettingLine]:
        """Read the over/under line from the match's detail page in a separate tab."""
        with self.page.open_secondary(summary.detail_link, DETAIL_NAVIGATION_TIMEOUT) as detail:
            return self.odds_extractor.extract(detail)

    def process_match(self, summary: MatchSummary, week: int) -> MatchRecord:
        line = None
        if summary.is_finished and summary.detail_link:
            line = self.fetch_line(summary)

        total_score, result = classify_result(
            summary.status, summary.score_home, summary.score_away, line
        )
        record = MatchRecord.build(
            summary,
            week=week,
            line=line,
            total_score=total_score,
            result=result,
            match_timestamp=parse_match_date(summary.date),
            recorded_at=self.clock(),
        )

        score = f"{summary.score_home}-{summary.score_away}" if summary.is_finished else "v"
        logger.info(
            f"[Week {week}] {summary.date}: {summary.home_team} {score} {summary.away_team} "
            f"({summary.status}) -> {record.result}"
        )
        return record
