"""Extraction of fixture rows and over/under odds from mackolik pages."""
import logging
from typing import List, Optional

from bs4 import BeautifulSoup
from selenium.common.exceptions import TimeoutException, WebDriverException

from .config import (
    SELECTORS,
    OVER_UNDER_FILTER_TEXT,
    OVER_UNDER_HEADERS,
    OVER_LABELS,
    LAZY_LOAD_SECONDS,
    MARKET_FILTER_SECONDS,
    MATCH_LIST_TIMEOUT,
    ELEMENT_TIMEOUT,
)
from .models import MatchSummary, BettingLine
from .parsing import parse_decimal, parse_limit

logger = logging.getLogger(__name__)

# Runs in the page. Only headers with a rendered size are read: the widget
# keeps neighbouring weeks mounted but hidden.
MATCH_ROWS_JS = """
const results = [];
const headers = Array.from(document.querySelectorAll('.p0c-competition-match-list__title'))
    .filter(el => el.offsetWidth > 0 && el.offsetHeight > 0);

const text = (root, selector) => {
    const el = root.querySelector(selector);
    return el ? el.textContent.trim() : null;
};

headers.forEach(header => {
    const container = header.nextElementSibling;
    if (!container || !container.classList.contains('p0c-competition-match-list__matches')) {
        return;
    }
    container.querySelectorAll('.p0c-competition-match-list__row').forEach(row => {
        const homeTeam = text(row, '.p0c-competition-match-list__team-name--home .p0c-competition-match-list__team-full');
        const awayTeam = text(row, '.p0c-competition-match-list__team-name--away .p0c-competition-match-list__team-full');
        if (!homeTeam || !awayTeam) {
            return;
        }
        const link = row.querySelector('a.p0c-competition-match-list__match-link');
        results.push({
            date: header.textContent.trim(),
            homeTeam: homeTeam,
            awayTeam: awayTeam,
            scoreHome: text(row, '.p0c-competition-match-list__team--home .p0c-competition-match-list__score'),
            scoreAway: text(row, '.p0c-competition-match-list__team--away .p0c-competition-match-list__score'),
            status: text(row, '.p0c-competition-match-list__status'),
            matchLink: link ? link.href : null
        });
    });
});
return results;
"""

SCROLL_TO_BOTTOM_JS = "window.scrollBy(0, document.body.scrollHeight);"


class MatchListExtractor:
    """Reads every visible match row of the currently displayed week."""

    def __init__(self, lazy_load_wait: float = LAZY_LOAD_SECONDS):
        self.lazy_load_wait = lazy_load_wait

    def extract(self, page) -> List[MatchSummary]:
        page.wait_for_selector(SELECTORS["match_list"], MATCH_LIST_TIMEOUT)

        # Scroll down so lazily rendered rows get mounted
        page.evaluate(SCROLL_TO_BOTTOM_JS)
        page.sleep(self.lazy_load_wait)

        rows = page.evaluate(MATCH_ROWS_JS) or []
        summaries = []
        for row in rows:
            summary = MatchSummary.from_row(row)
            if summary is not None:
                summaries.append(summary)
        return summaries


def parse_over_under_markets(html: str) -> Optional[BettingLine]:
    """
    Find the over/under line in a rendered iddaa markets section.

    Args:
        html: Page source of a match detail page

    Returns:
        BettingLine from the first complete over/under market, or None
    """
    soup = BeautifulSoup(html, "lxml")

    for market in soup.select(SELECTORS["market"]):
        header_elem = market.select_one(SELECTORS["market_header"])
        if not header_elem:
            continue

        header = header_elem.get_text(strip=True)
        if not any(name in header for name in OVER_UNDER_HEADERS):
            continue

        limit = parse_limit(header)
        if limit is None:
            continue

        over_payout = None
        for option in market.select(SELECTORS["market_option"]):
            label = option.select_one(SELECTORS["option_label"])
            if label and label.get_text(strip=True) in OVER_LABELS:
                value = option.select_one(SELECTORS["option_value"])
                over_payout = parse_decimal(value.get_text(strip=True)) if value else None
                break

        if over_payout is not None:
            return BettingLine(limit=limit, over_payout=over_payout)

    return None


class OddsExtractor:
    """Opens the iddaa tab of a match detail page and reads the over/under line."""

    def __init__(self, filter_wait: float = MARKET_FILTER_SECONDS):
        self.filter_wait = filter_wait

    def extract(self, page) -> Optional[BettingLine]:
        """
        Extract the over/under line from a loaded match detail page.

        Missing tabs, timeouts and unparsable markets all mean the line is
        not available yet; they return None instead of raising.
        """
        try:
            logger.debug("Opening iddaa tab")
            page.wait_for_selector(SELECTORS["iddaa_tab"], ELEMENT_TIMEOUT)
            page.click(SELECTORS["iddaa_tab"])

            logger.debug(f"Filtering markets for {OVER_UNDER_FILTER_TEXT}")
            page.wait_for_selector(SELECTORS["market_tabs"], ELEMENT_TIMEOUT)
            if not page.click_text(SELECTORS["market_tabs"], OVER_UNDER_FILTER_TEXT):
                logger.debug("Over/under filter tab not found, scanning all markets")

            page.sleep(self.filter_wait)
            line = parse_over_under_markets(page.content())
        except TimeoutException:
            logger.info("Betting info not available yet (timeout)")
            return None
        except WebDriverException as e:
            logger.info(f"Failed to read betting info: {e.msg}")
            return None

        if line is None:
            logger.info("No over/under market found")
        return line
