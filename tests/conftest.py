"""Shared fixtures: a fake page controller and an in-memory database."""
from contextlib import contextmanager

import pytest
from selenium.common.exceptions import NoSuchElementException, TimeoutException

from overunder.config import SELECTORS, PREV_DISABLED_CLASS, ScraperConfig
from overunder.database import get_connection, init_database
from overunder.extractors import MATCH_ROWS_JS


def market_html(header, options):
    """Render one iddaa market block; options is a list of (label, value)."""
    option_html = "".join(
        f'<div class="widget-iddaa-markets__option">'
        f'<span class="widget-iddaa-markets__label">{label}</span>'
        f'<span class="widget-iddaa-markets__value">{value}</span>'
        f"</div>"
        for label, value in options
    )
    return (
        f'<div class="widget-iddaa-markets__market">'
        f'<div class="widget-iddaa-markets__market-header">{header}</div>'
        f"{option_html}</div>"
    )


def detail_html(*markets):
    return f"<html><body><div class='markets'>{''.join(markets)}</div></body></html>"


def row(home, away, score_home="85", score_away="78", status="MS",
        date="Salı 30.09.2025", link="https://example.test/mac/1"):
    return {
        "date": date,
        "homeTeam": home,
        "awayTeam": away,
        "scoreHome": score_home,
        "scoreAway": score_away,
        "status": status,
        "matchLink": link,
    }


class FakeDetailPage:
    """Match detail page: serves fixed html, optionally missing the iddaa tab."""

    def __init__(self, html="", missing=()):
        self.html = html
        self.missing = set(missing)
        self.clicked = []
        self.sleeps = []

    def wait_for_selector(self, selector, timeout=10):
        if selector in self.missing:
            raise TimeoutException(f"Timed out waiting for {selector}")

    def click(self, selector, timeout=10):
        self.clicked.append(selector)

    def click_text(self, selector, text):
        self.clicked.append((selector, text))
        return True

    def content(self):
        return self.html

    def sleep(self, seconds):
        self.sleeps.append(seconds)


class FakeSeasonPage:
    """
    Simulates the fixture widget: a current week moved by prev/next arrows.

    label_lag makes the label trail the real week for that many reads
    after each click, like the slide animation on the site.
    """

    def __init__(self, start_week=5, weeks=28, rows_by_week=None, details=None,
                 label_lag=0, consent=False, prev_ever_disabled=True,
                 label_format="{week}. Hafta (1 Ekim - 3 Ekim)"):
        self.week = start_week
        self.weeks = weeks
        self.rows_by_week = rows_by_week or {}
        self.details = details or {}
        self.label_lag = label_lag
        self.consent = consent
        self.prev_ever_disabled = prev_ever_disabled
        self.label_format = label_format
        self._shown_week = start_week
        self._lag_left = 0
        self.clicks = []
        self.sleeps = []
        self.opened = []
        self.open_contexts = 0
        self.max_open_contexts = 0
        self.visited = []
        self.closed = False

    def goto(self, url, timeout=30):
        self.visited.append(url)

    def wait_for_selector(self, selector, timeout=10):
        return None

    def click(self, selector, timeout=10):
        self.clicks.append(selector)
        if selector == SELECTORS["prev_arrow"]:
            self.week = max(1, self.week - 1)
        elif selector == SELECTORS["next_arrow"]:
            self.week = min(self.weeks, self.week + 1)
        self._lag_left = self.label_lag

    def click_button_text(self, text, timeout=10):
        if not self.consent:
            raise TimeoutException("no consent button")
        self.consent = False

    def read_text(self, selector):
        if selector != SELECTORS["week_label"]:
            raise NoSuchElementException(selector)
        if self._lag_left > 0:
            self._lag_left -= 1
        else:
            self._shown_week = self.week
        return self.label_format.format(week=self._shown_week)

    def has_class(self, selector, class_name):
        return (
            selector == SELECTORS["prev_arrow"]
            and class_name == PREV_DISABLED_CLASS
            and self.prev_ever_disabled
            and self.week == 1
        )

    def evaluate(self, script, *args):
        if script == MATCH_ROWS_JS:
            return list(self.rows_by_week.get(self.week, []))
        return None

    def sleep(self, seconds):
        self.sleeps.append(seconds)

    @contextmanager
    def open_secondary(self, url, timeout=30):
        self.opened.append(url)
        self.open_contexts += 1
        self.max_open_contexts = max(self.max_open_contexts, self.open_contexts)
        try:
            detail = self.details[url]
            if isinstance(detail, Exception):
                raise detail
            yield detail
        finally:
            self.open_contexts -= 1

    def close(self):
        self.closed = True


class RecordingSink:
    def __init__(self, fail_for=()):
        self.records = []
        self.fail_for = set(fail_for)

    def append(self, record):
        if record.home_team in self.fail_for:
            raise RuntimeError("write failed")
        self.records.append(record)
        return len(self.records)


@pytest.fixture
def fast_config():
    return ScraperConfig(
        weeks=3,
        match_delay=0,
        week_animation=0,
        label_poll=0,
        lazy_load=0,
        market_filter=0,
    )


@pytest.fixture
def conn():
    conn = get_connection(":memory:")
    init_database(conn)
    yield conn
    conn.close()
