"""Week navigation for the paginated fixture widget."""
import logging
from enum import Enum
from typing import Optional

from selenium.common.exceptions import NoSuchElementException

from .config import (
    SELECTORS,
    PREV_DISABLED_CLASS,
    WEEK_LABEL_SUFFIX,
    REWIND_ATTEMPTS,
    LABEL_ATTEMPTS,
    LABEL_POLL_SECONDS,
    WEEK_ANIMATION_SECONDS,
    ELEMENT_TIMEOUT,
)

logger = logging.getLogger(__name__)


class NavState(Enum):
    UNKNOWN = "unknown"
    REWINDING = "rewinding"
    AT_WEEK_ONE = "at_week_one"
    REWIND_EXHAUSTED = "rewind_exhausted"
    AWAITING_LABEL = "awaiting_label"
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"


def week_label(week: int) -> str:
    """Label prefix the widget shows for a round, e.g. '3. Hafta'."""
    return f"{week}{WEEK_LABEL_SUFFIX}"


def label_matches(label: Optional[str], week: int) -> bool:
    """Check whether a selected-week label denotes the given round."""
    if not label:
        return False
    return label.strip().startswith(week_label(week))


class WeekNavigator:
    """
    Drives the gameweek widget using its prev/next arrows.

    The widget has no addressable URL per week; the selected label is the
    only evidence of where it is. Rewinding stops when the label reads
    week 1 or the prev arrow is disabled, and gives up after a bounded
    number of clicks. Waiting for a week's label gives up after a bounded
    number of polls. Neither outcome is fatal: the caller proceeds with
    whatever week is displayed.
    """

    def __init__(
        self,
        page,
        rewind_attempts: int = REWIND_ATTEMPTS,
        label_attempts: int = LABEL_ATTEMPTS,
        label_poll: float = LABEL_POLL_SECONDS,
        animation_wait: float = WEEK_ANIMATION_SECONDS,
    ):
        self.page = page
        self.rewind_attempts = rewind_attempts
        self.label_attempts = label_attempts
        self.label_poll = label_poll
        self.animation_wait = animation_wait
        self.state = NavState.UNKNOWN
        self.week: Optional[int] = None

    def current_label(self) -> str:
        """Read the selected-week label, waiting for the widget to render."""
        self.page.wait_for_selector(SELECTORS["week_label"], ELEMENT_TIMEOUT)
        return self.page.read_text(SELECTORS["week_label"]).strip()

    def _read_label(self) -> str:
        try:
            return self.page.read_text(SELECTORS["week_label"]).strip()
        except NoSuchElementException:
            return ""

    def rewind(self) -> NavState:
        """Click 'previous' until week 1 is shown."""
        logger.info("Navigating back to the first week...")
        self.state = NavState.REWINDING

        for attempt in range(1, self.rewind_attempts + 1):
            label = self.current_label()
            logger.debug(f"Rewind attempt {attempt}: current week label '{label}'")

            if label_matches(label, 1):
                logger.info("Reached week 1")
                return self._at_week_one()

            # A disabled arrow is stronger evidence than the label text
            if self.page.has_class(SELECTORS["prev_arrow"], PREV_DISABLED_CLASS):
                logger.info("Prev arrow disabled, assuming week 1")
                return self._at_week_one()

            self.page.click(SELECTORS["prev_arrow"])
            self.page.sleep(self.animation_wait)

        logger.warning(
            f"Could not confirm week 1 after {self.rewind_attempts} attempts, continuing anyway"
        )
        self.state = NavState.REWIND_EXHAUSTED
        self.week = 1
        return self.state

    def _at_week_one(self) -> NavState:
        self.state = NavState.AT_WEEK_ONE
        self.week = 1
        return self.state

    def await_week(self, week: int) -> NavState:
        """Poll the label until it shows the given week."""
        self.week = week
        self.state = NavState.AWAITING_LABEL
        label = ""

        for _ in range(self.label_attempts):
            label = self._read_label()
            if label_matches(label, week):
                self.state = NavState.CONFIRMED
                return self.state
            logger.info(f"Waiting for label to switch to week {week} (current: '{label}')")
            self.page.sleep(self.label_poll)

        logger.warning(f"Week {week} label not confirmed (last seen: '{label}'), scraping anyway")
        self.state = NavState.UNCONFIRMED
        return self.state

    def next_week(self) -> int:
        """Click 'next' and wait for the slide animation."""
        if self.week is None:
            raise RuntimeError("Cannot advance before rewinding to the first week")

        logger.info(f"Moving from week {self.week} to week {self.week + 1}...")
        self.page.click(SELECTORS["next_arrow"])
        self.page.sleep(self.animation_wait)
        self.week += 1
        self.state = NavState.AWAITING_LABEL
        return self.week
