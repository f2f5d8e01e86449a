"""Configuration and settings for the season scraper."""
import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
DB_PATH = Path(os.getenv("OVERUNDER_DB_PATH", DATA_DIR / "matches.db"))
EXPORT_DIR = DATA_DIR / "exports"

# Season identity (EuroLeague fixture on mackolik)
SEASON_URL = "https://www.mackolik.com/basketbol/puan-durumu/avrupa-euroleague/fikstur/8ds5tn5aaaoqkqh0fqwubxjax"
SEASON_WEEKS = 28

# Status and label sentinels used by the site
FINISHED_STATUS = "MS"
WEEK_LABEL_SUFFIX = ". Hafta"
UNKNOWN_VALUE = "TBD"
CONSENT_BUTTON_TEXT = "Kabul Et"
OVER_UNDER_FILTER_TEXT = "Altı/Üstü"
OVER_UNDER_HEADERS = ("ALT/ÜST", "Alt/Üst", "Altı/Üstü")
OVER_LABELS = ("Üst", "Üstü")

# Delays (seconds)
MATCH_DELAY_SECONDS = 0.5  # Politeness delay between matches
WEEK_ANIMATION_SECONDS = 3  # Wait after clicking a week arrow
LABEL_POLL_SECONDS = 2
LAZY_LOAD_SECONDS = 2
MARKET_FILTER_SECONDS = 2

# Attempt bounds
REWIND_ATTEMPTS = 40
LABEL_ATTEMPTS = 5

# Timeouts (seconds)
ROOT_NAVIGATION_TIMEOUT = 60
DETAIL_NAVIGATION_TIMEOUT = 30
MATCH_LIST_TIMEOUT = 20
ELEMENT_TIMEOUT = 10
CONSENT_TIMEOUT = 5

# CSS selectors
SELECTORS = {
    "week_label": ".widget-gameweek__selected-label",
    "prev_arrow": ".widget-gameweek__arrow--prev",
    "next_arrow": ".widget-gameweek__arrow--next",
    "match_list": ".p0c-competition-match-list",
    "iddaa_tab": ".widget-match-detail-submenu__icon--iddaa",
    "market_tabs": ".widget-dropdown-tabs__link",
    "market": ".widget-iddaa-markets__market",
    "market_header": ".widget-iddaa-markets__market-header, .widget-iddaa-markets__market-title",
    "market_option": ".widget-iddaa-markets__option",
    "option_label": ".widget-iddaa-markets__label, .widget-iddaa-markets__option-label",
    "option_value": ".widget-iddaa-markets__value, .widget-iddaa-markets__option-value",
}
PREV_DISABLED_CLASS = "widget-gameweek__arrow--disabled"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ScraperConfig:
    """Options for a single season run."""
    season_url: str = SEASON_URL
    weeks: int = SEASON_WEEKS
    headless: bool = True
    dry_run: bool = False
    db_path: Path = DB_PATH
    match_delay: float = MATCH_DELAY_SECONDS
    week_animation: float = WEEK_ANIMATION_SECONDS
    label_poll: float = LABEL_POLL_SECONDS
    lazy_load: float = LAZY_LOAD_SECONDS
    market_filter: float = MARKET_FILTER_SECONDS
    rewind_attempts: int = REWIND_ATTEMPTS
    label_attempts: int = LABEL_ATTEMPTS


def load_config(**overrides) -> ScraperConfig:
    """Build a ScraperConfig from the environment, then apply explicit overrides."""
    config = ScraperConfig(
        headless=_env_flag("OVERUNDER_HEADLESS", True),
        dry_run=_env_flag("OVERUNDER_DRY_RUN", False),
    )
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    return config
