"""Selenium-backed page controller used by the scraper."""
import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from selenium import webdriver
from selenium.common.exceptions import NoSuchWindowException
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from webdriver_manager.chrome import ChromeDriverManager

from .config import ELEMENT_TIMEOUT

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"

# Clicks the first element under the selector whose text contains the given string.
_CLICK_BY_TEXT_JS = """
const elements = Array.from(document.querySelectorAll(arguments[0]));
const target = elements.find(el => el.textContent.includes(arguments[1]));
if (target) { target.click(); return true; }
return false;
"""


def create_driver(headless: bool = True) -> webdriver.Chrome:
    """Create a Chrome WebDriver."""
    options = Options()
    if headless:
        options.add_argument("--headless")
    options.add_argument("--disable-gpu")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--window-size=1920,1080")
    options.add_argument(f"user-agent={USER_AGENT}")
    # Return from get() once the DOM is ready, the fixture widgets load afterwards
    options.page_load_strategy = "eager"

    try:
        service = Service(ChromeDriverManager().install())
        return webdriver.Chrome(service=service, options=options)
    except Exception as e:
        logger.error(f"Failed to initialize Chrome WebDriver: {e}")
        raise


class SeleniumPage:
    """
    Page controller over a Selenium WebDriver.

    All waits raise selenium's TimeoutException when their bound expires.
    The driver is created lazily on first use and released by close().
    """

    def __init__(self, headless: bool = True, driver: Optional[webdriver.Chrome] = None):
        self.headless = headless
        self._driver = driver

    @property
    def driver(self) -> webdriver.Chrome:
        """Get or create Selenium WebDriver."""
        if self._driver is None:
            self._driver = create_driver(self.headless)
        return self._driver

    def close(self):
        """Clean up WebDriver resources."""
        if self._driver:
            self._driver.quit()
            self._driver = None

    def goto(self, url: str, timeout: float = 30):
        self.driver.set_page_load_timeout(timeout)
        self.driver.get(url)
        self.wait_for_selector("body", timeout)

    def wait_for_selector(self, selector: str, timeout: float = ELEMENT_TIMEOUT):
        return WebDriverWait(self.driver, timeout).until(
            EC.presence_of_element_located((By.CSS_SELECTOR, selector))
        )

    def click(self, selector: str, timeout: float = ELEMENT_TIMEOUT):
        element = WebDriverWait(self.driver, timeout).until(
            EC.element_to_be_clickable((By.CSS_SELECTOR, selector))
        )
        element.click()

    def click_button_text(self, text: str, timeout: float = ELEMENT_TIMEOUT):
        """Click a button by its visible text."""
        xpath = f"//button[contains(normalize-space(.), '{text}')]"
        element = WebDriverWait(self.driver, timeout).until(
            EC.element_to_be_clickable((By.XPATH, xpath))
        )
        element.click()

    def click_text(self, selector: str, text: str) -> bool:
        """Click the first element matching selector whose text contains text."""
        return bool(self.evaluate(_CLICK_BY_TEXT_JS, selector, text))

    def evaluate(self, script: str, *args) -> Any:
        return self.driver.execute_script(script, *args)

    def read_text(self, selector: str) -> str:
        element = self.driver.find_element(By.CSS_SELECTOR, selector)
        return element.get_attribute("textContent") or ""

    def has_class(self, selector: str, class_name: str) -> bool:
        classes = self.driver.find_element(By.CSS_SELECTOR, selector).get_attribute("class") or ""
        return class_name in classes.split()

    def content(self) -> str:
        return self.driver.page_source

    def sleep(self, seconds: float):
        time.sleep(seconds)

    @contextmanager
    def open_secondary(self, url: str, timeout: float = 30) -> Iterator["SeleniumPage"]:
        """
        Open url in a new tab and yield a controller bound to it.

        The tab is closed and focus returned to the original window on
        exit, whatever happens inside the block.
        """
        driver = self.driver
        original_window = driver.current_window_handle
        driver.switch_to.new_window("tab")
        try:
            secondary = SeleniumPage(self.headless, driver)
            secondary.goto(url, timeout)
            yield secondary
        finally:
            try:
                if driver.current_window_handle != original_window:
                    driver.close()
            except NoSuchWindowException:
                logger.debug(f"Detail tab for {url} was already closed")
            driver.switch_to.window(original_window)
