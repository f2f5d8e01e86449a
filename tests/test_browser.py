import pytest
from selenium.common.exceptions import (
    NoSuchElementException,
    NoSuchWindowException,
    TimeoutException,
)

from overunder.browser import SeleniumPage

DETAIL_URL = "https://example.test/mac/1"


class FakeElement:
    def __init__(self, text="", **attributes):
        self.text = text
        self.attributes = attributes

    def get_attribute(self, name):
        return self.attributes.get(name)


class FakeSwitchTo:
    def __init__(self, driver):
        self.driver = driver

    def new_window(self, type_hint):
        handle = f"tab-{len(self.driver.handles)}"
        self.driver.handles.append(handle)
        self.driver.current = handle

    def window(self, handle):
        if handle not in self.driver.handles:
            raise NoSuchWindowException(f"no such window: {handle}")
        self.driver.current = handle
        self.driver.switched.append(handle)


class FakeDriver:
    """Just enough of a WebDriver for SeleniumPage, with one window called main."""

    def __init__(self, elements=None, get_error=None, tab_vanishes=False, script_result=None):
        self.handles = ["main"]
        self.current = "main"
        self.switch_to = FakeSwitchTo(self)
        self.elements = {"body": FakeElement()}
        self.elements.update(elements or {})
        self.get_error = get_error
        self.tab_vanishes = tab_vanishes
        self.script_result = script_result
        self.visited = []
        self.load_timeouts = []
        self.switched = []
        self.closed = []
        self.scripts = []
        self.quit_called = False
        self.page_source = "<html></html>"

    @property
    def current_window_handle(self):
        if self.current not in self.handles:
            raise NoSuchWindowException("target window already closed")
        return self.current

    def set_page_load_timeout(self, timeout):
        self.load_timeouts.append(timeout)

    def get(self, url):
        self.visited.append(url)
        if self.tab_vanishes:
            self.handles.remove(self.current)
        if self.get_error is not None:
            raise self.get_error

    def close(self):
        self.handles.remove(self.current)
        self.closed.append(self.current)

    def quit(self):
        self.quit_called = True

    def find_element(self, by, value):
        if value not in self.elements:
            raise NoSuchElementException(value)
        return self.elements[value]

    def execute_script(self, script, *args):
        self.scripts.append((script, args))
        return self.script_result


def test_secondary_tab_is_closed_after_block():
    driver = FakeDriver()
    page = SeleniumPage(driver=driver)

    with page.open_secondary(DETAIL_URL, 30) as detail:
        assert detail.driver is driver
        assert driver.current == "tab-1"

    assert driver.visited == [DETAIL_URL]
    assert driver.load_timeouts == [30]
    assert driver.closed == ["tab-1"]
    assert driver.switched == ["main"]
    assert driver.handles == ["main"]


def test_secondary_tab_is_closed_when_block_fails():
    driver = FakeDriver()
    page = SeleniumPage(driver=driver)

    with pytest.raises(ValueError):
        with page.open_secondary(DETAIL_URL):
            raise ValueError("unparsable score")

    assert driver.closed == ["tab-1"]
    assert driver.current == "main"


def test_secondary_tab_is_closed_on_navigation_timeout():
    driver = FakeDriver(get_error=TimeoutException("page load timed out"))
    page = SeleniumPage(driver=driver)

    with pytest.raises(TimeoutException):
        with page.open_secondary(DETAIL_URL):
            pass

    assert driver.closed == ["tab-1"]
    assert driver.switched == ["main"]


def test_vanished_tab_still_returns_to_original_window():
    driver = FakeDriver(get_error=TimeoutException("page load timed out"), tab_vanishes=True)
    page = SeleniumPage(driver=driver)

    with pytest.raises(TimeoutException):
        with page.open_secondary(DETAIL_URL):
            pass

    assert driver.closed == []
    assert driver.switched == ["main"]
    assert driver.current_window_handle == "main"


def test_read_text_uses_text_content():
    label = FakeElement(text="3. HAFTA", textContent=" 3. Hafta (14 Ekim - 16 Ekim) ")
    driver = FakeDriver(elements={".label": label, ".empty": FakeElement()})
    page = SeleniumPage(driver=driver)

    assert page.read_text(".label") == " 3. Hafta (14 Ekim - 16 Ekim) "
    assert page.read_text(".empty") == ""

    with pytest.raises(NoSuchElementException):
        page.read_text(".missing")


def test_has_class():
    driver = FakeDriver(elements={
        ".prev": FakeElement(**{"class": "widget-gameweek__arrow widget-gameweek__arrow--disabled"}),
        ".next": FakeElement(**{"class": "widget-gameweek__arrow"}),
        ".bare": FakeElement(),
    })
    page = SeleniumPage(driver=driver)

    assert page.has_class(".prev", "widget-gameweek__arrow--disabled")
    assert not page.has_class(".next", "widget-gameweek__arrow--disabled")
    assert not page.has_class(".next", "widget-gameweek")
    assert not page.has_class(".bare", "widget-gameweek__arrow")


@pytest.mark.parametrize("script_result, clicked", [(True, True), (False, False), (None, False)])
def test_click_text(script_result, clicked):
    driver = FakeDriver(script_result=script_result)
    page = SeleniumPage(driver=driver)

    assert page.click_text(".widget-iddaa-markets__tab", "Altı/Üstü") is clicked
    assert driver.scripts[-1][1] == (".widget-iddaa-markets__tab", "Altı/Üstü")


def test_close_quits_driver_once():
    driver = FakeDriver()
    page = SeleniumPage(driver=driver)

    page.close()
    page.close()

    assert driver.quit_called
    assert page._driver is None
