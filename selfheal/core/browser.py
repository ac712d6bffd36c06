from __future__ import annotations

import asyncio
from typing import Any

from selenium import webdriver
from selenium.common.exceptions import InvalidSelectorException, JavascriptException
from selenium.webdriver import ChromeOptions, FirefoxOptions
from selenium.webdriver.common.by import By

from selfheal.config.schema import EnvironmentConfig
from selfheal.core.exceptions import ConfigurationError, InvalidLocatorError
from selfheal.utils.dom_extract import HAS_TEXT_QUERY_SCRIPT, POINT_QUERY_SCRIPT, ROLE_QUERY_SCRIPT
from selfheal.utils.selectors import (
    infer_selector_type,
    parse_has_text_locator,
    parse_point_locator,
    parse_role_locator,
)

WRITE_DOCUMENT_SCRIPT = "document.open(); document.write(arguments[0]); document.close();"


class SeleniumDocument:
    """Live document handle backed by a Selenium WebDriver.

    Driver calls block, so each one runs in a worker thread. Role, has-text
    and point locators have no native Selenium strategy and are answered by
    in-page scripts instead.
    """

    def __init__(self, driver) -> None:
        self.driver = driver

    async def query_all(self, locator: str) -> list[Any]:
        return await asyncio.to_thread(self._query_all, locator)

    async def screenshot(self, element: Any | None = None) -> bytes:
        if element is None:
            return await asyncio.to_thread(self.driver.get_screenshot_as_png)
        return await asyncio.to_thread(lambda: element.screenshot_as_png)

    async def evaluate(self, script: str, *args: Any) -> Any:
        return await asyncio.to_thread(self.driver.execute_script, script, *args)

    def close(self) -> None:
        self.driver.quit()

    def _query_all(self, locator: str) -> list[Any]:
        selector_type = infer_selector_type(locator)
        try:
            if selector_type == "xpath":
                return self.driver.find_elements(By.XPATH, locator)
            if selector_type == "role":
                parsed = parse_role_locator(locator)
                if parsed is None:
                    raise InvalidLocatorError(f"Malformed role locator: {locator}")
                role, name, partial = parsed
                return self.driver.execute_script(ROLE_QUERY_SCRIPT, role, name, partial) or []
            if selector_type == "text":
                base, text = parse_has_text_locator(locator)
                return self.driver.execute_script(HAS_TEXT_QUERY_SCRIPT, base, text) or []
            if selector_type == "point":
                point = parse_point_locator(locator)
                if point is None:
                    raise InvalidLocatorError(f"Malformed point locator: {locator}")
                return self.driver.execute_script(POINT_QUERY_SCRIPT, *point) or []
            return self.driver.find_elements(By.CSS_SELECTOR, locator)
        except (InvalidSelectorException, JavascriptException) as exc:
            raise InvalidLocatorError(f"Locator rejected by the browser: {locator}") from exc


class BrowserSession:
    """Starts a local browser sized for snapshot capture and opens pages in it as live documents."""

    def __init__(self, environment: EnvironmentConfig) -> None:
        self.environment = environment

    def window_dimensions(self) -> tuple[int, int]:
        width, _, height = self.environment.window_size.partition(",")
        return int(width), int(height)

    def chrome_options(self) -> ChromeOptions:
        options = ChromeOptions()
        if self.environment.headless:
            options.add_argument("--headless=new")
        options.add_argument("--window-size={},{}".format(*self.window_dimensions()))
        options.add_argument("--force-device-scale-factor=1")
        return options

    def firefox_options(self) -> FirefoxOptions:
        options = FirefoxOptions()
        if self.environment.headless:
            options.add_argument("-headless")
        width, height = self.window_dimensions()
        options.add_argument(f"--width={width}")
        options.add_argument(f"--height={height}")
        options.set_preference("layout.css.devPixelsPerPx", "1.0")
        return options

    def start(self, browser_name: str | None = None):
        browser = (browser_name or self.environment.browser).lower()
        if browser == "chrome":
            driver = webdriver.Chrome(options=self.chrome_options())
        elif browser == "firefox":
            driver = webdriver.Firefox(options=self.firefox_options())
        else:
            raise ConfigurationError(f"Unsupported browser: {browser}")
        driver.set_page_load_timeout(self.environment.default_timeout_seconds)
        driver.implicitly_wait(0)
        return driver

    def open_document(self, html: str, browser_name: str | None = None) -> SeleniumDocument:
        """Starts a browser, writes ``html`` into a blank page and wraps the driver."""

        driver = self.start(browser_name)
        try:
            driver.get("about:blank")
            driver.execute_script(WRITE_DOCUMENT_SCRIPT, html)
        except Exception:
            driver.quit()
            raise
        return SeleniumDocument(driver)
