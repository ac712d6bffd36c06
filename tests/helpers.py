from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

import pytest
from selenium.common.exceptions import WebDriverException

from selfheal.core.browser import BrowserSession, SeleniumDocument
from selfheal.utils.dom_extract import (
    ALTERNATIVE_SIGNALS_SCRIPT,
    BOUNDING_BOX_SCRIPT,
    NEARBY_TEXT_SCRIPT,
)


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeElement:
    def __init__(self, label: str = "element") -> None:
        self.label = label
        self.clicks = 0
        self.cleared = 0
        self.typed: list[str] = []

    def click(self) -> None:
        self.clicks += 1

    def clear(self) -> None:
        self.cleared += 1

    def send_keys(self, value: str) -> None:
        self.typed.append(value)

    def __repr__(self) -> str:
        return f"FakeElement({self.label!r})"


class FakeDocument:
    """In-memory live document: canned query results and script responses.

    ``matches`` maps a locator to a match count or a list of elements.
    ``scripts`` maps a script constant to a value or to a callable that
    receives the script arguments.
    """

    def __init__(
        self,
        matches: dict[str, int | list[Any]] | None = None,
        scripts: dict[str, Any] | None = None,
        errors: dict[str, Exception] | None = None,
        page_image: bytes = b"page",
        element_image: bytes = b"element",
    ) -> None:
        self.matches: dict[str, list[Any]] = {}
        for locator, value in (matches or {}).items():
            self.set_matches(locator, value)
        self.scripts = dict(scripts or {})
        self.errors = dict(errors or {})
        self.page_image = page_image
        self.element_image = element_image
        self.screenshot_error: Exception | None = None
        self.queries: list[str] = []
        self.evaluations: list[tuple[str, tuple[Any, ...]]] = []

    def set_matches(self, locator: str, value: int | list[Any]) -> list[Any]:
        if isinstance(value, int):
            value = [FakeElement(f"{locator}[{index}]") for index in range(value)]
        self.matches[locator] = list(value)
        return self.matches[locator]

    def remove(self, locator: str) -> None:
        self.matches.pop(locator, None)

    async def query_all(self, locator: str) -> list[Any]:
        self.queries.append(locator)
        if locator in self.errors:
            raise self.errors[locator]
        return list(self.matches.get(locator, []))

    async def screenshot(self, element: Any | None = None) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        return self.page_image if element is None else self.element_image

    async def evaluate(self, script: str, *args: Any) -> Any:
        self.evaluations.append((script, args))
        handler = self.scripts.get(script)
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(*args)
        return handler


def capturable_document(
    locator: str,
    signals: dict[str, Any] | None = None,
    texts: list[str] | None = None,
    rect: dict[str, float] | None = None,
) -> FakeDocument:
    """A document where ``locator`` resolves to one element with the given capture signals."""

    return FakeDocument(
        matches={locator: 1},
        scripts={
            ALTERNATIVE_SIGNALS_SCRIPT: signals,
            NEARBY_TEXT_SCRIPT: texts or [],
            BOUNDING_BOX_SCRIPT: rect,
        },
    )


@contextmanager
def managed_document(suite_config, html: str) -> Iterator[SeleniumDocument]:
    try:
        document = BrowserSession(suite_config.environment).open_document(html)
    except WebDriverException as exc:
        pytest.skip(f"WebDriver could not start for {suite_config.environment.browser}: {exc}")
    try:
        yield document
    finally:
        document.close()
