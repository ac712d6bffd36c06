from __future__ import annotations

import asyncio

from selenium.common.exceptions import (
    ElementNotInteractableException,
    StaleElementReferenceException,
)


class SafeActions:
    """High-level element actions routed through the capture and healing pipeline."""

    def __init__(self, finder) -> None:
        self.finder = finder

    async def click(self, locator: str) -> None:
        element = await self.finder.find(locator)
        try:
            await asyncio.to_thread(element.click)
        except (ElementNotInteractableException, StaleElementReferenceException):
            element = await self.finder.find(locator)
            await asyncio.to_thread(element.click)

    async def type(self, locator: str, value: str, clear_first: bool = True) -> None:
        element = await self.finder.find(locator)
        try:
            await self._type_into(element, value, clear_first)
        except (ElementNotInteractableException, StaleElementReferenceException):
            element = await self.finder.find(locator)
            await self._type_into(element, value, clear_first)

    @staticmethod
    async def _type_into(element, value: str, clear_first: bool) -> None:
        if clear_first:
            await asyncio.to_thread(element.clear)
        await asyncio.to_thread(element.send_keys, value)
