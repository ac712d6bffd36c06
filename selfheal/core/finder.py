from __future__ import annotations

import logging
from typing import Any

from selfheal.core.exceptions import ElementNotFoundError, InvalidLocatorError
from selfheal.core.healer import SelfHealingResolver
from selfheal.core.repository import ElementRepository
from selfheal.logging.audit import HealingAuditLogger
from selfheal.utils.wait import wait_until

logger = logging.getLogger(__name__)


class SafeFinder:
    """Centralized element lookup with capture on success and healing on failure."""

    def __init__(
        self,
        document,
        repository: ElementRepository,
        resolver: SelfHealingResolver,
        default_timeout: float = 10,
        audit_logger: HealingAuditLogger | None = None,
    ) -> None:
        self.document = document
        self.repository = repository
        self.resolver = resolver
        self.default_timeout = default_timeout
        self.selector_overrides = audit_logger.read_overrides() if audit_logger else {}

    async def find(self, locator: str, timeout: float | None = None) -> Any:
        duration = self.default_timeout if timeout is None else timeout
        found = await self._wait_for_first_match(self._locator_specs(locator), duration)
        if found:
            used, element = found
            await self.repository.capture(used, self.document)
            return element

        healed = await self.resolver.heal(locator, self.document)
        if healed and healed != locator:
            found = await self._wait_for_first_match([healed], duration)
            if found:
                self.selector_overrides[locator] = healed
                await self.repository.capture(healed, self.document)
                return found[1]
        logger.warning("Self-healing attempted and exhausted for %s", locator)
        raise ElementNotFoundError(locator, healing_attempted=True)

    async def find_by_locator(self, locator: str, timeout: float | None = None) -> Any:
        duration = self.default_timeout if timeout is None else timeout
        found = await self._wait_for_first_match([locator], duration)
        if not found:
            raise ElementNotFoundError(locator)
        return found[1]

    def _locator_specs(self, locator: str) -> list[str]:
        locators: list[str] = []
        override = self.selector_overrides.get(locator)
        if override:
            locators.append(override)
        locators.append(locator)
        return locators

    async def _wait_for_first_match(self, locators: list[str], timeout: float):
        async def first_match():
            for candidate in locators:
                try:
                    matches = await self.document.query_all(candidate)
                except InvalidLocatorError as exc:
                    logger.debug("Skipping invalid locator %s: %s", candidate, exc)
                    continue
                if matches:
                    return candidate, matches[0]
            return None

        return await wait_until(first_match, timeout)
