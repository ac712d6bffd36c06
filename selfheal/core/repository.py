from __future__ import annotations

import logging
import time
from typing import Callable

from selfheal.config.schema import HealingConfig
from selfheal.core.metadata import CapturedElement, ElementSnapshot
from selfheal.utils.dom_extract import (
    collect_alternative_locators,
    extract_nearby_text,
    measure_bounding_box,
)

logger = logging.getLogger(__name__)


class ElementRepository:
    """Session-scoped store of recovery signals, keyed by the locator that found them.

    Bundles are immutable and replaced with a single assignment, so readers
    never observe a half-written bundle. Nothing is persisted; a new
    repository starts empty.
    """

    def __init__(
        self,
        config: HealingConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or HealingConfig()
        self._clock = clock
        self._elements: dict[str, CapturedElement] = {}

    def _now_ms(self) -> int:
        return round(self._clock() * 1000)

    async def capture(self, locator: str, document) -> None:
        try:
            matches = await document.query_all(locator)
            if not matches:
                logger.debug("Skipping capture for %s: no element resolved", locator)
                return
            element = matches[0]
            alternatives = await collect_alternative_locators(document, element)
            snapshot_image = await self._element_screenshot(document, element, locator)
            nearby_text = await extract_nearby_text(document, element, self.config.nearby_text_limit)
            bounding_box = await measure_bounding_box(document, element)
            self._elements[locator] = CapturedElement(
                original_locator=locator,
                alternative_locators=tuple(alternatives),
                snapshot_image=snapshot_image,
                bounding_box=bounding_box,
                nearby_text=nearby_text,
                captured_at=self._now_ms(),
            )
            logger.debug("Captured element %s with %d alternatives", locator, len(alternatives))
        except Exception as exc:  # noqa: BLE001 - capture is best-effort instrumentation.
            logger.error("Failed to capture element %s: %s", locator, exc)

    async def _element_screenshot(self, document, element, locator: str) -> bytes:
        try:
            return await document.screenshot(element)
        except Exception as exc:  # noqa: BLE001 - the other signals are still worth keeping.
            logger.warning("Element screenshot failed for %s: %s", locator, exc)
            return b""

    def get_alternative(self, locator: str) -> str | None:
        bundle = self._elements.get(locator)
        if bundle is None or not bundle.alternative_locators:
            return None
        return bundle.alternative_locators[0]

    def get_snapshot(self, locator: str) -> ElementSnapshot | None:
        bundle = self._elements.get(locator)
        if bundle is None or not bundle.snapshot_image:
            return None
        return ElementSnapshot(
            image=bundle.snapshot_image,
            bounding_box=bundle.bounding_box,
            captured_at=bundle.captured_at,
        )

    def get_bundle(self, locator: str) -> CapturedElement | None:
        return self._elements.get(locator)

    def evict_older_than(self, max_age_ms: int | None = None) -> int:
        max_age = self.config.max_age_ms if max_age_ms is None else max_age_ms
        now = self._now_ms()
        expired = [
            locator
            for locator, bundle in list(self._elements.items())
            if now - bundle.captured_at > max_age
        ]
        for locator in expired:
            self._elements.pop(locator, None)
        if expired:
            logger.debug("Evicted %d captured elements older than %d ms", len(expired), max_age)
        return len(expired)

    def locators(self) -> list[str]:
        return list(self._elements)

    def clear(self) -> None:
        self._elements.clear()

    def __contains__(self, locator: object) -> bool:
        return locator in self._elements

    def __len__(self) -> int:
        return len(self._elements)
