"""Recovery strategies tried, in order, when a locator stops resolving.

Each strategy is independent: it reads the stored bundle (if any), the live
document, or the broken locator string, and either returns a replacement
locator or ``None``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from selfheal.config.schema import HealingConfig
from selfheal.core.document import LiveDocument, VisionBackend, locator_exists
from selfheal.core.metadata import CapturedElement
from selfheal.core.repository import ElementRepository
from selfheal.logging.artifacts import ArtifactManager
from selfheal.utils.dom_extract import (
    element_exists_at_point,
    find_clickable_near_text,
    scan_element_rects,
)
from selfheal.utils.scoring import filter_size_similar
from selfheal.utils.selectors import (
    derive_looser_locators,
    has_text_locator,
    locator_text_hint,
    point_locator,
    role_locator,
)

logger = logging.getLogger(__name__)


class HealingStrategy(ABC):
    name = "unknown"

    @abstractmethod
    async def find(
        self,
        broken_locator: str,
        document: LiveDocument,
        bundle: CapturedElement | None,
    ) -> str | None:
        raise NotImplementedError


class RepositoryAlternativeStrategy(HealingStrategy):
    name = "repository_alternative"

    def __init__(self, repository: ElementRepository) -> None:
        self.repository = repository

    async def find(self, broken_locator, document, bundle):
        alternative = self.repository.get_alternative(broken_locator)
        if alternative and await locator_exists(document, alternative):
            return alternative
        return None


class RoleStrategy(HealingStrategy):
    """Re-resolves by ARIA role using the captured nearby text as accessible name."""

    name = "role"

    def __init__(self, config: HealingConfig) -> None:
        self.config = config

    async def find(self, broken_locator, document, bundle):
        if bundle is None or not bundle.nearby_text.strip():
            return None
        text = bundle.nearby_text.strip()
        partial_text = text[: self.config.partial_name_length]
        for role in self.config.roles:
            exact = role_locator(role, text)
            if await locator_exists(document, exact):
                return exact
            if len(text) > self.config.partial_name_length:
                partial = role_locator(role, partial_text, partial=True)
                if await locator_exists(document, partial):
                    return partial
        return None


class LooserCssStrategy(HealingStrategy):
    name = "looser_css"

    async def find(self, broken_locator, document, bundle):
        for candidate in derive_looser_locators(broken_locator):
            if await locator_exists(document, candidate):
                return candidate
        return None


class VisualStrategy(HealingStrategy):
    """Finds the element again by its captured image, or by its size when no vision backend is set."""

    name = "visual"

    def __init__(
        self,
        repository: ElementRepository,
        config: HealingConfig,
        vision: VisionBackend | None = None,
        artifact_manager: ArtifactManager | None = None,
    ) -> None:
        self.repository = repository
        self.config = config
        self.vision = vision
        self.artifact_manager = artifact_manager

    async def find(self, broken_locator, document, bundle):
        snapshot = self.repository.get_snapshot(broken_locator)
        if snapshot is None or snapshot.bounding_box is None:
            return None
        if self.vision is not None:
            return await self._template_match(broken_locator, document, snapshot.image)
        return await self._size_match(document, snapshot.bounding_box)

    async def _template_match(self, broken_locator: str, document, template: bytes) -> str | None:
        screenshot = await document.screenshot()
        if self.artifact_manager is not None:
            self.artifact_manager.write_visual_evidence(broken_locator, template, screenshot)
        match = self.vision.locate(template, screenshot)
        if match is None or match.confidence <= self.config.visual_confidence_threshold:
            logger.debug("No confident visual match for %s", broken_locator)
            return None
        x, y = match.center
        if await element_exists_at_point(document, x, y):
            return point_locator(x, y)
        return None

    async def _size_match(self, document, expected) -> str | None:
        rects = await scan_element_rects(document, self.config.visual_scan_tags)
        for rect in filter_size_similar(expected, rects, self.config.size_tolerance):
            x, y = rect.center
            if await element_exists_at_point(document, x, y):
                return point_locator(x, y)
        return None


class NearestTextStrategy(HealingStrategy):
    name = "nearest_text"

    def __init__(self, config: HealingConfig) -> None:
        self.config = config

    async def find(self, broken_locator, document, bundle):
        text = bundle.nearby_text.strip() if bundle is not None else ""
        if not text:
            text = locator_text_hint(broken_locator)
        if not text:
            return None
        query_text = text[: self.config.text_query_length]
        for tag in self.config.interactive_tags:
            candidate = has_text_locator(tag, query_text)
            if await locator_exists(document, candidate):
                return candidate
        nearby = await find_clickable_near_text(document, text, self.config.interactive_tags)
        if nearby and await locator_exists(document, nearby):
            return nearby
        return None


def default_strategies(
    repository: ElementRepository,
    config: HealingConfig,
    vision: VisionBackend | None = None,
    artifact_manager: ArtifactManager | None = None,
) -> list[HealingStrategy]:
    return [
        RepositoryAlternativeStrategy(repository),
        RoleStrategy(config),
        LooserCssStrategy(),
        VisualStrategy(repository, config, vision, artifact_manager),
        NearestTextStrategy(config),
    ]
