from __future__ import annotations

import logging
from time import perf_counter

from selfheal.config.schema import HealingConfig
from selfheal.core.document import LiveDocument, VisionBackend
from selfheal.core.metadata import HealAttempt
from selfheal.core.repository import ElementRepository
from selfheal.core.strategies import HealingStrategy, default_strategies
from selfheal.logging.artifacts import ArtifactManager
from selfheal.logging.audit import HealingAuditLogger

logger = logging.getLogger(__name__)


class SelfHealingResolver:
    """Runs the recovery strategies in priority order and returns the first replacement found.

    Strategies go from cheapest and most precise (a stored alternative) to
    most expensive (screenshot scans, DOM text walks). A strategy that raises
    is logged and skipped; it never stops the cascade.
    """

    def __init__(
        self,
        repository: ElementRepository,
        config: HealingConfig | None = None,
        vision: VisionBackend | None = None,
        audit_logger: HealingAuditLogger | None = None,
        artifact_manager: ArtifactManager | None = None,
        strategies: list[HealingStrategy] | None = None,
    ) -> None:
        self.repository = repository
        self.config = config or repository.config
        self.vision = vision
        self.audit_logger = audit_logger
        self.strategies = strategies or default_strategies(
            repository,
            self.config,
            vision=vision,
            artifact_manager=artifact_manager,
        )

    async def heal(self, broken_locator: str, document: LiveDocument) -> str | None:
        if document is None:
            raise TypeError("heal() requires a live document handle")

        logger.info("Attempting to self-heal locator: %s", broken_locator)
        started = perf_counter()
        bundle = self.repository.get_bundle(broken_locator)
        tried: list[str] = []
        healed: str | None = None
        strategy_name = ""

        for strategy in self.strategies:
            tried.append(strategy.name)
            try:
                healed = await strategy.find(broken_locator, document, bundle)
            except Exception as exc:  # noqa: BLE001 - a failing strategy abstains.
                logger.error("Strategy %s failed for %s: %s", strategy.name, broken_locator, exc)
                continue
            if healed:
                strategy_name = strategy.name
                logger.info("Healed %s via %s strategy: %s", broken_locator, strategy.name, healed)
                break
            healed = None

        if healed is None:
            logger.warning("Unable to heal locator: %s", broken_locator)

        self._audit(
            HealAttempt(
                broken_locator=broken_locator,
                strategy=strategy_name,
                new_locator=healed or "",
                success=healed is not None,
                had_bundle=bundle is not None,
                strategies_tried=tried,
                duration_ms=round((perf_counter() - started) * 1000, 3),
            )
        )
        return healed

    def _audit(self, attempt: HealAttempt) -> None:
        if self.audit_logger is None:
            return
        try:
            self.audit_logger.write(attempt)
        except OSError as exc:
            logger.error("Could not record heal attempt for %s: %s", attempt.broken_locator, exc)
