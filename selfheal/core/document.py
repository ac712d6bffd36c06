from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from selfheal.core.metadata import VisualMatch


@runtime_checkable
class LiveDocument(Protocol):
    """Query, screenshot and script access to the page currently on screen."""

    async def query_all(self, locator: str) -> list[Any]:
        ...

    async def screenshot(self, element: Any | None = None) -> bytes:
        ...

    async def evaluate(self, script: str, *args: Any) -> Any:
        ...


class VisionBackend(Protocol):
    """Locates a stored element image inside a fresh page screenshot."""

    def locate(self, template: bytes, screenshot: bytes) -> VisualMatch | None:
        ...


async def locator_exists(document: LiveDocument, locator: str) -> bool:
    return bool(await document.query_all(locator))
