from __future__ import annotations

import re
from datetime import UTC, datetime
from pathlib import Path


class ArtifactManager:
    """Keeps the images compared during visual healing."""

    def __init__(self, root: str | Path = "artifacts") -> None:
        self.root = Path(root)
        self.snapshot_root = self.root / "snapshots"
        self.screenshot_root = self.root / "screenshots"
        self._ensure_structure()

    def _ensure_structure(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.snapshot_root.mkdir(parents=True, exist_ok=True)
        self.screenshot_root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def timestamp() -> str:
        return datetime.now(UTC).strftime("%Y%m%dT%H%M%S%fZ")

    @staticmethod
    def slug(locator: str) -> str:
        cleaned = re.sub(r"[^A-Za-z0-9_-]+", "_", locator).strip("_")
        return cleaned[:80] or "locator"

    def write_visual_evidence(
        self,
        locator: str,
        snapshot: bytes,
        screenshot: bytes,
        timestamp: str | None = None,
    ) -> tuple[Path, Path]:
        stamp = timestamp or self.timestamp()
        name = f"{stamp}_{self.slug(locator)}.png"
        snapshot_path = self.snapshot_root / name
        screenshot_path = self.screenshot_root / name
        snapshot_path.write_bytes(snapshot)
        screenshot_path.write_bytes(screenshot)
        return snapshot_path, screenshot_path
