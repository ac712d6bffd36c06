from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from selfheal.core.metadata import HealAttempt


class HealingAuditLogger:
    """Persists healing attempts and the latest replacement for each broken locator."""

    def __init__(self, root: str | Path = "artifacts") -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.healed_elements_path = self.root / "healed_elements.jsonl"
        self.selector_overrides_path = self.root / "selector_overrides.json"

    def write(self, attempt: HealAttempt) -> None:
        with self.healed_elements_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(attempt)) + "\n")

        if attempt.success and attempt.new_locator:
            overrides = self.read_overrides()
            overrides[attempt.broken_locator] = attempt.new_locator
            self.selector_overrides_path.write_text(
                json.dumps(overrides, indent=2, sort_keys=True),
                encoding="utf-8",
            )

    def read_attempts(self) -> list[dict]:
        if not self.healed_elements_path.exists():
            return []
        with self.healed_elements_path.open("r", encoding="utf-8") as handle:
            return [json.loads(line) for line in handle if line.strip()]

    def read_overrides(self) -> dict[str, str]:
        if not self.selector_overrides_path.exists():
            return {}
        return json.loads(self.selector_overrides_path.read_text(encoding="utf-8"))
