from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_ROLES = [
    "button",
    "link",
    "textbox",
    "checkbox",
    "radiogroup",
    "combobox",
    "tab",
    "tabpanel",
]
DEFAULT_INTERACTIVE_TAGS = ["button", "a", "input", "select", '[role="button"]']
DEFAULT_VISUAL_SCAN_TAGS = ["button", "a", "input", "select", "div", "span", "img"]


class HealingConfig(BaseModel):
    max_age_ms: int = Field(default=60 * 60 * 1000, ge=0)
    visual_confidence_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    size_tolerance: float = Field(default=0.2, gt=0.0)
    roles: list[str] = Field(default_factory=lambda: list(DEFAULT_ROLES))
    partial_name_length: int = Field(default=10, gt=0)
    text_query_length: int = Field(default=30, gt=0)
    nearby_text_limit: int = Field(default=100, gt=0)
    interactive_tags: list[str] = Field(default_factory=lambda: list(DEFAULT_INTERACTIVE_TAGS))
    visual_scan_tags: list[str] = Field(default_factory=lambda: list(DEFAULT_VISUAL_SCAN_TAGS))

    @field_validator("roles", "interactive_tags", "visual_scan_tags")
    @classmethod
    def validate_non_empty(cls, value: list[str]) -> list[str]:
        cleaned = [item.strip() for item in value if item.strip()]
        if not cleaned:
            raise ValueError("list must contain at least one entry")
        return cleaned


class EnvironmentConfig(BaseModel):
    browser: str = "chrome"
    headless: bool = True
    default_timeout_seconds: int = 10
    window_size: str = "1366,768"

    @field_validator("browser")
    @classmethod
    def validate_browser(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"chrome", "firefox"}:
            raise ValueError(f"Unsupported browser: {value}")
        return normalized

    @field_validator("window_size")
    @classmethod
    def validate_window_size(cls, value: str) -> str:
        width, separator, height = value.replace("x", ",").partition(",")
        if not separator or not width.strip().isdigit() or not height.strip().isdigit():
            raise ValueError(f"window_size must look like WIDTH,HEIGHT: {value}")
        return f"{int(width)},{int(height)}"


class SuiteConfig(BaseModel):
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    healing: HealingConfig = Field(default_factory=HealingConfig)
