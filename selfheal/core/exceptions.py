class HealingError(RuntimeError):
    """Base error for the self-healing core."""


class InvalidLocatorError(HealingError):
    """Raised when a document handle rejects a locator string."""


class ConfigurationError(HealingError):
    """Raised when a configuration file cannot be loaded or validated."""


class ElementNotFoundError(HealingError):
    """Raised when a locator and its healing attempt both fail."""

    def __init__(self, locator: str, healing_attempted: bool = False) -> None:
        message = f"No element matches locator: {locator}"
        if healing_attempted:
            message += " (self-healing attempted and exhausted)"
        super().__init__(message)
        self.locator = locator
        self.healing_attempted = healing_attempted
