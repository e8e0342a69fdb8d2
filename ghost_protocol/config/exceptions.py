class ConfigurationError(Exception):
    """Base exception for configuration problems."""


class MissingConfigurationError(ConfigurationError):
    """Raised at startup when required secrets are not configured."""

    def __init__(self, message: str, missing: list[str]) -> None:
        super().__init__(message)
        self.missing = missing
