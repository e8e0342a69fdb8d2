class AnalysisError(Exception):
    """Raised when content analysis fails."""


class AnalysisValidationError(AnalysisError):
    """Raised when the model's JSON is missing required fields or has bad types."""


class AnalysisNetworkError(AnalysisError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
