class TextExtractionError(Exception):
    """Raised when text cannot be extracted from an uploaded file."""


class UnsupportedExtractionTypeError(TextExtractionError):
    """Raised when no extractor handles the file's media type."""
