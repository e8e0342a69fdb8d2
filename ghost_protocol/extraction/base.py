from abc import ABC, abstractmethod


class BaseTextExtractor(ABC):
    """Contract for document text extraction adapters."""

    @abstractmethod
    def extract(self, content: bytes) -> str:
        """Extract plain text from document bytes.

        Args:
            content: Raw file content.

        Returns:
            Extracted text as a single normalized string.

        Raises:
            TextExtractionError: if extraction fails for any reason.
        """
