import io

import docx

from ghost_protocol.extraction.base import BaseTextExtractor
from ghost_protocol.extraction.exceptions import TextExtractionError


class DocxAdapter(BaseTextExtractor):
    """Extracts paragraph text from Word (.docx) documents using python-docx."""

    def extract(self, content: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(content))
        except Exception as exc:
            raise TextExtractionError(f"docx extraction failed: {exc}") from exc
        paragraphs = [p.text for p in document.paragraphs]
        return "\n".join(paragraphs).strip()
