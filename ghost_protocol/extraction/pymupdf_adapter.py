import pymupdf

from ghost_protocol.extraction.base import BaseTextExtractor
from ghost_protocol.extraction.exceptions import TextExtractionError


class PyMuPdfAdapter(BaseTextExtractor):
    """Extracts text with PyMuPDF. Handles PDF and, with filetype="epub", EPUB."""

    def __init__(self, filetype: str = "pdf") -> None:
        self._filetype = filetype

    def extract(self, content: bytes) -> str:
        try:
            with pymupdf.open(stream=content, filetype=self._filetype) as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
        except Exception as exc:
            raise TextExtractionError(
                f"pymupdf {self._filetype} extraction failed: {exc}"
            ) from exc
        return "\n".join(pages).strip()
