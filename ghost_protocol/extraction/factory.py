from ghost_protocol.config.settings import Settings
from ghost_protocol.extraction.base import BaseTextExtractor
from ghost_protocol.extraction.docx_adapter import DocxAdapter
from ghost_protocol.extraction.extractor import TextExtractor
from ghost_protocol.extraction.pdfplumber_adapter import PdfPlumberAdapter
from ghost_protocol.extraction.plain_text_adapter import PlainTextAdapter
from ghost_protocol.extraction.pymupdf_adapter import PyMuPdfAdapter

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TextExtractorFactory:
    """Builds a TextExtractor with the configured PDF engine."""

    PDF_ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> TextExtractor:
        engine = settings.pdf_engine.lower()
        pdf_adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if pdf_adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return TextExtractor({
            "application/pdf": pdf_adapter_cls(),
            DOCX_MEDIA_TYPE: DocxAdapter(),
            "application/epub+zip": PyMuPdfAdapter(filetype="epub"),
            "text/plain": PlainTextAdapter(),
        })
