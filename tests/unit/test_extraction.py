import pytest

from ghost_protocol.config.settings import Settings
from ghost_protocol.extraction.docx_adapter import DocxAdapter
from ghost_protocol.extraction.exceptions import (
    TextExtractionError,
    UnsupportedExtractionTypeError,
)
from ghost_protocol.extraction.extractor import TextExtractor
from ghost_protocol.extraction.factory import DOCX_MEDIA_TYPE, TextExtractorFactory
from ghost_protocol.extraction.pdfplumber_adapter import PdfPlumberAdapter
from ghost_protocol.extraction.plain_text_adapter import PlainTextAdapter
from ghost_protocol.extraction.pymupdf_adapter import PyMuPdfAdapter
from ghost_protocol.storage.models import UploadedFile


def _make_extractor(pdf_engine: str = "pdfplumber") -> TextExtractor:
    settings = Settings(_env_file=None, pdf_engine=pdf_engine)  # type: ignore[call-arg]
    return TextExtractorFactory.create(settings)


class TestPdfAdapters:
    @pytest.mark.parametrize("adapter", [PdfPlumberAdapter(), PyMuPdfAdapter()])
    def test_extracts_text(self, adapter, sample_pdf_bytes: bytes) -> None:  # type: ignore[no-untyped-def]
        assert "The Crimson Lighthouse" in adapter.extract(sample_pdf_bytes)

    @pytest.mark.parametrize("adapter", [PdfPlumberAdapter(), PyMuPdfAdapter()])
    def test_extracts_every_page(self, adapter, multi_page_pdf_bytes: bytes) -> None:  # type: ignore[no-untyped-def]
        result = adapter.extract(multi_page_pdf_bytes)
        assert "Chapter one" in result
        assert "Chapter two" in result

    @pytest.mark.parametrize("adapter", [PdfPlumberAdapter(), PyMuPdfAdapter()])
    def test_raises_on_invalid_bytes(self, adapter) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(TextExtractionError):
            adapter.extract(b"not a pdf")


class TestDocxAdapter:
    def test_extracts_paragraphs(self, sample_docx_bytes: bytes) -> None:
        result = DocxAdapter().extract(sample_docx_bytes)
        assert result.splitlines()[0] == "The Crimson Lighthouse"
        assert "never comes" in result

    def test_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(TextExtractionError, match="docx"):
            DocxAdapter().extract(b"not a docx")


class TestPlainTextAdapter:
    def test_decodes_utf8(self) -> None:
        assert PlainTextAdapter().extract("  Café noir \n".encode()) == "Café noir"

    def test_replaces_invalid_bytes(self) -> None:
        assert PlainTextAdapter().extract(b"ok \xff end") == "ok \ufffd end"


class TestTextExtractor:
    def test_routes_by_media_type(self, sample_docx_bytes: bytes) -> None:
        file = UploadedFile(file_name="w.docx", media_type=DOCX_MEDIA_TYPE, content=sample_docx_bytes)
        assert "Crimson" in _make_extractor().extract(file)

    def test_describes_media_files(self) -> None:
        file = UploadedFile(file_name="song.mp3", media_type="audio/mpeg", content=b"\x00" * 42)
        text = _make_extractor().extract(file)
        assert "File name: song.mp3" in text
        assert "File size: 42 bytes" in text
        assert "This is a audio file" in text

    def test_rejects_unknown_type(self) -> None:
        file = UploadedFile(file_name="a.zip", media_type="application/zip", content=b"PK")
        with pytest.raises(UnsupportedExtractionTypeError):
            _make_extractor().extract(file)

    def test_supports(self) -> None:
        extractor = _make_extractor()
        assert extractor.supports("application/pdf")
        assert extractor.supports("image/png")
        assert not extractor.supports("application/zip")


class TestTextExtractorFactory:
    def test_uses_pymupdf_engine(self, sample_pdf_bytes: bytes) -> None:
        file = UploadedFile(file_name="w.pdf", media_type="application/pdf", content=sample_pdf_bytes)
        assert "Crimson" in _make_extractor("PyMuPDF").extract(file)

    def test_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine 'tika'"):
            _make_extractor("tika")
