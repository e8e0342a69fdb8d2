from ghost_protocol.extraction.base import BaseTextExtractor
from ghost_protocol.extraction.exceptions import UnsupportedExtractionTypeError
from ghost_protocol.storage.models import UploadedFile

_MEDIA_PREFIXES = ("image/", "audio/", "video/")


class TextExtractor:
    """Routes an upload to the extractor registered for its media type.

    Image, audio and video uploads have no analysable text; they get a short
    description of the file instead so the analysis step still has input.
    """

    def __init__(self, adapters: dict[str, BaseTextExtractor]) -> None:
        self._adapters = adapters

    def supports(self, media_type: str) -> bool:
        return media_type in self._adapters or media_type.startswith(_MEDIA_PREFIXES)

    def extract(self, file: UploadedFile) -> str:
        """Return text for the upload.

        Raises:
            UnsupportedExtractionTypeError: if the media type has no extractor.
            TextExtractionError: if the extractor fails.
        """
        adapter = self._adapters.get(file.media_type)
        if adapter is not None:
            return adapter.extract(file.content)
        if file.media_type.startswith(_MEDIA_PREFIXES):
            return self.describe_media(file)
        raise UnsupportedExtractionTypeError(
            f"Unsupported file type for text extraction: {file.media_type}"
        )

    @staticmethod
    def describe_media(file: UploadedFile) -> str:
        kind = file.media_type.split("/", 1)[0]
        return (
            f"File name: {file.file_name}\n"
            f"File type: {file.media_type}\n"
            f"File size: {file.size} bytes\n\n"
            f"Note: This is a {kind} file. Please enter details manually."
        )
