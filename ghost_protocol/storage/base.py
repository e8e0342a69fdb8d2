from abc import ABC, abstractmethod

from ghost_protocol.storage.exceptions import FileTooLargeError, UnsupportedMediaTypeError
from ghost_protocol.storage.models import ALLOWED_MEDIA_TYPES, StoredFile, UploadedFile


class BaseStorage(ABC):
    """Contract for content-addressed storage adapters."""

    def __init__(self, max_upload_bytes: int) -> None:
        self._max_upload_bytes = max_upload_bytes

    def store(self, file: UploadedFile) -> StoredFile:
        """Validate and pin a file.

        Raises:
            FileTooLargeError: if the file exceeds the size ceiling.
            UnsupportedMediaTypeError: if the media type is not allowed.
            StorageError: if the remote pinning call fails.
        """
        self.validate(file)
        return self._pin(file)

    def validate(self, file: UploadedFile) -> None:
        if file.size > self._max_upload_bytes:
            limit_mib = self._max_upload_bytes // (1024 * 1024)
            raise FileTooLargeError(f"File size exceeds {limit_mib}MB limit")
        if file.media_type not in ALLOWED_MEDIA_TYPES:
            raise UnsupportedMediaTypeError("File type not supported")

    @abstractmethod
    def _pin(self, file: UploadedFile) -> StoredFile:
        """Upload validated bytes and return the content reference."""
