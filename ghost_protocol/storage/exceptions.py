class StorageError(Exception):
    """Base exception for all upload and pinning errors."""


class FileTooLargeError(StorageError):
    """Raised when an upload exceeds the configured size ceiling."""


class UnsupportedMediaTypeError(StorageError):
    """Raised when an upload's media type is not on the allow-list."""


class PinningError(StorageError):
    """Raised when the remote pinning service rejects or fails an upload."""
