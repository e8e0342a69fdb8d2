from dataclasses import dataclass
from pathlib import PurePath

ALLOWED_MEDIA_TYPES = frozenset({
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "application/epub+zip",
    "image/jpeg",
    "image/png",
    "audio/mpeg",
    "audio/wav",
    "video/mp4",
})


@dataclass(frozen=True)
class UploadedFile:
    """A file received from a client, held in memory."""

    file_name: str
    media_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def stem(self) -> str:
        return PurePath(self.file_name).stem

    @property
    def extension(self) -> str:
        return PurePath(self.file_name).suffix.lstrip(".").lower()


@dataclass(frozen=True)
class StoredFile:
    """Result of pinning a file: its content reference and public gateway URL."""

    content_hash: str
    url: str
    file_name: str
    size: int
    media_type: str
    timestamp: str | None = None
