"""Offline storage adapter.

Computes a deterministic content reference from the file bytes and keeps the
bytes in memory. Useful for local development and tests.
"""

import hashlib
from datetime import datetime, timezone

from ghost_protocol.storage.base import BaseStorage
from ghost_protocol.storage.models import StoredFile, UploadedFile


class ExampleStorageAdapter(BaseStorage):
    GATEWAY_URL = "http://localhost/ipfs"

    def __init__(self, max_upload_bytes: int) -> None:
        super().__init__(max_upload_bytes)
        self.pinned: dict[str, bytes] = {}

    def _pin(self, file: UploadedFile) -> StoredFile:
        content_hash = "sha256-" + hashlib.sha256(file.content).hexdigest()
        self.pinned[content_hash] = file.content
        return StoredFile(
            content_hash=content_hash,
            url=f"{self.GATEWAY_URL}/{content_hash}",
            file_name=file.file_name,
            size=file.size,
            media_type=file.media_type,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
