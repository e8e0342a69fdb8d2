import json

import httpx

from ghost_protocol.logging.logger import Log
from ghost_protocol.storage.base import BaseStorage
from ghost_protocol.storage.exceptions import PinningError
from ghost_protocol.storage.models import StoredFile, UploadedFile


class PinataStorageAdapter(BaseStorage):
    """Pins files to IPFS through the Pinata pinning API."""

    def __init__(
        self,
        *,
        api_key: str,
        secret_key: str,
        max_upload_bytes: int,
        api_url: str = "https://api.pinata.cloud",
        gateway_url: str = "https://gateway.pinata.cloud/ipfs",
        timeout_seconds: int = 120,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(max_upload_bytes)
        self._gateway_url = gateway_url.rstrip("/")
        self._client = httpx.Client(
            base_url=api_url,
            timeout=timeout_seconds,
            headers={
                "pinata_api_key": api_key,
                "pinata_secret_api_key": secret_key,
            },
            transport=transport,
        )

    def _pin(self, file: UploadedFile) -> StoredFile:
        try:
            response = self._client.post(
                "/pinning/pinFileToIPFS",
                files={"file": (file.file_name, file.content, file.media_type)},
                data={
                    "pinataMetadata": json.dumps({"name": file.file_name}),
                    "pinataOptions": json.dumps({"cidVersion": 0}),
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = self._error_detail(exc.response)
            Log.error(f"Pinata upload rejected: {detail}")
            raise PinningError(f"Failed to upload to IPFS: {detail}") from exc
        except httpx.HTTPError as exc:
            Log.error(f"Pinata upload error: {exc}")
            raise PinningError(f"Failed to upload to IPFS: {exc}") from exc

        payload = response.json()
        ipfs_hash = payload.get("IpfsHash")
        if not ipfs_hash:
            raise PinningError("Failed to upload to IPFS: response had no IpfsHash")
        return StoredFile(
            content_hash=ipfs_hash,
            url=f"{self._gateway_url}/{ipfs_hash}",
            file_name=file.file_name,
            size=file.size,
            media_type=file.media_type,
            timestamp=payload.get("Timestamp"),
        )

    def check_connection(self) -> bool:
        """Return True when Pinata accepts the configured key pair."""
        try:
            response = self._client.get("/data/testAuthentication")
            response.raise_for_status()
        except httpx.HTTPError as exc:
            Log.warning(f"Pinata connection failed: {exc}")
            return False
        return True

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return str(error.get("details") or error.get("reason") or error)
        return str(error or body)
