from ghost_protocol.config.settings import Settings
from ghost_protocol.storage.base import BaseStorage
from ghost_protocol.storage.example_adapter import ExampleStorageAdapter
from ghost_protocol.storage.pinata_adapter import PinataStorageAdapter


class StorageFactory:
    """Creates the configured storage adapter."""

    PROVIDERS = ("pinata", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseStorage:
        provider = settings.storage_provider.lower()
        if provider == "example":
            return ExampleStorageAdapter(settings.max_upload_bytes)
        if provider == "pinata":
            return PinataStorageAdapter(
                api_key=settings.pinata_api_key,
                secret_key=settings.pinata_secret_key,
                max_upload_bytes=settings.max_upload_bytes,
                api_url=settings.pinata_api_url,
                gateway_url=settings.pinata_gateway_url,
                timeout_seconds=settings.pinata_timeout_seconds,
            )
        raise ValueError(
            f"Unknown storage provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
