from pydantic_settings import BaseSettings, SettingsConfigDict

from ghost_protocol.config.exceptions import MissingConfigurationError

_REMEDIATION = """Please create a .env file with the following variables:
   PINATA_API_KEY=your_pinata_api_key_here
   PINATA_SECRET_KEY=your_pinata_secret_key_here
   GROQ_API_KEY=your_groq_api_key_here

Get keys from:
   Pinata: https://pinata.cloud/
   Groq: https://console.groq.com/"""


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3001

    storage_provider: str = "pinata"
    pinata_api_key: str = ""
    pinata_secret_key: str = ""
    pinata_api_url: str = "https://api.pinata.cloud"
    pinata_gateway_url: str = "https://gateway.pinata.cloud/ipfs"
    pinata_timeout_seconds: int = 120
    max_upload_bytes: int = 100 * 1024 * 1024

    pdf_engine: str = "pdfplumber"

    analysis_provider: str = "groq"
    groq_api_key: str = ""
    groq_model_name: str = "llama-3.3-70b-versatile"
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_timeout_seconds: int = 30
    analysis_temperature: float = 0.3
    analysis_max_tokens: int = 2000
    analysis_text_budget: int = 8000

    chain_provider: str = "web3"
    chain_rpc_url: str = "https://aeneid.storyrpc.io"
    chain_id: int = 1514
    chain_explorer_url: str = "https://aeneid.storyscan.io"
    chain_rpc_timeout_seconds: int = 30
    ghost_wallet_factory_address: str = "0xc17c11ab2736bcab4f69e0c1a75f4a7aafbbf1bb"
    ghost_wallet_implementation_address: str = "0xf73d6c9472245ed0eaf3001fca14c1608d4ccae2"
    ip_registry_address: str = "0x62be70f0015b2398dab49f714762e4886ec24b6e"
    wallet_private_key: str = ""

    registration_gas_limit: int = 3_000_000
    confirmation_timeout_seconds: float = 180.0
    confirmation_poll_interval_seconds: float = 3.0

    session_store_path: str = ".ghost-protocol-session.json"

    def missing_secrets(self) -> list[str]:
        """Names of required environment variables that are unset."""
        missing: list[str] = []
        if self.storage_provider.lower() == "pinata":
            if not self.pinata_api_key:
                missing.append("PINATA_API_KEY")
            if not self.pinata_secret_key:
                missing.append("PINATA_SECRET_KEY")
        if self.analysis_provider.lower() != "example" and not self.groq_api_key:
            missing.append("GROQ_API_KEY")
        return missing

    def require_secrets(self) -> None:
        """Fail fast when a required secret is missing.

        Raises:
            MissingConfigurationError: listing every missing variable and how
                to obtain it.
        """
        missing = self.missing_secrets()
        if missing:
            listing = "\n".join(f"   - {name}" for name in missing)
            raise MissingConfigurationError(
                f"Missing required environment variables:\n{listing}\n\n{_REMEDIATION}",
                missing=missing,
            )
