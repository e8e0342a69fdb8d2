import pytest

from ghost_protocol.config.exceptions import MissingConfigurationError
from ghost_protocol.config.settings import Settings

_SECRET_VARS = ("PINATA_API_KEY", "PINATA_SECRET_KEY", "GROQ_API_KEY")


@pytest.fixture(autouse=True)
def _clear_secrets(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SECRET_VARS:
        monkeypatch.delenv(name, raising=False)


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


class TestSettingsDefaults:
    def test_targets_aeneid_testnet(self) -> None:
        s = _settings()
        assert s.chain_id == 1514
        assert s.chain_rpc_url == "https://aeneid.storyrpc.io"
        assert s.chain_explorer_url == "https://aeneid.storyscan.io"

    def test_contract_addresses(self) -> None:
        s = _settings()
        assert s.ghost_wallet_factory_address == "0xc17c11ab2736bcab4f69e0c1a75f4a7aafbbf1bb"
        assert s.ip_registry_address == "0x62be70f0015b2398dab49f714762e4886ec24b6e"

    def test_upload_ceiling_is_100_mib(self) -> None:
        assert _settings().max_upload_bytes == 100 * 1024 * 1024

    def test_confirmation_window(self) -> None:
        s = _settings()
        assert s.confirmation_timeout_seconds == 180
        assert s.confirmation_poll_interval_seconds == 3

    def test_analysis_defaults(self) -> None:
        s = _settings()
        assert s.analysis_temperature == 0.3
        assert s.analysis_text_budget == 8000
        assert s.groq_base_url == "https://api.groq.com/openai/v1"


class TestSettingsFromEnv:
    def test_loads_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_PORT", "8080")
        assert _settings().api_port == 8080

    def test_loads_providers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORAGE_PROVIDER", "example")
        monkeypatch.setenv("CHAIN_PROVIDER", "example")
        s = _settings()
        assert s.storage_provider == "example"
        assert s.chain_provider == "example"


class TestRequireSecrets:
    def test_lists_every_missing_secret(self) -> None:
        with pytest.raises(MissingConfigurationError) as exc_info:
            _settings().require_secrets()
        assert exc_info.value.missing == list(_SECRET_VARS)
        assert "https://pinata.cloud/" in str(exc_info.value)
        assert "https://console.groq.com/" in str(exc_info.value)

    def test_passes_when_all_set(self) -> None:
        s = _settings(pinata_api_key="a", pinata_secret_key="b", groq_api_key="c")
        s.require_secrets()

    def test_example_providers_need_no_keys(self) -> None:
        s = _settings(storage_provider="example", analysis_provider="example")
        assert s.missing_secrets() == []

    def test_only_groq_missing(self) -> None:
        s = _settings(pinata_api_key="a", pinata_secret_key="b")
        assert s.missing_secrets() == ["GROQ_API_KEY"]
