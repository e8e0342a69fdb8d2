from ghost_protocol.chain.base import BaseChainClient
from ghost_protocol.chain.example_adapter import ExampleChainAdapter
from ghost_protocol.chain.web3_adapter import Web3ChainAdapter
from ghost_protocol.config.settings import Settings


class ChainClientFactory:
    """Creates the configured chain client."""

    PROVIDERS = ("web3", "example")

    @classmethod
    def create(cls, settings: Settings) -> BaseChainClient:
        provider = settings.chain_provider.lower()
        if provider == "example":
            return ExampleChainAdapter()
        if provider == "web3":
            return Web3ChainAdapter(
                rpc_url=settings.chain_rpc_url,
                chain_id=settings.chain_id,
                factory_address=settings.ghost_wallet_factory_address,
                registry_address=settings.ip_registry_address,
                private_key=settings.wallet_private_key,
                timeout_seconds=settings.chain_rpc_timeout_seconds,
            )
        raise ValueError(
            f"Unknown chain provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
