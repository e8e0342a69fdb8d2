from abc import ABC, abstractmethod

from ghost_protocol.chain.models import (
    AssetRegistrationRequest,
    AssetStats,
    BeneficiaryContractRequest,
    RegisteredAsset,
    TransactionReceipt,
)


class BaseChainClient(ABC):
    """Contract for the Ghost Wallet factory and IP registry bindings.

    Write methods return the transaction hash as soon as the transaction is
    sent; confirmation is polled separately through ``get_receipt``.

    All methods raise ``ChainError`` on failure.
    """

    @property
    @abstractmethod
    def account_address(self) -> str | None:
        """Address of the connected signing account, or None when not connected."""

    @abstractmethod
    def is_content_registered(self, content_hash: str) -> bool:
        """Read-only plagiarism check against the registry."""

    @abstractmethod
    def create_beneficiary_contract(self, request: BeneficiaryContractRequest) -> str:
        """Send createGhostWallet; return the transaction hash."""

    @abstractmethod
    def register_asset(self, request: AssetRegistrationRequest, gas_limit: int) -> str:
        """Send registerIPAsset with a fixed gas ceiling; return the transaction hash."""

    @abstractmethod
    def get_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        """Return the decoded receipt, or None while the transaction is pending."""

    @abstractmethod
    def get_total_assets(self) -> int: ...

    @abstractmethod
    def get_asset(self, asset_id: int) -> RegisteredAsset: ...

    @abstractmethod
    def get_asset_stats(self) -> AssetStats: ...

    @abstractmethod
    def get_total_wallets(self) -> int: ...

    @abstractmethod
    def is_deployed(self, address: str) -> bool:
        """True when contract code exists at the address."""

    @abstractmethod
    def chain_id(self) -> int: ...
