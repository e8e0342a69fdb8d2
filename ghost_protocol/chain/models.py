from dataclasses import dataclass, field
from typing import Any

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

GHOST_WALLET_CREATED = "GhostWalletCreated"
IP_ASSET_REGISTERED = "IPAssetRegistered"


@dataclass(frozen=True)
class ChainEvent:
    """A decoded contract event from a transaction receipt."""

    name: str
    args: dict[str, Any]


@dataclass(frozen=True)
class TransactionReceipt:
    """The subset of a mined transaction's receipt the orchestrator reads."""

    tx_hash: str
    succeeded: bool
    block_number: int | None = None
    events: list[ChainEvent] = field(default_factory=list)

    def first_event(self, name: str) -> ChainEvent | None:
        return next((e for e in self.events if e.name == name), None)


@dataclass(frozen=True)
class BeneficiaryContractRequest:
    """Arguments of the factory's createGhostWallet call."""

    creator_name: str
    death_year: int
    beneficiary_addresses: list[str]
    share_basis_points: list[int]
    names: list[str]
    admin_addresses: list[str]
    required_signatures: int = 1


@dataclass(frozen=True)
class AssetRegistrationRequest:
    """Arguments of the registry's registerIPAsset call."""

    owner: str
    beneficiary_contract: str
    content_hash: str
    title: str
    creator_name: str
    is_deceased: bool


@dataclass(frozen=True)
class RegisteredAsset:
    """An IP asset as stored by the registry contract."""

    id: int
    owner: str
    beneficiary_contract: str
    content_hash: str
    title: str
    creator_name: str
    is_deceased: bool
    registered_at: int = 0

    @property
    def has_beneficiary_contract(self) -> bool:
        return self.beneficiary_contract.lower() != ZERO_ADDRESS


@dataclass(frozen=True)
class AssetStats:
    deceased: int
    living: int

    @property
    def total(self) -> int:
        return self.deceased + self.living


def transaction_url(explorer_url: str, tx_hash: str) -> str:
    return f"{explorer_url.rstrip('/')}/tx/{tx_hash}"


def address_url(explorer_url: str, address: str) -> str:
    return f"{explorer_url.rstrip('/')}/address/{address}"
