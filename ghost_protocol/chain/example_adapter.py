"""In-memory chain.

Behaves like the deployed factory and registry without an RPC node. Receipts
can be held back for a number of polls to imitate confirmation latency. Used
for local development and tests.
"""

import hashlib
import time

from ghost_protocol.chain.base import BaseChainClient
from ghost_protocol.chain.exceptions import ChainError
from ghost_protocol.chain.models import (
    GHOST_WALLET_CREATED,
    IP_ASSET_REGISTERED,
    ZERO_ADDRESS,
    AssetRegistrationRequest,
    AssetStats,
    BeneficiaryContractRequest,
    ChainEvent,
    RegisteredAsset,
    TransactionReceipt,
)

EXAMPLE_ACCOUNT = "0x00000000000000000000000000000000000a11ce"
EXAMPLE_CHAIN_ID = 1514


def _derive(seed: str, length: int) -> str:
    return "0x" + hashlib.sha256(seed.encode("utf-8")).hexdigest()[:length]


class ExampleChainAdapter(BaseChainClient):
    def __init__(
        self,
        *,
        account_address: str | None = EXAMPLE_ACCOUNT,
        pending_polls: int = 0,
    ) -> None:
        self._account_address = account_address
        self.pending_polls = pending_polls
        self.assets: list[RegisteredAsset] = []
        self.wallets: dict[str, BeneficiaryContractRequest] = {}
        self.writes: list[str] = []
        self.failures: dict[str, str] = {}
        self._pending: dict[str, tuple[TransactionReceipt, int]] = {}
        self._nonce = 0

    @property
    def account_address(self) -> str | None:
        return self._account_address

    def fail_next(self, method: str, message: str) -> None:
        """Make the next call to ``method`` raise ChainError with ``message``."""
        self.failures[method] = message

    def is_content_registered(self, content_hash: str) -> bool:
        self._maybe_fail("is_content_registered")
        return any(a.content_hash == content_hash for a in self.assets)

    def create_beneficiary_contract(self, request: BeneficiaryContractRequest) -> str:
        self.writes.append("create_beneficiary_contract")
        self._maybe_fail("create_beneficiary_contract")
        if sum(request.share_basis_points) != 10_000:
            raise ChainError("execution reverted: Shares must total 10000")
        wallet_address = _derive(f"{request.creator_name}:{request.death_year}", 40)
        self.wallets[wallet_address] = request
        event = ChainEvent(
            name=GHOST_WALLET_CREATED,
            args={
                "walletAddress": wallet_address,
                "creatorName": request.creator_name,
                "deathYear": request.death_year,
                "admin": request.admin_addresses[0] if request.admin_addresses else ZERO_ADDRESS,
            },
        )
        return self._queue(event)

    def register_asset(self, request: AssetRegistrationRequest, gas_limit: int) -> str:
        self.writes.append("register_asset")
        self._maybe_fail("register_asset")
        if gas_limit <= 0:
            raise ChainError("intrinsic gas too low")
        if any(a.content_hash == request.content_hash for a in self.assets):
            raise ChainError("execution reverted: Content already registered")
        asset = RegisteredAsset(
            id=len(self.assets) + 1,
            owner=request.owner,
            beneficiary_contract=request.beneficiary_contract,
            content_hash=request.content_hash,
            title=request.title,
            creator_name=request.creator_name,
            is_deceased=request.is_deceased,
            registered_at=int(time.time()),
        )
        self.assets.append(asset)
        event = ChainEvent(
            name=IP_ASSET_REGISTERED,
            args={
                "id": asset.id,
                "owner": asset.owner,
                "ipfsHash": asset.content_hash,
                "isDeceased": asset.is_deceased,
            },
        )
        return self._queue(event)

    def get_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        self._maybe_fail("get_receipt")
        entry = self._pending.get(tx_hash)
        if entry is None:
            return None
        receipt, remaining = entry
        if remaining > 0:
            self._pending[tx_hash] = (receipt, remaining - 1)
            return None
        return receipt

    def get_total_assets(self) -> int:
        return len(self.assets)

    def get_asset(self, asset_id: int) -> RegisteredAsset:
        if not 1 <= asset_id <= len(self.assets):
            raise ChainError(f"execution reverted: IP asset {asset_id} does not exist")
        return self.assets[asset_id - 1]

    def get_asset_stats(self) -> AssetStats:
        deceased = sum(1 for a in self.assets if a.is_deceased)
        return AssetStats(deceased=deceased, living=len(self.assets) - deceased)

    def get_total_wallets(self) -> int:
        return len(self.wallets)

    def is_deployed(self, address: str) -> bool:
        return address.lower() != ZERO_ADDRESS

    def chain_id(self) -> int:
        return EXAMPLE_CHAIN_ID

    def _queue(self, event: ChainEvent) -> str:
        self._nonce += 1
        tx_hash = _derive(f"tx:{self._nonce}", 64)
        receipt = TransactionReceipt(
            tx_hash=tx_hash,
            succeeded=True,
            block_number=self._nonce,
            events=[event],
        )
        self._pending[tx_hash] = (receipt, self.pending_polls)
        return tx_hash

    def _maybe_fail(self, method: str) -> None:
        message = self.failures.pop(method, None)
        if message is not None:
            raise ChainError(message)
