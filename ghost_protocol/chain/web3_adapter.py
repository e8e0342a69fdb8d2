from typing import Any

from web3 import Web3
from web3.exceptions import TransactionNotFound, Web3Exception
from web3.logs import DISCARD

from ghost_protocol.chain.abi_loader import load_abi
from ghost_protocol.chain.base import BaseChainClient
from ghost_protocol.chain.exceptions import ChainError
from ghost_protocol.chain.models import (
    GHOST_WALLET_CREATED,
    IP_ASSET_REGISTERED,
    AssetRegistrationRequest,
    AssetStats,
    BeneficiaryContractRequest,
    ChainEvent,
    RegisteredAsset,
    TransactionReceipt,
)
from ghost_protocol.logging.logger import Log

_BENEFICIARY_CONTRACT_GAS = 5_000_000


class Web3ChainAdapter(BaseChainClient):
    """Story Protocol bindings over JSON-RPC using web3.py.

    Transactions are signed locally with the configured private key; without
    a key the adapter is read-only and ``account_address`` is None.
    """

    def __init__(
        self,
        *,
        rpc_url: str,
        chain_id: int,
        factory_address: str,
        registry_address: str,
        private_key: str = "",
        timeout_seconds: int = 30,
        web3: Web3 | None = None,
    ) -> None:
        self._w3 = web3 or Web3(
            Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout_seconds})
        )
        self._chain_id = chain_id
        self._account = self._w3.eth.account.from_key(private_key) if private_key else None
        self._factory = self._w3.eth.contract(
            address=Web3.to_checksum_address(factory_address),
            abi=load_abi("ghost_wallet_factory"),
        )
        self._registry = self._w3.eth.contract(
            address=Web3.to_checksum_address(registry_address),
            abi=load_abi("ip_registry"),
        )

    @property
    def account_address(self) -> str | None:
        return self._account.address if self._account is not None else None

    def is_content_registered(self, content_hash: str) -> bool:
        return bool(self._call(self._registry.functions.isContentRegistered(content_hash)))

    def create_beneficiary_contract(self, request: BeneficiaryContractRequest) -> str:
        fn = self._factory.functions.createGhostWallet(
            request.creator_name,
            request.death_year,
            [_checksum(a) for a in request.beneficiary_addresses],
            request.share_basis_points,
            request.names,
            [_checksum(a) for a in request.admin_addresses],
            request.required_signatures,
        )
        return self._send(fn, _BENEFICIARY_CONTRACT_GAS)

    def register_asset(self, request: AssetRegistrationRequest, gas_limit: int) -> str:
        fn = self._registry.functions.registerIPAsset(
            _checksum(request.owner),
            _checksum(request.beneficiary_contract),
            request.content_hash,
            request.title,
            request.creator_name,
            request.is_deceased,
        )
        return self._send(fn, gas_limit)

    def get_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        try:
            receipt = self._w3.eth.get_transaction_receipt(tx_hash)  # type: ignore[arg-type]
        except TransactionNotFound:
            return None
        except (Web3Exception, ValueError, OSError) as exc:
            raise ChainError(f"Failed to fetch receipt for {tx_hash}: {exc}") from exc

        events: list[ChainEvent] = []
        for contract, name in (
            (self._factory, GHOST_WALLET_CREATED),
            (self._registry, IP_ASSET_REGISTERED),
        ):
            for log in contract.events[name]().process_receipt(receipt, errors=DISCARD):
                events.append(ChainEvent(name=name, args=dict(log["args"])))
        return TransactionReceipt(
            tx_hash=tx_hash,
            succeeded=receipt["status"] == 1,
            block_number=receipt.get("blockNumber"),
            events=events,
        )

    def get_total_assets(self) -> int:
        return int(self._call(self._registry.functions.getTotalIPAssets()))

    def get_asset(self, asset_id: int) -> RegisteredAsset:
        raw = self._call(self._registry.functions.getIPAsset(asset_id))
        (
            onchain_id,
            owner,
            ghost_wallet,
            ipfs_hash,
            title,
            creator,
            is_deceased,
            registered_at,
        ) = raw
        return RegisteredAsset(
            id=int(onchain_id),
            owner=owner,
            beneficiary_contract=ghost_wallet,
            content_hash=ipfs_hash,
            title=title,
            creator_name=creator,
            is_deceased=bool(is_deceased),
            registered_at=int(registered_at),
        )

    def get_asset_stats(self) -> AssetStats:
        deceased, living = self._call(self._registry.functions.getIPAssetStats())
        return AssetStats(deceased=int(deceased), living=int(living))

    def get_total_wallets(self) -> int:
        return int(self._call(self._factory.functions.getTotalWallets()))

    def is_deployed(self, address: str) -> bool:
        try:
            code = self._w3.eth.get_code(Web3.to_checksum_address(address))
        except (Web3Exception, ValueError, OSError) as exc:
            raise ChainError(f"Failed to read code at {address}: {exc}") from exc
        return len(code) > 0

    def chain_id(self) -> int:
        try:
            return int(self._w3.eth.chain_id)
        except (Web3Exception, ValueError, OSError) as exc:
            raise ChainError(f"Failed to read chain id: {exc}") from exc

    def _call(self, fn: Any) -> Any:
        try:
            return fn.call()
        except (Web3Exception, ValueError, OSError) as exc:
            raise ChainError(f"Contract call {fn.fn_name} failed: {exc}") from exc

    def _send(self, fn: Any, gas_limit: int) -> str:
        if self._account is None:
            raise ChainError("No signing account configured")
        try:
            tx = fn.build_transaction({
                "from": self._account.address,
                "nonce": self._w3.eth.get_transaction_count(self._account.address),
                "gas": gas_limit,
                "chainId": self._chain_id,
            })
            signed = self._account.sign_transaction(tx)
            tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, ValueError, OSError) as exc:
            raise ChainError(f"{fn.fn_name} transaction failed: {exc}") from exc
        hex_hash = Web3.to_hex(tx_hash)
        Log.info(f"{fn.fn_name} transaction sent: {hex_hash}")
        return hex_hash


def _checksum(address: str) -> str:
    try:
        return Web3.to_checksum_address(address)
    except (Web3Exception, ValueError, TypeError) as exc:
        raise ChainError(f"Invalid address '{address}': {exc}") from exc
