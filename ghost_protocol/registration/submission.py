from collections.abc import Callable

from ghost_protocol.chain.base import BaseChainClient
from ghost_protocol.chain.exceptions import ChainError
from ghost_protocol.chain.models import (
    GHOST_WALLET_CREATED,
    IP_ASSET_REGISTERED,
    ZERO_ADDRESS,
    AssetRegistrationRequest,
    BeneficiaryContractRequest,
    TransactionReceipt,
    transaction_url,
)
from ghost_protocol.logging.logger import Log
from ghost_protocol.registration.confirmation import (
    ConfirmationCancelled,
    ConfirmationTimeout,
    ConfirmationWaiter,
)
from ghost_protocol.registration.errors import classify_error
from ghost_protocol.registration.models import (
    RegistrationForm,
    RegistrationPhase,
    SubmissionError,
    SubmissionResult,
)
from ghost_protocol.registration.validation import (
    share_basis_points,
    shares_total_one_hundred,
)

PhaseCallback = Callable[[RegistrationPhase], None]

UNTITLED = "Untitled"
UNKNOWN_CREATOR = "Unknown"


class _StageFailed(Exception):
    def __init__(self, result: SubmissionResult) -> None:
        super().__init__(result.message)
        self.result = result


class RegistrationSubmitter:
    """Runs the on-chain part of a registration.

    The sequence is: plagiarism gate, optional beneficiary contract for a
    deceased creator, asset registration, confirmation. Nothing is written
    before the gate passes, and a beneficiary contract failure stops the
    sequence before registration.
    """

    def __init__(
        self,
        chain: BaseChainClient,
        waiter: ConfirmationWaiter,
        *,
        gas_limit: int,
        explorer_url: str,
    ) -> None:
        self._chain = chain
        self._waiter = waiter
        self._gas_limit = gas_limit
        self._explorer_url = explorer_url

    def cancel(self) -> None:
        self._waiter.cancel()

    def submit(
        self,
        form: RegistrationForm,
        owner: str,
        on_phase: PhaseCallback | None = None,
    ) -> SubmissionResult:
        notify = on_phase or (lambda _phase: None)
        self._waiter.reset()
        try:
            notify(RegistrationPhase.SUBMITTING)
            self._check_not_registered(form.content_hash)
            wallet_address = ZERO_ADDRESS
            if form.is_deceased:
                wallet_address = self._create_beneficiary_contract(form, owner, notify)
            return self._register(form, owner, wallet_address, notify)
        except _StageFailed as failed:
            Log.warning(f"Registration failed: {failed.result.error.value} {failed.result.message}")
            return failed.result

    def _check_not_registered(self, content_hash: str) -> None:
        try:
            registered = self._chain.is_content_registered(content_hash)
        except ChainError as exc:
            error, message = classify_error(str(exc))
            raise _StageFailed(SubmissionResult.failure(error, message)) from exc
        if registered:
            raise _StageFailed(SubmissionResult.failure(
                SubmissionError.ALREADY_REGISTERED,
                "This content has already been registered as an IP asset",
            ))

    def _create_beneficiary_contract(
        self,
        form: RegistrationForm,
        owner: str,
        notify: PhaseCallback,
    ) -> str:
        if not form.creator_name.strip() or not form.death_year:
            raise _StageFailed(SubmissionResult.failure(
                SubmissionError.BENEFICIARY_CREATION_FAILED,
                "Creator name and death year are required",
            ))
        if not form.beneficiaries:
            raise _StageFailed(SubmissionResult.failure(
                SubmissionError.BENEFICIARY_CREATION_FAILED,
                "At least one beneficiary is required",
            ))
        if not shares_total_one_hundred(form.beneficiaries):
            raise _StageFailed(SubmissionResult.failure(
                SubmissionError.BENEFICIARY_CREATION_FAILED,
                f"Beneficiary percentages must total 100% (currently {form.total_percentage():g}%)",
            ))

        request = BeneficiaryContractRequest(
            creator_name=form.creator_name,
            death_year=int(form.death_year),
            beneficiary_addresses=[b.wallet_address for b in form.beneficiaries],
            share_basis_points=share_basis_points(form.beneficiaries),
            names=[b.name for b in form.beneficiaries],
            admin_addresses=[owner],
            required_signatures=1,
        )
        try:
            tx_hash = self._chain.create_beneficiary_contract(request)
        except ChainError as exc:
            error, message = classify_error(str(exc), SubmissionError.BENEFICIARY_CREATION_FAILED)
            raise _StageFailed(SubmissionResult.failure(error, message)) from exc

        receipt = self._confirm(tx_hash, notify, SubmissionError.BENEFICIARY_CREATION_FAILED)
        event = receipt.first_event(GHOST_WALLET_CREATED)
        if event is None or not event.args.get("walletAddress"):
            raise _StageFailed(self._failure(
                SubmissionError.BENEFICIARY_CREATION_FAILED,
                "Ghost Wallet creation did not emit a wallet address",
                tx_hash,
            ))
        wallet_address = event.args["walletAddress"]
        Log.info(f"Ghost Wallet created at {wallet_address}")
        notify(RegistrationPhase.SUBMITTING)
        return wallet_address

    def _register(
        self,
        form: RegistrationForm,
        owner: str,
        wallet_address: str,
        notify: PhaseCallback,
    ) -> SubmissionResult:
        analysis = form.analysis
        request = AssetRegistrationRequest(
            owner=owner,
            beneficiary_contract=wallet_address,
            content_hash=form.content_hash,
            title=(analysis.title if analysis else "") or UNTITLED,
            creator_name=form.creator_name or UNKNOWN_CREATOR,
            is_deceased=bool(form.is_deceased),
        )
        try:
            tx_hash = self._chain.register_asset(request, self._gas_limit)
        except ChainError as exc:
            error, message = classify_error(str(exc))
            raise _StageFailed(SubmissionResult.failure(error, message)) from exc

        receipt = self._confirm(tx_hash, notify, SubmissionError.REGISTRATION_FAILED_OTHER)
        event = receipt.first_event(IP_ASSET_REGISTERED)
        asset_id = int(event.args["id"]) if event is not None else None
        if asset_id is None:
            Log.warning(f"No {IP_ASSET_REGISTERED} event in receipt of {tx_hash}")
        Log.info(f"IP asset registered: id={asset_id} tx={tx_hash}")
        return SubmissionResult(
            success=True,
            transaction_ref=tx_hash,
            asset_id=asset_id,
            wallet_address=wallet_address,
            explorer_url=transaction_url(self._explorer_url, tx_hash),
        )

    def _confirm(
        self,
        tx_hash: str,
        notify: PhaseCallback,
        reverted_error: SubmissionError,
    ) -> TransactionReceipt:
        notify(RegistrationPhase.CONFIRMING)
        try:
            receipt = self._waiter.wait(tx_hash)
        except ConfirmationTimeout as exc:
            raise _StageFailed(self._failure(
                SubmissionError.CONFIRMATION_TIMED_OUT,
                "Transaction sent but not confirmed in time. Check the explorer for its status",
                tx_hash,
            )) from exc
        except ConfirmationCancelled as exc:
            raise _StageFailed(self._failure(
                SubmissionError.CONFIRMATION_TIMED_OUT,
                "Stopped waiting for confirmation. The transaction may still be mined",
                tx_hash,
            )) from exc
        if not receipt.succeeded:
            raise _StageFailed(self._failure(reverted_error, "Transaction reverted", tx_hash))
        return receipt

    def _failure(self, error: SubmissionError, message: str, tx_hash: str) -> SubmissionResult:
        return SubmissionResult.failure(
            error,
            message,
            transaction_ref=tx_hash,
            explorer_url=transaction_url(self._explorer_url, tx_hash),
        )
