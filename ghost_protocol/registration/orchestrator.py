import threading
from dataclasses import dataclass

from ghost_protocol.analysis.analyzer import ContentAnalyzer
from ghost_protocol.analysis.models import AnalysisOutcome
from ghost_protocol.chain.base import BaseChainClient
from ghost_protocol.logging.logger import Log
from ghost_protocol.registration.models import (
    FIRST_STEP,
    LAST_STEP,
    FormStep,
    RegistrationForm,
    RegistrationPhase,
    SubmissionError,
    SubmissionResult,
)
from ghost_protocol.registration.submission import RegistrationSubmitter
from ghost_protocol.registration.validation import validate_step
from ghost_protocol.session.store import SessionStore, WalletPreference
from ghost_protocol.storage.base import BaseStorage
from ghost_protocol.storage.exceptions import StorageError
from ghost_protocol.storage.models import StoredFile, UploadedFile

SIGNER_CONNECTOR = "signer"

_STEP_LABELS = {
    FormStep.UPLOAD: "Upload details",
    FormStep.CREATOR_DETAILS: "Creator details",
    FormStep.WORK_METADATA: "Work details",
    FormStep.ESTATE_CONTRACT: "Estate contract details",
    FormStep.LICENSING: "Licensing details",
}


@dataclass(frozen=True)
class UploadResult:
    success: bool
    stored: StoredFile | None = None
    analysis: AnalysisOutcome | None = None
    error: str | None = None


class RegistrationSession:
    """One registration flow, from upload to confirmed asset.

    Holds the form, the active step and the phase. A step is validated when
    ``next_step`` leaves it, and every step is validated again by ``submit``
    before anything is sent, since ``go_to_step`` can skip ahead. Only one ``submit`` may run at a time; a concurrent call
    returns a NotReady result without touching the network.

    The connected wallet is the chain client's signing account. The session
    store is read in ``start`` and written in ``close`` and nowhere else.
    """

    def __init__(
        self,
        *,
        storage: BaseStorage,
        analyzer: ContentAnalyzer,
        chain: BaseChainClient,
        submitter: RegistrationSubmitter,
        session_store: SessionStore | None = None,
    ) -> None:
        self._storage = storage
        self._analyzer = analyzer
        self._chain = chain
        self._submitter = submitter
        self._session_store = session_store
        self._submit_lock = threading.Lock()

        self.form = RegistrationForm()
        self.phase = RegistrationPhase.UPLOAD_PENDING
        self.current_step = FIRST_STEP
        self.errors: dict[str, str] = {}
        self.wallet_address: str | None = None
        self.preference = WalletPreference()

    # Session lifecycle

    def start(self) -> None:
        if self._session_store is not None:
            self.preference = self._session_store.restore()
        if self.preference.auto_connect:
            self.connect_wallet(self.preference.connector or SIGNER_CONNECTOR)

    def close(self) -> None:
        """Abandon any pending confirmation and persist the wallet preference."""
        self.abandon()
        if self._session_store is not None:
            self._session_store.save(self.preference)

    def connect_wallet(self, connector: str = SIGNER_CONNECTOR) -> bool:
        address = self._chain.account_address
        if not address:
            Log.warning("No signing account configured; wallet not connected")
            return False
        self.wallet_address = address
        self.preference = WalletPreference(auto_connect=True, connector=connector)
        Log.info(f"Wallet connected: {address}")
        return True

    def disconnect_wallet(self) -> None:
        self.wallet_address = None
        self.preference = WalletPreference()

    def reset(self) -> None:
        self.form.reset()
        self.current_step = FIRST_STEP
        self.errors = {}
        self.phase = RegistrationPhase.UPLOAD_PENDING

    # Upload

    def upload_and_analyze(self, file: UploadedFile) -> UploadResult:
        self.phase = RegistrationPhase.UPLOADING
        try:
            stored = self._storage.store(file)
        except StorageError as exc:
            Log.error(f"Upload of {file.file_name} failed: {exc}")
            self.phase = RegistrationPhase.UPLOAD_PENDING
            return UploadResult(success=False, error=str(exc))

        self.phase = RegistrationPhase.ANALYZING
        outcome = self._analyzer.analyze(file)
        self.form.apply_upload(stored, file, outcome.analysis)
        self.phase = RegistrationPhase.READY_TO_FILL_DETAILS
        return UploadResult(success=True, stored=stored, analysis=outcome)

    # Steps

    def next_step(self) -> bool:
        """Validate the active step and advance when it has no errors."""
        self.errors = validate_step(self.current_step, self.form)
        if self.errors:
            return False
        if self.current_step < LAST_STEP:
            self.current_step = FormStep(self.current_step + 1)
            return True
        return False

    def previous_step(self) -> None:
        if self.current_step > FIRST_STEP:
            self.current_step = FormStep(self.current_step - 1)

    def go_to_step(self, step: int) -> None:
        self.current_step = FormStep(max(FIRST_STEP, min(LAST_STEP, step)))

    # Submission

    def submit(self) -> SubmissionResult:
        if not self._submit_lock.acquire(blocking=False):
            return SubmissionResult.failure(
                SubmissionError.NOT_READY, "A submission is already in progress"
            )
        try:
            return self._submit()
        finally:
            self._submit_lock.release()

    def abandon(self) -> None:
        """Stop waiting for confirmation; a sent transaction stays outstanding."""
        self._submitter.cancel()

    def _submit(self) -> SubmissionResult:
        if not self.wallet_address:
            return SubmissionResult.failure(SubmissionError.NOT_READY, "Please connect your wallet")
        if not self.form.content_hash:
            return SubmissionResult.failure(SubmissionError.NOT_READY, "Please upload a file first")
        if self.current_step != LAST_STEP:
            return SubmissionResult.failure(
                SubmissionError.NOT_READY, "Complete every step before submitting"
            )
        for step in FormStep:
            self.errors = validate_step(step, self.form)
            if self.errors:
                self.current_step = step
                return SubmissionResult.failure(
                    SubmissionError.NOT_READY, f"{_STEP_LABELS[step]} are incomplete"
                )

        result = self._submitter.submit(self.form, self.wallet_address, self._set_phase)
        if result.success:
            self.phase = RegistrationPhase.SUCCEEDED
            self.form.reset()
            self.current_step = FIRST_STEP
        else:
            self.phase = RegistrationPhase.FAILED
        return result

    def _set_phase(self, phase: RegistrationPhase) -> None:
        self.phase = phase
