import uuid
from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum

from ghost_protocol.analysis.models import ContentAnalysis
from ghost_protocol.storage.models import StoredFile, UploadedFile

MIN_TAG_LENGTH = 3
MAX_TAG_LENGTH = 20
MAX_TAGS = 10
MIN_TAGS = 2
DEFAULT_TAGS = ("creative-work", "ip-asset")

MIN_ROYALTY_RATE = 1
MAX_ROYALTY_RATE = 25


class LicenseType(str, Enum):
    OPEN = "open"
    COMMERCIAL = "commercial"


class FormStep(IntEnum):
    """Steps of the details form, in the order they are filled."""

    UPLOAD = 0
    CREATOR_DETAILS = 1
    WORK_METADATA = 2
    ESTATE_CONTRACT = 3
    LICENSING = 4


FIRST_STEP = FormStep.UPLOAD
LAST_STEP = FormStep.LICENSING


class RegistrationPhase(str, Enum):
    """Busy indicator of a registration session."""

    UPLOAD_PENDING = "upload_pending"
    UPLOADING = "uploading"
    ANALYZING = "analyzing"
    READY_TO_FILL_DETAILS = "ready_to_fill_details"
    SUBMITTING = "submitting"
    CONFIRMING = "confirming"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SubmissionError(str, Enum):
    NOT_READY = "NotReady"
    ALREADY_REGISTERED = "AlreadyRegistered"
    BENEFICIARY_CREATION_FAILED = "BeneficiaryCreationFailed"
    REGISTRATION_REJECTED_BY_USER = "RegistrationRejectedByUser"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    REGISTRATION_FAILED_OTHER = "RegistrationFailedOther"
    CONFIRMATION_TIMED_OUT = "ConfirmationTimedOut"


@dataclass
class Beneficiary:
    """One payee of a Ghost Wallet and their share in percent."""

    wallet_address: str = ""
    name: str = ""
    percentage: float = 0.0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(frozen=True)
class UploadedFileRef:
    file_name: str
    media_type: str
    size: int


@dataclass
class RegistrationForm:
    """Everything the user enters during one registration session."""

    is_deceased: bool | None = None
    creator_name: str = ""
    death_year: int | None = None
    estate_representative: str = ""
    uploaded_file: UploadedFileRef | None = None
    content_hash: str = ""
    content_url: str = ""
    analysis: ContentAnalysis | None = None
    tags: list[str] = field(default_factory=list)
    beneficiaries: list[Beneficiary] = field(default_factory=list)
    license_type: LicenseType | None = None
    royalty_rate: int = 15
    allow_ai_training: bool = False
    ai_training_price: float = 0.001

    def add_tag(self, tag: str) -> bool:
        """Add a normalized tag; return False when it is rejected."""
        normalized = tag.strip().lower()
        if not MIN_TAG_LENGTH <= len(normalized) <= MAX_TAG_LENGTH:
            return False
        if normalized in self.tags or len(self.tags) >= MAX_TAGS:
            return False
        self.tags.append(normalized)
        return True

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    def add_beneficiary(
        self,
        wallet_address: str = "",
        name: str = "",
        percentage: float = 0.0,
    ) -> Beneficiary:
        beneficiary = Beneficiary(
            wallet_address=wallet_address,
            name=name,
            percentage=percentage,
        )
        self.beneficiaries.append(beneficiary)
        return beneficiary

    def remove_beneficiary(self, beneficiary_id: str) -> None:
        self.beneficiaries = [b for b in self.beneficiaries if b.id != beneficiary_id]

    def update_beneficiary(
        self,
        beneficiary_id: str,
        *,
        wallet_address: str | None = None,
        name: str | None = None,
        percentage: float | None = None,
    ) -> None:
        for beneficiary in self.beneficiaries:
            if beneficiary.id != beneficiary_id:
                continue
            if wallet_address is not None:
                beneficiary.wallet_address = wallet_address
            if name is not None:
                beneficiary.name = name
            if percentage is not None:
                beneficiary.percentage = percentage

    def reset(self) -> None:
        """Return every field to its default, keeping the same object."""
        blank = RegistrationForm()
        for f in fields(self):
            setattr(self, f.name, getattr(blank, f.name))

    def total_percentage(self) -> float:
        return sum(b.percentage for b in self.beneficiaries)

    def set_royalty_rate(self, rate: int) -> None:
        self.royalty_rate = max(MIN_ROYALTY_RATE, min(MAX_ROYALTY_RATE, rate))

    def apply_upload(
        self,
        stored: StoredFile,
        file: UploadedFile,
        analysis: ContentAnalysis,
    ) -> None:
        """Fill the upload fields and auto-tags from a finished upload and analysis."""
        title = analysis.title or file.stem or "Untitled Work"
        genre = analysis.genre or "Creative Work"
        description = analysis.description or f"A creative work uploaded as {file.file_name}"

        self.uploaded_file = UploadedFileRef(
            file_name=file.file_name,
            media_type=file.media_type,
            size=file.size,
        )
        self.content_hash = stored.content_hash
        self.content_url = stored.url
        self.analysis = ContentAnalysis(
            title=title,
            genre=genre,
            description=description,
            publication_year=analysis.publication_year,
            detected_influences=list(analysis.detected_influences),
        )
        for tag in (genre.lower(), file.extension or "file", "ip-asset", "creative-work", "digital-asset"):
            self.add_tag(tag)


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of one submission attempt.

    ``timed_out`` marks the partial outcome: the transaction was sent but its
    confirmation was not observed, so ``transaction_ref`` must be checked by
    hand.
    """

    success: bool
    transaction_ref: str | None = None
    asset_id: int | None = None
    wallet_address: str | None = None
    error: SubmissionError | None = None
    message: str | None = None
    timed_out: bool = False
    explorer_url: str | None = None

    @classmethod
    def failure(
        cls,
        error: SubmissionError,
        message: str,
        *,
        transaction_ref: str | None = None,
        explorer_url: str | None = None,
        wallet_address: str | None = None,
    ) -> "SubmissionResult":
        return cls(
            success=False,
            error=error,
            message=message,
            transaction_ref=transaction_ref,
            explorer_url=explorer_url,
            wallet_address=wallet_address,
            timed_out=error is SubmissionError.CONFIRMATION_TIMED_OUT,
        )
