"""Per-step validation of the registration form.

Each validator returns field-scoped error messages; an empty dict means the
step is complete. Validators run only when the user tries to leave a step,
not on every edit.
"""

from abc import ABC, abstractmethod
from typing import ClassVar

from web3 import Web3

from ghost_protocol.registration.models import (
    DEFAULT_TAGS,
    MIN_TAGS,
    Beneficiary,
    FormStep,
    RegistrationForm,
)

BASIS_POINTS_PER_PERCENT = 100
SHARE_SUM_TOLERANCE = 0.01


class StepValidator(ABC):
    step: ClassVar[FormStep]

    @abstractmethod
    def validate(self, form: RegistrationForm) -> dict[str, str]:
        raise NotImplementedError


class UploadStepValidator(StepValidator):
    step = FormStep.UPLOAD

    def validate(self, form: RegistrationForm) -> dict[str, str]:
        errors: dict[str, str] = {}
        if form.uploaded_file is None or not form.content_hash:
            errors["uploaded_file"] = "Please upload a file and wait for processing to complete"
        if form.analysis is None or not form.analysis.title or not form.analysis.genre:
            errors["analysis"] = "File analysis incomplete. Please try uploading again."
        return errors


class CreatorDetailsValidator(StepValidator):
    step = FormStep.CREATOR_DETAILS

    def validate(self, form: RegistrationForm) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not form.creator_name.strip():
            errors["creator_name"] = "Creator name is required"
        if form.is_deceased is None:
            errors["is_deceased"] = "Please specify if creator is deceased"
        if form.is_deceased and not form.death_year:
            errors["death_year"] = "Death year is required"
        if form.is_deceased and not form.estate_representative.strip():
            errors["estate_representative"] = "Estate representative is required"
        return errors


class WorkMetadataValidator(StepValidator):
    """Checks title, genre and description, and repairs a short tag list.

    With fewer than two tags the genre and the default tags are added before
    the count is checked, so the error only appears if that still falls short.
    """

    step = FormStep.WORK_METADATA

    def validate(self, form: RegistrationForm) -> dict[str, str]:
        errors: dict[str, str] = {}
        analysis = form.analysis
        if analysis is None or not analysis.title.strip():
            errors["title"] = "Title is required"
        if analysis is None or not analysis.genre.strip():
            errors["genre"] = "Genre is required"
        if analysis is None or not analysis.description.strip():
            errors["description"] = "Description is required"

        if len(form.tags) < MIN_TAGS:
            synthesize_tags(form)
        if len(form.tags) < MIN_TAGS:
            errors["tags"] = f"At least {MIN_TAGS} tags are required"
        return errors


class EstateContractValidator(StepValidator):
    step = FormStep.ESTATE_CONTRACT

    def validate(self, form: RegistrationForm) -> dict[str, str]:
        if not form.is_deceased:
            return {}
        errors: dict[str, str] = {}
        if not form.beneficiaries:
            errors["beneficiaries"] = "At least one beneficiary is required"
        if form.total_percentage() > 100:
            errors["total_percentage"] = "Total percentage cannot exceed 100%"
        for index, beneficiary in enumerate(form.beneficiaries):
            address = beneficiary.wallet_address.strip()
            if not address:
                errors[f"beneficiary_{index}_address"] = "Wallet address is required"
            elif not Web3.is_address(address):
                errors[f"beneficiary_{index}_address"] = "Invalid wallet address"
        return errors


class LicensingValidator(StepValidator):
    step = FormStep.LICENSING

    def validate(self, form: RegistrationForm) -> dict[str, str]:
        errors: dict[str, str] = {}
        if form.license_type is None:
            errors["license_type"] = "Please select a license type"
        if form.allow_ai_training and form.ai_training_price <= 0:
            errors["ai_training_price"] = "AI training price must be greater than 0"
        return errors


VALIDATORS: dict[FormStep, StepValidator] = {
    v.step: v
    for v in (
        UploadStepValidator(),
        CreatorDetailsValidator(),
        WorkMetadataValidator(),
        EstateContractValidator(),
        LicensingValidator(),
    )
}


def validate_step(step: FormStep, form: RegistrationForm) -> dict[str, str]:
    return VALIDATORS[step].validate(form)


def synthesize_tags(form: RegistrationForm) -> None:
    if form.analysis is not None and form.analysis.genre:
        form.add_tag(form.analysis.genre.lower())
    for tag in DEFAULT_TAGS:
        form.add_tag(tag)


def shares_total_one_hundred(beneficiaries: list[Beneficiary]) -> bool:
    """Submission-time share check: the sum must be 100 within floating-point tolerance.

    Stricter than the estate-contract step, which only rejects sums above 100.
    """
    total = sum(b.percentage for b in beneficiaries)
    return round(abs(total - 100), 9) <= SHARE_SUM_TOLERANCE


def to_basis_points(percentage: float) -> int:
    return round(percentage * BASIS_POINTS_PER_PERCENT)


def share_basis_points(beneficiaries: list[Beneficiary]) -> list[int]:
    """Convert percentages to basis points that total exactly 10000.

    Rounding drift (e.g. three shares of 33.33) is absorbed by the largest
    share. Callers check ``shares_total_one_hundred`` first.
    """
    shares = [to_basis_points(b.percentage) for b in beneficiaries]
    drift = 100 * BASIS_POINTS_PER_PERCENT - sum(shares)
    if shares and drift:
        largest = max(range(len(shares)), key=shares.__getitem__)
        shares[largest] += drift
    return shares
