from ghost_protocol.registration.factory import RegistrationSessionFactory
from ghost_protocol.registration.models import (
    Beneficiary,
    FormStep,
    LicenseType,
    RegistrationForm,
    RegistrationPhase,
    SubmissionError,
    SubmissionResult,
)
from ghost_protocol.registration.orchestrator import RegistrationSession, UploadResult

__all__ = [
    "Beneficiary",
    "FormStep",
    "LicenseType",
    "RegistrationForm",
    "RegistrationPhase",
    "RegistrationSession",
    "RegistrationSessionFactory",
    "SubmissionError",
    "SubmissionResult",
    "UploadResult",
]
