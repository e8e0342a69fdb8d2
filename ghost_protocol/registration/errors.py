"""Translation of raw provider errors into the submission error taxonomy."""

from ghost_protocol.registration.models import SubmissionError

_USER_REJECTED = ("user rejected", "user denied", "rejected the request")
_INSUFFICIENT_FUNDS = ("insufficient funds",)
_ALREADY_REGISTERED = ("already registered",)
_TIMEOUT = ("timed out", "timeout")


def classify_error(
    raw_message: str,
    default: SubmissionError = SubmissionError.REGISTRATION_FAILED_OTHER,
) -> tuple[SubmissionError, str]:
    """Return the taxonomy entry and a human-readable message for a failure.

    Known substrings win over ``default``; anything unrecognised keeps the raw
    text so nothing is lost.
    """
    lowered = raw_message.lower()
    if _contains(lowered, _USER_REJECTED):
        return SubmissionError.REGISTRATION_REJECTED_BY_USER, "Transaction was rejected in the wallet"
    if _contains(lowered, _INSUFFICIENT_FUNDS):
        return SubmissionError.INSUFFICIENT_FUNDS, "Insufficient funds to pay for gas"
    if _contains(lowered, _ALREADY_REGISTERED):
        return SubmissionError.ALREADY_REGISTERED, "This content is already registered"
    if _contains(lowered, _TIMEOUT):
        return default, "The network did not respond in time. Please try again"
    return default, raw_message or "Unknown error"


def _contains(message: str, needles: tuple[str, ...]) -> bool:
    return any(needle in message for needle in needles)
