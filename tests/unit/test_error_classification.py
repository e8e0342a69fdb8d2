import pytest

from ghost_protocol.registration.errors import classify_error
from ghost_protocol.registration.models import SubmissionError


class TestClassifyError:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("User rejected the request.", SubmissionError.REGISTRATION_REJECTED_BY_USER),
            ("MetaMask Tx Signature: User denied transaction signature.", SubmissionError.REGISTRATION_REJECTED_BY_USER),
            ("insufficient funds for gas * price + value", SubmissionError.INSUFFICIENT_FUNDS),
            ("execution reverted: Content already registered", SubmissionError.ALREADY_REGISTERED),
        ],
    )
    def test_known_substrings(self, raw: str, expected: SubmissionError) -> None:
        error, message = classify_error(raw)
        assert error is expected
        assert message

    def test_timeout_keeps_default(self) -> None:
        error, message = classify_error(
            "Request timed out", SubmissionError.BENEFICIARY_CREATION_FAILED
        )
        assert error is SubmissionError.BENEFICIARY_CREATION_FAILED
        assert "did not respond" in message

    def test_unknown_keeps_raw_message(self) -> None:
        error, message = classify_error("execution reverted: Invalid shares")
        assert error is SubmissionError.REGISTRATION_FAILED_OTHER
        assert message == "execution reverted: Invalid shares"

    def test_empty_message(self) -> None:
        assert classify_error("") == (SubmissionError.REGISTRATION_FAILED_OTHER, "Unknown error")
