from unittest.mock import MagicMock

import pytest

from ghost_protocol.chain.exceptions import ChainError
from ghost_protocol.chain.models import TransactionReceipt
from ghost_protocol.registration.confirmation import (
    ConfirmationCancelled,
    ConfirmationTimeout,
    ConfirmationWaiter,
)

_RECEIPT = TransactionReceipt(tx_hash="0xtx", succeeded=True, block_number=7)


def _make_waiter(fetch: MagicMock, clock, sleep=None) -> ConfirmationWaiter:  # type: ignore[no-untyped-def]
    return ConfirmationWaiter(
        fetch,
        timeout_seconds=180,
        poll_interval_seconds=3,
        clock=clock,
        sleep=sleep or clock.sleep,
    )


class TestConfirmationWaiter:
    def test_returns_first_receipt(self, fake_clock) -> None:  # type: ignore[no-untyped-def]
        fetch = MagicMock(side_effect=[None, None, _RECEIPT])
        assert _make_waiter(fetch, fake_clock).wait("0xtx") is _RECEIPT
        assert fetch.call_count == 3
        assert fake_clock.sleeps == [3, 3]

    def test_times_out_at_ceiling(self, fake_clock) -> None:  # type: ignore[no-untyped-def]
        fetch = MagicMock(return_value=None)
        with pytest.raises(ConfirmationTimeout) as exc_info:
            _make_waiter(fetch, fake_clock).wait("0xtx")
        assert exc_info.value.tx_hash == "0xtx"
        assert fake_clock.now == 180
        assert fetch.call_count == 61

    def test_last_sleep_is_clipped_to_ceiling(self, fake_clock) -> None:  # type: ignore[no-untyped-def]
        waiter = ConfirmationWaiter(
            MagicMock(return_value=None),
            timeout_seconds=10,
            poll_interval_seconds=4,
            clock=fake_clock,
            sleep=fake_clock.sleep,
        )
        with pytest.raises(ConfirmationTimeout):
            waiter.wait("0xtx")
        assert fake_clock.sleeps == [4, 4, 2]

    def test_retries_transient_errors(self, fake_clock) -> None:  # type: ignore[no-untyped-def]
        fetch = MagicMock(side_effect=[ChainError("502 Bad Gateway"), _RECEIPT])
        assert _make_waiter(fetch, fake_clock).wait("0xtx") is _RECEIPT

    def test_cancel_stops_polling(self, fake_clock) -> None:  # type: ignore[no-untyped-def]
        fetch = MagicMock(return_value=None)
        waiter: ConfirmationWaiter

        def sleep(seconds: float) -> None:
            fake_clock.sleep(seconds)
            waiter.cancel()

        waiter = _make_waiter(fetch, fake_clock, sleep)
        with pytest.raises(ConfirmationCancelled) as exc_info:
            waiter.wait("0xtx")
        assert exc_info.value.tx_hash == "0xtx"
        assert fetch.call_count == 1

    def test_reset_clears_cancel(self, fake_clock) -> None:  # type: ignore[no-untyped-def]
        waiter = _make_waiter(MagicMock(return_value=_RECEIPT), fake_clock)
        waiter.cancel()
        assert waiter.cancelled
        waiter.reset()
        assert waiter.wait("0xtx") is _RECEIPT
