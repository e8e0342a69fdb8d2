import threading
import time
from collections.abc import Callable

from ghost_protocol.chain.exceptions import ChainError
from ghost_protocol.chain.models import TransactionReceipt
from ghost_protocol.logging.logger import Log


class ConfirmationTimeout(Exception):
    """The receipt did not appear before the ceiling elapsed."""

    def __init__(self, tx_hash: str, timeout_seconds: float) -> None:
        super().__init__(f"Transaction {tx_hash} not confirmed within {timeout_seconds:g}s")
        self.tx_hash = tx_hash


class ConfirmationCancelled(Exception):
    """Polling was abandoned before the receipt appeared."""

    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"Stopped waiting for transaction {tx_hash}")
        self.tx_hash = tx_hash


class ConfirmationWaiter:
    """Bounded poll for a transaction receipt.

    Polls ``fetch_receipt`` every ``poll_interval_seconds`` until it returns a
    receipt or ``timeout_seconds`` have passed on ``clock``. ``cancel`` stops
    the wait; it never touches the transaction itself. Clock and sleep are
    injectable so the loop can run without real delays.
    """

    def __init__(
        self,
        fetch_receipt: Callable[[str], TransactionReceipt | None],
        *,
        timeout_seconds: float,
        poll_interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], object] | None = None,
    ) -> None:
        self._fetch_receipt = fetch_receipt
        self._timeout = timeout_seconds
        self._interval = poll_interval_seconds
        self._clock = clock
        self._cancelled = threading.Event()
        # Event.wait doubles as an interruptible sleep.
        self._sleep = sleep if sleep is not None else self._cancelled.wait

    def cancel(self) -> None:
        self._cancelled.set()

    def reset(self) -> None:
        self._cancelled.clear()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def wait(self, tx_hash: str) -> TransactionReceipt:
        """Block until the transaction is mined.

        Raises:
            ConfirmationTimeout: when the ceiling elapses first.
            ConfirmationCancelled: when ``cancel`` was called.
        """
        deadline = self._clock() + self._timeout
        polls = 0
        while True:
            if self._cancelled.is_set():
                raise ConfirmationCancelled(tx_hash)
            polls += 1
            receipt = self._poll(tx_hash)
            if receipt is not None:
                Log.info(f"Transaction {tx_hash} confirmed after {polls} polls")
                return receipt
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise ConfirmationTimeout(tx_hash, self._timeout)
            Log.debug(f"Transaction {tx_hash} pending, polling again")
            self._sleep(min(self._interval, remaining))

    def _poll(self, tx_hash: str) -> TransactionReceipt | None:
        try:
            return self._fetch_receipt(tx_hash)
        except ChainError as exc:
            Log.warning(f"Receipt lookup for {tx_hash} failed, will retry: {exc}")
            return None
