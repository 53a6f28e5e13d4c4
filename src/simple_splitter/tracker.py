"""Receipt polling state machine for submitted transactions."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from ._exceptions import RpcError
from .chain import ChainClient
from .types import TransactionHandle, TxOutcome, TxState

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 2.0

TERMINAL_STATES: frozenset[TxState] = frozenset({"confirmed", "reverted", "timed_out"})


class TransactionTracker:
    """
    Track one transaction from ``pending`` to a terminal state.

    ``wait()`` polls for the receipt until it is mined or ``timeout``
    seconds pass. The first terminal state is final: later calls return it
    without querying the node, and ``on_settled`` callbacks run exactly
    once. To keep waiting after ``timed_out``, track the handle again with
    a new tracker.

    Example:
        >>> tracker = TransactionTracker(client, handle, timeout=60)
        >>> outcome = await tracker.wait()
        >>> outcome.state
        'confirmed'
    """

    def __init__(
        self,
        client: ChainClient,
        handle: TransactionHandle,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        on_settled: Callable[[TxOutcome], Any] | None = None,
    ) -> None:
        self.client = client
        self.handle = handle
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.state: TxState = "pending"
        self.receipt: Any = None
        self._callbacks: list[Callable[[TxOutcome], Any]] = [on_settled] if on_settled else []
        self._cancelled = asyncio.Event()
        self._lock = asyncio.Lock()

    @property
    def settled(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def outcome(self) -> TxOutcome:
        block_number = self.receipt.get("blockNumber") if self.receipt is not None else None
        return TxOutcome(hash=self.handle.hash, state=self.state, receipt=self.receipt, block_number=block_number)

    def add_settled_callback(self, callback: Callable[[TxOutcome], Any]) -> None:
        """Register a callback; runs immediately if already settled."""
        if self.settled:
            callback(self.outcome)
        else:
            self._callbacks.append(callback)

    def cancel(self) -> None:
        """Stop polling. A running ``wait()`` returns the pending snapshot."""
        self._cancelled.set()

    def _settle(self, state: TxState, receipt: Any = None) -> TxOutcome:
        self.state = state
        self.receipt = receipt
        outcome = self.outcome
        logger.info("Transaction %s %s", self.handle.hash, state)

        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(outcome)
        return outcome

    async def _poll(self) -> Any:
        try:
            return await self.client.get_receipt(self.handle.hash)
        except RpcError as e:
            logger.warning("Receipt poll for %s failed, will retry: %s", self.handle.hash, e)
            return None

    async def wait(self) -> TxOutcome:
        """Poll until a terminal state, the timeout, or cancel()."""
        async with self._lock:
            if self.settled:
                return self.outcome

            loop = asyncio.get_running_loop()
            deadline = loop.time() + self.timeout

            while not self._cancelled.is_set():
                receipt = await self._poll()
                if receipt is not None:
                    state: TxState = "confirmed" if receipt.get("status") == 1 else "reverted"
                    return self._settle(state, receipt)

                remaining = deadline - loop.time()
                if remaining <= 0:
                    return self._settle("timed_out")

                try:
                    await asyncio.wait_for(self._cancelled.wait(), timeout=min(self.poll_interval, remaining))
                except asyncio.TimeoutError:
                    pass

            logger.info("Stopped tracking %s while pending", self.handle.hash)
            return self.outcome
