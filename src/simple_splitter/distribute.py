"""Standalone distribute operation for SimpleSplitter."""

import logging
from collections.abc import Awaitable, Callable

from ._exceptions import (
    NothingToDistributeError,
    SimpleSplitterError,
    TransactionRevertedError,
    TransactionTimeoutError,
    ValidationError,
)
from .abi import SIMPLE_SPLITTER_ABI
from .chain import DEFAULT_GAS_DISTRIBUTE, ChainClient, to_checksum
from .tracker import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT, TransactionTracker
from .types import DistributeResult, GasOptions, SplitterState

logger = logging.getLogger(__name__)


def _failed(error: SimpleSplitterError, tx_hash: str | None = None) -> DistributeResult:
    return DistributeResult(
        status="FAILED",
        tx_hash=tx_hash,
        reason=error.reason,
        message=str(error),
        revert_reason=getattr(error, "reason_text", None),
        error=error,
    )


async def distribute(
    client: ChainClient,
    splitter_address: str,
    balance: int | None,
    gas: GasOptions | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    on_confirmed: Callable[[], Awaitable[SplitterState | None]] | None = None,
) -> DistributeResult:
    """
    Pay out a splitter's token balance to its recipients.

    - If balance is zero or unknown: returns SKIPPED, nothing is submitted
    - On success: returns DISTRIBUTED; ``on_confirmed`` runs once to re-read the splitter
    - On revert, timeout or RPC failure: returns FAILED (never resubmitted)

    Anyone can call distribute; the caller pays the gas.

    Args:
        client: ChainClient with a signer
        splitter_address: Address of the splitter
        balance: Token balance from the latest read_splitter snapshot
        gas: Optional gas options
        timeout: Seconds to wait for the transaction to be mined
        poll_interval: Seconds between receipt polls
        on_confirmed: Refresh hook, awaited once after confirmation

    Returns:
        DistributeResult with status DISTRIBUTED, SKIPPED, or FAILED
    """
    try:
        splitter = to_checksum(splitter_address)
    except ValidationError as e:
        return _failed(e)

    if not balance:
        error = NothingToDistributeError(f"Splitter {splitter} has no balance to distribute")
        return DistributeResult(status="SKIPPED", reason=error.reason, message=str(error), error=error)

    try:
        handle = await client.write(
            splitter,
            SIMPLE_SPLITTER_ABI,
            "distribute",
            gas=gas,
            default_gas=DEFAULT_GAS_DISTRIBUTE,
        )
    except SimpleSplitterError as e:
        return _failed(e)

    outcome = await TransactionTracker(client, handle, timeout=timeout, poll_interval=poll_interval).wait()

    if outcome.state == "reverted":
        return _failed(TransactionRevertedError(handle.hash), handle.hash)
    if outcome.state != "confirmed":
        return _failed(TransactionTimeoutError(handle.hash, timeout), handle.hash)

    logger.info("Distributed %d from %s (tx %s)", balance, splitter, handle.hash)

    state = None
    if on_confirmed is not None:
        try:
            state = await on_confirmed()
        except SimpleSplitterError as e:
            logger.warning("Distribution %s confirmed but refresh failed: %s", handle.hash, e)

    return DistributeResult(
        status="DISTRIBUTED",
        tx_hash=handle.hash,
        refresh_required=True,
        state=state,
    )
