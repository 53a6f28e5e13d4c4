"""Standalone create_splitter operation for SimpleSplitter."""

import logging

from ._exceptions import (
    EventNotFoundError,
    SimpleSplitterError,
    TransactionRevertedError,
    TransactionTimeoutError,
    ValidationError,
)
from .abi import SIMPLE_SPLITTER_FACTORY_ABI
from .chain import DEFAULT_GAS_CREATE, ChainClient, to_checksum
from .constants import MAX_RECIPIENTS, MIN_RECIPIENTS, TOTAL_SHARES
from .events import find_event
from .tracker import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT, TransactionTracker
from .types import CreateResult, GasOptions, RecipientSpec

logger = logging.getLogger(__name__)

SPLITTER_CREATED = "SplitterCreated"


def validate_recipients(recipients: list[RecipientSpec]) -> None:
    """
    Check a recipient set locally, before any chain call.

    Raises:
        ValidationError: Wrong count, share out of range, or shares not summing to 100
        InvalidAddressError: A recipient address is malformed
    """
    count = len(recipients)
    if not (MIN_RECIPIENTS <= count <= MAX_RECIPIENTS):
        raise ValidationError(f"Recipients: expected {MIN_RECIPIENTS}-{MAX_RECIPIENTS}, got {count}")

    for r in recipients:
        to_checksum(r.address)
        if not (1 <= r.share <= TOTAL_SHARES):
            raise ValidationError(f"Share must be between 1 and {TOTAL_SHARES}, got {r.share}")

    total = sum(r.share for r in recipients)
    if total != TOTAL_SHARES:
        raise ValidationError(f"Recipient shares must sum to {TOTAL_SHARES}, got {total}")


def to_create_args(recipients: list[RecipientSpec]) -> tuple[list[str], list[int]]:
    """
    Convert validated recipients to ``createSplitter`` arguments.

    Example:
        >>> to_create_args([RecipientSpec(address="0xf39f...", share=60), ...])
        (["0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266", ...], [60, ...])
    """
    validate_recipients(recipients)
    addresses = [to_checksum(r.address) for r in recipients]
    shares = [int(r.share) for r in recipients]
    return addresses, shares


def _failed(error: SimpleSplitterError, tx_hash: str | None = None) -> CreateResult:
    return CreateResult(
        status="FAILED",
        tx_hash=tx_hash,
        reason=error.reason,
        message=str(error),
        revert_reason=getattr(error, "reason_text", None),
        error=error,
    )


async def create_splitter(
    client: ChainClient,
    factory_address: str,
    recipients: list[RecipientSpec],
    gas: GasOptions | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> CreateResult:
    """
    Deploy a new splitter through the factory.

    - If the recipients are invalid: returns FAILED without touching the chain
    - On success: returns CREATED with the address from the SplitterCreated log
    - If the receipt has no SplitterCreated log: returns FAILED (event_not_found)
    - On revert, timeout or RPC failure: returns FAILED with details

    Args:
        client: ChainClient with a signer
        factory_address: The splitter factory contract address
        recipients: 2-10 recipients whose shares sum to 100
        gas: Optional gas options
        timeout: Seconds to wait for the transaction to be mined
        poll_interval: Seconds between receipt polls

    Returns:
        CreateResult with status CREATED or FAILED

    Example:
        >>> result = await create_splitter(client, factory, [
        ...     RecipientSpec(address="0xAlice...", share=60),
        ...     RecipientSpec(address="0xBob...", share=40),
        ... ])
        >>> result.splitter
        '0xNewSplitter...'
    """
    try:
        factory_address = to_checksum(factory_address)
        addresses, shares = to_create_args(recipients)
    except ValidationError as e:
        return _failed(e)

    try:
        handle = await client.write(
            factory_address,
            SIMPLE_SPLITTER_FACTORY_ABI,
            "createSplitter",
            (addresses, shares),
            gas=gas,
            default_gas=DEFAULT_GAS_CREATE,
        )
    except SimpleSplitterError as e:
        return _failed(e)

    outcome = await TransactionTracker(client, handle, timeout=timeout, poll_interval=poll_interval).wait()

    if outcome.state == "reverted":
        return _failed(TransactionRevertedError(handle.hash), handle.hash)
    if outcome.state != "confirmed":
        return _failed(TransactionTimeoutError(handle.hash, timeout), handle.hash)

    event = find_event(outcome.receipt.get("logs") or [], SIMPLE_SPLITTER_FACTORY_ABI, SPLITTER_CREATED)
    if event is None:
        logger.error("Receipt %s has no %s log", handle.hash, SPLITTER_CREATED)
        return _failed(EventNotFoundError(SPLITTER_CREATED, handle.hash), handle.hash)

    splitter = event.args["splitter"]
    logger.info("Splitter created at %s (tx %s)", splitter, handle.hash)
    return CreateResult(
        status="CREATED",
        splitter=splitter,
        creator=event.args.get("creator"),
        tx_hash=handle.hash,
    )
