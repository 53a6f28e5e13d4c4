"""Read a splitter's recipients and balance, and derive entitlements."""

import asyncio
import logging

from ._exceptions import DataIntegrityError
from .abi import ERC20_ABI, SIMPLE_SPLITTER_ABI
from .chain import ChainClient, to_checksum
from .types import Recipient, SplitterState

logger = logging.getLogger(__name__)


def compute_entitlements(rows: list[tuple[str, int]], total_shares: int, balance: int) -> list[Recipient]:
    """
    Derive each recipient's percentage and balance by floor division.

    The remainder left by rounding is not redistributed.

    Example:
        >>> compute_entitlements([("0xA", 33), ("0xB", 33), ("0xC", 34)], 100, 100)
        [Recipient(..., balance=33), Recipient(..., balance=33), Recipient(..., balance=34)]
    """
    if rows and total_shares <= 0:
        raise DataIntegrityError(f"Splitter has {len(rows)} recipients but totalShares is {total_shares}")

    return [
        Recipient(
            address=address,
            share=share,
            percentage=share * 100 // total_shares,
            balance=balance * share // total_shares,
        )
        for address, share in rows
    ]


async def get_token_balance(client: ChainClient, token_address: str, holder: str) -> int:
    """
    Get the token balance of an address.

    Returns:
        Balance in token's smallest unit (6 decimals for PYUSD)
    """
    return await client.read(token_address, ERC20_ABI, "balanceOf", (to_checksum(holder),))


async def _recipient_at(client: ChainClient, splitter: str, index: int) -> tuple[str, int]:
    address, share = await asyncio.gather(
        client.read(splitter, SIMPLE_SPLITTER_ABI, "recipients", (index,)),
        client.read(splitter, SIMPLE_SPLITTER_ABI, "shares", (index,)),
    )
    return to_checksum(address), share


async def read_splitter(client: ChainClient, splitter_address: str, token_address: str) -> SplitterState:
    """
    Read a complete snapshot of a splitter.

    The recipient count is read first; total shares, the token balance and
    every recipient/share pair are then read concurrently. Any failed read
    fails the whole snapshot.

    Args:
        client: ChainClient (no signer needed)
        splitter_address: Address of the splitter
        token_address: Token held by the splitter (PYUSD)

    Returns:
        SplitterState with derived per-recipient entitlements

    Raises:
        InvalidAddressError: If splitter_address is malformed (no reads are made)
        DataIntegrityError: If totalShares is zero while recipients exist
        RpcError / RevertError: If any read fails
    """
    splitter = to_checksum(splitter_address)
    token = to_checksum(token_address)

    count = await client.read(splitter, SIMPLE_SPLITTER_ABI, "recipientCount")

    if count == 0:
        balance = await get_token_balance(client, token, splitter)
        return SplitterState(
            address=splitter,
            token=token,
            recipient_count=0,
            total_shares=0,
            balance=balance,
            recipients=[],
        )

    total_shares, balance, *rows = await asyncio.gather(
        client.read(splitter, SIMPLE_SPLITTER_ABI, "totalShares"),
        get_token_balance(client, token, splitter),
        *(_recipient_at(client, splitter, i) for i in range(count)),
    )

    recipients = compute_entitlements(rows, total_shares, balance)
    logger.debug("Read splitter %s: %d recipients, balance %d", splitter, count, balance)

    return SplitterState(
        address=splitter,
        token=token,
        recipient_count=count,
        total_shares=total_shares,
        balance=balance,
        recipients=recipients,
    )
