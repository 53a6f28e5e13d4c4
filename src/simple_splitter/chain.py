"""Async JSON-RPC adapter: contract reads, signed writes and receipts."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, cast

import aiohttp
from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from eth_utils import keccak, to_bytes
from web3 import AsyncWeb3
from web3.contract.async_contract import AsyncContractFunction
from web3.exceptions import ContractLogicError, TransactionNotFound, Web3Exception

from ._exceptions import InvalidAddressError, NotConnectedError, RevertError, RpcError
from .types import GasOptions, TransactionHandle

logger = logging.getLogger(__name__)

# Type alias for transaction params
TxParams = dict[str, int | str]

# Default gas limits for operations
DEFAULT_GAS_CREATE = 1_000_000
DEFAULT_GAS_DISTRIBUTE = 600_000
DEFAULT_GAS_WRITE = 300_000

# Transport failures surfaced as RpcError. AsyncHTTPProvider lets aiohttp errors
# (HTTP 429/5xx, dropped connections) through unwrapped.
_TRANSPORT_ERRORS = (Web3Exception, aiohttp.ClientError, OSError, asyncio.TimeoutError)


def to_checksum(address: str) -> ChecksumAddress:
    """
    Checksum an address, raising InvalidAddressError if it is malformed.

    All-lowercase and all-uppercase hex is accepted as unchecksummed input.
    Mixed case must be a valid EIP-55 checksum, so a mistyped letter is
    rejected instead of being silently re-checksummed.
    """
    if not isinstance(address, str) or not AsyncWeb3.is_address(address):
        raise InvalidAddressError(address)
    digits = address[2:] if address[:2].lower() == "0x" else address
    if digits != digits.lower() and digits != digits.upper() and not AsyncWeb3.is_checksum_address(address):
        raise InvalidAddressError(address)
    return AsyncWeb3.to_checksum_address(address)


def decode_custom_error(data: str | bytes | None, abi: Sequence[dict[str, Any]]) -> tuple[str, dict[str, Any]] | None:
    """
    Match revert data against the ``error`` entries of an ABI.

    Returns:
        (error name, decoded arguments) or None if no entry matches
    """
    if not data:
        return None
    raw = bytes(data) if isinstance(data, (bytes, bytearray)) else to_bytes(hexstr=data)
    if len(raw) < 4:
        return None

    for entry in abi:
        if entry.get("type") != "error":
            continue
        types = [i["type"] for i in entry.get("inputs", [])]
        signature = f"{entry['name']}({','.join(types)})"
        if keccak(text=signature)[:4] != raw[:4]:
            continue
        try:
            values = abi_decode(types, raw[4:]) if types else ()
        except DecodingError:
            return None
        names = [i.get("name") or f"arg{n}" for n, i in enumerate(entry.get("inputs", []))]
        return entry["name"], dict(zip(names, values))
    return None


def decode_revert(exc: ContractLogicError, abi: Sequence[dict[str, Any]]) -> RevertError:
    """Turn a web3 revert into a RevertError with the decoded reason."""
    data = getattr(exc, "data", None)
    custom = decode_custom_error(data, abi) if isinstance(data, (str, bytes, bytearray)) else None
    if custom is not None:
        name, args = custom
        rendered = ", ".join(f"{k}={v}" for k, v in args.items())
        reason = f"{name}({rendered})"
        return RevertError(f"Execution reverted: {reason}", reason_text=reason, error_name=name, error_args=args)

    message = getattr(exc, "message", None) or str(exc)
    return RevertError(message, reason_text=message)


async def build_tx_params(
    w3: AsyncWeb3,
    sender: ChecksumAddress | str,
    chain_id: int,
    default_gas: int,
    gas_options: GasOptions | None = None,
    contract_call: AsyncContractFunction | None = None,
) -> TxParams:
    """
    Build nonce, chain id, gas limit and fee fields for a write.

    The gas limit is ``gas_options.gas_limit`` if set, else an estimate plus
    20% when ``estimate_gas`` is on (Arbitrum estimates include the L1 data
    fee, which moves between estimation and inclusion), else ``default_gas``.

    Setting ``max_fee_per_gas`` makes a type 2 transaction. Without an
    explicit tip the node's ``eth_maxPriorityFeePerGas`` is used; the
    Arbitrum sequencer does not order by tip, so this is normally 0.
    Otherwise pricing is left to the node.
    """
    opts = gas_options or GasOptions()

    tx_params: TxParams = {
        "from": sender,
        "nonce": await w3.eth.get_transaction_count(cast(ChecksumAddress, sender)),
        "chainId": chain_id,
    }

    if opts.gas_limit is not None:
        gas = opts.gas_limit
    elif opts.estimate_gas and contract_call is not None:
        gas = int(await contract_call.estimate_gas({"from": sender}) * 1.2)
    else:
        gas = default_gas
    tx_params["gas"] = gas

    if opts.max_fee_per_gas is None:
        return tx_params

    tip = opts.max_priority_fee_per_gas
    if tip is None:
        tip = await w3.eth.max_priority_fee
    tx_params.update(type="0x2", maxFeePerGas=opts.max_fee_per_gas, maxPriorityFeePerGas=min(tip, opts.max_fee_per_gas))
    logger.debug("Type 2 fees for %s: max %d, tip %d", sender, opts.max_fee_per_gas, tx_params["maxPriorityFeePerGas"])
    return tx_params


class ChainClient:
    """
    Thin async adapter over a JSON-RPC node.

    Reads are plain ``eth_call``s and are retried on transport failure.
    Writes need a signer: they are simulated first so reverts surface with
    their decoded reason before anything is broadcast.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        chain_id: int,
        account: LocalAccount | None = None,
        read_retries: int = 2,
    ) -> None:
        self.w3 = w3
        self.chain_id = chain_id
        self.account = account
        self.read_retries = read_retries

    @property
    def is_connected(self) -> bool:
        """True when a signer is available for writes."""
        return self.account is not None

    def _function(
        self, contract_address: str, abi: Sequence[dict[str, Any]], function_name: str, args: Sequence[Any]
    ) -> AsyncContractFunction:
        contract = self.w3.eth.contract(address=to_checksum(contract_address), abi=abi)
        return getattr(contract.functions, function_name)(*args)

    async def read(
        self,
        contract_address: str,
        abi: Sequence[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """
        Call a view function and return its decoded result.

        Raises:
            InvalidAddressError: If contract_address is malformed
            RevertError: If the call reverts
            RpcError: If the node cannot be reached after retries
        """
        call = self._function(contract_address, abi, function_name, args)

        attempt = 0
        while True:
            try:
                return await call.call()
            except ContractLogicError as e:
                raise decode_revert(e, abi) from e
            except _TRANSPORT_ERRORS as e:
                if attempt >= self.read_retries:
                    raise RpcError(f"{function_name} read failed: {e}") from e
                attempt += 1
                logger.warning("Retrying %s on %s (%d/%d): %s", function_name, contract_address, attempt, self.read_retries, e)

    async def write(
        self,
        contract_address: str,
        abi: Sequence[dict[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
        *,
        gas: GasOptions | None = None,
        default_gas: int = DEFAULT_GAS_WRITE,
    ) -> TransactionHandle:
        """
        Simulate, sign and broadcast a state-changing call.

        Raises:
            NotConnectedError: If no signer is configured
            RevertError: If the simulation reverts
            RpcError: On node or network failure
        """
        if self.account is None:
            raise NotConnectedError(f"Cannot call {function_name}: no signer configured")

        call = self._function(contract_address, abi, function_name, args)
        sender = self.account.address

        try:
            await call.call({"from": sender})
            tx_params = await build_tx_params(
                self.w3,
                sender,
                self.chain_id,
                default_gas,
                gas_options=gas,
                contract_call=call,
            )
            tx = await call.build_transaction(tx_params)

            signed = self.account.sign_transaction(tx)
            tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except ContractLogicError as e:
            raise decode_revert(e, abi) from e
        except _TRANSPORT_ERRORS as e:
            raise RpcError(f"{function_name} submission failed: {e}") from e

        handle = TransactionHandle(hash=AsyncWeb3.to_hex(tx_hash))
        logger.info("Submitted %s on %s: %s", function_name, contract_address, handle.hash)
        return handle

    async def get_receipt(self, tx_hash: str) -> Any:
        """
        Fetch a transaction receipt.

        Returns:
            The receipt, or None while the transaction is not mined

        Raises:
            RpcError: On node or network failure
        """
        try:
            return await self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        except _TRANSPORT_ERRORS as e:
            raise RpcError(f"Receipt lookup failed for {tx_hash}: {e}") from e

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.w3.provider.disconnect()
