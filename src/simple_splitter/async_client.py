"""Async high-level client for simple-splitter SDK."""

import os

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3

from ._exceptions import ActionInProgressError, NetworkNotSupportedError
from .abi import SIMPLE_SPLITTER_FACTORY_ABI
from .chain import ChainClient, to_checksum
from .constants import (
    ARBITRUM_ONE,
    get_block_explorer_url,
    get_default_rpc_url,
    get_pyusd_address,
    get_splitter_factory_address,
    is_supported_chain,
)
from .create import create_splitter as _create_splitter
from .distribute import distribute as _distribute
from .state import get_token_balance as _get_token_balance
from .state import read_splitter as _read_splitter
from .tracker import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT, TransactionTracker
from .types import (
    CreateResult,
    DistributeResult,
    GasOptions,
    RecipientSpec,
    SplitterState,
    TransactionHandle,
    TxOutcome,
)


class AsyncSplitterClient:
    """
    Async high-level client for PYUSD splitters on Arbitrum.

    Example:
        >>> import asyncio
        >>> from simple_splitter import AsyncSplitterClient, RecipientSpec
        >>>
        >>> async def main():
        ...     async with AsyncSplitterClient(private_key="0x...") as client:
        ...         result = await client.create_splitter([
        ...             RecipientSpec(address="0xAlice...", share=60),
        ...             RecipientSpec(address="0xBob...", share=40),
        ...         ])
        ...         if result.status == "CREATED":
        ...             state = await client.read_splitter(result.splitter)
        ...             await client.distribute(result.splitter, state.balance)
        >>>
        >>> asyncio.run(main())
    """

    def __init__(
        self,
        rpc_url: str | None = None,
        private_key: str | None = None,
        chain_id: int = ARBITRUM_ONE,
        factory_address: str | None = None,
        token_address: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """
        Initialize the async splitter client.

        Args:
            rpc_url: RPC endpoint URL. Falls back to SPLITTER_RPC_URL env var,
                then to the network's public RPC.
            private_key: Private key for signing. Falls back to SPLITTER_PRIVATE_KEY
                env var. Without one the client is read-only.
            chain_id: Chain ID (42161 for Arbitrum One, 421614 for Arbitrum Sepolia)
            factory_address: Custom factory address (uses default if not provided)
            token_address: Custom token address (defaults to PYUSD)
            timeout: Seconds to wait for transactions to be mined
            poll_interval: Seconds between receipt polls

        Raises:
            NetworkNotSupportedError: If chain_id is not supported
        """
        if not is_supported_chain(chain_id):
            raise NetworkNotSupportedError(chain_id)

        resolved_rpc = rpc_url or os.environ.get("SPLITTER_RPC_URL") or get_default_rpc_url(chain_id)
        resolved_key = private_key or os.environ.get("SPLITTER_PRIVATE_KEY")

        self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(resolved_rpc))
        self.account: LocalAccount | None = Account.from_key(resolved_key) if resolved_key else None
        self.chain_id = chain_id
        self.timeout = timeout
        self.poll_interval = poll_interval

        self.chain = ChainClient(self.w3, chain_id, self.account)

        self.factory_address = to_checksum(factory_address or get_splitter_factory_address(chain_id))
        self.token_address = to_checksum(token_address or get_pyusd_address(chain_id))

        # (action, target) pairs with a write in flight
        self._in_flight: set[tuple[str, str]] = set()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.chain.close()

    async def __aenter__(self) -> "AsyncSplitterClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager and close session."""
        await self.close()

    @property
    def address(self) -> str | None:
        """Get the wallet address, or None for a read-only client."""
        return self.account.address if self.account else None

    def _claim(self, action: str, target: str) -> bool:
        key = (action, target)
        if key in self._in_flight:
            return False
        self._in_flight.add(key)
        return True

    async def create_splitter(
        self,
        recipients: list[RecipientSpec],
        gas: GasOptions | None = None,
    ) -> CreateResult:
        """
        Deploy a new splitter.

        Args:
            recipients: 2-10 recipients with shares summing to 100
            gas: Gas options (estimation, EIP-1559 fees)

        Returns:
            CreateResult with status CREATED or FAILED
        """
        if not self._claim("create", self.factory_address):
            error = ActionInProgressError("A splitter creation is already pending")
            return CreateResult(status="FAILED", reason=error.reason, message=str(error), error=error)
        try:
            return await _create_splitter(
                self.chain,
                self.factory_address,
                recipients,
                gas=gas,
                timeout=self.timeout,
                poll_interval=self.poll_interval,
            )
        finally:
            self._in_flight.discard(("create", self.factory_address))

    async def read_splitter(self, splitter_address: str) -> SplitterState:
        """Read recipients, shares and token balance of a splitter."""
        return await _read_splitter(self.chain, splitter_address, self.token_address)

    async def distribute(
        self,
        splitter_address: str,
        balance: int | None,
        gas: GasOptions | None = None,
    ) -> DistributeResult:
        """
        Distribute a splitter's balance (permissionless).

        ``balance`` comes from the latest read_splitter snapshot. On success
        the splitter is read again and returned in ``result.state``.

        Args:
            splitter_address: Address of the splitter
            balance: Current token balance of the splitter
            gas: Gas options (estimation, EIP-1559 fees)

        Returns:
            DistributeResult with status DISTRIBUTED, SKIPPED, or FAILED
        """
        key = str(splitter_address).lower()
        if not self._claim("distribute", key):
            error = ActionInProgressError(f"A distribution for {splitter_address} is already pending")
            return DistributeResult(status="FAILED", reason=error.reason, message=str(error), error=error)
        try:
            return await _distribute(
                self.chain,
                splitter_address,
                balance,
                gas=gas,
                timeout=self.timeout,
                poll_interval=self.poll_interval,
                on_confirmed=lambda: self.read_splitter(splitter_address),
            )
        finally:
            self._in_flight.discard(("distribute", key))

    async def track_transaction(self, handle: TransactionHandle | str) -> TxOutcome:
        """Wait for a submitted transaction, e.g. after a timed_out result."""
        if isinstance(handle, str):
            handle = TransactionHandle(hash=handle)
        tracker = TransactionTracker(self.chain, handle, timeout=self.timeout, poll_interval=self.poll_interval)
        return await tracker.wait()

    async def get_token_balance(self, address: str) -> int:
        """Get the token balance of an address (in smallest unit)."""
        return await _get_token_balance(self.chain, self.token_address, address)

    async def get_implementation(self) -> str:
        """Get the splitter implementation the factory clones."""
        return await self.chain.read(self.factory_address, SIMPLE_SPLITTER_FACTORY_ABI, "implementation")

    def explorer_url(self, address: str) -> str:
        """Get the block explorer page for an address on this network."""
        return get_block_explorer_url(self.chain_id, address)
