# web3 7.x imports its legacy websocket provider on every import, even though
# this SDK only talks HTTP to Arbitrum RPCs. Silence the resulting websockets
# deprecation noise (ethereum/web3.py#3530); drop this once web3 8 is required.
import warnings

warnings.filterwarnings(
    "ignore",
    message="websockets.legacy is deprecated",
    category=DeprecationWarning,
    module=r"websockets\.legacy",
)

"""
SimpleSplitter SDK

Create PYUSD splitters on Arbitrum, read their recipients and balance,
and distribute accumulated funds to recipients by share.

Usage:
    import asyncio
    from simple_splitter import AsyncSplitterClient, RecipientSpec

    async def main():
        async with AsyncSplitterClient(
            rpc_url="https://arb1.arbitrum.io/rpc",
            private_key="0x...",
        ) as client:
            result = await client.create_splitter([
                RecipientSpec(address="0xAlice...", share=60),
                RecipientSpec(address="0xBob...", share=40),
            ])

            state = await client.read_splitter(result.splitter)
            await client.distribute(result.splitter, state.balance)

    asyncio.run(main())

Low-level async functions:
    from simple_splitter import ChainClient, create_splitter, read_splitter, distribute
    from web3 import AsyncWeb3
    from eth_account import Account

    w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
    chain = ChainClient(w3, 42161, Account.from_key("0x..."))
    result = await create_splitter(chain, factory_address, recipients)
"""

from ._exceptions import (
    ActionInProgressError,
    ConfigurationError,
    DataIntegrityError,
    EventNotFoundError,
    InvalidAddressError,
    NetworkNotSupportedError,
    NothingToDistributeError,
    NotConnectedError,
    RevertError,
    RpcError,
    SimpleSplitterError,
    TransactionRevertedError,
    TransactionTimeoutError,
    ValidationError,
)
from ._version import __version__

# ABIs (for advanced usage)
from .abi import ERC20_ABI, SIMPLE_SPLITTER_ABI, SIMPLE_SPLITTER_FACTORY_ABI

# Async client
from .async_client import AsyncSplitterClient

# Chain adapter
from .chain import ChainClient, decode_custom_error

# Constants
from .constants import (
    ARBITRUM_ONE,
    ARBITRUM_SEPOLIA,
    MAX_RECIPIENTS,
    MIN_RECIPIENTS,
    PYUSD_ADDRESSES,
    SPLITTER_FACTORY_ADDRESSES,
    SUPPORTED_CHAIN_IDS,
    TOKEN_DECIMALS,
    TOTAL_SHARES,
    format_units,
    get_block_explorer_url,
    get_network_name,
    get_pyusd_address,
    get_splitter_factory_address,
    is_supported_chain,
    is_testnet,
)

# Standalone async operations
from .create import create_splitter, to_create_args, validate_recipients
from .distribute import distribute
from .events import decode_if_matches, find_event
from .state import compute_entitlements, get_token_balance, read_splitter
from .tracker import TransactionTracker

# Types
from .types import (
    CreateResult,
    CreateStatus,
    DecodedEvent,
    DistributeResult,
    DistributeStatus,
    FailedReason,
    GasOptions,
    Recipient,
    RecipientSpec,
    SkippedReason,
    SplitterState,
    TransactionHandle,
    TxOutcome,
    TxState,
)

__all__ = [
    # Version
    "__version__",
    # Clients
    "AsyncSplitterClient",
    "ChainClient",
    "TransactionTracker",
    # Standalone operations
    "create_splitter",
    "read_splitter",
    "distribute",
    "validate_recipients",
    "to_create_args",
    "compute_entitlements",
    "get_token_balance",
    "decode_if_matches",
    "find_event",
    "decode_custom_error",
    # Types
    "RecipientSpec",
    "Recipient",
    "SplitterState",
    "TransactionHandle",
    "TxOutcome",
    "TxState",
    "DecodedEvent",
    "CreateResult",
    "DistributeResult",
    "CreateStatus",
    "DistributeStatus",
    "FailedReason",
    "SkippedReason",
    "GasOptions",
    # Constants
    "ARBITRUM_ONE",
    "ARBITRUM_SEPOLIA",
    "SPLITTER_FACTORY_ADDRESSES",
    "PYUSD_ADDRESSES",
    "SUPPORTED_CHAIN_IDS",
    "MIN_RECIPIENTS",
    "MAX_RECIPIENTS",
    "TOTAL_SHARES",
    "TOKEN_DECIMALS",
    "get_splitter_factory_address",
    "get_pyusd_address",
    "get_network_name",
    "get_block_explorer_url",
    "is_supported_chain",
    "is_testnet",
    "format_units",
    # ABIs
    "SIMPLE_SPLITTER_FACTORY_ABI",
    "SIMPLE_SPLITTER_ABI",
    "ERC20_ABI",
    # Exceptions
    "SimpleSplitterError",
    "ValidationError",
    "InvalidAddressError",
    "ConfigurationError",
    "NetworkNotSupportedError",
    "NotConnectedError",
    "RpcError",
    "RevertError",
    "TransactionRevertedError",
    "DataIntegrityError",
    "EventNotFoundError",
    "TransactionTimeoutError",
    "NothingToDistributeError",
    "ActionInProgressError",
]
