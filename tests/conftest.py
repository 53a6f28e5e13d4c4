"""Pytest configuration and fixtures for simple-splitter tests."""

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from eth_abi import encode as abi_encode
from eth_utils import event_abi_to_log_topic, keccak
from hexbytes import HexBytes

from simple_splitter.abi import SIMPLE_SPLITTER_FACTORY_ABI
from simple_splitter.chain import ChainClient
from simple_splitter.types import TransactionHandle

# Anvil's pre-funded test accounts (same as Hardhat/Foundry)
# Private keys are well-known - DO NOT use on mainnet
ANVIL_ACCOUNTS = [
    {
        "address": "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
        "private_key": "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80",
    },
    {
        "address": "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
        "private_key": "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d",
    },
    {
        "address": "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
        "private_key": "0x5de4111afa1a4b94908f83103eb1f1706367c2e68ca870fc3fb9a804cdab365a",
    },
]

FACTORY = "0x187C8493a0b4B21b4E7DAB6c57E069dfa9785006"
SPLITTER = "0x90F79bf6EB2c4f870365E785982E1f101E93b906"
TOKEN = "0x46850aD61C2B7d64d08c9C754F45254596696984"
TX_HASH = "0x" + "ab" * 32

SPLITTER_CREATED_ABI = next(e for e in SIMPLE_SPLITTER_FACTORY_ABI if e.get("name") == "SplitterCreated")
TRANSFER_TOPIC = keccak(text="Transfer(address,address,uint256)")


def _topic_address(address: str) -> HexBytes:
    return HexBytes(abi_encode(["address"], [address]))


def make_splitter_created_log(
    splitter: str,
    creator: str,
    recipients: list[str],
    shares: list[int],
    address: str = FACTORY,
    log_index: int = 0,
) -> dict:
    """Build a SplitterCreated log as a node would return it."""
    return {
        "address": address,
        "topics": [
            HexBytes(event_abi_to_log_topic(SPLITTER_CREATED_ABI)),
            _topic_address(splitter),
            _topic_address(creator),
        ],
        "data": HexBytes(abi_encode(["address[]", "uint256[]"], [recipients, shares])),
        "logIndex": log_index,
    }


def make_transfer_log(sender: str, receiver: str, amount: int, address: str = TOKEN, log_index: int = 0) -> dict:
    """Build an ERC20 Transfer log (unrelated to the factory)."""
    return {
        "address": address,
        "topics": [HexBytes(TRANSFER_TOPIC), _topic_address(sender), _topic_address(receiver)],
        "data": HexBytes(abi_encode(["uint256"], [amount])),
        "logIndex": log_index,
    }


def make_receipt(status: int = 1, logs: list | None = None, block_number: int = 100) -> dict:
    return {"status": status, "logs": logs or [], "blockNumber": block_number, "transactionHash": TX_HASH}


def create_mock_client(receipt: dict | None = None) -> MagicMock:
    """Create a ChainClient mock whose write returns TX_HASH and is mined with ``receipt``."""
    client = MagicMock(spec=ChainClient)
    client.read = AsyncMock()
    client.write = AsyncMock(return_value=TransactionHandle(hash=TX_HASH))
    client.get_receipt = AsyncMock(return_value=receipt)
    return client


@pytest.fixture
def test_account():
    """Get a pre-funded test account."""
    return ANVIL_ACCOUNTS[0]


@pytest.fixture
def alice():
    """Get Alice's address (recipient)."""
    return ANVIL_ACCOUNTS[1]["address"]


@pytest.fixture
def bob():
    """Get Bob's address (recipient)."""
    return ANVIL_ACCOUNTS[2]["address"]


def http_error(status: int) -> aiohttp.ClientResponseError:
    """An HTTP error as AsyncHTTPProvider raises it (e.g. 429 rate limit, 503)."""
    return aiohttp.ClientResponseError(request_info=MagicMock(), history=(), status=status, message="rpc unavailable")


def create_mock_w3(receipt: dict | None = None) -> MagicMock:
    """Create a mock AsyncWeb3 for driving a real ChainClient."""
    mock_w3 = MagicMock()
    mock_w3.eth.get_transaction_count = AsyncMock(return_value=0)
    mock_w3.eth.send_raw_transaction = AsyncMock(return_value=bytes.fromhex(TX_HASH[2:]))
    mock_w3.eth.get_transaction_receipt = AsyncMock(return_value=receipt)
    mock_w3.provider.disconnect = AsyncMock()
    return mock_w3
