"""Contract addresses and chain constants for simple-splitter SDK."""

from ._exceptions import NetworkNotSupportedError

ARBITRUM_ONE = 42161
ARBITRUM_SEPOLIA = 421614

# Deployed SimpleSplitterFactory contract addresses per chain.
SPLITTER_FACTORY_ADDRESSES: dict[int, str] = {
    ARBITRUM_SEPOLIA: "0x5B0aDF5b6cD6E6e7e662F5eB51e165bAE9bcD4a6",
    ARBITRUM_ONE: "0x187C8493a0b4B21b4E7DAB6c57E069dfa9785006",
}

# PYUSD token addresses per chain.
PYUSD_ADDRESSES: dict[int, str] = {
    ARBITRUM_SEPOLIA: "0x637A1259C6afd7E3AdF63993cA7E58BB438aB1B1",
    ARBITRUM_ONE: "0x46850aD61C2B7d64d08c9C754F45254596696984",
}

# Public RPC endpoints, used when no rpc_url is configured.
DEFAULT_RPC_URLS: dict[int, str] = {
    ARBITRUM_SEPOLIA: "https://sepolia-rollup.arbitrum.io/rpc",
    ARBITRUM_ONE: "https://arb1.arbitrum.io/rpc",
}

BLOCK_EXPLORER_URLS: dict[int, str] = {
    ARBITRUM_SEPOLIA: "https://sepolia.arbiscan.io",
    ARBITRUM_ONE: "https://arbiscan.io",
}

NETWORK_NAMES: dict[int, str] = {
    ARBITRUM_SEPOLIA: "Arbitrum Sepolia",
    ARBITRUM_ONE: "Arbitrum One",
}

TESTNET_CHAIN_IDS: frozenset[int] = frozenset({ARBITRUM_SEPOLIA})

# Supported chain IDs
SUPPORTED_CHAIN_IDS: list[int] = [ARBITRUM_SEPOLIA, ARBITRUM_ONE]

# Recipient limits
MIN_RECIPIENTS = 2
MAX_RECIPIENTS = 10

# Shares are whole percentage points
TOTAL_SHARES = 100

# PYUSD precision
TOKEN_DECIMALS = 6


def _lookup(table: dict[int, str], chain_id: int) -> str:
    value = table.get(chain_id)
    if not value:
        raise NetworkNotSupportedError(chain_id)
    return value


def get_splitter_factory_address(chain_id: int) -> str:
    """Get the SimpleSplitterFactory address for a given chain ID."""
    return _lookup(SPLITTER_FACTORY_ADDRESSES, chain_id)


def get_pyusd_address(chain_id: int) -> str:
    """Get the PYUSD address for a given chain ID."""
    return _lookup(PYUSD_ADDRESSES, chain_id)


def get_default_rpc_url(chain_id: int) -> str:
    """Get the public RPC URL for a given chain ID."""
    return _lookup(DEFAULT_RPC_URLS, chain_id)


def get_network_name(chain_id: int) -> str:
    """Get the display name of a network."""
    return _lookup(NETWORK_NAMES, chain_id)


def get_block_explorer_url(chain_id: int, address: str) -> str:
    """Get the block explorer page for an address."""
    return f"{_lookup(BLOCK_EXPLORER_URLS, chain_id)}/address/{address}"


def is_supported_chain(chain_id: int) -> bool:
    """Check if a chain is supported."""
    return chain_id in SPLITTER_FACTORY_ADDRESSES


def is_testnet(chain_id: int) -> bool:
    """Check if a supported chain is a test network."""
    if not is_supported_chain(chain_id):
        raise NetworkNotSupportedError(chain_id)
    return chain_id in TESTNET_CHAIN_IDS


def format_units(amount: int, decimals: int = TOKEN_DECIMALS) -> str:
    """
    Format an integer token amount as a decimal string.

    Example:
        >>> format_units(1_500_000)
        '1.5'
    """
    sign = "-" if amount < 0 else ""
    whole, fraction = divmod(abs(amount), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""
    if fraction_str:
        return f"{sign}{whole}.{fraction_str}"
    return f"{sign}{whole}"
