"""
Contract ABIs for the SimpleSplitter contracts.

Only the surface the SDK consumes is listed.
"""

# SimpleSplitterFactory ABI
SIMPLE_SPLITTER_FACTORY_ABI = [
    {
        "type": "function",
        "name": "createSplitter",
        "inputs": [
            {"name": "_recipients", "type": "address[]"},
            {"name": "_shares", "type": "uint256[]"},
        ],
        "outputs": [{"name": "splitter", "type": "address"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "implementation",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "SplitterCreated",
        "inputs": [
            {"name": "splitter", "type": "address", "indexed": True},
            {"name": "creator", "type": "address", "indexed": True},
            {"name": "recipients", "type": "address[]", "indexed": False},
            {"name": "shares", "type": "uint256[]", "indexed": False},
        ],
        "anonymous": False,
    },
    {
        "type": "error",
        "name": "FailedDeployment",
        "inputs": [],
    },
    {
        "type": "error",
        "name": "InsufficientBalance",
        "inputs": [
            {"name": "balance", "type": "uint256"},
            {"name": "needed", "type": "uint256"},
        ],
    },
]

# SimpleSplitter (per-instance) ABI
SIMPLE_SPLITTER_ABI = [
    {
        "type": "function",
        "name": "recipientCount",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "totalShares",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "recipients",
        "inputs": [{"name": "", "type": "uint256"}],
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "shares",
        "inputs": [{"name": "", "type": "uint256"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "distribute",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]

# Minimal ERC20 ABI
ERC20_ABI = [
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "decimals",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
    },
]
