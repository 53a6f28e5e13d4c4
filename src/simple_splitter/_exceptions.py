"""Custom exceptions for simple-splitter SDK."""

from typing import Any


class SimpleSplitterError(Exception):
    """Base exception for simple-splitter."""

    reason = "error"


class ValidationError(SimpleSplitterError):
    """Invalid input (recipients, shares). Never reaches the chain."""

    reason = "validation_error"


class InvalidAddressError(ValidationError):
    """Not a syntactically valid account address."""

    reason = "invalid_address"

    def __init__(self, address: object) -> None:
        super().__init__(f"Invalid address: {address!r}")
        self.address = address


class ConfigurationError(SimpleSplitterError):
    """Invalid configuration (missing RPC URL, unknown network, etc.)."""

    reason = "configuration_error"


class NetworkNotSupportedError(ConfigurationError):
    """Unsupported chain ID."""

    def __init__(self, chain_id: int) -> None:
        super().__init__(f"Chain {chain_id} is not supported")
        self.chain_id = chain_id


class NotConnectedError(SimpleSplitterError):
    """No signer available for a write call."""

    reason = "not_connected"


class RpcError(SimpleSplitterError):
    """Node or network failure. Transient, safe to retry reads and polls."""

    reason = "rpc_error"


class RevertError(SimpleSplitterError):
    """
    Transaction reverted, either in simulation or on-chain.

    Carries the decoded custom error when the ABI knows it, e.g.
    ``error_name="InsufficientBalance"`` and
    ``error_args={"balance": 0, "needed": 10}``.
    """

    reason = "transaction_reverted"

    def __init__(
        self,
        message: str,
        reason_text: str | None = None,
        error_name: str | None = None,
        error_args: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.reason_text = reason_text
        self.error_name = error_name
        self.error_args = error_args or {}


class TransactionRevertedError(RevertError):
    """Transaction was mined with a failed status."""

    def __init__(self, tx_hash: str, reason_text: str | None = None) -> None:
        super().__init__(f"Transaction {tx_hash} reverted", reason_text=reason_text)
        self.tx_hash = tx_hash


class DataIntegrityError(SimpleSplitterError):
    """Chain data contradicts an invariant. Not retryable."""

    reason = "data_integrity"


class EventNotFoundError(DataIntegrityError):
    """Transaction succeeded but the expected event log is missing."""

    reason = "event_not_found"

    def __init__(self, event_name: str, tx_hash: str) -> None:
        super().__init__(f"No {event_name} event in receipt of {tx_hash}")
        self.event_name = event_name
        self.tx_hash = tx_hash


class TransactionTimeoutError(SimpleSplitterError):
    """Inclusion not observed within the bounded wait."""

    reason = "timed_out"

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(f"Transaction {tx_hash} not mined within {timeout:g}s")
        self.tx_hash = tx_hash
        self.timeout = timeout


class NothingToDistributeError(SimpleSplitterError):
    """Splitter balance is zero or unknown."""

    reason = "nothing_to_distribute"


class ActionInProgressError(SimpleSplitterError):
    """The same write is already pending for this target."""

    reason = "in_progress"
