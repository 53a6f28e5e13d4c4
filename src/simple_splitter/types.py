"""Type definitions for simple-splitter SDK."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from ._exceptions import SimpleSplitterError


class RecipientSpec(BaseModel):
    """
    A recipient with a share percentage (1-100), used to create a splitter.

    Shares must sum to exactly 100 across all recipients.

    Example:
        RecipientSpec(address="0xAlice...", share=60)
    """

    address: str
    share: int = Field(ge=1, le=100)

    model_config = {"frozen": True}


class Recipient(BaseModel):
    """
    A recipient as read back from a deployed splitter.

    ``percentage`` and ``balance`` are floor-divided estimates of the
    recipient's entitlement; the contract's actual payout may differ by
    rounding.
    """

    address: str
    share: int
    percentage: int
    balance: int

    model_config = {"frozen": True}


class SplitterState(BaseModel):
    """One complete snapshot of a splitter's recipients and token balance."""

    address: str
    token: str
    recipient_count: int
    total_shares: int
    balance: int
    recipients: list[Recipient]

    model_config = {"frozen": True}

    @property
    def allocated(self) -> int:
        """Sum of the recipients' derived balances."""
        return sum(r.balance for r in self.recipients)

    @property
    def remainder(self) -> int:
        """Balance left over by integer division."""
        return self.balance - self.allocated


class TransactionHandle(BaseModel):
    """A submitted transaction, identified by its hash."""

    hash: str

    model_config = {"frozen": True}


TxState = Literal["pending", "confirmed", "reverted", "timed_out"]


class TxOutcome(BaseModel):
    """Snapshot of a tracked transaction."""

    hash: str
    state: TxState
    receipt: Any = None
    block_number: int | None = None

    model_config = {"frozen": True}


class DecodedEvent(BaseModel):
    """An event log decoded against an ABI."""

    name: str
    args: dict[str, Any]
    address: str | None = None
    log_index: int | None = None

    model_config = {"frozen": True}


# Result status types
CreateStatus = Literal["CREATED", "FAILED"]
DistributeStatus = Literal["DISTRIBUTED", "SKIPPED", "FAILED"]
FailedReason = Literal[
    "validation_error",
    "invalid_address",
    "configuration_error",
    "not_connected",
    "rpc_error",
    "transaction_reverted",
    "data_integrity",
    "event_not_found",
    "timed_out",
    "in_progress",
]
SkippedReason = Literal["nothing_to_distribute"]


class CreateResult(BaseModel):
    """
    Result of create_splitter operation.

    status: CREATED | FAILED

    ``splitter`` is taken from the decoded ``SplitterCreated`` log only.
    """

    status: CreateStatus
    splitter: str | None = None
    creator: str | None = None
    tx_hash: str | None = None
    reason: FailedReason | str | None = None
    message: str | None = None
    revert_reason: str | None = None
    error: SimpleSplitterError | None = Field(default=None, exclude=True)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class DistributeResult(BaseModel):
    """
    Result of distribute operation.

    status: DISTRIBUTED | SKIPPED | FAILED

    After DISTRIBUTED the splitter should be read again; ``state`` holds
    that refreshed snapshot when the caller supplied a refresh hook.
    """

    status: DistributeStatus
    tx_hash: str | None = None
    reason: FailedReason | SkippedReason | str | None = None
    message: str | None = None
    revert_reason: str | None = None
    refresh_required: bool = False
    state: SplitterState | None = None
    error: SimpleSplitterError | None = Field(default=None, exclude=True)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


class GasOptions(BaseModel):
    """
    Per-call gas settings for createSplitter and distribute.

    With no fields set the operation default limit is used and the node
    prices the transaction. Arbitrum base fees are low and tips are not
    used for ordering, so a max fee alone is usually enough for type 2.

    Example:
        GasOptions(estimate_gas=True)
        GasOptions(max_fee_per_gas=100_000_000)  # 0.1 gwei cap
    """

    estimate_gas: bool = False
    """Estimate with eth_estimateGas and add 20%, instead of the fixed default."""

    gas_limit: int | None = Field(default=None, gt=0)
    """Fixed gas limit; wins over estimation."""

    max_fee_per_gas: int | None = Field(default=None, ge=0)
    """Cap in wei. Setting it sends an EIP-1559 transaction."""

    max_priority_fee_per_gas: int | None = Field(default=None, ge=0)
    """Tip in wei, only used with max_fee_per_gas. Defaults to the node's eth_maxPriorityFeePerGas."""

    model_config = {"frozen": True}
