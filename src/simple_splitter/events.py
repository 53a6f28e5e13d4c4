"""Event-log decoding against a contract ABI."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from eth_abi.exceptions import DecodingError
from eth_utils import to_bytes, to_checksum_address
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import InvalidEventABI, LogTopicError, MismatchedABI

from .types import DecodedEvent

# Offline instance: only its ABI codec is used, no provider is ever called
_codec_w3 = Web3()

_NOT_THIS_EVENT = (MismatchedABI, LogTopicError, InvalidEventABI, DecodingError)


def _as_hexbytes(value: Any) -> HexBytes:
    if isinstance(value, (bytes, bytearray)):
        return HexBytes(value)
    return HexBytes(to_bytes(hexstr=value))


def _log_entry(log: Mapping[str, Any]) -> dict[str, Any]:
    """Shape a raw or node-formatted log the way web3's event decoder expects."""
    return {
        "address": log.get("address"),
        "topics": [_as_hexbytes(t) for t in log.get("topics") or []],
        "data": _as_hexbytes(log.get("data") or b""),
        "logIndex": log.get("logIndex"),
        "transactionIndex": log.get("transactionIndex"),
        "transactionHash": log.get("transactionHash"),
        "blockHash": log.get("blockHash"),
        "blockNumber": log.get("blockNumber"),
    }


def _plain(value: Any) -> Any:
    if isinstance(value, (tuple, list)):
        return [_plain(v) for v in value]
    if isinstance(value, str) and Web3.is_address(value):
        return to_checksum_address(value)
    return value


def decode_if_matches(log: Mapping[str, Any], abi: Sequence[Mapping[str, Any]], event_name: str) -> DecodedEvent | None:
    """
    Decode a log as ``event_name``, or return None if it is something else.

    A log matches when its first topic is the event's signature hash and
    both its indexed topics and data decode against the event inputs.

    Raises:
        KeyError: If ``event_name`` is not an event in ``abi``
    """
    if not any(e.get("type") == "event" and e.get("name") == event_name for e in abi):
        raise KeyError(f"Event {event_name} not in ABI")

    event = getattr(_codec_w3.eth.contract(abi=list(abi)).events, event_name)
    try:
        decoded = event().process_log(_log_entry(log))
    except _NOT_THIS_EVENT:
        return None

    address = log.get("address")
    return DecodedEvent(
        name=event_name,
        args={k: _plain(v) for k, v in decoded["args"].items()},
        address=to_checksum_address(address) if address else None,
        log_index=log.get("logIndex"),
    )


def find_event(logs: Iterable[Mapping[str, Any]], abi: Sequence[Mapping[str, Any]], event_name: str) -> DecodedEvent | None:
    """Return the first log in order that decodes as ``event_name``."""
    for log in logs:
        decoded = decode_if_matches(log, abi, event_name)
        if decoded is not None:
            return decoded
    return None
