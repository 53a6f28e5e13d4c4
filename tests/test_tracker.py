"""Tests for the transaction tracker state machine."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from simple_splitter import ChainClient, RpcError, TransactionHandle, TransactionTracker

from .conftest import TX_HASH, create_mock_client, create_mock_w3, http_error, make_receipt


def _tracker(client, **kwargs) -> TransactionTracker:
    kwargs.setdefault("timeout", 1.0)
    kwargs.setdefault("poll_interval", 0.01)
    return TransactionTracker(client, TransactionHandle(hash=TX_HASH), **kwargs)


class TestTerminalStates:
    """Tests for each terminal transition."""

    @pytest.mark.asyncio
    async def test_starts_pending(self) -> None:
        tracker = _tracker(create_mock_client())

        assert tracker.state == "pending"
        assert tracker.settled is False
        assert tracker.outcome.receipt is None

    @pytest.mark.asyncio
    async def test_confirmed_on_success_receipt(self) -> None:
        receipt = make_receipt(status=1, block_number=42)
        client = create_mock_client(receipt)

        outcome = await _tracker(client).wait()

        assert outcome.state == "confirmed"
        assert outcome.hash == TX_HASH
        assert outcome.receipt == receipt
        assert outcome.block_number == 42
        client.get_receipt.assert_awaited_once_with(TX_HASH)

    @pytest.mark.asyncio
    async def test_reverted_on_failed_receipt(self) -> None:
        client = create_mock_client(make_receipt(status=0))

        outcome = await _tracker(client).wait()

        assert outcome.state == "reverted"

    @pytest.mark.asyncio
    async def test_pending_until_mined(self) -> None:
        client = create_mock_client()
        client.get_receipt = AsyncMock(side_effect=[None, None, make_receipt()])

        outcome = await _tracker(client).wait()

        assert outcome.state == "confirmed"
        assert client.get_receipt.await_count == 3

    @pytest.mark.asyncio
    async def test_timed_out_exactly_once(self) -> None:
        """A never-mined transaction times out once and is not polled again."""
        client = create_mock_client(receipt=None)
        callback = MagicMock()
        tracker = _tracker(client, timeout=0.05, on_settled=callback)

        first = await tracker.wait()
        polls = client.get_receipt.await_count
        second = await tracker.wait()

        assert first.state == "timed_out"
        assert second.state == "timed_out"
        assert client.get_receipt.await_count == polls
        callback.assert_called_once()
        assert callback.call_args.args[0].state == "timed_out"

    @pytest.mark.asyncio
    async def test_zero_timeout_polls_once(self) -> None:
        client = create_mock_client(receipt=None)

        outcome = await _tracker(client, timeout=0).wait()

        assert outcome.state == "timed_out"
        client.get_receipt.assert_awaited_once()


class TestCachedOutcome:
    """A terminal state is final."""

    @pytest.mark.asyncio
    async def test_repeat_wait_does_not_requery(self) -> None:
        client = create_mock_client(make_receipt())
        tracker = _tracker(client)

        await tracker.wait()
        await tracker.wait()
        outcome = await tracker.wait()

        assert outcome.state == "confirmed"
        client.get_receipt.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_settled_callback_fires_once(self) -> None:
        callback = MagicMock()
        tracker = _tracker(create_mock_client(make_receipt()), on_settled=callback)

        await tracker.wait()
        await tracker.wait()

        callback.assert_called_once()

    @pytest.mark.asyncio
    async def test_late_callback_runs_immediately(self) -> None:
        tracker = _tracker(create_mock_client(make_receipt(status=0)))
        await tracker.wait()

        callback = MagicMock()
        tracker.add_settled_callback(callback)

        callback.assert_called_once()
        assert callback.call_args.args[0].state == "reverted"

    @pytest.mark.asyncio
    async def test_concurrent_waits_share_one_poll(self) -> None:
        client = create_mock_client(make_receipt())
        tracker = _tracker(client)

        first, second = await asyncio.gather(tracker.wait(), tracker.wait())

        assert first == second
        client.get_receipt.assert_awaited_once()


class TestTransientErrors:
    """RPC errors while polling are absorbed."""

    @pytest.mark.asyncio
    async def test_rpc_error_then_confirmed(self) -> None:
        client = create_mock_client()
        client.get_receipt = AsyncMock(side_effect=[RpcError("connection reset"), None, make_receipt()])

        outcome = await _tracker(client).wait()

        assert outcome.state == "confirmed"
        assert client.get_receipt.await_count == 3

    @pytest.mark.asyncio
    async def test_rpc_errors_until_deadline_time_out(self) -> None:
        """Persistent RPC failure ends in timed_out, never reverted."""
        client = create_mock_client()
        client.get_receipt = AsyncMock(side_effect=RpcError("node down"))

        outcome = await _tracker(client, timeout=0.05).wait()

        assert outcome.state == "timed_out"

    @pytest.mark.asyncio
    async def test_http_errors_from_provider_are_absorbed(self) -> None:
        """Rate limits and dropped connections from the HTTP provider are retried."""
        mock_w3 = create_mock_w3()
        mock_w3.eth.get_transaction_receipt = AsyncMock(
            side_effect=[http_error(429), aiohttp.ServerDisconnectedError(), http_error(503), make_receipt()]
        )
        callback = MagicMock()
        tracker = _tracker(ChainClient(mock_w3, 42161), on_settled=callback)

        outcome = await tracker.wait()

        assert outcome.state == "confirmed"
        assert mock_w3.eth.get_transaction_receipt.await_count == 4
        callback.assert_called_once()

    @pytest.mark.asyncio
    async def test_persistent_http_errors_time_out(self) -> None:
        mock_w3 = create_mock_w3()
        mock_w3.eth.get_transaction_receipt = AsyncMock(side_effect=http_error(502))

        outcome = await _tracker(ChainClient(mock_w3, 42161), timeout=0.05).wait()

        assert outcome.state == "timed_out"


class TestCancellation:
    """Tests for abandoning a tracker."""

    @pytest.mark.asyncio
    async def test_cancel_stops_polling(self) -> None:
        client = create_mock_client(receipt=None)
        tracker = _tracker(client, timeout=60, poll_interval=30)

        task = asyncio.create_task(tracker.wait())
        await asyncio.sleep(0.01)
        tracker.cancel()
        outcome = await asyncio.wait_for(task, timeout=1)

        assert outcome.state == "pending"
        assert tracker.cancelled is True
        assert tracker.settled is False
        client.get_receipt.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_task_cancellation_propagates(self) -> None:
        tracker = _tracker(create_mock_client(receipt=None), timeout=60, poll_interval=30)

        task = asyncio.create_task(tracker.wait())
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert tracker.state == "pending"
