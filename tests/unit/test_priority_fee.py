"""Tests for priority fee plugins and manager"""
from unittest.mock import AsyncMock

import pytest

from pumpbot.core.priority_fee.dynamic_fee import DynamicPriorityFeePlugin, fee_at_percentile
from pumpbot.core.priority_fee.fixed_fee import FixedPriorityFee
from pumpbot.core.priority_fee.manager import PriorityFeeManager


@pytest.mark.asyncio
async def test_fixed_fee():
    assert await FixedPriorityFee(250_000).get_priority_fee() == 250_000
    assert await FixedPriorityFee(0).get_priority_fee() is None


@pytest.mark.asyncio
async def test_manager_fixed_with_extra_and_cap(mock_client):
    manager = PriorityFeeManager(mock_client, fixed_fee=900_000, extra_fee=200_000, hard_cap=1_000_000)

    details = await manager.get_priority_fee()

    assert details.fee == 1_000_000


@pytest.mark.asyncio
async def test_manager_without_plugins_returns_none(mock_client):
    manager = PriorityFeeManager(mock_client, enable_fixed_fee=False)

    assert await manager.get_priority_fee() is None


@pytest.mark.asyncio
async def test_dynamic_fee_percentile(mock_client, mint):
    mock_client.get_recent_prioritization_fees.return_value = [0, 300, 100, 200]
    plugin = DynamicPriorityFeePlugin(mock_client, percentile=50)
    plugin.set_accounts_for_check([mint])

    assert await plugin.get_priority_fee() == 200
    mock_client.get_recent_prioritization_fees.assert_awaited_once_with([mint])


@pytest.mark.asyncio
async def test_dynamic_fee_is_cached(mock_client):
    mock_client.get_recent_prioritization_fees.return_value = [1000]
    plugin = DynamicPriorityFeePlugin(mock_client, adjustment_factor=1.5, cache_duration=60)

    assert await plugin.get_priority_fee() == 1500
    assert await plugin.get_priority_fee() == 1500
    assert mock_client.get_recent_prioritization_fees.await_count == 1


@pytest.mark.asyncio
async def test_dynamic_fee_rpc_failure(mock_client):
    mock_client.get_recent_prioritization_fees.side_effect = RuntimeError("rpc down")
    plugin = DynamicPriorityFeePlugin(mock_client)

    assert await plugin.get_priority_fee() is None


def test_dynamic_fee_rejects_bad_percentile(mock_client):
    with pytest.raises(ValueError):
        DynamicPriorityFeePlugin(mock_client, percentile=101)


@pytest.mark.asyncio
async def test_manager_takes_highest_plugin(mock_client):
    mock_client.get_recent_prioritization_fees.return_value = [400_000]
    manager = PriorityFeeManager(mock_client, enable_dynamic_fee=True, fixed_fee=250_000)

    details = await manager.get_priority_fee()

    assert details.fee == 400_000


@pytest.mark.asyncio
async def test_manager_survives_plugin_error(mock_client):
    manager = PriorityFeeManager(mock_client, fixed_fee=100_000)
    failing = FixedPriorityFee(1)
    failing.get_priority_fee = AsyncMock(side_effect=RuntimeError("boom"))
    manager.plugins.append(failing)

    details = await manager.get_priority_fee()

    assert details.fee == 100_000


def test_fee_at_percentile_ignores_zero_fees():
    assert fee_at_percentile([0, 0], 50) == 0
    assert fee_at_percentile([5, 0, 1, 3], 0) == 1
    assert fee_at_percentile([5, 0, 1, 3], 100) == 5
