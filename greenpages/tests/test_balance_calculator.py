"""
Balance Calculator tests.

Summaries are derived from debts and settlements on every call.
"""

import pytest
from decimal import Decimal

from greenpages.app.core.exceptions import ResourceNotFoundError
from greenpages.app.domain.finance.service import FinanceService
from greenpages.app.models.finance_enums import CollectionType


@pytest.fixture
def service(db_session, clock):
    return FinanceService.for_session(db_session, clock=clock)


@pytest.mark.asyncio
async def test_agent_without_activity_has_zero_balance(service, finance_world):
    summary = await service.get_agent_debt(finance_world["agent_id"])

    assert summary.agent_id == finance_world["agent_id"]
    assert summary.total_debt == Decimal("0.00")
    assert summary.debt_count == 0
    assert summary.total_settlements == Decimal("0.00")
    assert summary.current_balance == Decimal("0.00")


@pytest.mark.asyncio
async def test_summary_sums_debts_and_settlements(service, finance_world, clock):
    agent_id = finance_world["agent_id"]
    business_id = finance_world["business_id"]

    await service.record_collection(agent_id, business_id, Decimal("100.10"), CollectionType.SUBSCRIPTION)
    clock.advance(minutes=1)
    await service.record_collection(agent_id, business_id, Decimal("0.20"), CollectionType.AD_PAYMENT)
    clock.advance(minutes=1)
    await service.process_settlement(agent_id, finance_world["accountant_id"], Decimal("50.05"))

    summary = await service.get_agent_debt(agent_id)

    assert summary.total_debt == Decimal("100.30")
    assert summary.debt_count == 2
    assert summary.total_settlements == Decimal("50.05")
    assert summary.current_balance == Decimal("50.25")


@pytest.mark.asyncio
async def test_summary_only_counts_the_requested_agent(service, finance_world):
    await service.record_collection(
        finance_world["other_agent_id"], finance_world["business_id"], 75, CollectionType.SUBSCRIPTION
    )

    summary = await service.get_agent_debt(finance_world["agent_id"])

    assert summary.debt_count == 0
    assert summary.current_balance == Decimal("0.00")


@pytest.mark.asyncio
async def test_repeated_summaries_are_identical(service, finance_world):
    agent_id = finance_world["agent_id"]
    await service.record_collection(agent_id, finance_world["business_id"], "42.50", CollectionType.AD_PAYMENT)

    first = await service.get_agent_debt(agent_id)
    second = await service.get_agent_debt(agent_id)

    assert first == second


@pytest.mark.asyncio
async def test_unknown_agent_is_not_found(service, finance_world):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await service.get_agent_debt("missing-agent")

    assert exc_info.value.status_code == 404
    assert exc_info.value.details == {"resource": "Agent", "id": "missing-agent"}
