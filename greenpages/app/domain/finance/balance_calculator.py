"""
Balance Calculator.

Derives an agent's outstanding balance from its full debt and settlement
history. Nothing is cached; every call re-aggregates.
"""

from dataclasses import dataclass
from decimal import Decimal

from greenpages.app.core.exceptions import ResourceNotFoundError
from greenpages.app.domain.finance.repository import FinanceRepository


@dataclass(frozen=True)
class DebtSummary:
    agent_id: str
    total_debt: Decimal
    debt_count: int
    total_settlements: Decimal
    current_balance: Decimal


class BalanceCalculator:

    def __init__(self, repository: FinanceRepository):
        self.repository = repository

    async def get_agent_debt(self, agent_id: str) -> DebtSummary:
        """
        Summarise an agent's debts and settlements.

        Raises:
            ResourceNotFoundError: agent does not exist
        """
        agent = await self.repository.find_agent(agent_id)
        if not agent:
            raise ResourceNotFoundError("Agent", agent_id)
        return await self.summarize(agent_id)

    async def summarize(self, agent_id: str) -> DebtSummary:
        """Aggregate without the existence check, for callers that already hold the agent."""
        debts = await self.repository.sum_debts(agent_id)
        settlements = await self.repository.sum_settlements(agent_id)

        return DebtSummary(
            agent_id=agent_id,
            total_debt=debts.total,
            debt_count=debts.count,
            total_settlements=settlements.total,
            current_balance=debts.total - settlements.total,
        )
