"""
Finance Service (Domain Facade).

Wires the debt recorder, settlement processor, balance calculator and
ledger builder to one repository, and adds the read-only reporting views
used by the admin dashboard.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from greenpages.app.core.config import settings
from greenpages.app.core.exceptions import ResourceNotFoundError
from greenpages.app.domain.finance.balance_calculator import BalanceCalculator, DebtSummary
from greenpages.app.domain.finance.debt_recorder import DebtRecorder
from greenpages.app.domain.finance.ledger_builder import LedgerBuilder
from greenpages.app.domain.finance.repository import DateRange, FinanceRepository
from greenpages.app.domain.finance.settlement_processor import SettlementProcessor
from greenpages.app.models.agent import Agent
from greenpages.app.models.base import utcnow
from greenpages.app.models.settlement import Settlement


@dataclass(frozen=True)
class AgentDebtOverview:
    agent: Agent
    debt_summary: DebtSummary


class FinanceService:

    def __init__(
        self,
        repository: FinanceRepository,
        clock: Callable[[], datetime] = utcnow,
        display_locale: Optional[str] = None
    ):
        locale = display_locale or settings.ledger_display_locale
        self.repository = repository
        self.balance_calculator = BalanceCalculator(repository)
        self.debt_recorder = DebtRecorder(repository, clock=clock, display_locale=locale)
        self.settlement_processor = SettlementProcessor(
            repository, balance_calculator=self.balance_calculator, clock=clock
        )
        self.ledger_builder = LedgerBuilder(repository, display_locale=locale)

    @classmethod
    def for_session(cls, db: AsyncSession, **kwargs) -> "FinanceService":
        return cls(FinanceRepository(db), **kwargs)

    # Operations

    async def record_collection(self, agent_id, business_id, amount, collection_type):
        return await self.debt_recorder.record_collection(agent_id, business_id, amount, collection_type)

    async def process_settlement(self, agent_id, accountant_id, amount, notes=None) -> Settlement:
        return await self.settlement_processor.process_settlement(agent_id, accountant_id, amount, notes)

    async def get_agent_debt(self, agent_id: str) -> DebtSummary:
        return await self.balance_calculator.get_agent_debt(agent_id)

    async def get_agent_ledger(self, agent_id: str, start: datetime = None, end: datetime = None):
        return await self.ledger_builder.get_agent_ledger(agent_id, start, end)

    # Reporting

    async def get_settlement_history(
        self,
        agent_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[Settlement]:
        """
        Settlements for an agent within the inclusive window, newest first.

        Raises:
            ResourceNotFoundError: agent does not exist
        """
        agent = await self.repository.find_agent(agent_id)
        if not agent:
            raise ResourceNotFoundError("Agent", agent_id)

        return await self.repository.list_settlements(
            agent_id, DateRange(start=start, end=end), newest_first=True
        )

    async def get_all_agents_with_debt(self) -> List[AgentDebtOverview]:
        """Every active agent, by employee code, with its current debt summary."""
        agents = await self.repository.list_active_agents()
        overview = []
        for agent in agents:
            summary = await self.balance_calculator.summarize(agent.id)
            overview.append(AgentDebtOverview(agent=agent, debt_summary=summary))
        return overview
