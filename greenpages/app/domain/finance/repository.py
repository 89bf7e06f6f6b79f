"""
Finance data access.

The only component that talks to the database. Every service receives a
repository bound to one AsyncSession; there is no module-level client.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, NamedTuple, Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from greenpages.app.core.exceptions import DataAccessError
from greenpages.app.domain.finance.money import to_money
from greenpages.app.models.agent import Agent
from greenpages.app.models.agent_debt import AgentDebt
from greenpages.app.models.business import Business
from greenpages.app.models.finance_enums import CollectionType
from greenpages.app.models.settlement import Settlement
from greenpages.app.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRange:
    """Inclusive creation-time window; either bound may be open."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class DebtTotals(NamedTuple):
    total: Decimal
    count: int


class SettlementTotals(NamedTuple):
    total: Decimal


def _apply_date_range(query, column, date_range: Optional[DateRange]):
    if date_range is None:
        return query
    if date_range.start is not None:
        query = query.where(column >= date_range.start)
    if date_range.end is not None:
        query = query.where(column <= date_range.end)
    return query


class FinanceRepository:
    """
    Data access for agents, businesses, debts and settlements.

    Inserts only flush; the calling service decides when to commit so that
    one logical operation is one transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _data_access(self, operation: str):
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error("Data access failed", extra={"operation": operation, "error": str(exc)})
            await self.db.rollback()
            raise DataAccessError(operation, exc) from exc

    # Lookups

    async def find_agent(self, agent_id: str) -> Optional[Agent]:
        async with self._data_access("find_agent"):
            result = await self.db.execute(select(Agent).where(Agent.id == agent_id))
            return result.scalar_one_or_none()

    async def find_user(self, user_id: str) -> Optional[User]:
        async with self._data_access("find_user"):
            result = await self.db.execute(select(User).where(User.id == user_id))
            return result.scalar_one_or_none()

    async def find_business(self, business_id: str) -> Optional[Business]:
        """Business with its translations loaded, for display-name resolution."""
        async with self._data_access("find_business"):
            result = await self.db.execute(
                select(Business)
                .options(selectinload(Business.translations))
                .execution_options(populate_existing=True)
                .where(Business.id == business_id)
            )
            return result.scalar_one_or_none()

    async def list_active_agents(self) -> List[Agent]:
        async with self._data_access("list_active_agents"):
            result = await self.db.execute(
                select(Agent)
                .options(selectinload(Agent.user))
                .execution_options(populate_existing=True)
                .where(Agent.is_active.is_(True))
                .order_by(Agent.employee_code.asc())
            )
            return list(result.scalars().all())

    # Writes

    async def lock_agent_ledger(self, agent_id: str) -> bool:
        """
        Claim the agent row for the current transaction.

        Bumps ledger_version, which row-locks the agent on PostgreSQL and
        takes the database write lock on SQLite. Concurrent settlements for
        the same agent block here until this transaction ends.

        Returns:
            False if the agent does not exist
        """
        async with self._data_access("lock_agent_ledger"):
            result = await self.db.execute(
                update(Agent)
                .where(Agent.id == agent_id)
                .values(ledger_version=Agent.ledger_version + 1)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    async def insert_debt(
        self,
        agent_id: str,
        business_id: str,
        amount: Decimal,
        collection_type: CollectionType,
        created_at: datetime
    ) -> AgentDebt:
        async with self._data_access("insert_debt"):
            debt = AgentDebt(
                agent_id=agent_id,
                business_id=business_id,
                amount=amount,
                type=collection_type,
                created_at=created_at
            )
            self.db.add(debt)
            await self.db.flush()
            return debt

    async def insert_settlement(
        self,
        agent_id: str,
        accountant_id: str,
        amount: Decimal,
        notes: Optional[str],
        created_at: datetime
    ) -> Settlement:
        async with self._data_access("insert_settlement"):
            settlement = Settlement(
                agent_id=agent_id,
                accountant_id=accountant_id,
                amount=amount,
                notes=notes,
                created_at=created_at
            )
            self.db.add(settlement)
            await self.db.flush()
            return settlement

    async def commit(self) -> None:
        async with self._data_access("commit"):
            await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

    # Aggregates

    async def sum_debts(self, agent_id: str, date_range: Optional[DateRange] = None) -> DebtTotals:
        async with self._data_access("sum_debts"):
            query = select(
                func.sum(AgentDebt.amount),
                func.count(AgentDebt.id)
            ).where(AgentDebt.agent_id == agent_id)
            query = _apply_date_range(query, AgentDebt.created_at, date_range)
            total, count = (await self.db.execute(query)).one()
            return DebtTotals(total=to_money(total), count=count or 0)

    async def sum_settlements(self, agent_id: str, date_range: Optional[DateRange] = None) -> SettlementTotals:
        async with self._data_access("sum_settlements"):
            query = select(func.sum(Settlement.amount)).where(Settlement.agent_id == agent_id)
            query = _apply_date_range(query, Settlement.created_at, date_range)
            total = (await self.db.execute(query)).scalar()
            return SettlementTotals(total=to_money(total))

    # Listings

    async def list_debts(self, agent_id: str, date_range: Optional[DateRange] = None) -> List[AgentDebt]:
        """Debts oldest first, each with business translations loaded."""
        async with self._data_access("list_debts"):
            query = (
                select(AgentDebt)
                .options(selectinload(AgentDebt.business).selectinload(Business.translations))
                .execution_options(populate_existing=True)
                .where(AgentDebt.agent_id == agent_id)
            )
            query = _apply_date_range(query, AgentDebt.created_at, date_range)
            query = query.order_by(AgentDebt.created_at.asc(), AgentDebt.id.asc())
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def list_settlements(
        self,
        agent_id: str,
        date_range: Optional[DateRange] = None,
        newest_first: bool = False
    ) -> List[Settlement]:
        async with self._data_access("list_settlements"):
            query = select(Settlement).where(Settlement.agent_id == agent_id)
            query = _apply_date_range(query, Settlement.created_at, date_range)
            if newest_first:
                query = query.order_by(Settlement.created_at.desc(), Settlement.id.desc())
            else:
                query = query.order_by(Settlement.created_at.asc(), Settlement.id.asc())
            result = await self.db.execute(query)
            return list(result.scalars().all())
