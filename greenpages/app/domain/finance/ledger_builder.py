"""
Ledger Builder.

Merges an agent's debts and settlements into one chronological history
with a running balance.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from greenpages.app.core.config import settings
from greenpages.app.core.exceptions import ResourceNotFoundError
from greenpages.app.domain.finance.money import ZERO, to_money
from greenpages.app.domain.finance.repository import DateRange, FinanceRepository
from greenpages.app.models.finance_enums import CollectionType, LedgerEntryKind


@dataclass(frozen=True)
class LedgerEntry:
    id: str
    type: LedgerEntryKind
    amount: Decimal
    balance: Decimal
    created_at: datetime
    business_id: Optional[str] = None
    business_name: Optional[str] = None
    collection_type: Optional[CollectionType] = None
    notes: Optional[str] = None


class LedgerBuilder:

    def __init__(self, repository: FinanceRepository, display_locale: str = None):
        self.repository = repository
        self.display_locale = display_locale or settings.ledger_display_locale

    async def get_agent_ledger(
        self,
        agent_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> List[LedgerEntry]:
        """
        Build the agent's ledger, oldest entry first.

        The running balance starts at zero at the first entry inside the
        window. With a start bound that skips earlier activity it is NOT the
        all-time balance and can go negative; use BalanceCalculator for that.

        Entries with equal timestamps keep debts before settlements, each
        kind in id order.

        Raises:
            ResourceNotFoundError: agent does not exist
        """
        agent = await self.repository.find_agent(agent_id)
        if not agent:
            raise ResourceNotFoundError("Agent", agent_id)

        date_range = DateRange(start=start, end=end)
        debts = await self.repository.list_debts(agent_id, date_range)
        settlements = await self.repository.list_settlements(agent_id, date_range)

        transactions = [
            (debt.created_at, LedgerEntryKind.DEBT, debt) for debt in debts
        ] + [
            (settlement.created_at, LedgerEntryKind.SETTLEMENT, settlement) for settlement in settlements
        ]
        # sorted() is stable: ties keep the debts-then-settlements order above
        transactions = sorted(transactions, key=lambda item: item[0])

        entries = []
        running_balance = ZERO
        for created_at, kind, record in transactions:
            amount = to_money(record.amount)
            if kind is LedgerEntryKind.DEBT:
                running_balance += amount
                entries.append(LedgerEntry(
                    id=record.id,
                    type=kind,
                    amount=amount,
                    balance=running_balance,
                    created_at=created_at,
                    business_id=record.business_id,
                    business_name=record.business.display_name(self.display_locale),
                    collection_type=record.type,
                ))
            else:
                running_balance -= amount
                entries.append(LedgerEntry(
                    id=record.id,
                    type=kind,
                    amount=amount,
                    balance=running_balance,
                    created_at=created_at,
                    notes=record.notes,
                ))

        return entries
