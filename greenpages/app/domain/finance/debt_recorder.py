"""
Debt Recorder.

Records cash an agent collected from a business as agent debt.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from greenpages.app.core.config import settings
from greenpages.app.core.exceptions import InvalidOperationError, ResourceNotFoundError
from greenpages.app.domain.finance.money import AmountLike, require_positive_amount
from greenpages.app.domain.finance.repository import FinanceRepository
from greenpages.app.models.base import utcnow
from greenpages.app.models.finance_enums import CollectionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedDebt:
    """A freshly inserted debt plus the business name, for immediate display."""
    id: str
    agent_id: str
    business_id: str
    business_name: str
    amount: Decimal
    type: CollectionType
    created_at: datetime


class DebtRecorder:

    def __init__(
        self,
        repository: FinanceRepository,
        clock: Callable[[], datetime] = utcnow,
        display_locale: str = None
    ):
        self.repository = repository
        self.clock = clock
        self.display_locale = display_locale or settings.ledger_display_locale

    async def record_collection(
        self,
        agent_id: str,
        business_id: str,
        amount: AmountLike,
        collection_type: CollectionType
    ) -> RecordedDebt:
        """
        Record a cash collection as agent debt.

        Inserts exactly one row and commits. No balance is stored anywhere.

        Raises:
            ResourceNotFoundError: agent or business does not exist
            InvalidOperationError: amount is not a positive cent amount, or the
                collection type is unknown
        """
        amount = require_positive_amount(amount)
        try:
            collection_type = CollectionType(collection_type)
        except ValueError:
            raise InvalidOperationError(f"Unknown collection type {collection_type!r}")

        agent = await self.repository.find_agent(agent_id)
        if not agent:
            raise ResourceNotFoundError("Agent", agent_id)

        business = await self.repository.find_business(business_id)
        if not business:
            raise ResourceNotFoundError("Business", business_id)

        debt = await self.repository.insert_debt(
            agent_id=agent_id,
            business_id=business_id,
            amount=amount,
            collection_type=collection_type,
            created_at=self.clock()
        )
        await self.repository.commit()

        logger.info(
            "Debt recorded",
            extra={
                "agent_id": agent_id,
                "business_id": business_id,
                "amount": str(amount),
                "collection_type": collection_type.value,
            }
        )

        return RecordedDebt(
            id=debt.id,
            agent_id=debt.agent_id,
            business_id=debt.business_id,
            business_name=business.display_name(self.display_locale),
            amount=amount,
            type=collection_type,
            created_at=debt.created_at,
        )
