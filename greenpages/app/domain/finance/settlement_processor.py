"""
Settlement Processor.

Records an agent handing collected cash to an accountant. The balance check
and the insert run in one transaction that starts by claiming the agent row,
so two settlements for the same agent can never both pass the check against
the same balance.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from greenpages.app.core.exceptions import InvalidOperationError, ResourceNotFoundError
from greenpages.app.domain.finance.balance_calculator import BalanceCalculator
from greenpages.app.domain.finance.money import AmountLike, require_positive_amount
from greenpages.app.domain.finance.repository import FinanceRepository
from greenpages.app.models.base import utcnow
from greenpages.app.models.settlement import Settlement

logger = logging.getLogger(__name__)


class SettlementProcessor:

    def __init__(
        self,
        repository: FinanceRepository,
        balance_calculator: BalanceCalculator = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.repository = repository
        self.balance_calculator = balance_calculator or BalanceCalculator(repository)
        self.clock = clock

    async def process_settlement(
        self,
        agent_id: str,
        accountant_id: str,
        amount: AmountLike,
        notes: Optional[str] = None
    ) -> Settlement:
        """
        Settle part or all of an agent's outstanding balance.

        Flow:
        1. Validate amount and accountant
        2. Claim the agent row (first write of the transaction)
        3. Re-aggregate the balance inside the transaction
        4. Reject if amount > balance, otherwise insert and commit

        Raises:
            ResourceNotFoundError: agent or accountant does not exist
            InvalidOperationError: amount is not positive or exceeds the balance
        """
        amount = require_positive_amount(amount)

        accountant = await self.repository.find_user(accountant_id)
        if not accountant:
            raise ResourceNotFoundError("Accountant", accountant_id)

        if not await self.repository.lock_agent_ledger(agent_id):
            await self.repository.rollback()
            raise ResourceNotFoundError("Agent", agent_id)

        try:
            summary = await self.balance_calculator.summarize(agent_id)

            if amount > summary.current_balance:
                logger.warning(
                    "Settlement rejected",
                    extra={
                        "agent_id": agent_id,
                        "offered": str(amount),
                        "available": str(summary.current_balance),
                    }
                )
                raise InvalidOperationError(
                    f"Settlement amount ({amount}) exceeds current debt balance ({summary.current_balance})",
                    details={
                        "agent_id": agent_id,
                        "offered": str(amount),
                        "available": str(summary.current_balance),
                    }
                )

            settlement = await self.repository.insert_settlement(
                agent_id=agent_id,
                accountant_id=accountant_id,
                amount=amount,
                notes=notes,
                created_at=self.clock()
            )
            await self.repository.commit()
        except InvalidOperationError:
            await self.repository.rollback()
            raise

        logger.info(
            "Settlement processed",
            extra={
                "agent_id": agent_id,
                "accountant_id": accountant_id,
                "amount": str(amount),
                "balance_after": str(summary.current_balance - amount),
            }
        )
        return settlement
