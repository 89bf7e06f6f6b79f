"""
Finance API Endpoints.

Agent cash collections, settlements, balances and ledgers.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from greenpages.app.core.exceptions import InvalidOperationError
from greenpages.app.core.guards import require_role
from greenpages.app.db.session import get_db
from greenpages.app.domain.finance.service import FinanceService
from greenpages.app.models.enums import UserRole
from greenpages.app.schemas.finance import (
    AgentDebtCreate,
    AgentDebtResponse,
    SettlementCreate,
    SettlementResponse,
    DebtSummaryResponse,
    LedgerEntryResponse,
    AgentUserSummary,
    AgentWithDebtResponse,
    AgentWithDebtListResponse,
)

router = APIRouter(prefix="/finance", tags=["Finance"])


def get_finance_service(db: AsyncSession = Depends(get_db)) -> FinanceService:
    return FinanceService.for_session(db)


def _check_date_range(start_date: Optional[datetime], end_date: Optional[datetime]):
    if start_date and end_date and start_date > end_date:
        raise InvalidOperationError(
            "start_date must not be after end_date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()}
        )


@router.post("/debts", response_model=AgentDebtResponse, status_code=status.HTTP_201_CREATED)
async def record_collection(
    debt: AgentDebtCreate,
    current_user: dict = Depends(require_role([UserRole.ADMIN, UserRole.AGENT])),
    service: FinanceService = Depends(get_finance_service)
):
    """
    Record cash collected from a business as agent debt.
    """
    recorded = await service.record_collection(
        agent_id=debt.agent_id,
        business_id=debt.business_id,
        amount=debt.amount,
        collection_type=debt.type
    )
    return AgentDebtResponse.model_validate(recorded)


@router.post("/settlements", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def process_settlement(
    settlement: SettlementCreate,
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    service: FinanceService = Depends(get_finance_service)
):
    """
    Settle agent debt (Admin/accountant only).

    Rejected with 400 if the amount exceeds the agent's current balance.
    """
    created = await service.process_settlement(
        agent_id=settlement.agent_id,
        accountant_id=current_user["user_id"],
        amount=settlement.amount,
        notes=settlement.notes
    )
    return SettlementResponse.model_validate(created)


@router.get("/agents/{agent_id}/debt", response_model=DebtSummaryResponse)
async def get_agent_debt(
    agent_id: str,
    current_user: dict = Depends(require_role([UserRole.ADMIN, UserRole.AGENT])),
    service: FinanceService = Depends(get_finance_service)
):
    """
    Get an agent's current debt summary.
    """
    summary = await service.get_agent_debt(agent_id)
    return DebtSummaryResponse.model_validate(summary)


@router.get("/agents/{agent_id}/ledger", response_model=List[LedgerEntryResponse])
async def get_agent_ledger(
    agent_id: str,
    start_date: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end_date: Optional[datetime] = Query(None, description="Inclusive upper bound"),
    current_user: dict = Depends(require_role([UserRole.ADMIN, UserRole.AGENT])),
    service: FinanceService = Depends(get_finance_service)
):
    """
    Get an agent's chronological ledger with a running balance.

    The running balance restarts at zero at the start of the requested window.
    """
    _check_date_range(start_date, end_date)
    entries = await service.get_agent_ledger(agent_id, start_date, end_date)
    return [LedgerEntryResponse.model_validate(entry) for entry in entries]


@router.get("/agents/{agent_id}/settlements", response_model=List[SettlementResponse])
async def get_settlement_history(
    agent_id: str,
    start_date: Optional[datetime] = Query(None, description="Inclusive lower bound"),
    end_date: Optional[datetime] = Query(None, description="Inclusive upper bound"),
    current_user: dict = Depends(require_role([UserRole.ADMIN, UserRole.AGENT])),
    service: FinanceService = Depends(get_finance_service)
):
    """
    Get an agent's settlements, newest first.
    """
    _check_date_range(start_date, end_date)
    settlements = await service.get_settlement_history(agent_id, start_date, end_date)
    return [SettlementResponse.model_validate(s) for s in settlements]


@router.get("/agents", response_model=AgentWithDebtListResponse)
async def get_all_agents_with_debt(
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    service: FinanceService = Depends(get_finance_service)
):
    """
    List all active agents with their debt summaries (Admin only).
    """
    overview = await service.get_all_agents_with_debt()
    agents = [
        AgentWithDebtResponse(
            id=item.agent.id,
            employee_code=item.agent.employee_code,
            user_id=item.agent.user_id,
            user=AgentUserSummary.model_validate(item.agent.user),
            debt_summary=DebtSummaryResponse.model_validate(item.debt_summary)
        )
        for item in overview
    ]
    return AgentWithDebtListResponse(agents=agents, total=len(agents))
