"""
Finance Schemas.

Request validation and response shapes for the finance endpoints.
Amounts are Decimals internally and JSON numbers on the wire.
"""

from pydantic import BaseModel, Field, PlainSerializer
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional, List
from greenpages.app.models.finance_enums import CollectionType, LedgerEntryKind

# Decimal in, float out: the dashboard consumes plain numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class AgentDebtCreate(BaseModel):
    """Schema for recording a cash collection."""
    agent_id: str = Field(..., min_length=1, max_length=36)
    business_id: str = Field(..., min_length=1, max_length=36)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Collected amount")
    type: CollectionType


class SettlementCreate(BaseModel):
    """Schema for settling agent debt. The accountant is the authenticated caller."""
    agent_id: str = Field(..., min_length=1, max_length=36)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Settled amount")
    notes: Optional[str] = Field(None, max_length=1000)


class AgentDebtResponse(BaseModel):
    """Schema for a recorded debt."""
    id: str
    agent_id: str
    business_id: str
    business_name: str
    amount: Money
    type: CollectionType
    created_at: datetime

    class Config:
        from_attributes = True


class SettlementResponse(BaseModel):
    """Schema for a settlement."""
    id: str
    agent_id: str
    accountant_id: str
    amount: Money
    notes: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class DebtSummaryResponse(BaseModel):
    """Schema for an agent's derived balance."""
    agent_id: str
    total_debt: Money
    debt_count: int
    total_settlements: Money
    current_balance: Money

    class Config:
        from_attributes = True


class LedgerEntryResponse(BaseModel):
    """Schema for one ledger row."""
    id: str
    type: LedgerEntryKind
    amount: Money
    balance: Money
    business_id: Optional[str] = None
    business_name: Optional[str] = None
    collection_type: Optional[CollectionType] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AgentUserSummary(BaseModel):
    id: str
    email: str

    class Config:
        from_attributes = True


class AgentWithDebtResponse(BaseModel):
    """Schema for the admin overview of agents."""
    id: str
    employee_code: str
    user_id: str
    user: AgentUserSummary
    debt_summary: DebtSummaryResponse


class AgentWithDebtListResponse(BaseModel):
    agents: List[AgentWithDebtResponse]
    total: int
