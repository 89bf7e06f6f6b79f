"""
Agent Debt database model.

Immutable record of cash collected by an agent on behalf of the platform.
"""

from sqlalchemy import Column, String, Numeric, ForeignKey, DateTime, Enum, CheckConstraint, Index
from sqlalchemy.orm import relationship
from greenpages.app.db.session import Base
from greenpages.app.models.base import generate_id, utcnow
from greenpages.app.models.finance_enums import CollectionType


class AgentDebt(Base):
    """
    Agent Debt model.

    Append-only: amount is always positive and rows are never updated or
    deleted. An agent's balance is derived from these rows, never stored.
    """
    __tablename__ = "agent_debts"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_agent_debts_amount_positive"),
        Index("ix_agent_debts_agent_created", "agent_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)

    # Linkage
    agent_id = Column(String(36), ForeignKey('agents.id'), nullable=False, index=True)
    business_id = Column(String(36), ForeignKey('businesses.id'), nullable=False, index=True)

    # Financials
    amount = Column(Numeric(12, 2, asdecimal=True), nullable=False)
    type = Column(Enum(CollectionType), nullable=False)

    # Timestamps (Immutable - no updated_at)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    business = relationship("Business", lazy="raise")

    def __repr__(self):
        return f"<AgentDebt(id={self.id}, type='{self.type.value}', amount={self.amount})>"
