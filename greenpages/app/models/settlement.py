"""
Settlement database model.

Immutable record of an agent handing collected cash to an accountant.
"""

from sqlalchemy import Column, String, Numeric, ForeignKey, DateTime, Text, CheckConstraint, Index
from greenpages.app.db.session import Base
from greenpages.app.models.base import generate_id, utcnow


class Settlement(Base):
    """
    Settlement model.

    Append-only. At creation time amount never exceeds the agent's balance,
    so the sum of an agent's settlements never exceeds the sum of its debts.
    """
    __tablename__ = "settlements"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_settlements_amount_positive"),
        Index("ix_settlements_agent_created", "agent_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)

    # Parties
    agent_id = Column(String(36), ForeignKey('agents.id'), nullable=False, index=True)
    accountant_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)

    # Financials
    amount = Column(Numeric(12, 2, asdecimal=True), nullable=False)
    notes = Column(Text, nullable=True)

    # Timestamps (Immutable - no updated_at)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Settlement(id={self.id}, agent_id={self.agent_id}, amount={self.amount})>"
