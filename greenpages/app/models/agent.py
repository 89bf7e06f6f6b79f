"""
Agent database model.

A field collector who gathers cash payments from businesses.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from greenpages.app.db.session import Base
from greenpages.app.models.base import generate_id


class Agent(Base):
    """
    Agent model.

    Read-only from the ledger's perspective, except for ledger_version:
    every settlement bumps it as the first write of its transaction, which
    serialises settlements for the same agent.
    """
    __tablename__ = "agents"

    id = Column(String(36), primary_key=True, default=generate_id)
    employee_code = Column(String(50), unique=True, index=True, nullable=False)
    user_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Settlement serialisation token
    ledger_version = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", lazy="raise")

    def __repr__(self):
        return f"<Agent(id={self.id}, code='{self.employee_code}', active={self.is_active})>"
