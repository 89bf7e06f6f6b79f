"""
User database model.

Accountants (ADMIN) and field agents (AGENT) both authenticate as users.
"""

from sqlalchemy import Column, String, Boolean, DateTime, Enum
from sqlalchemy.sql import func
from greenpages.app.db.session import Base
from greenpages.app.models.base import generate_id
from greenpages.app.models.enums import UserRole


class User(Base):
    """
    User model for authentication and role checks.

    Password handling lives in the identity service; this service only
    needs to know that a user exists, is active, and which role it holds.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
