"""
Business database models.

Only the parts of a directory listing the finance ledger reads: identity
and translated display names.
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from greenpages.app.db.session import Base
from greenpages.app.models.base import generate_id

UNKNOWN_BUSINESS_NAME = "Unknown"


class Business(Base):
    """Directory listing that pays subscriptions and ads through agents."""
    __tablename__ = "businesses"

    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    translations = relationship(
        "BusinessTranslation",
        back_populates="business",
        lazy="raise",
        order_by="BusinessTranslation.locale",
    )

    def display_name(self, locale: str) -> str:
        """Name in the given locale, or "Unknown" when it has no translation."""
        for translation in self.translations:
            if translation.locale == locale:
                return translation.name
        return UNKNOWN_BUSINESS_NAME

    def __repr__(self):
        return f"<Business(id={self.id})>"


class BusinessTranslation(Base):
    """Localised business name."""
    __tablename__ = "business_translations"
    __table_args__ = (
        UniqueConstraint("business_id", "locale", name="uq_business_translation_locale"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    business_id = Column(String(36), ForeignKey('businesses.id'), nullable=False, index=True)
    locale = Column(String(10), nullable=False)
    name = Column(String(255), nullable=False)

    business = relationship("Business", back_populates="translations")

    def __repr__(self):
        return f"<BusinessTranslation(business_id={self.business_id}, locale='{self.locale}')>"
