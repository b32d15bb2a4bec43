"""SQLAlchemy models for company and self-employed accounts."""
from __future__ import annotations

import enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    JSON,
    func,
)

from .session import Base


class AccountKind(str, enum.Enum):
    COMPANY = "company"
    SELF_EMPLOYED = "self-employed"

    @property
    def label(self) -> str:
        return "Company" if self is AccountKind.COMPANY else "Self-employed user"


class Account(Base):
    """Single table for both kinds; `business_email` is unique across all of them."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(32), nullable=False, index=True)
    business_email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    active = Column(Boolean, default=False, nullable=False)
    profile = Column(JSON, default=dict, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_public_dict(self) -> dict:
        data = dict(self.profile or {})
        data.update(
            {
                "business_email": self.business_email,
                "type": self.kind,
                "active": bool(self.active),
            }
        )
        return data
