"""User profile model."""

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from typing import Optional
import enum

from .base import Base, new_uuid


class UserRole(str, enum.Enum):
    """Profile role."""
    ADMIN = "admin"
    AGENT = "agent"
    USER = "user"


class UserStatus(str, enum.Enum):
    """Profile presence status."""
    ONLINE = "online"
    OFFLINE = "offline"
    AWAY = "away"


class Profile(Base):
    """Application user; customers, agents and CRM owners are all profiles."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    avatar: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value, index=True)
    status: Mapped[str] = mapped_column(String(20), default=UserStatus.OFFLINE.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email})>"
