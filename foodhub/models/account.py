from sqlalchemy import Column, String, Boolean, DateTime, Enum as SQLEnum
import uuid
from datetime import datetime
import enum
from foodhub.database import Base


class AccountRole(str, enum.Enum):
    ADMIN = "admin"
    SERVICE = "service"  # Backend-to-backend callers such as the customer web app


class Account(Base):
    """Principal allowed to operate on cart items through the API."""
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(SQLEnum(AccountRole), default=AccountRole.SERVICE, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
