"""
User profile model

Mirrors the identity of a signed-in user. Profiles are deactivated, never
hard-deleted, because HR and accounting rows keep referring to them.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from backoffice.db.base import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    ACCOUNTANT = "accountant"
    PURCHASER = "purchaser"
    WORKER = "worker"


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    # Primary role shown on HR screens; authorization reads user_roles
    role = Column(String, nullable=False, default=Role.WORKER.value)
    position = Column(String, nullable=True)
    department = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    # Relationships
    role_assignments = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")
