"""
Role-permission matrix model

One row per (role, feature). Unlike user visibility, explicit false rows are
stored; a missing row still means no access.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from backoffice.db.base import Base


class RolePermission(Base):
    __tablename__ = "role_permissions"

    role = Column(String, primary_key=True)
    feature_code = Column(String, ForeignKey("features.code"), primary_key=True)
    can_access = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
