"""
Per-user feature visibility model

Sparse: only can_view = true rows are written.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from backoffice.db.base import Base


class UserFeatureVisibility(Base):
    __tablename__ = "user_feature_visibility"

    user_id = Column(Integer, ForeignKey("profiles.id"), primary_key=True)
    feature_code = Column(String, ForeignKey("features.code"), primary_key=True)
    can_view = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
