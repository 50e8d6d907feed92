"""
Audit log model
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from backoffice.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    actor_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    action = Column(String, nullable=False)  # e.g., "CREATE", "UPDATE", "REPLACE", "DEACTIVATE"
    entity_type = Column(String, nullable=False)  # e.g., "feature", "role_permissions", "user_visibility"
    entity_id = Column(Integer, nullable=True)
    meta_json = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
