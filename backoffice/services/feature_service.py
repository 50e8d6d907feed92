"""
Feature catalog service
"""
import re
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from backoffice.constants import FEATURE_CODE_PATTERN
from backoffice.core.exceptions import Conflict, NotFound, ValidationError
from backoffice.models.feature import Feature
from backoffice.schemas.feature import FeatureCreate, FeatureUpdate
from backoffice.services.audit_service import log_audit

_CODE_RE = re.compile(FEATURE_CODE_PATTERN)


def list_active_features(db: Session) -> List[Dict[str, str]]:
    """Active features as {code, name, category}, ordered by category then name."""
    rows = (
        db.query(Feature.code, Feature.name, Feature.category)
        .filter(Feature.is_active.is_(True))
        .order_by(Feature.category.asc(), Feature.name.asc())
        .all()
    )
    return [{"code": code, "name": name, "category": category} for code, name, category in rows]


def active_feature_codes(db: Session) -> List[str]:
    return [f["code"] for f in list_active_features(db)]


def known_feature_codes(db: Session) -> set:
    """Every code in the catalog, active or not."""
    return {code for (code,) in db.query(Feature.code).all()}


def list_features(db: Session, active_only: Optional[bool] = True) -> List[Feature]:
    query = db.query(Feature)
    if active_only is not None:
        query = query.filter(Feature.is_active == active_only)
    return query.order_by(Feature.category.asc(), Feature.name.asc()).all()


def get_feature(db: Session, code: str) -> Optional[Feature]:
    return db.query(Feature).filter(Feature.code == code).first()


def create_feature(db: Session, feature_data: FeatureCreate, actor_id: int) -> Feature:
    """
    Add a feature to the catalog.

    Codes are lowercase dotted identifiers and unique.
    """
    if not _CODE_RE.match(feature_data.code):
        raise ValidationError.for_field(
            "code", f"Feature code '{feature_data.code}' must look like 'area.action'"
        )
    if get_feature(db, feature_data.code):
        raise Conflict(f"Feature with code '{feature_data.code}' already exists")

    feature = Feature(
        code=feature_data.code,
        name=feature_data.name,
        category=feature_data.category,
        description=feature_data.description,
        is_active=feature_data.is_active,
    )
    db.add(feature)
    db.commit()
    db.refresh(feature)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="CREATE",
        entity_type="feature",
        entity_id=feature.id,
        meta=feature_data,
    )
    return feature


def update_feature(db: Session, code: str, feature_data: FeatureUpdate, actor_id: int) -> Feature:
    """Update a feature; the code itself never changes."""
    feature = get_feature(db, code)
    if not feature:
        raise NotFound(f"Feature '{code}' not found")

    update_dict = feature_data.model_dump(exclude_unset=True)
    for field in ("name", "category", "description", "is_active"):
        if field in update_dict and update_dict[field] is not None:
            setattr(feature, field, update_dict[field])

    db.commit()
    db.refresh(feature)

    log_audit(
        db=db,
        actor_id=actor_id,
        action="UPDATE",
        entity_type="feature",
        entity_id=feature.id,
        meta=update_dict,
    )
    return feature
