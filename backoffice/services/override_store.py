"""
Full-replace persistence for override tables

Every override editor saves the same way: drop all rows of one scope (a
user, a project, or the whole matrix) and insert the current set. Both steps
and the audit entry run in one transaction, so a failed insert leaves the
previous rows in place.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.core.exceptions import BackendUnavailable, Conflict
from backoffice.services.audit_service import log_audit

logger = logging.getLogger(__name__)


def replace_scope(
    db: Session,
    model,
    scope: Sequence[Any],
    rows: Iterable[Dict[str, Any]],
    *,
    actor_id: int,
    entity_type: str,
    entity_id: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> int:
    """
    Replace every row of `model` matching `scope` with `rows`.

    Args:
        db: Database session
        model: ORM model class of the override table
        scope: SQLAlchemy filter expressions selecting the scope; empty means
            the whole table
        rows: Column values of the rows to insert
        actor_id: Admin performing the save (audit)
        entity_type: Audit entity type
        entity_id: Audit entity id (user or project id)
        meta: Extra audit metadata

    Returns:
        Number of rows inserted

    Raises:
        Conflict: the new rows violate a table constraint
        BackendUnavailable: any other database failure
    """
    objects: List[Any] = [model(**row) for row in rows]
    try:
        deleted = db.query(model).filter(*scope).delete(synchronize_session="fetch")
        db.add_all(objects)
        log_audit(
            db=db,
            actor_id=actor_id,
            action="REPLACE",
            entity_type=entity_type,
            entity_id=entity_id,
            meta={**(meta or {}), "deleted": deleted, "inserted": len(objects)},
            commit=False,
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Replace of %s rejected by constraint: %s", model.__tablename__, e.orig)
        raise Conflict(f"Could not save {entity_type}: conflicting or unknown references")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Replace of %s failed, rolled back: %s", model.__tablename__, e)
        raise BackendUnavailable(f"Could not save {entity_type}")

    logger.info(
        "Replaced %s scope (entity_id=%s): %d deleted, %d inserted",
        model.__tablename__, entity_id, deleted, len(objects),
    )
    return len(objects)
