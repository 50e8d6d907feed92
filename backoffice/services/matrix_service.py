"""
Role-permission matrix service

The matrix is saved whole: every (role, feature) cell the editor shows,
including false cells, replaces the grid in one transaction. The grid spans
the active features, so rows of deactivated features are left alone and
come back unchanged when the feature is reactivated.
"""
from typing import Dict, Iterable, List, Mapping

from sqlalchemy.orm import Session

from backoffice.constants import ALL_ROLES
from backoffice.core.exceptions import ValidationError
from backoffice.models.profile import Role
from backoffice.models.role_permission import RolePermission
from backoffice.schemas.permission import RolePermissionRecord
from backoffice.services.feature_service import active_feature_codes, known_feature_codes
from backoffice.services.override_store import replace_scope


def load_matrix(db: Session) -> Dict[str, Dict[str, bool]]:
    """
    {role: {feature_code: can_access}} over active features.

    Cells without a row read as False.
    """
    codes = active_feature_codes(db)
    matrix = {role: {code: False for code in codes} for role in ALL_ROLES}
    for role, code, can_access in db.query(
        RolePermission.role, RolePermission.feature_code, RolePermission.can_access
    ):
        if role in matrix and code in matrix[role]:
            matrix[role][code] = bool(can_access)
    return matrix


def list_role_permissions(db: Session) -> List[RolePermission]:
    """Raw rows, explicit false rows included."""
    return (
        db.query(RolePermission)
        .order_by(RolePermission.role.asc(), RolePermission.feature_code.asc())
        .all()
    )


def build_matrix_records(
    feature_codes: Iterable[str],
    grid: Mapping[str, Mapping[str, bool]],
) -> List[RolePermissionRecord]:
    """One record per (role, feature); cells missing from the grid are False."""
    codes = list(feature_codes)
    return [
        RolePermissionRecord(
            role=Role(role),
            feature_code=code,
            can_access=bool(grid.get(role, {}).get(code, False)),
        )
        for role in ALL_ROLES
        for code in codes
    ]


def replace_role_permissions(
    db: Session,
    records: List[RolePermissionRecord],
    actor_id: int,
) -> int:
    """
    Replace the active part of the matrix with `records`.

    Rows are deleted for every active feature and every feature named in
    `records`; rows of other inactive features are kept.

    Raises:
        ValidationError: no records, an unknown feature code or a duplicated cell
    """
    if not records:
        raise ValidationError(
            "Feature matrix is empty",
            errors=[{"loc": ["records"], "msg": "At least one cell is required"}],
        )
    known = known_feature_codes(db)
    seen = set()
    errors = []
    for index, record in enumerate(records):
        key = (record.role.value, record.feature_code)
        if record.feature_code not in known:
            errors.append({"loc": ["records", index, "feature_code"], "msg": f"Unknown feature '{record.feature_code}'"})
        elif key in seen:
            errors.append({"loc": ["records", index], "msg": f"Duplicate cell {key[0]}/{key[1]}"})
        seen.add(key)
    if errors:
        raise ValidationError("Invalid feature matrix", errors=errors)

    scope_codes = set(active_feature_codes(db)) | {r.feature_code for r in records}
    granted = sum(1 for r in records if r.can_access)
    return replace_scope(
        db,
        RolePermission,
        [RolePermission.feature_code.in_(scope_codes)],
        [
            {"role": r.role.value, "feature_code": r.feature_code, "can_access": r.can_access}
            for r in records
        ],
        actor_id=actor_id,
        entity_type="role_permissions",
        meta={"cells": len(records), "granted": granted},
    )
