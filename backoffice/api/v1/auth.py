"""
Authentication endpoints
"""
import logging
from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.core.deps import get_db, get_token_payload, get_current_user, get_authorization
from backoffice.core.exceptions import AuthRequired, Forbidden
from backoffice.core.security import verify_password, create_access_token, new_session_id, token_expiry
from backoffice.models.profile import Profile, Role
from backoffice.schemas.auth import LoginRequest, TokenResponse, SessionOut
from backoffice.services.audit_service import log_audit
from backoffice.services.authorization_session import AuthorizationSession, registry
from backoffice.services.role_service import get_user_roles

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token

    Opens a new authorization session for the token's session id.
    """
    user = db.query(Profile).filter(Profile.email == login_data.email.strip().lower()).first()

    if not user or not verify_password(login_data.password, user.password_hash):
        raise AuthRequired("Invalid email or password")

    if not user.is_active:
        raise Forbidden("Account is inactive")

    sid = new_session_id()
    registry.open(sid, db, user.id)

    access_token = create_access_token(data={
        "sub": str(user.id),
        "sid": sid,
        "email": user.email,
        "role": user.role,
    })

    # Audit failure must not block sign-in
    try:
        log_audit(
            db=db,
            actor_id=user.id,
            action="AUTH_LOGIN_SUCCESS",
            entity_type="auth",
            meta={"email": user.email},
        )
    except Exception as e:
        db.rollback()
        logger.warning("Failed to log audit for login: %s", e)

    return TokenResponse(access_token=access_token, token_type="bearer")


@router.post("/logout", status_code=204)
async def logout(
    payload: Dict = Depends(get_token_payload),
    current_user: Profile = Depends(get_current_user),
):
    """Tear down the caller's authorization session; the token stops working."""
    registry.close(payload["sid"], expires_at=token_expiry(payload))
    logger.info("User %s signed out", current_user.id)


@router.get("/me", response_model=SessionOut)
async def me(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
    authz: AuthorizationSession = Depends(get_authorization),
):
    """Current user with the cached authorization state"""
    return SessionOut(
        user_id=current_user.id,
        full_name=current_user.full_name,
        email=current_user.email,
        role=Role(current_user.role),
        roles=get_user_roles(db, current_user.id),
        is_admin=authz.is_admin,
        state=authz.state.value,
        visible_features=sorted(authz.visible_features),
    )
