"""
Dependencies and guards for FastAPI endpoints
"""
from typing import Dict, Generator

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from backoffice.core.exceptions import AuthRequired, Forbidden
from backoffice.core.security import decode_token, token_expiry
from backoffice.db.session import SessionLocal
from backoffice.models.profile import Profile
from backoffice.services.authorization_session import AuthorizationSession, SessionState, registry


security = HTTPBearer(auto_error=False)


def get_db() -> Generator:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_token_payload(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Dict:
    """Decoded bearer token; must carry both 'sub' and 'sid'"""
    if credentials is None:
        raise AuthRequired()
    try:
        payload = decode_token(credentials.credentials)
    except ValueError:
        raise AuthRequired("Invalid authentication credentials")
    if payload.get("sub") is None or payload.get("sid") is None:
        raise AuthRequired("Invalid authentication credentials")
    return payload


async def get_current_user(
    payload: Dict = Depends(get_token_payload),
    db: Session = Depends(get_db)
) -> Profile:
    """
    Get current authenticated user from JWT token
    """
    try:
        user_id = int(payload["sub"])
    except (ValueError, TypeError):
        raise AuthRequired("Invalid authentication credentials")

    if registry.is_closed(payload["sid"]):
        raise AuthRequired("Session has ended, please sign in again")

    user = db.query(Profile).filter(Profile.id == user_id).first()
    if user is None:
        raise AuthRequired("User not found")

    if not user.is_active:
        raise Forbidden("Inactive user")

    return user


async def get_authorization(
    payload: Dict = Depends(get_token_payload),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AuthorizationSession:
    """
    The caller's authorization session.

    A token issued before a restart gets a fresh session; a session that was
    invalidated or belongs to someone else is reloaded before use.
    """
    sid = payload["sid"]
    session = registry.get(sid)
    if session is None:
        return registry.open(sid, db, current_user.id, expires_at=token_expiry(payload))
    if session.user_id != current_user.id or session.state is not SessionState.READY:
        session.on_auth_state_change(db, current_user.id)
    return session


async def require_admin(
    current_user: Profile = Depends(get_current_user),
    authz: AuthorizationSession = Depends(get_authorization),
) -> Profile:
    """Admin-only screens"""
    if not authz.is_admin:
        raise Forbidden("Access denied. Admin role required.")
    return current_user


def require_feature(feature_code: str):
    """
    Dependency factory for feature-gated endpoints

    Usage:
        @router.get("/payroll")
        async def payroll(user: Profile = Depends(require_feature("payroll.view"))):
            ...
    """
    async def feature_checker(
        current_user: Profile = Depends(get_current_user),
        authz: AuthorizationSession = Depends(get_authorization),
    ) -> Profile:
        if not authz.has_permission(feature_code):
            raise Forbidden(f"Access denied. Feature '{feature_code}' is not enabled for you.")
        return current_user
    return feature_checker
