"""
Authorization session: the per-sign-in cache of what a user may see

One AuthorizationSession exists per signed-in session (the token's 'sid').
It is created at sign-in, torn down at sign-out, and answers
has_permission() from its cache without touching the database.

Loads are numbered. A load only lands if no newer load (or sign-out) was
started after it, so a slow load for a previous user can never overwrite
the cache of the current one.
"""
import enum
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, FrozenSet, Iterable, List, Optional

from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.services.permission_resolver import (
    PermissionResolver,
    ResolvedPermissions,
    get_permission_resolver,
)

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class LoadTicket:
    generation: int
    user_id: int


class AuthorizationSession:
    def __init__(self, resolver: Optional[PermissionResolver] = None):
        self._resolver = resolver or get_permission_resolver()
        self._lock = threading.Lock()
        self._generation = 0
        self._state = SessionState.UNINITIALIZED
        self._user_id: Optional[int] = None
        self._resolved: Optional[ResolvedPermissions] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user_id(self) -> Optional[int]:
        return self._user_id

    @property
    def is_admin(self) -> bool:
        with self._lock:
            return self._state is SessionState.READY and self._resolved is not None and self._resolved.is_admin

    @property
    def visible_features(self) -> FrozenSet[str]:
        with self._lock:
            if self._state is not SessionState.READY or self._resolved is None:
                return frozenset()
            return self._resolved.visible_features

    def begin_load(self, user_id: int) -> LoadTicket:
        """Start a load; every earlier ticket becomes stale."""
        with self._lock:
            self._generation += 1
            self._user_id = user_id
            self._resolved = None
            self._state = SessionState.LOADING
            return LoadTicket(generation=self._generation, user_id=user_id)

    def complete_load(self, ticket: LoadTicket, resolved: ResolvedPermissions) -> bool:
        """Apply a finished load. Returns False if the ticket was superseded."""
        with self._lock:
            if ticket.generation != self._generation:
                logger.debug(
                    "Discarding stale permission load for user %s (generation %d, current %d)",
                    ticket.user_id, ticket.generation, self._generation,
                )
                return False
            self._resolved = resolved
            self._state = SessionState.READY
            return True

    def load(self, db: Session, user_id: int) -> bool:
        ticket = self.begin_load(user_id)
        return self.complete_load(ticket, self._resolver.resolve(db, user_id))

    def sign_out(self) -> None:
        """Back to UNINITIALIZED; loads still in flight will be discarded."""
        with self._lock:
            self._generation += 1
            self._user_id = None
            self._resolved = None
            self._state = SessionState.UNINITIALIZED

    def on_auth_state_change(self, db: Session, user_id: Optional[int]) -> None:
        """Sign-in, sign-out, user switch or token refresh: always reload from scratch."""
        self.sign_out()
        if user_id is not None:
            self.load(db, user_id)

    def has_permission(self, feature_code: str) -> bool:
        with self._lock:
            if self._state is not SessionState.READY or self._resolved is None:
                return False
            return self._resolved.allows(feature_code)


class SessionRegistry:
    """
    Open authorization sessions of this process, keyed by session id.

    Every sid carries the expiry of its token. Open sessions and closed sids
    are dropped once that expiry has passed, since the token itself is
    rejected from then on.
    """

    def __init__(self, resolver: Optional[PermissionResolver] = None):
        self._resolver = resolver
        self._lock = threading.Lock()
        self._sessions: Dict[str, AuthorizationSession] = {}
        self._expires: Dict[str, datetime] = {}
        self._closed: Dict[str, datetime] = {}

    @staticmethod
    def _default_expiry() -> datetime:
        return datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    def _prune_locked(self, now: datetime) -> List[AuthorizationSession]:
        expired = [sid for sid, expires_at in self._expires.items() if expires_at <= now]
        dropped = []
        for sid in expired:
            self._expires.pop(sid, None)
            session = self._sessions.pop(sid, None)
            if session is not None:
                dropped.append(session)
        for sid in [sid for sid, expires_at in self._closed.items() if expires_at <= now]:
            del self._closed[sid]
        return dropped

    def prune(self, now: Optional[datetime] = None) -> int:
        """Forget every sid whose token has expired; returns the sessions dropped."""
        with self._lock:
            dropped = self._prune_locked(now or datetime.now(timezone.utc))
        for session in dropped:
            session.sign_out()
        if dropped:
            logger.debug("Pruned %d expired authorization session(s)", len(dropped))
        return len(dropped)

    def open(
        self,
        sid: str,
        db: Session,
        user_id: int,
        expires_at: Optional[datetime] = None,
    ) -> AuthorizationSession:
        session = AuthorizationSession(self._resolver)
        with self._lock:
            dropped = self._prune_locked(datetime.now(timezone.utc))
            previous = self._sessions.get(sid)
            self._sessions[sid] = session
            self._expires[sid] = expires_at or self._default_expiry()
            self._closed.pop(sid, None)
        for stale in dropped:
            stale.sign_out()
        if previous is not None:
            previous.sign_out()
        session.load(db, user_id)
        return session

    def get(self, sid: str) -> Optional[AuthorizationSession]:
        with self._lock:
            expires_at = self._expires.get(sid)
            if expires_at is not None and expires_at <= datetime.now(timezone.utc):
                self._expires.pop(sid, None)
                session = self._sessions.pop(sid, None)
            else:
                return self._sessions.get(sid)
        if session is not None:
            session.sign_out()
        return None

    def is_closed(self, sid: str) -> bool:
        with self._lock:
            return sid in self._closed

    def close(self, sid: str, expires_at: Optional[datetime] = None) -> bool:
        with self._lock:
            dropped = self._prune_locked(datetime.now(timezone.utc))
            session = self._sessions.pop(sid, None)
            known_expiry = self._expires.pop(sid, None)
            self._closed[sid] = expires_at or known_expiry or self._default_expiry()
        for stale in dropped:
            stale.sign_out()
        if session is None:
            return False
        session.sign_out()
        return True

    def invalidate(self, user_ids: Optional[Iterable[int]] = None) -> int:
        """
        Drop cached permissions so the next request reloads them.

        None invalidates every session (a matrix change touches everyone).
        """
        targets = None if user_ids is None else set(user_ids)
        with self._lock:
            sessions = [
                s for s in self._sessions.values()
                if targets is None or s.user_id in targets
            ]
        for session in sessions:
            session.sign_out()
        if sessions:
            logger.info("Invalidated %d authorization session(s)", len(sessions))
        return len(sessions)

    def clear(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            self._expires.clear()
            self._closed.clear()
        for session in sessions:
            session.sign_out()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


registry = SessionRegistry()
