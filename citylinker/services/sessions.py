"""Server-side session store: opaque cookie token -> user id, with a fixed TTL."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from citylinker.core.config import Settings, get_settings
from citylinker.core.database import get_db
from citylinker.core.security import generate_session_token
from citylinker.models import UserSession

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    Persists login sessions in the `sessions` table.

    Expiry is compared in SQL so it behaves the same on PostgreSQL and SQLite.
    Sessions disappear with their user (ON DELETE CASCADE).
    """

    def __init__(self, db: Session, ttl_hours: int) -> None:
        self.db = db
        self.ttl = timedelta(hours=ttl_hours)

    @classmethod
    def from_settings(cls, db: Session, settings: Settings) -> "SessionStore":
        return cls(db, ttl_hours=settings.SESSION_TTL_HOURS)

    def create(self, user_id: int) -> str:
        """Open a session for user_id and return its token."""
        token = generate_session_token()
        self.db.add(
            UserSession(token=token, user_id=user_id, expires_at=_utcnow() + self.ttl)
        )
        self.db.commit()
        logger.info("Session created", extra={"user_id": user_id})
        return token

    def resolve(self, token: str | None) -> int | None:
        """Return the user id behind a live token; None for missing, unknown or expired tokens."""
        if not token:
            return None
        now = _utcnow()
        row = (
            self.db.query(UserSession)
            .filter(UserSession.token == token, UserSession.expires_at > now)
            .first()
        )
        if row is not None:
            return row.user_id
        expired = (
            self.db.query(UserSession)
            .filter(UserSession.token == token, UserSession.expires_at <= now)
            .delete(synchronize_session=False)
        )
        if expired:
            self.db.commit()
        return None

    def destroy(self, token: str | None) -> None:
        """End a session. Unknown tokens are ignored."""
        if not token:
            return
        deleted = (
            self.db.query(UserSession)
            .filter(UserSession.token == token)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted:
            logger.info("Session destroyed")

    def purge_expired(self) -> int:
        """Delete every expired session. Idempotent: safe to run repeatedly."""
        now = _utcnow()
        deleted_count = (
            self.db.query(UserSession)
            .filter(UserSession.expires_at <= now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted_count > 0:
            logger.info(
                "Session purge: cutoff=%s, sessions_deleted=%s",
                now.isoformat(),
                deleted_count,
            )
        return deleted_count


def get_session_store(db: Annotated[Session, Depends(get_db)]) -> SessionStore:
    """Dependency: session store over the request's DB session."""
    return SessionStore.from_settings(db, get_settings())
