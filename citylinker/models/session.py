"""ORM model for server-side login sessions keyed by an opaque cookie token."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from citylinker.models.base import Base


class UserSession(Base):
    __tablename__ = "sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
