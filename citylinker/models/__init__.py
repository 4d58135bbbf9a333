"""SQLAlchemy ORM models."""

from citylinker.models.base import Base
from citylinker.models.category import Category
from citylinker.models.enums import PublicationStatus, PublicationType, UserRole
from citylinker.models.publication import Publication
from citylinker.models.review import Review
from citylinker.models.session import UserSession
from citylinker.models.user import User

__all__ = [
    "Base",
    "Category",
    "Publication",
    "PublicationStatus",
    "PublicationType",
    "Review",
    "User",
    "UserRole",
    "UserSession",
]
