"""Closed enumerations shared by ORM columns and API schemas."""

import enum


class UserRole(str, enum.Enum):
    CLIENT = "client"
    BUSINESS = "business"
    ADMIN = "admin"


class PublicationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PublicationType(str, enum.Enum):
    ANNOUNCEMENT = "announcement"
    SERVICE = "service"
    ARTICLE = "article"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum values (not member names) in the database."""
    return [member.value for member in enum_cls]
