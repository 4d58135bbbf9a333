"""Request/response schemas for auth, profile and admin user endpoints."""

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field, field_validator

from citylinker.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)
from citylinker.models.enums import UserRole
from citylinker.schemas.base import ApiModel

# Roles a visitor may pick at registration; admins are created by script or promoted.
SELF_SERVICE_ROLES: frozenset[UserRole] = frozenset({UserRole.CLIENT, UserRole.BUSINESS})


class BusinessProfileFields(ApiModel):
    """Optional contact and business profile fields shared by several payloads."""

    phone: str | None = Field(default=None, max_length=50)
    business_name: str | None = Field(default=None, max_length=255)
    business_description: str | None = None
    business_address: str | None = Field(default=None, max_length=512)
    business_phone: str | None = Field(default=None, max_length=50)
    business_website: str | None = Field(default=None, max_length=512)
    business_image: str | None = Field(default=None, max_length=1024)


class RegisterRequest(BusinessProfileFields):
    """Self-service sign-up as a client or a business."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    first_name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    last_name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    role: UserRole

    @field_validator("role")
    @classmethod
    def validate_self_service_role(cls, v: UserRole) -> UserRole:
        if v not in SELF_SERVICE_ROLES:
            raise ValueError("Rôle invalide")
        return v


class LoginRequest(ApiModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class ProfileUpdate(BusinessProfileFields):
    """
    Self-service profile edit. Role, email and verification are not editable here;
    a new password is hashed before it is stored.
    """

    first_name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    password: str | None = Field(default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class AdminUserUpdate(BusinessProfileFields):
    """Admin edit of another account: profile fields, verification and role. Never the password."""

    first_name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    role: UserRole | None = None
    business_verified: bool | None = None


class UserPublic(BusinessProfileFields):
    """User as returned by the API (no password field exists on this model)."""

    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    business_verified: bool
    created_at: datetime
    updated_at: datetime


class UnknownUser(ApiModel):
    """Placeholder for an owner or reviewer whose account row no longer exists."""

    model_config = ConfigDict(extra="forbid")

    first_name: str = "Utilisateur"
    last_name: str = "Inconnu"


class UserResponse(ApiModel):
    """Envelope used by the auth and admin user endpoints."""

    user: UserPublic
