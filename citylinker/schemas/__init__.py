"""Pydantic request/response schemas."""

from citylinker.schemas.auth import (
    AdminUserUpdate,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UnknownUser,
    UserPublic,
    UserResponse,
)
from citylinker.schemas.base import ApiModel, MessageResponse
from citylinker.schemas.catalog import (
    CategoryCreate,
    CategoryOut,
    CategoryWithCount,
    PublicationCreate,
    PublicationOut,
    PublicationUpdate,
    PublicationWithDetails,
    StatusUpdate,
)
from citylinker.schemas.health import HealthResponse
from citylinker.schemas.reviews import ReviewCreate, ReviewOut, ReviewWithUser
from citylinker.schemas.stats import AdminStats, BusinessStats

__all__ = [
    "AdminStats",
    "AdminUserUpdate",
    "ApiModel",
    "BusinessStats",
    "CategoryCreate",
    "CategoryOut",
    "CategoryWithCount",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ProfileUpdate",
    "PublicationCreate",
    "PublicationOut",
    "PublicationUpdate",
    "PublicationWithDetails",
    "RegisterRequest",
    "ReviewCreate",
    "ReviewOut",
    "ReviewWithUser",
    "StatusUpdate",
    "UnknownUser",
    "UserPublic",
    "UserResponse",
]
