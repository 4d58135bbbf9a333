"""Schemas for categories, publications and their enriched read models."""

from datetime import datetime

from pydantic import Field

from citylinker.models.enums import PublicationStatus, PublicationType
from citylinker.schemas.auth import UnknownUser, UserPublic
from citylinker.schemas.base import ApiModel
from citylinker.schemas.reviews import ReviewOut


class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=2, max_length=255)
    icon: str = Field(..., min_length=1, max_length=64)
    description: str | None = None


class CategoryOut(ApiModel):
    id: int
    name: str
    icon: str
    description: str | None = None


class CategoryWithCount(CategoryOut):
    """Category plus the number of its approved publications."""

    count: int = 0


class PublicationContent(ApiModel):
    """Optional listing fields editable on create and update."""

    slug: str | None = Field(default=None, max_length=255)
    content: str | None = None
    image: str | None = Field(default=None, max_length=1024)
    price: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)


class PublicationCreate(PublicationContent):
    """New listing from a business. Owner comes from the session; status is always pending."""

    category_id: int = Field(..., ge=1)
    type: PublicationType
    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10)


class PublicationUpdate(PublicationContent):
    """
    Partial edit. Owner and category are fixed at creation.

    status and rejection_reason are honoured for admins only; any other
    editor's change puts the publication back to pending.
    """

    type: PublicationType | None = None
    title: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = Field(default=None, min_length=10)
    # Checked against PublicationStatus in the route, for admin editors only.
    status: str | None = None
    rejection_reason: str | None = None


class StatusUpdate(ApiModel):
    """Moderation decision. status is checked against approved/rejected in the route."""

    status: str
    rejection_reason: str | None = None


class PublicationOut(PublicationContent):
    id: int
    user_id: int
    category_id: int
    type: PublicationType
    title: str
    description: str
    status: PublicationStatus
    rejection_reason: str | None = None
    views: int
    created_at: datetime
    updated_at: datetime


class PublicationWithDetails(PublicationOut):
    """Publication joined with its owner, category and review aggregate."""

    user: UserPublic | UnknownUser
    category: CategoryOut | None = None
    reviews: list[ReviewOut] = []
    average_rating: float = 0.0
    review_count: int = 0
