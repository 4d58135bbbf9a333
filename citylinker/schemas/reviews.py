"""Schemas for reviews."""

from datetime import datetime

from pydantic import Field

from citylinker.schemas.auth import UnknownUser, UserPublic
from citylinker.schemas.base import ApiModel

RATING_MIN = 1
RATING_MAX = 5


class ReviewCreate(ApiModel):
    """Body of POST /publications/{id}/reviews; publication and author come from path and session."""

    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    comment: str | None = Field(default=None, max_length=2000)


class ReviewOut(ApiModel):
    id: int
    user_id: int
    publication_id: int
    rating: int
    comment: str | None = None
    created_at: datetime


class ReviewWithUser(ReviewOut):
    user: UserPublic | UnknownUser
