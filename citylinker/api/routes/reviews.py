"""Review endpoints nested under a publication."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from citylinker.api.routes.auth import require_client
from citylinker.api.routes.publications import PUBLICATION_NOT_FOUND
from citylinker.core.errors import ApiError
from citylinker.models import Review, User
from citylinker.schemas.reviews import ReviewCreate, ReviewOut, ReviewWithUser
from citylinker.services.storage import DatabaseStorage, get_storage

router = APIRouter()


@router.get("/{publication_id}/reviews", response_model=list[ReviewWithUser])
def list_reviews(
    publication_id: int,
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> list[ReviewWithUser]:
    """Reviews of a publication with their authors, newest first."""
    return storage.get_reviews_by_publication(publication_id)


@router.post(
    "/{publication_id}/reviews",
    response_model=ReviewOut,
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    publication_id: int,
    body: ReviewCreate,
    user: Annotated[User, Depends(require_client)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> Review:
    """Rate a publication (clients only). Repeat reviews are allowed."""
    if storage.get_publication(publication_id) is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, PUBLICATION_NOT_FOUND)
    return storage.create_review(
        {**body.model_dump(), "user_id": user.id, "publication_id": publication_id}
    )
