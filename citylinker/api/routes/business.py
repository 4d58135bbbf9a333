"""Business-owner dashboard: own publications and stats."""

from typing import Annotated

from fastapi import APIRouter, Depends

from citylinker.api.routes.auth import require_business
from citylinker.models import User
from citylinker.schemas.catalog import PublicationWithDetails
from citylinker.schemas.stats import BusinessStats
from citylinker.services.storage import DatabaseStorage, get_storage

router = APIRouter()


@router.get("/publications", response_model=list[PublicationWithDetails])
def my_publications(
    user: Annotated[User, Depends(require_business)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> list[PublicationWithDetails]:
    """All of the caller's publications, whatever their status."""
    return storage.get_publications_by_user(user.id)


@router.get("/stats", response_model=BusinessStats)
def my_stats(
    user: Annotated[User, Depends(require_business)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> BusinessStats:
    """Views, moderation counts and rating aggregate over the caller's publications."""
    return storage.get_business_stats(user.id)
