"""Publication endpoints: public browsing and search, creation by businesses, owner edits."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from citylinker.api.routes.auth import get_current_user, require_business
from citylinker.core.config import get_settings
from citylinker.core.errors import ApiError
from citylinker.models import Publication, PublicationStatus, PublicationType, User, UserRole
from citylinker.schemas.base import MessageResponse
from citylinker.schemas.catalog import (
    PublicationCreate,
    PublicationOut,
    PublicationUpdate,
    PublicationWithDetails,
)
from citylinker.services.storage import ALL_TYPES, DatabaseStorage, get_storage

logger = logging.getLogger(__name__)
router = APIRouter()

PUBLICATION_NOT_FOUND = "Publication non trouvée"
NOT_OWNER = "Non autorisé"
UNKNOWN_CATEGORY = "Catégorie introuvable"
INVALID_STATUS = "Statut invalide"

PUBLICATION_TYPE_VALUES: frozenset[str] = frozenset(t.value for t in PublicationType)
PUBLICATION_STATUS_VALUES: frozenset[str] = frozenset(s.value for s in PublicationStatus)

# NOT NULL columns: an explicit null in a partial update is ignored.
REQUIRED_PUBLICATION_FIELDS = ("type", "title", "description", "status")


def ensure_can_modify(publication: Publication, user: User) -> None:
    """Owner or admin only; raises 403 otherwise."""
    if publication.user_id != user.id and user.role != UserRole.ADMIN:
        raise ApiError(status.HTTP_403_FORBIDDEN, NOT_OWNER)


def moderated_changes(data: dict, editor: User, current_status: PublicationStatus) -> dict:
    """
    Apply the moderation rule to a partial update.

    Admins keep whatever status they send; it must be a known status. Anyone
    else sends the publication back to pending, whatever status they submitted.
    A rejection reason only survives on a rejected publication.
    """
    changes = {
        k: v
        for k, v in data.items()
        if not (k in REQUIRED_PUBLICATION_FIELDS and v is None)
    }
    if editor.role != UserRole.ADMIN:
        changes["status"] = PublicationStatus.PENDING
        changes["rejection_reason"] = None
        return changes

    if "status" in changes:
        if changes["status"] not in PUBLICATION_STATUS_VALUES:
            raise ApiError(status.HTTP_400_BAD_REQUEST, INVALID_STATUS)
        changes["status"] = PublicationStatus(changes["status"])
    if changes.get("status", current_status) != PublicationStatus.REJECTED:
        changes["rejection_reason"] = None
    return changes


def _parse_type(value: str | None) -> str | None:
    if value is None or value == "" or value == ALL_TYPES:
        return None
    if value not in PUBLICATION_TYPE_VALUES:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Type invalide")
    return value


def _parse_category(value: str | None) -> int | None:
    if value is None or value == "" or value == ALL_TYPES:
        return None
    if not (value.isascii() and value.isdigit()):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Catégorie invalide")
    return int(value)


@router.get("", response_model=list[PublicationWithDetails])
def list_publications(
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> list[PublicationWithDetails]:
    """Approved publications, newest first."""
    return storage.get_publications(PublicationStatus.APPROVED)


@router.get("/trending", response_model=list[PublicationWithDetails])
def trending_publications(
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> list[PublicationWithDetails]:
    """Most viewed approved publications."""
    return storage.get_trending_publications(get_settings().TRENDING_LIMIT)


@router.get("/search", response_model=list[PublicationWithDetails])
def search_publications(
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
    q: Annotated[str | None, Query(max_length=200)] = None,
    type: str | None = None,
    category: str | None = None,
) -> list[PublicationWithDetails]:
    """
    Search approved publications.

    - **q**: case-insensitive text in title or description
    - **type**: announcement, service, article or all
    - **category**: category id or all
    """
    return storage.search_publications(
        query=q.strip() if q else None,
        type=_parse_type(type),
        category_id=_parse_category(category),
    )


@router.get("/{publication_id}", response_model=PublicationWithDetails)
def get_publication(
    publication_id: int,
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> PublicationWithDetails:
    """Publication detail; each read counts one view."""
    publication = storage.get_publication_by_id(publication_id)
    if publication is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, PUBLICATION_NOT_FOUND)
    storage.increment_publication_views(publication_id)
    return publication


@router.post("", response_model=PublicationOut, status_code=status.HTTP_201_CREATED)
def create_publication(
    body: PublicationCreate,
    user: Annotated[User, Depends(require_business)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> Publication:
    """Submit a listing for moderation (status pending)."""
    if storage.get_category_by_id(body.category_id) is None:
        raise ApiError(status.HTTP_400_BAD_REQUEST, UNKNOWN_CATEGORY)
    publication = storage.create_publication({**body.model_dump(), "user_id": user.id})
    logger.info(
        "Publication submitted",
        extra={"publication_id": publication.id, "user_id": user.id},
    )
    return publication


@router.patch("/{publication_id}", response_model=PublicationOut)
def update_publication(
    publication_id: int,
    body: PublicationUpdate,
    user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> Publication:
    """Edit a publication (owner or admin). Non-admin edits require a new review."""
    existing = storage.get_publication(publication_id)
    if existing is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, PUBLICATION_NOT_FOUND)
    ensure_can_modify(existing, user)

    changes = moderated_changes(
        body.model_dump(exclude_unset=True), user, existing.status
    )
    publication = storage.update_publication(publication_id, changes)
    if publication is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, PUBLICATION_NOT_FOUND)
    return publication


@router.delete("/{publication_id}", response_model=MessageResponse)
def delete_publication(
    publication_id: int,
    user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> MessageResponse:
    """Delete a publication and its reviews (owner or admin)."""
    existing = storage.get_publication(publication_id)
    if existing is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, PUBLICATION_NOT_FOUND)
    ensure_can_modify(existing, user)

    storage.delete_publication(publication_id)
    logger.info(
        "Publication deleted",
        extra={"publication_id": publication_id, "user_id": user.id},
    )
    return MessageResponse(message="Publication supprimée")
