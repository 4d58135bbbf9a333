"""Admin endpoints: moderation, user management, categories and global stats."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError

from citylinker.api.routes.auth import (
    REQUIRED_USER_FIELDS,
    USER_NOT_FOUND,
    drop_null_required,
    require_admin,
)
from citylinker.api.routes.publications import PUBLICATION_NOT_FOUND
from citylinker.core.errors import ApiError
from citylinker.models import Category, Publication, PublicationStatus, User
from citylinker.schemas.auth import AdminUserUpdate, UserPublic, UserResponse
from citylinker.schemas.base import MessageResponse
from citylinker.schemas.catalog import (
    CategoryCreate,
    CategoryOut,
    PublicationOut,
    PublicationWithDetails,
    StatusUpdate,
)
from citylinker.schemas.stats import AdminStats
from citylinker.services.storage import DatabaseStorage, get_storage

logger = logging.getLogger(__name__)
router = APIRouter()

# The only statuses an admin can set through the moderation endpoint.
MODERATION_DECISIONS: frozenset[str] = frozenset(
    {PublicationStatus.APPROVED.value, PublicationStatus.REJECTED.value}
)


@router.get("/stats", response_model=AdminStats)
def admin_stats(
    _admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> AdminStats:
    return storage.get_admin_stats()


@router.get("/users", response_model=list[UserPublic])
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> list[User]:
    """All users, newest first (no passwords)."""
    return storage.get_all_users()


@router.get("/publications", response_model=list[PublicationWithDetails])
def list_all_publications(
    _admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> list[PublicationWithDetails]:
    """Every publication whatever its status."""
    return storage.get_publications()


@router.get("/publications/pending", response_model=list[PublicationWithDetails])
def list_pending_publications(
    _admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> list[PublicationWithDetails]:
    """Moderation queue."""
    return storage.get_publications(PublicationStatus.PENDING)


@router.patch("/publications/{publication_id}/status", response_model=PublicationOut)
def moderate_publication(
    publication_id: int,
    body: StatusUpdate,
    admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> Publication:
    """
    Approve or reject a publication. Any other status is refused with 400.
    A rejection may carry a reason; approving clears it.
    """
    if body.status not in MODERATION_DECISIONS:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Statut invalide")

    decision = PublicationStatus(body.status)
    publication = storage.update_publication(
        publication_id,
        {
            "status": decision,
            "rejection_reason": body.rejection_reason
            if decision == PublicationStatus.REJECTED
            else None,
        },
    )
    if publication is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, PUBLICATION_NOT_FOUND)

    logger.info(
        "Publication moderated",
        extra={
            "publication_id": publication_id,
            "decision": decision.value,
            "admin_id": admin.id,
        },
    )
    return publication


@router.patch("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: AdminUserUpdate,
    admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> UserResponse:
    """Edit a user's profile, verification flag or role. Passwords are not editable here."""
    data = drop_null_required(body.model_dump(exclude_unset=True), REQUIRED_USER_FIELDS)
    if user_id == admin.id and data.get("role", admin.role) != admin.role:
        raise ApiError(status.HTTP_403_FORBIDDEN, "Vous ne pouvez pas modifier votre propre rôle")

    user = storage.update_user(user_id, data)
    if user is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)
    if "role" in data:
        logger.info(
            "User role set",
            extra={"user_id": user_id, "role": user.role.value, "admin_id": admin.id},
        )
    return UserResponse(user=UserPublic.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> MessageResponse:
    """Delete a user with their publications and reviews. Admins cannot delete themselves."""
    if user_id == admin.id:
        raise ApiError(
            status.HTTP_403_FORBIDDEN,
            "Impossible de supprimer votre propre compte Admin",
        )
    storage.delete_user(user_id)
    logger.info("User deleted", extra={"user_id": user_id, "admin_id": admin.id})
    return MessageResponse(message="Utilisateur supprimé")


@router.post("/categories", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    _admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> Category:
    """Add a category to the taxonomy. Names are unique."""
    if storage.get_category_by_name(body.name) is not None:
        raise ApiError(status.HTTP_409_CONFLICT, "Cette catégorie existe déjà")
    try:
        return storage.create_category(body.model_dump())
    except IntegrityError as e:
        raise ApiError(status.HTTP_409_CONFLICT, "Cette catégorie existe déjà") from e
