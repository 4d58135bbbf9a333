"""Session login/registration and auth dependencies (get_current_user_id, require_roles)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import APIKeyCookie
from sqlalchemy.exc import IntegrityError

from citylinker.core.config import get_settings, settings
from citylinker.core.errors import ApiError
from citylinker.core.security import hash_password, verify_password
from citylinker.models import User, UserRole
from citylinker.schemas.auth import (
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserPublic,
    UserResponse,
)
from citylinker.schemas.base import MessageResponse
from citylinker.services.sessions import SessionStore, get_session_store
from citylinker.services.storage import DatabaseStorage, get_storage

logger = logging.getLogger(__name__)
router = APIRouter()
session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)

NOT_AUTHENTICATED = "Non authentifié"
FORBIDDEN = "Accès non autorisé"
USER_NOT_FOUND = "Utilisateur non trouvé"
EMAIL_TAKEN = "Cet email est déjà utilisé"
# Same message for unknown email and wrong password: do not reveal which accounts exist.
INVALID_CREDENTIALS = "Email ou mot de passe incorrect"

# Columns that are NOT NULL: an explicit null in a partial update is ignored.
REQUIRED_USER_FIELDS = ("first_name", "last_name", "role", "business_verified")


def get_current_user_id(
    token: Annotated[str | None, Depends(session_cookie)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> int:
    """Dependency: require a live session cookie and return its user id. Raises 401 otherwise."""
    user_id = sessions.resolve(token)
    if user_id is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, NOT_AUTHENTICATED)
    return user_id


def get_current_user(
    user_id: Annotated[int, Depends(get_current_user_id)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> User:
    """Dependency: authenticated user row, loaded fresh. Raises 401 if the account is gone."""
    user = storage.get_user(user_id)
    if user is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, NOT_AUTHENTICATED)
    return user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Dependency factory: authenticated user whose role is one of `roles`.

    The user is reloaded on every request, so a role change applies to the
    very next call. Raises 401 without a session and 403 for other roles.
    """
    allowed = frozenset(roles)

    def dependency(
        user_id: Annotated[int, Depends(get_current_user_id)],
        storage: Annotated[DatabaseStorage, Depends(get_storage)],
    ) -> User:
        user = storage.get_user(user_id)
        if user is None or user.role not in allowed:
            raise ApiError(status.HTTP_403_FORBIDDEN, FORBIDDEN)
        return user

    return dependency


require_admin = require_roles(UserRole.ADMIN)
require_business = require_roles(UserRole.BUSINESS)
require_client = require_roles(UserRole.CLIENT)


def drop_null_required(data: dict, required: tuple[str, ...]) -> dict:
    """Remove explicit nulls for NOT NULL columns from a partial update."""
    return {k: v for k, v in data.items() if not (k in required and v is None)}


def _open_session(response: Response, sessions: SessionStore, user_id: int) -> None:
    cfg = get_settings()
    token = sessions.create(user_id)
    response.set_cookie(
        key=cfg.SESSION_COOKIE_NAME,
        value=token,
        max_age=cfg.SESSION_TTL_HOURS * 3600,
        httponly=True,
        secure=cfg.APP_ENV == "prod",
        samesite="lax",
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    response: Response,
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> UserResponse:
    """
    Create a client or business account and log it in.
    Returns 409 if the email is already registered.
    """
    if storage.get_user_by_email(body.email) is not None:
        raise ApiError(status.HTTP_409_CONFLICT, EMAIL_TAKEN)

    data = body.model_dump(exclude={"password"})
    data["password"] = hash_password(body.password)
    try:
        user = storage.create_user(data)
    except IntegrityError as e:
        raise ApiError(status.HTTP_409_CONFLICT, EMAIL_TAKEN) from e

    _open_session(response, sessions, user.id)
    logger.info("User registered", extra={"user_id": user.id, "role": user.role.value})
    return UserResponse(user=UserPublic.model_validate(user))


@router.post("/login", response_model=UserResponse)
def login(
    body: LoginRequest,
    response: Response,
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> UserResponse:
    """Authenticate with email and password; sets the session cookie."""
    user = storage.get_user_by_email(body.email)
    if user is None or not verify_password(body.password, user.password):
        logger.info("Login rejected")
        raise ApiError(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS)

    _open_session(response, sessions, user.id)
    return UserResponse(user=UserPublic.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    token: Annotated[str | None, Depends(session_cookie)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> MessageResponse:
    """End the server-side session and clear the cookie. Succeeds without a session too."""
    sessions.destroy(token)
    response.delete_cookie(get_settings().SESSION_COOKIE_NAME)
    return MessageResponse(message="Déconnecté avec succès")


@router.get("/me", response_model=UserResponse)
def me(
    user_id: Annotated[int, Depends(get_current_user_id)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> UserResponse:
    """Return the logged-in user."""
    user = storage.get_user(user_id)
    if user is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)
    return UserResponse(user=UserPublic.model_validate(user))


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    body: ProfileUpdate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> UserResponse:
    """Edit one's own profile. A new password is hashed; role and email cannot change here."""
    data = drop_null_required(body.model_dump(exclude_unset=True), REQUIRED_USER_FIELDS)
    new_password = data.pop("password", None)
    if new_password:
        data["password"] = hash_password(new_password)

    user = storage.update_user(user_id, data)
    if user is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)
    return UserResponse(user=UserPublic.model_validate(user))
