"""Password hashing and session-token generation for authentication."""

import secrets

import bcrypt

from citylinker.core.config import settings

# Min/max lengths for password and name validation.
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128
NAME_MIN_LEN = 2
NAME_MAX_LEN = 100

# Bytes of entropy in a session token (encoded to ~43 url-safe chars).
SESSION_TOKEN_BYTES = 32


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def generate_session_token() -> str:
    """Return a new opaque, URL-safe session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)
