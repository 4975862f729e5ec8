"""Password hashing and generation of opaque identifiers and tokens."""

import secrets
import uuid

import bcrypt

from app.core.config import settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 2
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# Plain text behind the decoy hash used when a login names an unknown user.
_DECOY_PASSWORD = "decoy-password-for-timing-equalization"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash (constant-time compare inside bcrypt)."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


# Built at import so the first unknown-user login costs one bcrypt check, like every
# later one. Same cost as hash_password, i.e. as the stored hashes made under the
# current BCRYPT_ROUNDS; hashes created under an older cost keep theirs.
DECOY_HASH = hash_password(_DECOY_PASSWORD)


def verify_decoy_password(plain_password: str) -> bool:
    """
    Run a full bcrypt check against a fixed decoy hash and return False.

    Called when the user does not exist so that both login failure paths
    spend the same hashing time.
    """
    verify_password(plain_password, DECOY_HASH)
    return False


def generate_id() -> str:
    """Collision-resistant primary key for new rows."""
    return str(uuid.uuid4())


def generate_session_id() -> str:
    """Opaque session identifier sent to the browser in the session cookie."""
    return secrets.token_urlsafe(30)


def generate_access_token() -> str:
    """Opaque bearer token for one (user, service instance) grant."""
    return secrets.token_urlsafe(32)
