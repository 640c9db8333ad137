"""
Security primitives for admin authentication.

Provides bcrypt password hashing and signed JWT session tokens using
industry-standard libraries (bcrypt, python-jose). Both halves are
stateless: the only shared input is the signing secret from settings,
which is read-only after startup.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import settings

# JWT Algorithm
ALGORITHM = "HS256"

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class TokenData(BaseModel):
    """
    Decoded session token claims.

    Only produced for tokens whose signature and expiry both checked out.
    """
    admin_id: str
    username: str
    issued_at: Optional[datetime] = None
    expires_at: datetime


def _password_bytes(password: str) -> bytes:
    # Truncate to 72 bytes if needed (bcrypt limit)
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password string (salt and cost factor embedded)

    Note:
        Output is randomized: hashing the same password twice yields
        different strings, both of which verify.
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    hashed = bcrypt.hashpw(_password_bytes(password), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The stored hash to compare against

    Returns:
        True if password matches, False on mismatch or malformed hash
    """
    if not plain_password or not hashed_password:
        return False

    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password),
            hashed_password.encode("utf-8"),
        )
    except (ValueError, TypeError):
        # Malformed hash ("Invalid salt") or wrong type
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """
    Hash used to burn the same CPU time when a username does not exist.

    Computed once per process at the configured cost factor.
    """
    return get_password_hash("dummy-password-for-timing")


def create_access_token(
    admin_id: str,
    username: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed session token for an admin.

    Args:
        admin_id: Admin primary key (stored as the ``sub`` claim)
        username: Admin username
        expires_delta: Optional custom lifetime (tests pass short or negative values)

    Returns:
        Encoded JWT token string

    Example:
        >>> token = create_access_token("3f2c...", "admin")
        >>> decode_access_token(token).username
        'admin'
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    payload = {
        "sub": str(admin_id),
        "username": username,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: Optional[str]) -> Optional[TokenData]:
    """
    Decode and validate a session token.

    Args:
        token: JWT token string (may be None or garbage)

    Returns:
        TokenData if signature and expiry are valid, None otherwise.
        Callers treat None exactly like a missing token.
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError:
        return None

    admin_id = payload.get("sub")
    username = payload.get("username")
    if not admin_id or not username:
        return None

    issued_at = payload.get("iat")
    return TokenData(
        admin_id=admin_id,
        username=username,
        issued_at=(
            datetime.fromtimestamp(issued_at, tz=timezone.utc)
            if isinstance(issued_at, (int, float)) else None
        ),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
