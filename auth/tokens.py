"""
auth/tokens.py -- Password hashing, password policy, and JWT utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       sub (user id), email, name, role, and expiry. Verification returns None
       on any failure -- the dependency layer turns that into a 401.

  Passwords: bcrypt with a fixed cost factor (Settings.bcrypt_rounds, 10 by
       default). The policy check runs before hashing so a weak password never
       costs a bcrypt round and never reaches the store.

  SECRET_KEY: sourced from core.config.get_settings(). The Settings class
       validates the key at startup: dev mode (DEBUG=true) auto-generates a
       random key with a warning; production mode refuses to start without one.

Layer rule: no imports from api/ or catalog/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from auth.models import TokenClaims, User
from core.config import get_settings

logger = logging.getLogger("vinylstore.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password policy
#
# At least 8 characters with one uppercase letter, one lowercase letter, one
# digit, and one symbol from the set #?!@$ %^&*-
# ---------------------------------------------------------------------------

# Upper bound shared by the signup policy and the login request model.
MAX_PASSWORD_LENGTH = 255

PASSWORD_PATTERN = re.compile(r"^(?=.*?[A-Z])(?=.*?[a-z])(?=.*?[0-9])(?=.*?[#?!@$ %^&*-]).{8,}$")

WEAK_PASSWORD_MESSAGE = (
    "Password is required and must have at least 8 characters, "
    "uppercase and lowercase letters, numbers and special characters."
)


def check_password_policy(password: object) -> bool:
    """Return True if password is a string of at most MAX_PASSWORD_LENGTH chars matching PASSWORD_PATTERN."""
    if not isinstance(password, str) or len(password) > MAX_PASSWORD_LENGTH:
        return False
    return PASSWORD_PATTERN.match(password) is not None


# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Passwords longer than 72 bytes are truncated by bcrypt 3.x and rejected
    by bcrypt 4.x+, so we truncate explicitly and consistently in both
    hash_password() and verify_password().
    """
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8")[:72], salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash -- treat as a mismatch, never as a match.
        logger.warning("Stored password hash is malformed")
        return False


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(user: User, expire_seconds: int = 0) -> str:
    """Encode a signed JWT for a persisted user.

    Args:
        user:           The user the token identifies. Must have an id.
        expire_seconds: Token lifetime. If 0 (default), uses
                        Settings.token_expire_seconds.
    """
    if user.id is None:
        raise ValueError("Cannot issue a token for an unsaved user")
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    expire = datetime.now(timezone.utc) + timedelta(seconds=duration)
    payload = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims | None:
    """Decode and verify a JWT. Returns TokenClaims or None on any failure.

    Malformed, expired, and wrongly signed tokens all yield None; python-jose
    checks the exp claim during decode.
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or "exp" not in payload:
        return None
    return TokenClaims(
        user_id=user_id,
        email=payload.get("email", ""),
        role=payload.get("role", ""),
        expires_at=int(payload["exp"]),
    )
