"""
auth/models.py -- Domain dataclasses and schema rules for user accounts.

Pattern: Data class (pure data container) plus one validation function. The
dataclasses own the domain shape; auth/store.py and the route layer do the
work. validate_user() is the single definition of what a User document may
contain -- the store runs it before every insert and update.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from core.validation import SchemaValidator, ValidationResult

ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"
ROLES = (ROLE_ADMIN, ROLE_USER)

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[a-z]{2,}$"


@dataclass
class User:
    """A customer or administrator account.

    password_hash is the bcrypt hash; the plaintext password is never held
    here. Response models never copy password_hash.

    id is None before the record is written to the database.
    """

    email: str
    password_hash: str
    name: str | None = None
    role: str = ROLE_USER  # "ADMIN" | "USER"
    id: str | None = None
    created_at: str | None = None  # ISO 8601, set by store on insert
    updated_at: str | None = None  # ISO 8601, set by store on every write


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a bearer token.

    Produced only by auth.tokens.decode_access_token() after signature and
    expiry checks pass, so holding one means the token was genuine.
    """

    user_id: str
    email: str
    role: str
    expires_at: int  # unix seconds


def validate_user(data: Mapping[str, Any], partial: bool = False) -> ValidationResult:
    """Validate a User document keyed by its stored (camelCase) field names."""
    v = SchemaValidator(data, partial=partial)
    v.string("name", trim=True, min_length=1)
    v.string("email", required=True, trim=True, lowercase=True, pattern=EMAIL_PATTERN)
    v.string("passwordHash", required=True)
    v.string("role", choices=ROLES, default=ROLE_USER)
    return v.result()
