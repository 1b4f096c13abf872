"""
API request and response models for the Vinyl Store REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two via the from_*() factory methods.

Wire format follows the document layout: ids are exposed as "_id" and
multi-word fields are camelCase. Aliases are used for both validation and
serialization so FastAPI's response_model round trip accepts them.

No response model has a password or passwordHash field, so a credential
cannot be serialized into a response by accident.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User
from auth.tokens import MAX_PASSWORD_LENGTH
from catalog.models import Product

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /login.

    password is compared byte for byte, so it is never stripped. The email
    lookup trims and lowercases on its own.
    """

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)


# Signup, profile update, and product creation accept free-form JSON objects
# (dict[str, Any]); the stores' schema validation decides what is kept.


# ---------------------------------------------------------------------------
# User responses
# ---------------------------------------------------------------------------


class SafeUser(BaseModel):
    """The user summary embedded in a login response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: Optional[str] = None
    email: str
    id: str = Field(alias="_id")
    role: str

    @classmethod
    def from_user(cls, user: User) -> "SafeUser":
        return cls(name=user.name, email=user.email, id=user.id, role=user.role)


class LoginResponse(BaseModel):
    """Response body for POST /login."""

    model_config = ConfigDict(frozen=True)

    user: SafeUser
    token: str


class UserResponse(BaseModel):
    """A stored user as returned by signup, profile, and profile update."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="_id")
    name: Optional[str] = None
    email: str
    role: str
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        """Map the domain User to its public shape. password_hash is not copied."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class DeleteResponse(BaseModel):
    """Summary of a hard delete."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    acknowledged: bool
    deleted_count: int = Field(alias="deletedCount")


# ---------------------------------------------------------------------------
# Catalog responses
# ---------------------------------------------------------------------------


class ProductResponse(BaseModel):
    """A catalog product."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="_id")
    artist: str
    album_name: str = Field(alias="albumName")
    description: str
    details: list[str] = Field(default_factory=list)
    genre: list[str] = Field(default_factory=list)
    track_list: Optional[str] = Field(default=None, alias="trackList")
    price: float
    stock: int = 0

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            artist=product.artist,
            album_name=product.album_name,
            description=product.description,
            details=product.details,
            genre=product.genre,
            track_list=product.track_list,
            price=product.price,
            stock=product.stock,
        )


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    msg: str


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
