"""
api/routes/users.py -- Account REST endpoints.

Routes:
  POST   /signup            -- create an account; 201 user (no hash)
  POST   /login             -- email/password login; 200 {user, token}
  GET    /profile           -- current user (requires auth)
  PATCH  /profile/update    -- partial update, email immutable (requires auth)
  DELETE /delete-account    -- hard delete of the current user (requires auth)

Every handler converts its own expected failures to HTTPException; the
application's exception handlers render them as {"msg": ...}.

Logging: request bodies are logged only as LoggableRequest views, which drop
password fields by construction.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from pymongo.errors import PyMongoError

from api.models import DeleteResponse, LoginRequest, LoginResponse, SafeUser, UserResponse
from auth.dependencies import get_current_user
from auth.models import User
from auth.store import UserStore
from auth.tokens import WEAK_PASSWORD_MESSAGE, check_password_policy, create_access_token, hash_password, verify_password
from core.db import DuplicateDocumentError
from core.loggable import LoggableRequest
from core.validation import DocumentValidationError

logger = logging.getLogger("vinylstore.api.users")

# Auth policy:
# - POST   /signup, /login:                         public
# - GET    /profile, PATCH /profile/update,
#   DELETE /delete-account:                        bearer token + existing user (get_current_user)
router = APIRouter()


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/signup", response_model=UserResponse, status_code=201)
def signup(request: Request, body: dict[str, Any] = Body(...)) -> UserResponse:
    """Create an account from the request body plus a bcrypt hash of its password.

    The password policy is checked before hashing; a weak or missing password
    is a 400 and nothing is written. Persistence failures, including a
    duplicate email or a schema violation, are 500.
    """
    logger.info("POST /signup %s", LoggableRequest.from_body(body))
    password = body.get("password")
    if not check_password_policy(password):
        raise HTTPException(status_code=400, detail=WEAK_PASSWORD_MESSAGE)

    user_store: UserStore = request.app.state.user_store
    try:
        user = user_store.create_user(body, hash_password(password))
    except DuplicateDocumentError as exc:
        logger.warning("Signup rejected: %s", exc)
        raise HTTPException(status_code=500, detail="This email is already registered.") from exc
    except DocumentValidationError as exc:
        logger.warning("Signup rejected: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except PyMongoError as exc:
        logger.exception("Signup failed")
        raise HTTPException(status_code=500, detail="Could not create the account.") from exc

    logger.info("User %s created", user.id)
    return UserResponse.from_user(user)


@router.post("/login", response_model=LoginResponse)
def login(request: Request, response: Response, body: LoginRequest) -> LoginResponse:
    """Verify email and password; return the safe user fields and a bearer token.

    An unknown email is a 400, a wrong password a 401.
    """
    logger.info("POST /login %s", LoggableRequest.from_body(body.model_dump()))
    response.headers["Cache-Control"] = "no-store"

    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_email(body.email)
    if user is None:
        raise HTTPException(status_code=400, detail="This email is not yet registered in our website.")
    if not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Wrong password or email.")

    return LoginResponse(user=SafeUser.from_user(user), token=create_access_token(user))


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/profile", response_model=UserResponse)
def profile(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the authenticated user's stored record."""
    return UserResponse.from_user(current_user)


@router.patch("/profile/update", response_model=UserResponse)
def update_profile(
    request: Request,
    body: dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Partially update the current user. The email address can never change."""
    logger.info("PATCH /profile/update user=%s %s", current_user.id, LoggableRequest.from_body(body))
    if "email" in body:
        raise HTTPException(status_code=400, detail="You cannot change your email.")

    user_store: UserStore = request.app.state.user_store
    try:
        updated = user_store.update_user(current_user.id, body)
    except DocumentValidationError as exc:
        logger.warning("Profile update rejected for %s: %s", current_user.id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except PyMongoError as exc:
        logger.exception("Profile update failed for %s", current_user.id)
        raise HTTPException(status_code=500, detail="Could not update the profile.") from exc

    if updated is None:
        raise HTTPException(status_code=404, detail="User not found.")
    return UserResponse.from_user(updated)


@router.delete("/delete-account", response_model=DeleteResponse)
def delete_account(request: Request, current_user: User = Depends(get_current_user)) -> DeleteResponse:
    """Hard-delete the current user. Tokens issued to it stop resolving immediately."""
    user_store: UserStore = request.app.state.user_store
    try:
        summary = user_store.delete_user(current_user.id)
    except PyMongoError as exc:
        logger.exception("Account deletion failed for %s", current_user.id)
        raise HTTPException(status_code=500, detail="Could not delete the account.") from exc

    logger.info("User %s deleted (deletedCount=%d)", current_user.id, summary["deletedCount"])
    return DeleteResponse(acknowledged=summary["acknowledged"], deleted_count=summary["deletedCount"])
