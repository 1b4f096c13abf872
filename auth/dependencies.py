"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Protected routes always compose two stages:
  1. require_bearer_token() -- the Authorization: Bearer <token> header must be
     present and carry a genuine, unexpired JWT. Returns TokenClaims, else 401.
  2. get_current_user() -- depends on stage 1 and loads the User the claims
     name. Returns the User, else 404 (the account was deleted after the
     token was issued).

Handlers receive the User as a typed parameter; nothing is attached to the
request object. Declaring Depends(get_current_user) pulls in stage 1
automatically, so the stages cannot be used out of order.

require_admin() wraps get_current_user() and raises HTTP 403 if the user is
not an ADMIN.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from auth.models import ROLE_ADMIN, TokenClaims, User
from auth.store import UserStore
from auth.tokens import decode_access_token


def require_bearer_token(request: Request) -> TokenClaims:
    """Stage 1: verify the bearer token. Raises HTTP 401 on any failure."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Authentication required.")
    claims = decode_access_token(token)
    if claims is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")
    return claims


def get_current_user(request: Request, claims: TokenClaims = Depends(require_bearer_token)) -> User:
    """Stage 2: resolve verified claims to the stored user. Raises HTTP 404 if gone.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(claims.user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found.")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require the ADMIN role. Raises HTTP 401/404 via the stages above, 403 if not admin."""
    if user.role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required.")
    return user
