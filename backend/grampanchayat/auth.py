"""Authentication helpers and FastAPI security dependency.

This module provides utilities to decode JWT tokens and a FastAPI
dependency `get_current_user` that validates the bearer token and
returns the corresponding active `User` from the database.

Token verification raises HTTPExceptions on failure so it can be used
directly inside route dependencies. A missing token is a 401, not the
403 `HTTPBearer` would produce on its own.
"""

import uuid
from typing import Optional

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlmodel import Session

from .config import settings
from .database import get_session
from . import models, repositories

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str):
    """Decode and verify a JWT token.

    Returns the decoded payload on success or raises an HTTPException
    with status 401 on failure.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Token is not valid")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_session),
) -> models.User:
    """FastAPI dependency that returns the authenticated user.

    The function extracts the bearer token from the request, decodes it
    and looks the user up. Inactive or deleted users are rejected with
    401 just like a bad token.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="No authentication token, access denied")
    payload = decode_token(credentials.credentials)
    try:
        user_id = uuid.UUID(str(payload.get("id")))
    except ValueError:
        raise HTTPException(status_code=401, detail="Token is not valid")
    user = repositories.UserRepository(db).get(user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    return user
