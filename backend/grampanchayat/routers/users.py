"""User management endpoints (admin role only, except /me)."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from .. import models, repositories, services
from ..auth import get_current_user
from ..database import get_session
from ..permissions import require_admin
from ..schemas import UserCreate, UserOut, UserUpdate, envelope, serialize

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
def list_users(db: Session = Depends(get_session), admin: models.User = Depends(require_admin)):
    return envelope(serialize(UserOut, repositories.UserRepository(db).list_all()))


@router.get("/me")
def current_user(user: models.User = Depends(get_current_user)):
    return envelope(serialize(UserOut, user))


@router.post("", status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_session), admin: models.User = Depends(require_admin)):
    try:
        user = services.UserService(db).create(payload.email, payload.password, payload.role, payload.permissions)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return envelope(serialize(UserOut, user), "User created successfully")


@router.put("/{user_id}")
def update_user(user_id: uuid.UUID, payload: UserUpdate, db: Session = Depends(get_session),
                admin: models.User = Depends(require_admin)):
    try:
        user = services.UserService(db).update(user_id, payload.model_dump(exclude_unset=True))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return envelope(serialize(UserOut, user), "User updated successfully")


@router.delete("/{user_id}")
def delete_user(user_id: uuid.UUID, db: Session = Depends(get_session), admin: models.User = Depends(require_admin)):
    try:
        services.UserService(db).delete(user_id, admin)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return envelope(message="User deleted successfully")
