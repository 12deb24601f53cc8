"""Login and account endpoints under /api/auth."""

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from .. import models, services
from ..auth import get_current_user
from ..database import get_session
from ..schemas import ChangePasswordIn, LoginIn, UserOut, envelope, serialize

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(payload: LoginIn, db: Session = Depends(get_session)):
    """Authenticate with email/password and return a JWT bearer token."""
    auth = services.AuthService(db)
    user = auth.authenticate(payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")
    token = auth.issue_token(user)
    return {"success": True, "message": "Login successful", "token": token, "user": serialize(UserOut, user)}


@router.get("/me")
def me(user: models.User = Depends(get_current_user)):
    return envelope(serialize(UserOut, user))


@router.post("/change-password")
def change_password(payload: ChangePasswordIn, db: Session = Depends(get_session),
                    user: models.User = Depends(get_current_user)):
    try:
        services.AuthService(db).change_password(user, payload.current_password, payload.new_password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return envelope(message="Password changed successfully")
