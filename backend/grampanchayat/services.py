"""Business logic services used by the HTTP routers.

This module holds small service classes that coordinate repositories
and object storage. Services are intentionally thin: they perform
validation, execute domain logic and persist aggregates via
repositories. Invalid input raises `ValueError` (a 400 at the HTTP
layer) and missing rows raise `LookupError` (a 404).
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from passlib.context import CryptContext
import jwt
from sqlmodel import Session

from . import models, permissions, repositories
from .config import settings
from .storage import delete_file, upload_file

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
MAX_HERO_IMAGES = 3

logger = logging.getLogger("grampanchayat.services")


class AuthService:
    """Authentication related operations (login, tokens, passwords)."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def authenticate(self, email: str, password: str) -> Optional[models.User]:
        """Return the user whose credentials match, or `None`."""
        user = self.user_repo.get_by_email(email.strip().lower())
        if not user or not PWD_CTX.verify(password, user.password_hash):
            return None
        return user

    def issue_token(self, user: models.User) -> str:
        """Record the login and return a signed JWT for `user`."""
        user.last_login = datetime.now(timezone.utc)
        self.user_repo.save(user)
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRE_HOURS)
        payload = {"id": str(user.id), "email": user.email, "role": user.role, "exp": int(expire.timestamp())}
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    def change_password(self, user: models.User, current_password: str, new_password: str) -> None:
        if not PWD_CTX.verify(current_password, user.password_hash):
            raise ValueError("Current password is incorrect")
        user.password_hash = PWD_CTX.hash(new_password)
        self.user_repo.save(user)


class UserService:
    """Admin-side user management."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def create(self, email: str, password: str, role: str = permissions.ROLE_EDITOR,
               perms: Optional[List[str]] = None) -> models.User:
        """Create a user with a hashed password.

        Emails are stored lower-cased and must be unique. An admin created
        without permissions is granted the wildcard.
        """
        email = email.strip().lower()
        if self.user_repo.get_by_email(email):
            raise ValueError("User with this email already exists")
        role = permissions.validate_role(role)
        perms = permissions.default_permissions(role, permissions.validate_permissions(perms or []))
        user = models.User(email=email, password_hash=PWD_CTX.hash(password), role=role, permissions=perms)
        return self.user_repo.create(user)

    def update(self, user_id: uuid.UUID, updates: Dict[str, Any]) -> models.User:
        user = self.user_repo.get(user_id)
        if not user:
            raise LookupError("User not found")
        if updates.get("email"):
            email = updates["email"].strip().lower()
            other = self.user_repo.get_by_email(email)
            if other and other.id != user.id:
                raise ValueError("User with this email already exists")
            user.email = email
        if updates.get("role"):
            user.role = permissions.validate_role(updates["role"])
        if updates.get("permissions") is not None:
            user.permissions = permissions.validate_permissions(updates["permissions"])
        if updates.get("is_active") is not None:
            user.is_active = updates["is_active"]
        return self.user_repo.save(user)

    def delete(self, user_id: uuid.UUID, acting_user: models.User) -> None:
        if user_id == acting_user.id:
            raise ValueError("Cannot delete your own account")
        user = self.user_repo.get(user_id)
        if not user:
            raise LookupError("User not found")
        self.user_repo.delete(user)


def ensure_default_admin(session: Session) -> Optional[models.User]:
    """Create the configured admin account when it does not exist yet.

    An existing admin with an empty permission list is backfilled with
    the wildcard. Returns the created user, or `None` if one existed.
    """
    repo = repositories.UserRepository(session)
    email = settings.ADMIN_EMAIL.strip().lower()
    existing = repo.get_by_email(email)
    if existing:
        if existing.role == permissions.ROLE_ADMIN and not existing.permissions:
            existing.permissions = [permissions.WILDCARD]
            repo.save(existing)
        return None
    admin = UserService(session).create(email, settings.ADMIN_PASSWORD, role=permissions.ROLE_ADMIN)
    logger.warning("created default admin %s; change its password after first login", email)
    return admin


class RepresentativeService:
    def __init__(self, session: Session, storage):
        self.repo = repositories.RepresentativeRepository(session)
        self.storage = storage

    def delete(self, rep_id: uuid.UUID) -> models.Representative:
        """Delete the row first, then its photo (best effort)."""
        rep = self.repo.get(rep_id)
        if not rep:
            raise LookupError("Representative not found")
        image = rep.image
        self.repo.delete(rep)
        delete_file(self.storage, image)
        return rep


class ImageService:
    def __init__(self, session: Session, storage):
        self.repo = repositories.ImageRepository(session)
        self.storage = storage

    def upload(self, filename: str, data: bytes, content_type: str, title: Optional[str] = None,
               description: Optional[str] = None, category: str = "gallery") -> models.Image:
        stored = upload_file(self.storage, filename, data, content_type, category)
        image = models.Image(
            title=title or None,
            description=description or None,
            image_path=stored.path,
            image_url=stored.public_url,
            category=category,
        )
        return self.repo.create(image)

    def delete(self, image_id: uuid.UUID) -> models.Image:
        image = self.repo.get(image_id)
        if not image:
            raise LookupError("Image not found")
        target = image.image_url or image.image_path
        self.repo.delete(image)
        delete_file(self.storage, target)
        return image


class HeroImageService:
    """Homepage slider images, capped at `MAX_HERO_IMAGES` active rows."""
    def __init__(self, session: Session, storage):
        self.repo = repositories.HeroImageRepository(session)
        self.storage = storage

    def upload(self, filename: str, data: bytes, content_type: str) -> models.HeroImage:
        count = self.repo.count_active()
        if count >= MAX_HERO_IMAGES:
            raise ValueError(
                f"Maximum {MAX_HERO_IMAGES} hero images allowed. Please delete an existing image first."
            )
        stored = upload_file(self.storage, filename, data, content_type, "hero-images")
        hero = models.HeroImage(image_path=stored.path, image_url=stored.public_url, order=count + 1)
        return self.repo.save(hero)

    def set_order(self, hero_id: uuid.UUID, order: Optional[int]) -> models.HeroImage:
        if order is None or not 1 <= order <= MAX_HERO_IMAGES:
            raise ValueError(f"Order must be between 1 and {MAX_HERO_IMAGES}")
        hero = self.repo.get(hero_id)
        if not hero:
            raise LookupError("Hero image not found")
        hero.order = order
        return self.repo.save(hero)

    def delete(self, hero_id: uuid.UUID) -> models.HeroImage:
        hero = self.repo.get(hero_id)
        if not hero:
            raise LookupError("Hero image not found")
        path = hero.image_path
        self.repo.delete(hero)
        delete_file(self.storage, path)
        return hero


class HistoricalService:
    def __init__(self, session: Session, storage):
        self.repo = repositories.HistoricalRepository(session)
        self.storage = storage

    def get_all(self) -> Dict[str, List[Any]]:
        return {
            "events": self.repo.list_events(),
            "places": self.repo.list_places(),
            "awards": self.repo.list_awards(),
        }

    def delete(self, model, row_id: uuid.UUID, label: str):
        row = self.repo.get(model, row_id)
        if not row:
            raise LookupError(f"Historical {label} not found")
        image = getattr(row, "image", None)
        self.repo.delete(row)
        delete_file(self.storage, image)
        return row


class AnnouncementService:
    def __init__(self, session: Session, storage):
        self.repo = repositories.AnnouncementRepository(session)
        self.storage = storage

    def create_many(self, items: List[Dict[str, Any]]) -> List[models.Announcement]:
        rows = []
        for item in items:
            data = {k: v for k, v in item.items() if v is not None}
            rows.append(models.Announcement(**data))
        return self.repo.create_many(rows)

    def delete(self, ann_id: uuid.UUID) -> models.Announcement:
        announcement = self.repo.get(ann_id)
        if not announcement:
            raise LookupError("Announcement not found")
        path = announcement.file_path
        self.repo.delete(announcement)
        delete_file(self.storage, path)
        return announcement
