"""Role and task permissions for admin-panel users.

Every admin-panel section is a *task*. Editors are granted a list of task
ids; admins (or anyone holding the ``"*"`` wildcard) may edit every
section; viewers may only read.

The FastAPI dependencies at the bottom of the module are what the
routers use:

- ``require_task(task)`` gates writes to one section;
- ``require_admin`` gates user management.
"""

from typing import Dict, Iterable, List

from fastapi import Depends, HTTPException, Request

from . import models
from .auth import get_current_user

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_VIEWER = "viewer"
ALLOWED_ROLES = (ROLE_ADMIN, ROLE_EDITOR, ROLE_VIEWER)

WILDCARD = "*"

TASK_REPRESENTATIVES = "task1"
TASK_DOCUMENTS = "task2"
TASK_CERTIFICATES = "task3"
TASK_IMAGES = "task4"
TASK_INFRASTRUCTURE = "task5"
TASK_HISTORICAL = "task6"
TASK_GRAMPANCHAYAT_INFO = "task7"
TASK_ANNOUNCEMENTS = "task8"
TASK_HERO_IMAGES = "task9"

TASKS: Dict[str, str] = {
    TASK_REPRESENTATIVES: "representatives",
    TASK_DOCUMENTS: "documents",
    TASK_CERTIFICATES: "certificates",
    TASK_IMAGES: "gallery images",
    TASK_INFRASTRUCTURE: "infrastructure",
    TASK_HISTORICAL: "historical data",
    TASK_GRAMPANCHAYAT_INFO: "grampanchayat info",
    TASK_ANNOUNCEMENTS: "announcements",
    TASK_HERO_IMAGES: "hero images",
}

READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

NO_TASK_PERMISSION = "तुम्हाला या कार्यासाठी परवानगी नाही (You do not have permission for this task)"
VIEW_ONLY = "तुम्ही फक्त माहिती पाहू शकता, बदल करू शकत नाही (You can only view, not modify)"


def validate_role(role: str) -> str:
    if role not in ALLOWED_ROLES:
        raise ValueError(f"Unknown role: {role}. Allowed roles: {list(ALLOWED_ROLES)}")
    return role


def validate_permissions(permissions: Iterable[str]) -> List[str]:
    """Return a de-duplicated copy of `permissions`, rejecting unknown tasks."""
    out: List[str] = []
    for p in permissions:
        if p != WILDCARD and p not in TASKS:
            raise ValueError(f"Unknown permission: {p}")
        if p not in out:
            out.append(p)
    return out


def default_permissions(role: str, permissions: List[str]) -> List[str]:
    """Admins created without an explicit list get the wildcard."""
    if role == ROLE_ADMIN and not permissions:
        return [WILDCARD]
    return permissions


def has_task_permission(user: models.User, task: str) -> bool:
    if user.role == ROLE_ADMIN:
        return True
    granted = user.permissions or []
    return WILDCARD in granted or task in granted


def check_write_permission(user: models.User, task: str, method: str) -> None:
    """Raise 403 unless `user` may perform `method` on `task`'s section.

    Reads are open to every authenticated user; viewers can never write.
    """
    if method.upper() in READ_METHODS:
        return
    if user.role == ROLE_VIEWER:
        raise HTTPException(status_code=403, detail=VIEW_ONLY)
    if not has_task_permission(user, task):
        raise HTTPException(status_code=403, detail=NO_TASK_PERMISSION)


def require_task(task: str):
    """Build a dependency that authenticates the caller and checks `task`."""
    if task not in TASKS:
        raise ValueError(f"unknown task: {task}")

    def dependency(request: Request, user: models.User = Depends(get_current_user)) -> models.User:
        check_write_permission(user, task, request.method)
        return user

    return dependency


def require_admin(user: models.User = Depends(get_current_user)) -> models.User:
    if user.role != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Only admins can manage users")
    return user
