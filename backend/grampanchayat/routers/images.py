"""Gallery image endpoints. Writes need task4."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlmodel import Session

from .. import models, repositories, services
from ..config import settings
from ..database import get_session
from ..permissions import TASK_IMAGES, require_task
from ..schemas import ImageOut, envelope, serialize
from ..storage import StorageError, get_storage
from ..utils.uploads import read_image_upload

router = APIRouter(prefix="/api/images", tags=["images"])
can_edit = require_task(TASK_IMAGES)

IMAGE_CATEGORIES = ("general", "gallery", "events", "infrastructure", "officials")


@router.get("")
def list_images(category: Optional[str] = None, db: Session = Depends(get_session)):
    return envelope(serialize(ImageOut, repositories.ImageRepository(db).list_active(category)))


@router.post("/upload")
def upload_image(
    image: UploadFile = File(...),
    title: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    db: Session = Depends(get_session),
    user: models.User = Depends(can_edit),
    storage=Depends(get_storage),
):
    category = category or "gallery"
    if category not in IMAGE_CATEGORIES:
        raise HTTPException(status_code=400, detail=f"category must be one of {', '.join(IMAGE_CATEGORIES)}")
    payload = read_image_upload(image, settings.MAX_FILE_SIZE)
    try:
        created = services.ImageService(db, storage).upload(
            image.filename, payload, image.content_type, title=title, description=description, category=category
        )
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Failed to upload file: {e}")
    return envelope(serialize(ImageOut, created), "Image uploaded successfully")


@router.delete("/{image_id}")
def delete_image(image_id: uuid.UUID, db: Session = Depends(get_session),
                 user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    try:
        services.ImageService(db, storage).delete(image_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return envelope(message="Image deleted successfully")
