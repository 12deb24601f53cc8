"""Representatives (elected officials) endpoints. Writes need task1."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlmodel import Session

from .. import models, repositories, services
from ..config import settings
from ..database import get_session
from ..permissions import TASK_REPRESENTATIVES, require_task
from ..schemas import RepresentativeOut, RepresentativesPayload, envelope, serialize
from ..storage import StorageError, get_storage, upload_file
from ..utils.uploads import read_image_upload

router = APIRouter(prefix="/api/representatives", tags=["representatives"])
can_edit = require_task(TASK_REPRESENTATIVES)


@router.get("")
def list_representatives(db: Session = Depends(get_session)):
    return envelope(serialize(RepresentativeOut, repositories.RepresentativeRepository(db).list_all()))


@router.post("")
def save_representatives(payload: RepresentativesPayload, db: Session = Depends(get_session),
                         user: models.User = Depends(can_edit)):
    """Create or update the full list; list position becomes display order."""
    items = [rep.model_dump() for rep in payload.representatives]
    try:
        saved = repositories.RepresentativeRepository(db).upsert_many(items)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return envelope(serialize(RepresentativeOut, saved), "Representatives saved successfully")


@router.post("/upload")
def upload_representative_image(image: UploadFile = File(...), category: Optional[str] = Form(default=None),
                                user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    """Store a photo and return its URL; the row is saved by the next POST."""
    payload = read_image_upload(image, settings.MAX_FILE_SIZE)
    try:
        stored = upload_file(storage, image.filename, payload, image.content_type, category or "officials")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Failed to upload file: {e}")
    return envelope({"filePath": stored.path, "imageUrl": stored.public_url}, "Image uploaded successfully")


@router.delete("/{rep_id}")
def delete_representative(rep_id: uuid.UUID, db: Session = Depends(get_session),
                          user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    try:
        services.RepresentativeService(db, storage).delete(rep_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return envelope(message="Representative deleted successfully")
