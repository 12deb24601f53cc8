"""Announcement endpoints. Writes need task8."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlmodel import Session

from .. import models, repositories, services
from ..config import settings
from ..database import get_session
from ..permissions import TASK_ANNOUNCEMENTS, require_task
from ..schemas import AnnouncementOut, AnnouncementsPayload, envelope, serialize
from ..storage import StorageError, get_storage, upload_file
from ..utils.uploads import format_kb, read_document_upload

router = APIRouter(prefix="/api/announcements", tags=["announcements"])
can_edit = require_task(TASK_ANNOUNCEMENTS)


@router.get("")
def list_announcements(db: Session = Depends(get_session)):
    return envelope(serialize(AnnouncementOut, repositories.AnnouncementRepository(db).list_active()))


@router.post("")
def create_announcements(payload: AnnouncementsPayload, db: Session = Depends(get_session),
                         user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    created = services.AnnouncementService(db, storage).create_many([a.model_dump() for a in payload.announcements])
    return envelope(serialize(AnnouncementOut, created), "Announcements saved successfully")


@router.post("/upload")
def upload_document(document: UploadFile = File(...), category: Optional[str] = Form(default=None),
                    user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    """Store a PDF/Word/Excel file; the announcement row is created separately."""
    payload = read_document_upload(document, settings.MAX_DOCUMENT_SIZE)
    try:
        stored = upload_file(storage, document.filename, payload, document.content_type, category or "documents")
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Failed to upload file: {e}")
    data = {
        "filePath": stored.public_url,
        "fileName": stored.file_name,
        "fileType": stored.content_type,
        "fileSize": format_kb(stored.size),
    }
    return envelope(data, "Document uploaded successfully")


@router.delete("/{ann_id}")
def delete_announcement(ann_id: uuid.UUID, db: Session = Depends(get_session),
                        user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    try:
        services.AnnouncementService(db, storage).delete(ann_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return envelope(message="Announcement deleted successfully")
