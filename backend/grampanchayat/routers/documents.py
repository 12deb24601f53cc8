"""Structured documents endpoints. Writes need task2."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from .. import models, repositories
from ..database import get_session
from ..permissions import TASK_DOCUMENTS, require_task
from ..schemas import DocumentIn, DocumentOut, DocumentsPayload, envelope, serialize

router = APIRouter(prefix="/api/documents", tags=["documents"])
can_edit = require_task(TASK_DOCUMENTS)


def _get_or_404(repo: repositories.DocumentRepository, doc_id: uuid.UUID) -> models.Document:
    doc = repo.get(doc_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    return doc


@router.get("")
def list_documents(category: Optional[str] = None, db: Session = Depends(get_session)):
    return envelope(serialize(DocumentOut, repositories.DocumentRepository(db).list(category)))


@router.get("/{doc_id}")
def get_document(doc_id: uuid.UUID, db: Session = Depends(get_session)):
    return envelope(serialize(DocumentOut, _get_or_404(repositories.DocumentRepository(db), doc_id)))


@router.post("")
def create_documents(payload: DocumentsPayload, db: Session = Depends(get_session),
                     user: models.User = Depends(can_edit)):
    docs = [models.Document(**doc.model_dump()) for doc in payload.documents]
    created = repositories.DocumentRepository(db).create_many(docs)
    return envelope(serialize(DocumentOut, created), "Documents saved successfully")


@router.put("/{doc_id}")
def update_document(doc_id: uuid.UUID, payload: DocumentIn, db: Session = Depends(get_session),
                    user: models.User = Depends(can_edit)):
    repo = repositories.DocumentRepository(db)
    doc = _get_or_404(repo, doc_id)
    for key, value in payload.model_dump().items():
        setattr(doc, key, value)
    return envelope(serialize(DocumentOut, repo.save(doc)), "Document updated successfully")


@router.delete("/{doc_id}")
def delete_document(doc_id: uuid.UUID, db: Session = Depends(get_session), user: models.User = Depends(can_edit)):
    repo = repositories.DocumentRepository(db)
    repo.delete(_get_or_404(repo, doc_id))
    return envelope(message="Document deleted successfully")
