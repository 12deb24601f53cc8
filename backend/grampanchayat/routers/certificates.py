"""Certificate catalogue endpoints. Writes need task3."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from .. import models, repositories
from ..database import get_session
from ..permissions import TASK_CERTIFICATES, require_task
from ..schemas import CertificateOut, CertificatesPayload, envelope, serialize

router = APIRouter(prefix="/api/certificates", tags=["certificates"])
can_edit = require_task(TASK_CERTIFICATES)


@router.get("")
def list_certificates(db: Session = Depends(get_session)):
    return envelope(serialize(CertificateOut, repositories.CertificateRepository(db).list_active()))


@router.post("")
def add_certificates(payload: CertificatesPayload, db: Session = Depends(get_session),
                     user: models.User = Depends(can_edit)):
    """Append certificates after the existing ones; nothing is replaced."""
    certs = [models.Certificate(**cert.model_dump()) for cert in payload.certificates]
    created = repositories.CertificateRepository(db).append_many(certs)
    return envelope(serialize(CertificateOut, created), "Certificates saved successfully")


@router.delete("/{cert_id}")
def delete_certificate(cert_id: uuid.UUID, db: Session = Depends(get_session), user: models.User = Depends(can_edit)):
    repo = repositories.CertificateRepository(db)
    cert = repo.get(cert_id)
    if not cert:
        raise HTTPException(status_code=404, detail="Certificate not found")
    repo.delete(cert)
    return envelope(message="Certificate deleted successfully")
