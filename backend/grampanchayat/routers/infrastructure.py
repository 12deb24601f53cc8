"""Infrastructure statistics endpoints. Writes need task5."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from .. import models, repositories
from ..database import get_session
from ..permissions import TASK_INFRASTRUCTURE, require_task
from ..schemas import InfrastructureOut, InfrastructurePayload, envelope, serialize

router = APIRouter(prefix="/api/infrastructure", tags=["infrastructure"])
can_edit = require_task(TASK_INFRASTRUCTURE)


@router.get("")
def list_infrastructure(db: Session = Depends(get_session)):
    return envelope(serialize(InfrastructureOut, repositories.InfrastructureRepository(db).list_all()))


@router.get("/subcategory/{subcategory}")
def list_by_subcategory(subcategory: str, db: Session = Depends(get_session)):
    rows = repositories.InfrastructureRepository(db).list_by_subcategory(subcategory)
    return envelope(serialize(InfrastructureOut, rows))


@router.post("")
def save_infrastructure(payload: InfrastructurePayload, db: Session = Depends(get_session),
                        user: models.User = Depends(can_edit)):
    """Append items; with `subcategory`, that subcategory is replaced.

    Replacing per subcategory lets separate admin screens maintain their
    own slices of the table independently.
    """
    items = [models.Infrastructure(**item.model_dump()) for item in payload.infrastructure]
    created = repositories.InfrastructureRepository(db).replace_and_append(items, payload.subcategory)
    return envelope(serialize(InfrastructureOut, created), "Infrastructure saved successfully")


@router.delete("/{item_id}")
def delete_infrastructure(item_id: uuid.UUID, db: Session = Depends(get_session),
                          user: models.User = Depends(can_edit)):
    repo = repositories.InfrastructureRepository(db)
    item = repo.get(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Infrastructure item not found")
    repo.delete(item)
    return envelope(message="Infrastructure item deleted successfully")
