"""Village history endpoints: events, places and awards. Writes need task6."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from .. import models, services
from ..database import get_session
from ..permissions import TASK_HISTORICAL, require_task
from ..schemas import (
    HistoricalAwardOut,
    HistoricalEventOut,
    HistoricalPayload,
    HistoricalPlaceOut,
    envelope,
    serialize,
)
from ..storage import get_storage

router = APIRouter(prefix="/api/historical", tags=["historical"])
can_edit = require_task(TASK_HISTORICAL)


def serialize_historical(data: dict) -> dict:
    return {
        "events": serialize(HistoricalEventOut, data["events"]),
        "places": serialize(HistoricalPlaceOut, data["places"]),
        "awards": serialize(HistoricalAwardOut, data["awards"]),
    }


@router.get("")
def get_historical(db: Session = Depends(get_session), storage=Depends(get_storage)):
    return envelope(serialize_historical(services.HistoricalService(db, storage).get_all()))


@router.post("")
def save_historical(payload: HistoricalPayload, db: Session = Depends(get_session),
                    user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    """Upsert all three lists by id in a single transaction."""
    svc = services.HistoricalService(db, storage)
    try:
        saved = svc.repo.save_all(
            [e.model_dump() for e in payload.events],
            [p.model_dump() for p in payload.places],
            [a.model_dump() for a in payload.awards],
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return envelope(serialize_historical(saved), "Historical data saved successfully")


def _delete(model, row_id: uuid.UUID, label: str, db: Session, storage):
    try:
        services.HistoricalService(db, storage).delete(model, row_id, label)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return envelope(message=f"Historical {label} deleted successfully")


@router.delete("/events/{row_id}")
def delete_event(row_id: uuid.UUID, db: Session = Depends(get_session),
                 user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    return _delete(models.HistoricalEvent, row_id, "event", db, storage)


@router.delete("/places/{row_id}")
def delete_place(row_id: uuid.UUID, db: Session = Depends(get_session),
                 user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    return _delete(models.HistoricalPlace, row_id, "place", db, storage)


@router.delete("/awards/{row_id}")
def delete_award(row_id: uuid.UUID, db: Session = Depends(get_session),
                 user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    return _delete(models.HistoricalAward, row_id, "award", db, storage)
