"""Grampanchayat contact info endpoints. Writes need task7."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import models, repositories
from ..database import get_session
from ..permissions import TASK_GRAMPANCHAYAT_INFO, require_task
from ..schemas import GrampanchayatInfoIn, GrampanchayatInfoOut, envelope, serialize

router = APIRouter(prefix="/api/grampanchayat", tags=["grampanchayat"])
can_edit = require_task(TASK_GRAMPANCHAYAT_INFO)


@router.get("")
def get_info(db: Session = Depends(get_session)):
    """Return the info row, or `data: null` before the first save."""
    return envelope(serialize(GrampanchayatInfoOut, repositories.GrampanchayatInfoRepository(db).get()))


@router.post("")
def save_info(payload: GrampanchayatInfoIn, db: Session = Depends(get_session),
              user: models.User = Depends(can_edit)):
    info = repositories.GrampanchayatInfoRepository(db).save(payload.model_dump())
    return envelope(serialize(GrampanchayatInfoOut, info), "Grampanchayat info saved successfully")
