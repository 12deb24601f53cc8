"""Homepage slider endpoints. Writes need task9; at most three images."""

import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlmodel import Session

from .. import models, repositories, services
from ..config import settings
from ..database import get_session
from ..permissions import TASK_HERO_IMAGES, require_task
from ..schemas import HeroImageOut, HeroOrderIn, envelope, serialize
from ..storage import StorageError, get_storage
from ..utils.uploads import read_image_upload

router = APIRouter(prefix="/api/hero-images", tags=["hero-images"])
can_edit = require_task(TASK_HERO_IMAGES)


@router.get("")
def list_hero_images(db: Session = Depends(get_session)):
    return envelope(serialize(HeroImageOut, repositories.HeroImageRepository(db).list_active()))


@router.post("/upload")
def upload_hero_image(image: UploadFile = File(...), db: Session = Depends(get_session),
                      user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    payload = read_image_upload(image, settings.MAX_FILE_SIZE)
    try:
        hero = services.HeroImageService(db, storage).upload(image.filename, payload, image.content_type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=f"Failed to upload file: {e}")
    return envelope(serialize(HeroImageOut, hero), "Hero image uploaded successfully")


@router.patch("/{hero_id}/order")
def update_hero_order(hero_id: uuid.UUID, payload: HeroOrderIn, db: Session = Depends(get_session),
                      user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    try:
        hero = services.HeroImageService(db, storage).set_order(hero_id, payload.order)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return envelope(serialize(HeroImageOut, hero), "Hero image order updated successfully")


@router.delete("/{hero_id}")
def delete_hero_image(hero_id: uuid.UUID, db: Session = Depends(get_session),
                      user: models.User = Depends(can_edit), storage=Depends(get_storage)):
    svc = services.HeroImageService(db, storage)
    hero = svc.repo.get(hero_id)
    if not hero:
        raise HTTPException(status_code=404, detail="Hero image not found")
    data = serialize(HeroImageOut, hero)
    svc.delete(hero_id)
    return envelope(data, "Hero image deleted successfully")
