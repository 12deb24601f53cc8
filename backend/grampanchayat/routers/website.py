"""Public read-only aggregates used to render the static site."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from .. import repositories
from ..database import get_session
from ..schemas import (
    AnnouncementOut,
    CertificateOut,
    GrampanchayatInfoOut,
    HeroImageOut,
    ImageOut,
    InfrastructureOut,
    RepresentativeOut,
    envelope,
    serialize,
)
from .historical import serialize_historical

router = APIRouter(prefix="/api/website", tags=["website"])


@router.get("/all")
def all_website_data(db: Session = Depends(get_session)):
    """Everything the public site needs in one response."""
    history = repositories.HistoricalRepository(db)
    data = {
        "representatives": serialize(RepresentativeOut, repositories.RepresentativeRepository(db).list_all()),
        "certificates": serialize(CertificateOut, repositories.CertificateRepository(db).list_active()),
        "images": serialize(ImageOut, repositories.ImageRepository(db).list_active()),
        "infrastructure": serialize(InfrastructureOut, repositories.InfrastructureRepository(db).list_all()),
        "historical": serialize_historical({
            "events": history.list_events(),
            "places": history.list_places(),
            "awards": history.list_awards(),
        }),
        "grampanchayat": serialize(GrampanchayatInfoOut, repositories.GrampanchayatInfoRepository(db).get()),
        "heroImages": serialize(HeroImageOut, repositories.HeroImageRepository(db).list_active()),
        "announcements": serialize(AnnouncementOut, repositories.AnnouncementRepository(db).list_active()),
    }
    return envelope(data)


@router.get("/officials")
def officials(db: Session = Depends(get_session)):
    return envelope(serialize(RepresentativeOut, repositories.RepresentativeRepository(db).list_all()))


@router.get("/gallery")
def gallery(db: Session = Depends(get_session)):
    return envelope(serialize(ImageOut, repositories.ImageRepository(db).list_active("gallery")))
