"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (users,
representatives, certificates, ...). Repositories return SQLModel
objects and perform commits/refreshes where appropriate. Bulk writes
go through `_commit_all`, so a batch either lands completely or is
rolled back.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func
from sqlmodel import Session, select

from . import models


def _commit_all(session: Session, rows: Sequence[Any], deleted: Iterable[Any] = ()) -> List[Any]:
    try:
        for row in deleted:
            session.delete(row)
        for row in rows:
            session.add(row)
        session.commit()
    except Exception:
        session.rollback()
        raise
    for row in rows:
        session.refresh(row)
    return list(rows)


def _next_order(session: Session, model) -> int:
    current = session.exec(select(func.max(model.order))).one()
    return 0 if current is None else current + 1


class UserRepository:
    """CRUD operations for `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        return _commit_all(self.session, [user])[0]

    def save(self, user: models.User) -> models.User:
        return _commit_all(self.session, [user])[0]

    def get(self, user_id: uuid.UUID) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def get_by_email(self, email: str) -> Optional[models.User]:
        """Return a `User` by email or `None` if not found."""
        stmt = select(models.User).where(models.User.email == email)
        return self.session.exec(stmt).first()

    def list_all(self) -> List[models.User]:
        stmt = select(models.User).order_by(models.User.created_at.desc())
        return self.session.exec(stmt).all()

    def delete(self, user: models.User) -> None:
        self.session.delete(user)
        self.session.commit()


class RepresentativeRepository:
    """Representatives, kept in display order."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Representative]:
        stmt = select(models.Representative).order_by(models.Representative.order, models.Representative.created_at)
        return self.session.exec(stmt).all()

    def get(self, rep_id: uuid.UUID) -> Optional[models.Representative]:
        return self.session.get(models.Representative, rep_id)

    def upsert_many(self, items: List[Dict[str, Any]]) -> List[models.Representative]:
        """Insert or update representatives, renumbering `order` by position.

        A fixed post submitted without an id reuses the row that already
        holds that post, so fixed positions never get duplicated. An id
        that does not exist aborts the whole batch with ValueError.
        """
        fixed_by_position = {
            r.position: r
            for r in self.session.exec(select(models.Representative).where(models.Representative.fixed == True)).all()  # noqa: E712
        }
        rows = []
        for index, item in enumerate(items):
            rep_id = item.get("id")
            if item.get("fixed") and not rep_id and item.get("position") in fixed_by_position:
                rep_id = fixed_by_position[item["position"]].id
            if rep_id:
                rep = self.get(rep_id)
                if not rep:
                    self.session.rollback()
                    raise ValueError(f"representative not found: {rep_id}")
            else:
                rep = models.Representative(name=item["name"], mobile=item["mobile"], position=item["position"])
            rep.name = item["name"]
            rep.mobile = item["mobile"]
            rep.position = item["position"]
            rep.image = item.get("image") or None
            rep.fixed = bool(item.get("fixed"))
            rep.order = index
            rows.append(rep)
        return _commit_all(self.session, rows)

    def delete(self, rep: models.Representative) -> None:
        self.session.delete(rep)
        self.session.commit()


class DocumentRepository:
    def __init__(self, session: Session):
        self.session = session

    def list(self, category: Optional[str] = None) -> List[models.Document]:
        """Return documents newest first, optionally for one `category`."""
        stmt = select(models.Document)
        if category:
            stmt = stmt.where(models.Document.category == category)
        return self.session.exec(stmt.order_by(models.Document.created_at.desc())).all()

    def get(self, doc_id: uuid.UUID) -> Optional[models.Document]:
        return self.session.get(models.Document, doc_id)

    def create_many(self, docs: List[models.Document]) -> List[models.Document]:
        return _commit_all(self.session, docs)

    def save(self, doc: models.Document) -> models.Document:
        return _commit_all(self.session, [doc])[0]

    def delete(self, doc: models.Document) -> None:
        self.session.delete(doc)
        self.session.commit()


class CertificateRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_active(self) -> List[models.Certificate]:
        stmt = select(models.Certificate).where(models.Certificate.is_active == True).order_by(models.Certificate.order)  # noqa: E712
        return self.session.exec(stmt).all()

    def get(self, cert_id: uuid.UUID) -> Optional[models.Certificate]:
        return self.session.get(models.Certificate, cert_id)

    def append_many(self, certs: List[models.Certificate]) -> List[models.Certificate]:
        """Append certificates after the current last `order`."""
        start = _next_order(self.session, models.Certificate)
        for offset, cert in enumerate(certs):
            cert.order = start + offset
        return _commit_all(self.session, certs)

    def delete(self, cert: models.Certificate) -> None:
        self.session.delete(cert)
        self.session.commit()


class ImageRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_active(self, category: Optional[str] = None) -> List[models.Image]:
        stmt = select(models.Image).where(models.Image.is_active == True)  # noqa: E712
        if category:
            stmt = stmt.where(models.Image.category == category)
        stmt = stmt.order_by(models.Image.order, models.Image.created_at.desc())
        return self.session.exec(stmt).all()

    def get(self, image_id: uuid.UUID) -> Optional[models.Image]:
        return self.session.get(models.Image, image_id)

    def create(self, image: models.Image) -> models.Image:
        return _commit_all(self.session, [image])[0]

    def delete(self, image: models.Image) -> None:
        self.session.delete(image)
        self.session.commit()


class HeroImageRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_active(self, limit: int = 3) -> List[models.HeroImage]:
        stmt = (
            select(models.HeroImage)
            .where(models.HeroImage.is_active == True)  # noqa: E712
            .order_by(models.HeroImage.order, models.HeroImage.created_at.desc())
            .limit(limit)
        )
        return self.session.exec(stmt).all()

    def count_active(self) -> int:
        stmt = select(func.count()).select_from(models.HeroImage).where(models.HeroImage.is_active == True)  # noqa: E712
        return self.session.exec(stmt).one()

    def get(self, hero_id: uuid.UUID) -> Optional[models.HeroImage]:
        return self.session.get(models.HeroImage, hero_id)

    def save(self, hero: models.HeroImage) -> models.HeroImage:
        return _commit_all(self.session, [hero])[0]

    def delete(self, hero: models.HeroImage) -> None:
        self.session.delete(hero)
        self.session.commit()


class InfrastructureRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Infrastructure]:
        return self.session.exec(select(models.Infrastructure).order_by(models.Infrastructure.order)).all()

    def list_by_subcategory(self, subcategory: str) -> List[models.Infrastructure]:
        stmt = (
            select(models.Infrastructure)
            .where(models.Infrastructure.subcategory == subcategory)
            .order_by(models.Infrastructure.order)
        )
        return self.session.exec(stmt).all()

    def get(self, item_id: uuid.UUID) -> Optional[models.Infrastructure]:
        return self.session.get(models.Infrastructure, item_id)

    def replace_and_append(self, items: List[models.Infrastructure],
                           subcategory: Optional[str] = None) -> List[models.Infrastructure]:
        """Drop `subcategory`'s rows (when given) and append `items`.

        Numbering continues after the highest remaining `order`, and the
        delete and inserts commit together.
        """
        stale = self.list_by_subcategory(subcategory) if subcategory else []
        stale_ids = {row.id for row in stale}
        remaining = [row.order for row in self.list_all() if row.id not in stale_ids]
        start = max(remaining) + 1 if remaining else 0
        for offset, item in enumerate(items):
            item.order = start + offset
        return _commit_all(self.session, items, deleted=stale)

    def delete(self, item: models.Infrastructure) -> None:
        self.session.delete(item)
        self.session.commit()


class HistoricalRepository:
    """Events, places and awards, saved together from one admin form."""
    def __init__(self, session: Session):
        self.session = session

    def list_events(self) -> List[models.HistoricalEvent]:
        return self.session.exec(select(models.HistoricalEvent).order_by(models.HistoricalEvent.year.desc())).all()

    def list_places(self) -> List[models.HistoricalPlace]:
        return self.session.exec(select(models.HistoricalPlace).order_by(models.HistoricalPlace.place_name)).all()

    def list_awards(self) -> List[models.HistoricalAward]:
        return self.session.exec(select(models.HistoricalAward).order_by(models.HistoricalAward.year.desc())).all()

    def get(self, model, row_id: uuid.UUID):
        return self.session.get(model, row_id)

    def _upsert_rows(self, model, items: List[Dict[str, Any]]) -> List[Any]:
        rows = []
        for item in items:
            data = dict(item)
            row_id = data.pop("id", None)
            if row_id:
                row = self.get(model, row_id)
                if not row:
                    self.session.rollback()
                    raise ValueError(f"{model.__tablename__} row not found: {row_id}")
                for key, value in data.items():
                    setattr(row, key, value)
            else:
                row = model(**data)
            rows.append(row)
        return rows

    def save_all(self, events: List[Dict[str, Any]], places: List[Dict[str, Any]],
                 awards: List[Dict[str, Any]]) -> Dict[str, List[Any]]:
        saved_events = self._upsert_rows(models.HistoricalEvent, events)
        saved_places = self._upsert_rows(models.HistoricalPlace, places)
        saved_awards = self._upsert_rows(models.HistoricalAward, awards)
        _commit_all(self.session, saved_events + saved_places + saved_awards)
        return {"events": saved_events, "places": saved_places, "awards": saved_awards}

    def delete(self, row) -> None:
        self.session.delete(row)
        self.session.commit()


class GrampanchayatInfoRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self) -> Optional[models.GrampanchayatInfo]:
        stmt = select(models.GrampanchayatInfo).order_by(models.GrampanchayatInfo.created_at).limit(1)
        return self.session.exec(stmt).first()

    def save(self, data: Dict[str, Any]) -> models.GrampanchayatInfo:
        """Update the single info row, creating it on first save."""
        info = self.get()
        if info is None:
            info = models.GrampanchayatInfo(**data)
        else:
            for key, value in data.items():
                setattr(info, key, value)
        return _commit_all(self.session, [info])[0]


class AnnouncementRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_active(self) -> List[models.Announcement]:
        stmt = (
            select(models.Announcement)
            .where(models.Announcement.is_active == True)  # noqa: E712
            .order_by(models.Announcement.upload_date.desc(), models.Announcement.created_at.desc())
        )
        return self.session.exec(stmt).all()

    def get(self, ann_id: uuid.UUID) -> Optional[models.Announcement]:
        return self.session.get(models.Announcement, ann_id)

    def create_many(self, announcements: List[models.Announcement]) -> List[models.Announcement]:
        return _commit_all(self.session, announcements)

    def delete(self, announcement: models.Announcement) -> None:
        self.session.delete(announcement)
        self.session.commit()
