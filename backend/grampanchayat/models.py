"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Every table uses a UUID primary key and carries `created_at` /
`updated_at` timestamps; `updated_at` is refreshed by SQLAlchemy on
every UPDATE. Content rows that point at an uploaded file store its
public URL (and, for images, the object path inside the bucket).
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampedModel(SQLModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})


class User(TimestampedModel, table=True):
    """An admin-panel account.

    Fields:
    - `email`: unique login name
    - `password_hash`: hashed password string (never store plaintext)
    - `role`: one of `admin`, `editor`, `viewer`
    - `permissions`: task ids the user may edit, or `["*"]`
    """
    __tablename__ = "users"

    email: str = Field(index=True, nullable=False, unique=True)
    password_hash: str
    role: str = Field(default="editor")
    permissions: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_active: bool = True
    last_login: Optional[datetime] = None


class Representative(TimestampedModel, table=True):
    """An elected official or staff member shown on the homepage."""
    __tablename__ = "representatives"

    name: str
    mobile: str
    position: str = Field(index=True)
    image: Optional[str] = None
    fixed: bool = False
    order: int = Field(default=0, index=True)


class Document(TimestampedModel, table=True):
    """Free-form structured content grouped by category."""
    __tablename__ = "documents"

    title: str
    description: Optional[str] = None
    category: str = Field(index=True)
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))


class Certificate(TimestampedModel, table=True):
    """A certificate the panchayat issues, with the papers needed to apply."""
    __tablename__ = "certificates"

    certificate_name: str
    certificate_description: str = ""
    required_documents: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    apply_online_url: Optional[str] = None
    is_active: bool = Field(default=True, index=True)
    order: int = Field(default=0, index=True)


class Image(TimestampedModel, table=True):
    __tablename__ = "images"

    title: Optional[str] = None
    description: Optional[str] = None
    image_path: str
    image_url: str
    category: str = Field(default="general", index=True)
    is_active: bool = Field(default=True, index=True)
    order: int = 0


class HeroImage(TimestampedModel, table=True):
    """A homepage slider image. At most three are active at once."""
    __tablename__ = "hero_images"

    image_path: str
    image_url: str
    order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True, index=True)


class Infrastructure(TimestampedModel, table=True):
    """A facility count, e.g. number of schools, grouped by subcategory."""
    __tablename__ = "infrastructure"

    subcategory: str = Field(index=True)
    facility: str
    count: str
    order: int = Field(default=0, index=True)


class HistoricalEvent(TimestampedModel, table=True):
    __tablename__ = "historical_events"

    year: str
    event_name: str
    additional_info: Optional[str] = None


class HistoricalPlace(TimestampedModel, table=True):
    __tablename__ = "historical_places"

    place_name: str
    place_info: Optional[str] = None
    image: Optional[str] = None


class HistoricalAward(TimestampedModel, table=True):
    __tablename__ = "historical_awards"

    award_name: str
    award_description: Optional[str] = None
    year: Optional[str] = None


class GrampanchayatInfo(TimestampedModel, table=True):
    """Contact details of the panchayat. The table holds a single row."""
    __tablename__ = "grampanchayat_info"

    grampanchayat_name: str
    taluka_name: str
    district_name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    pincode: Optional[str] = None
    website: Optional[str] = None


class Announcement(TimestampedModel, table=True):
    """A public notice, usually backed by an uploaded PDF or office file."""
    __tablename__ = "announcements"

    title: str
    description: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[str] = None
    upload_date: datetime = Field(default_factory=utcnow)
    category: str = "general"
    is_active: bool = Field(default=True, index=True)
    order: int = 0
