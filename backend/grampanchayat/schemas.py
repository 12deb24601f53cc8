"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
the routers and tests. Content resources are exchanged in camelCase
(`certificateName`), while users, representatives and hero images keep
their column names, which is what the public site reads.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        coerce_numbers_to_str=True,
    )


class RowModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, coerce_numbers_to_str=True)


def serialize(schema, obj):
    """Dump a row (or list of rows) through `schema` into JSON-ready data."""
    if obj is None:
        return None
    if isinstance(obj, (list, tuple)):
        return [serialize(schema, o) for o in obj]
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


def envelope(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"success": True}
    if message is not None:
        out["message"] = message
    out["data"] = data
    return out


# --- auth & users ---------------------------------------------------------

class LoginIn(BaseModel):
    """Payload for the login endpoint."""
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ChangePasswordIn(CamelModel):
    current_password: str
    new_password: str = Field(min_length=6)


class UserCreate(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: str = "editor"
    permissions: List[str] = Field(default_factory=list)


class UserUpdate(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None
    permissions: Optional[List[str]] = None
    is_active: Optional[bool] = None


class UserOut(RowModel):
    """User as returned by the API; the password hash never leaves the DB."""
    id: uuid.UUID
    email: str
    role: str
    permissions: List[str] = Field(default_factory=list)
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

    @field_validator("permissions", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return v or []


# --- representatives ------------------------------------------------------

class RepresentativeIn(RowModel):
    id: Optional[uuid.UUID] = None
    name: str = Field(min_length=1)
    mobile: str = Field(min_length=1)
    position: str = Field(min_length=1)
    image: Optional[str] = None
    fixed: bool = False


class RepresentativesPayload(BaseModel):
    representatives: List[RepresentativeIn]


class RepresentativeOut(RowModel):
    id: uuid.UUID
    name: str
    mobile: str
    position: str
    image: Optional[str] = None
    fixed: bool
    order: int
    created_at: datetime
    updated_at: datetime


# --- documents ------------------------------------------------------------

class DocumentIn(CamelModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    category: str = Field(min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)


class DocumentsPayload(BaseModel):
    documents: List[DocumentIn]


class DocumentOut(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    category: str
    data: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


# --- certificates ---------------------------------------------------------

class CertificateIn(CamelModel):
    certificate_name: str = ""
    certificate_description: str = ""
    required_documents: List[str] = Field(default_factory=list)
    apply_online_url: Optional[str] = None
    is_active: bool = True


class CertificatesPayload(BaseModel):
    certificates: List[CertificateIn]


class CertificateOut(CamelModel):
    id: uuid.UUID
    certificate_name: str
    certificate_description: str
    required_documents: List[str] = Field(default_factory=list)
    apply_online_url: Optional[str] = None
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime


# --- images ---------------------------------------------------------------

class ImageOut(CamelModel):
    id: uuid.UUID
    title: Optional[str] = None
    description: Optional[str] = None
    image_path: str
    image_url: str
    category: str
    is_active: bool
    order: int
    created_at: datetime
    updated_at: datetime


class HeroImageOut(RowModel):
    id: uuid.UUID
    image_path: str
    image_url: str
    order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class HeroOrderIn(BaseModel):
    order: Optional[int] = None


# --- infrastructure -------------------------------------------------------

class InfrastructureIn(CamelModel):
    subcategory: str = Field(min_length=1)
    facility: str = Field(min_length=1)
    count: str


class InfrastructurePayload(BaseModel):
    infrastructure: List[InfrastructureIn]
    subcategory: Optional[str] = None


class InfrastructureOut(CamelModel):
    id: uuid.UUID
    subcategory: str
    facility: str
    count: str
    order: int
    created_at: datetime
    updated_at: datetime


# --- historical data ------------------------------------------------------

class HistoricalEventIn(CamelModel):
    id: Optional[uuid.UUID] = None
    year: str = Field(min_length=1, max_length=10)
    event_name: str = Field(min_length=1)
    additional_info: Optional[str] = None


class HistoricalPlaceIn(CamelModel):
    id: Optional[uuid.UUID] = None
    place_name: str = Field(min_length=1)
    place_info: Optional[str] = None
    image: Optional[str] = None


class HistoricalAwardIn(CamelModel):
    id: Optional[uuid.UUID] = None
    award_name: str = Field(min_length=1)
    award_description: Optional[str] = None
    year: Optional[str] = None


class HistoricalPayload(BaseModel):
    events: List[HistoricalEventIn] = Field(default_factory=list)
    places: List[HistoricalPlaceIn] = Field(default_factory=list)
    awards: List[HistoricalAwardIn] = Field(default_factory=list)


class HistoricalEventOut(CamelModel):
    id: uuid.UUID
    year: str
    event_name: str
    additional_info: Optional[str] = None


class HistoricalPlaceOut(CamelModel):
    id: uuid.UUID
    place_name: str
    place_info: Optional[str] = None
    image: Optional[str] = None


class HistoricalAwardOut(CamelModel):
    id: uuid.UUID
    award_name: str
    award_description: Optional[str] = None
    year: Optional[str] = None


# --- grampanchayat info ---------------------------------------------------

class GrampanchayatInfoIn(CamelModel):
    grampanchayat_name: str = Field(min_length=1)
    taluka_name: str = Field(min_length=1)
    district_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: Optional[str] = None
    address: Optional[str] = None
    pincode: Optional[str] = None
    website: Optional[str] = None


class GrampanchayatInfoOut(GrampanchayatInfoIn):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


# --- announcements --------------------------------------------------------

class AnnouncementIn(CamelModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[str] = None
    upload_date: Optional[datetime] = None
    category: str = "general"
    is_active: bool = True


class AnnouncementsPayload(BaseModel):
    announcements: List[AnnouncementIn]


class AnnouncementOut(CamelModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[str] = None
    upload_date: datetime
    category: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
