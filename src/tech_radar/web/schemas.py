"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, field_validator

from tech_radar.radar.defaults import BLIP_DESCRIPTION_MAX, BLIP_NAME_MAX
from tech_radar.radar.models import Blip, Quadrant, Radar, Ring

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# (pattern, message) pairs checked in order
_PASSWORD_RULES = (
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^a-zA-Z0-9]"), "Password must contain at least one special character"),
)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


RadarDescription = Annotated[
    str | None, Field(max_length=500), AfterValidator(_blank_to_none)
]
BlipDescription = Annotated[
    str | None,
    Field(max_length=BLIP_DESCRIPTION_MAX),
    AfterValidator(_blank_to_none),
]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def _valid_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not _EMAIL_RE.match(v):
            raise ValueError("Invalid email")
        return v

    @field_validator("password")
    @classmethod
    def _strong_password(cls, v: str) -> str:
        if len(v) < 12:
            raise ValueError("Password must be at least 12 characters")
        for pattern, message in _PASSWORD_RULES:
            if not pattern.search(v):
                raise ValueError(message)
        return v


class RadarRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: RadarDescription = None


class BlipRequest(BaseModel):
    name: str = Field(min_length=1, max_length=BLIP_NAME_MAX)
    description: BlipDescription = None
    quadrant_id: str = Field(min_length=1)
    ring_id: str = Field(min_length=1)
    is_new: bool = True


class QuadrantUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    color: str = Field(pattern=r"^#[0-9a-fA-F]{6}$")


class RingUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=50)


class ImportRequest(BaseModel):
    csv_text: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    status: str
    version: str


class UserRecord(BaseModel):
    id: str
    name: str
    email: str


class QuadrantRecord(BaseModel):
    id: str
    name: str
    position: int
    color: str

    @classmethod
    def from_model(cls, q: Quadrant) -> QuadrantRecord:
        return cls(id=q.id, name=q.name, position=q.position, color=q.color)


class RingRecord(BaseModel):
    id: str
    name: str
    position: int
    opacity: float

    @classmethod
    def from_model(cls, r: Ring) -> RingRecord:
        return cls(id=r.id, name=r.name, position=r.position, opacity=r.opacity)


class BlipRecord(BaseModel):
    id: str
    name: str
    description: str | None
    is_new: bool
    quadrant_id: str
    ring_id: str
    offset_x: float
    offset_y: float
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, b: Blip) -> BlipRecord:
        return cls(
            id=b.id,
            name=b.name,
            description=b.description,
            is_new=b.is_new,
            quadrant_id=b.quadrant_id,
            ring_id=b.ring_id,
            offset_x=b.offset_x,
            offset_y=b.offset_y,
            created_at=b.created_at,
            updated_at=b.updated_at,
        )


class RadarSummary(BaseModel):
    id: str
    name: str
    description: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, r: Radar) -> RadarSummary:
        return cls(
            id=r.id,
            name=r.name,
            description=r.description,
            created_at=r.created_at,
            updated_at=r.updated_at,
        )


class RadarDetail(RadarSummary):
    quadrants: list[QuadrantRecord]
    rings: list[RingRecord]
    blips: list[BlipRecord]

    @classmethod
    def from_model(cls, r: Radar) -> RadarDetail:
        return cls(
            id=r.id,
            name=r.name,
            description=r.description,
            created_at=r.created_at,
            updated_at=r.updated_at,
            quadrants=[QuadrantRecord.from_model(q) for q in r.quadrants],
            rings=[RingRecord.from_model(g) for g in r.rings],
            blips=[BlipRecord.from_model(b) for b in r.blips],
        )


class RadarsResponse(BaseModel):
    radars: list[RadarSummary]


class BlipsResponse(BaseModel):
    blips: list[BlipRecord]


class ImportResponse(BaseModel):
    imported: int
    errors: list[str]
    message: str | None = None
