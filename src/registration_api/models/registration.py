"""SQLModel Registration model and its API schemas"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel


class SessionMode(str, enum.Enum):
    MORNING = "Morning"
    EVENING = "Evening"

    @classmethod
    def values(cls) -> list[str]:
        return [mode.value for mode in cls]


DEFAULT_SESSION = SessionMode.MORNING


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from stores without tz support"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Registration(SQLModel, table=True):
    """A single registration record.

    Records are created and deleted, never updated in place.
    """

    __tablename__ = "registrations"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    # Stored trimmed and lowercased; the unique index is the authoritative check
    email: str = Field(unique=True, index=True)
    phone: Optional[str] = None
    location: Optional[str] = None
    course_of_interest: Optional[str] = None
    selected_session: SessionMode = Field(
        default=DEFAULT_SESSION,
        sa_column=Column(
            SAEnum(
                SessionMode,
                name="registration_session_mode",
                native_enum=True,
                values_callable=lambda enum: [e.value for e in enum],
            ),
            nullable=False,
            server_default=DEFAULT_SESSION.value,
        ),
    )
    # Stored in UTC
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )


class RegistrationCreate(BaseModel):
    """Incoming registration payload (camelCase keys)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    course_of_interest: Optional[str] = None
    selected_session: Optional[str] = None


class RegistrationRead(BaseModel):
    """Outgoing registration representation (camelCase keys)"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    location: Optional[str] = None
    course_of_interest: Optional[str] = None
    selected_session: SessionMode
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)

    @classmethod
    def serialize(cls, registration: Registration) -> dict:
        return cls.model_validate(registration).model_dump(mode="json", by_alias=True)
