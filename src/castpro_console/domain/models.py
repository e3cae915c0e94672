"""Domain models for casting calls and applications."""

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class CastingCallStatus(StrEnum):
    """Staff-controlled availability of a casting call."""

    OPEN = "open"
    CLOSED = "closed"


class ApplicationStatus(StrEnum):
    """Triage status of a casting application."""

    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    HIRED = "hired"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


def _parse_calendar_date(value: object) -> object:
    # The backend serializes dates either as plain dates or full timestamps.
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        return cleaned[:10]
    return value


class ApplicationVideo(BaseModel):
    """Audition video attached to an application."""

    id: int
    casting_application_id: int
    video_path: str
    video_url: str | None = None


class CastingApplication(BaseModel):
    """A talent's submission against a casting call."""

    id: int
    casting_call_id: int
    full_name: str
    address: str
    phone: str
    email: str | None = None
    gender: Gender
    experience_story: str
    image_path: str
    status: ApplicationStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None
    casting_call: "CastingCall | None" = None
    videos: list[ApplicationVideo] | None = None


class CastingCall(BaseModel):
    """A staff-created casting posting."""

    id: int
    title: str
    description: str
    requirements: str | None = None
    deadline: date | None = None
    status: CastingCallStatus = CastingCallStatus.OPEN
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    applications: list[CastingApplication] | None = None

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, value: object) -> object:
        return _parse_calendar_date(value)

    def count_by_status(self) -> dict[ApplicationStatus, int]:
        """Count embedded applications per status."""
        counts = {status: 0 for status in ApplicationStatus}
        for application in self.applications or []:
            counts[application.status] += 1
        return counts


class CastingCallInput(BaseModel):
    """Form payload for creating or updating a casting call."""

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    requirements: str | None = None
    deadline: date | None = None
    status: CastingCallStatus = CastingCallStatus.OPEN

    @field_validator("requirements", mode="before")
    @classmethod
    def blank_requirements(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, value: object) -> object:
        return _parse_calendar_date(value)


class CastingCallUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    requirements: str | None = None
    deadline: date | None = None
    status: CastingCallStatus | None = None

    @field_validator("requirements", mode="before")
    @classmethod
    def blank_requirements(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, value: object) -> object:
        return _parse_calendar_date(value)


CastingApplication.model_rebuild()
