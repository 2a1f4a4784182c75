"""
Applicant Schemas

Pydantic schemas for request validation and response serialization.

ApplicantCreate validates every field independently, so a submission with
several problems reports all of them at once.
"""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, field_validator

# Re-use enums from models (they work with Pydantic too!)
from volunteer_api.modules.applicants.models import Availability, Interest
from volunteer_api.modules.shared import CamelModel

FULL_NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 20
BIO_MAX_LENGTH = 300


def _strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ApplicantCreate(CamelModel):
    """Request body for POST /applicants."""

    full_name: str
    email: EmailStr
    phone: str | None = None
    interests: list[Interest]
    availability: Availability
    bio: str | None = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full name is required")
        if len(value) > FULL_NAME_MAX_LENGTH:
            raise ValueError(f"Full name cannot exceed {FULL_NAME_MAX_LENGTH} characters")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        value = _strip_optional(value)
        if value is not None and len(value) > PHONE_MAX_LENGTH:
            raise ValueError(f"Phone number cannot exceed {PHONE_MAX_LENGTH} characters")
        return value

    @field_validator("interests")
    @classmethod
    def validate_interests(cls, value: list[Interest]) -> list[Interest]:
        if not value:
            raise ValueError("At least one interest must be selected")
        # Interests are a set; keep first-selection order
        return list(dict.fromkeys(value))

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, value: str | None) -> str | None:
        value = _strip_optional(value)
        if value is not None and len(value) > BIO_MAX_LENGTH:
            raise ValueError(f"Bio cannot exceed {BIO_MAX_LENGTH} characters")
        return value


class ApplicantResponse(CamelModel):
    """Complete applicant record as shown on the admin dashboard."""

    id: UUID
    full_name: str
    email: str
    phone: str | None = None
    interests: list[Interest]
    availability: Availability
    bio: str | None = None
    reviewed: bool
    created_at: datetime
    updated_at: datetime


class ApplicantSubmissionResponse(CamelModel):
    """Response after a successful public submission."""

    id: UUID
    full_name: str
    email: str
    reviewed: bool
    created_at: datetime
    message: str = "Application submitted successfully"


class ApplicantListResponse(CamelModel):
    """Filtered applicant list, newest first."""

    count: int
    applicants: list[ApplicantResponse]


class ReviewStatusResponse(ApplicantResponse):
    """The applicant after its review flag was toggled."""

    message: str
