"""Authentication schemas."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from volunteer_api.modules.shared import CamelModel

PASSWORD_MIN_LENGTH = 6
_PASSWORD_POLICY = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    """Admin registration request schema."""

    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
            )
        if not _PASSWORD_POLICY.match(value):
            raise ValueError(
                "Password must contain at least one uppercase letter, "
                "one lowercase letter, and one number"
            )
        return value


class AuthResponse(CamelModel):
    """Returned by login and registration."""

    id: UUID
    email: str
    token: str
    token_type: str = "bearer"


class AdminProfileResponse(CamelModel):
    """Admin identity, without the password hash."""

    id: UUID
    email: str
    created_at: datetime
