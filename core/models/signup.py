# =============================================================================
# core/models/signup.py - Event Signup Schemas
# =============================================================================
# Registration for the synchronized event. Consent fields are stored for
# GDPR bookkeeping. The verification token is generated server-side and is
# never part of any response model.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from .base import ApiModel
from .dream import EMAIL_PATTERN


class ParticipationLevel(str, Enum):
    ATTEND = "attend"
    VOLUNTEER = "volunteer"
    COORDINATOR = "coordinator"


class SignupCreate(ApiModel):
    """
    Payload for POST /api/pajama-party/signup.

    Example:
        {
            "name": "Sam",
            "email": "sam@example.org",
            "preferredStation": "Wien Hauptbahnhof",
            "participationLevel": "volunteer",
            "privacyConsent": true
        }
    """

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    preferred_station: str = Field(..., min_length=1, max_length=255)
    participation_level: ParticipationLevel
    message: str | None = Field(default=None, max_length=1000)
    newsletter_consent: bool = False
    privacy_consent: bool
    user_agent: str | None = Field(default=None, max_length=500)
    consent_version: str = Field(default="1.0", max_length=20)
    source_page: str | None = Field(default=None, max_length=500)

    @field_validator("name", "preferred_station", "message", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email address")
        return value

    @field_validator("privacy_consent")
    @classmethod
    def require_consent(cls, value: bool) -> bool:
        if not value:
            raise ValueError("Privacy consent is required")
        return value


class SignupResponse(ApiModel):
    success: bool = True
    message: str = (
        "Thank you for joining the European Pajama Party! "
        "Please check your email for verification instructions."
    )
    signup_id: str
    next_steps: list[str] = Field(default_factory=list)
