# =============================================================================
# core/models/dream.py - Dream Schemas
# =============================================================================
# A "dream" is one visitor's wish for a train route from an origin station to
# a destination city.
#
# - DreamCreate: validated submission payload (client -> server)
# - PublicDream: listing entry, never carries the email address
# - DreamSubmissionResponse: confirmation after insert
#
# `id` and `created_at` are always assigned server-side; the create model
# simply does not have those fields, so client-supplied values are ignored.
# =============================================================================

import re
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from .base import ApiModel

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")


class DreamCreate(ApiModel):
    """
    Submission payload for POST /api/dreams.

    Example:
        {
            "originStation": "Berlin Hauptbahnhof, Berlin, Germany",
            "destinationCity": "Vienna",
            "dreamerName": "Alex",
            "email": "alex@example.org",
            "why": "Night trains beat flying."
        }
    """

    origin_station: str = Field(..., min_length=1, max_length=255)
    destination_city: str = Field(..., min_length=1, max_length=255)
    dreamer_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    why: str | None = Field(default=None, max_length=2000)
    origin_country: str | None = Field(default=None, max_length=100)
    destination_country: str | None = Field(default=None, max_length=100)

    @field_validator(
        "origin_station",
        "destination_city",
        "dreamer_name",
        "why",
        "origin_country",
        "destination_country",
        mode="before",
    )
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("dreamer_name", "why", "origin_country", "destination_country")
    @classmethod
    def empty_to_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        if value is not None and not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value

    @model_validator(mode="after")
    def check_route(self) -> "DreamCreate":
        if self.origin_station.casefold() == self.destination_city.casefold():
            raise ValueError("Origin and destination must be different")
        return self


class PublicDream(ApiModel):
    """A dream as shown publicly. Email is deliberately absent."""

    id: str
    dreamer_name: str | None = None
    origin_station: str
    destination_city: str
    origin_country: str | None = None
    destination_country: str | None = None
    why: str | None = None
    coordinates: tuple[float, float] | None = Field(
        default=None,
        description="Origin [longitude, latitude] when known"
    )
    created_at: datetime

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "PublicDream":
        latitude = row.get("origin_latitude")
        longitude = row.get("origin_longitude")
        coordinates = None
        if latitude is not None and longitude is not None:
            coordinates = (float(longitude), float(latitude))

        return cls(
            id=str(row["id"]),
            dreamer_name=row.get("dreamer_name"),
            origin_station=row["origin_station"],
            destination_city=row["destination_city"],
            origin_country=row.get("origin_country"),
            destination_country=row.get("destination_country"),
            why=row.get("why"),
            coordinates=coordinates,
            created_at=row["created_at"],
        )


class DreamList(ApiModel):
    """Paginated response of GET /api/dreams."""

    dreams: list[PublicDream] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    limit: int = Field(..., ge=1, le=100)
    offset: int = Field(..., ge=0)


class DreamSubmissionResponse(ApiModel):
    """Confirmation returned with HTTP 201."""

    success: bool = True
    message: str = "Dream route submitted successfully!"
    id: str
