"""Pydantic models for UTM cookie instructions and API payloads."""
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CookieInstruction(BaseModel):
    """Set-Cookie request queued by the engine for the outbound response."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Cookie name")
    value: str = Field("", description="Encoded attribution record (empty when clearing)")
    expires: datetime = Field(..., description="Timezone-aware UTC expiry")
    path: str = Field("/", description="Cookie path")
    domain: Optional[str] = Field(None, description="Cookie domain (None = current host)")
    secure: bool = False
    httponly: bool = False

    @property
    def is_expired(self) -> bool:
        """Check if the instruction deletes the cookie (expiry in the past)."""
        return self.expires <= datetime.now(timezone.utc)


class AttributionResponse(BaseModel):
    """All five UTM values for the current visitor."""

    utm_campaign: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_source: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None


class AttributionValueResponse(BaseModel):
    """Single UTM value lookup."""

    key: str = Field(..., description="Canonical key (utm_ prefix applied)")
    value: Optional[str] = Field(None, description="Stored value, null if absent")


class ClearAttributionResponse(BaseModel):
    """Response for attribution revocation."""

    cleared: bool = Field(..., description="Whether an expiring cookie was queued")
    attribution: AttributionResponse = Field(
        ..., description="Values still cached for this request"
    )
