"""Pydantic models for the synthetic rows produced by the seeders."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from storage.database import utcnow


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------
class AccountRecord(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    password_hash: str = Field(..., min_length=1, description="Encoded Argon2 hash")
    created_at: datetime = Field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Organization
# ---------------------------------------------------------------------------
class OrganizationRecord(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str
    owner_id: UUID
    created_at: datetime = Field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------
class ListingRecord(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    organization_id: UUID
    title: str
    location: str
    capacity: int = Field(..., ge=0)
    scheduled_at: datetime
    equipment: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)


# ---------------------------------------------------------------------------
# Reservation
# ---------------------------------------------------------------------------
class ReservationRecord(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    account_id: UUID
    listing_id: UUID
    booked_at: datetime = Field(default_factory=utcnow)
