"""
Pydantic Schemas
Version: 1.0.0

Wire models for the bookings API. Attribute names are snake_case,
JSON field names are camelCase aliases.
NO DEPENDENCIES on services.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# === ENUMS ===

class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


# === BOOKING SCHEMAS ===

class Booking(BaseModel):
    """Canonical booking record as held by the store."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    check_in_date: str = Field(..., alias="checkInDate")
    check_out_date: str = Field(..., alias="checkOutDate")
    guests: int
    price: float
    status: str = BookingStatus.CONFIRMED.value


class BookingCreate(BaseModel):
    """
    Payload for create and full replace.

    Missing fields fall back to empty values so the service reports
    them with its own validation messages.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    check_in_date: str = Field(default="", alias="checkInDate")
    check_out_date: str = Field(default="", alias="checkOutDate")
    guests: int = 0
    price: float = Field(default=0.0, allow_inf_nan=False)


class BookingUpdate(BaseModel):
    """Partial update payload. A field is supplied when present and not null."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    check_in_date: Optional[str] = Field(default=None, alias="checkInDate")
    check_out_date: Optional[str] = Field(default=None, alias="checkOutDate")
    guests: Optional[int] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    status: Optional[str] = None

    def supplied_fields(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ErrorResponse(BaseModel):
    code: int
    message: str
    error: Optional[str] = None
