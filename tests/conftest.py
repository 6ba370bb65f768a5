"""
Test Configuration and Fixtures
Version: 1.0.0
"""

import pytest
from fastapi.testclient import TestClient

from schemas import Booking, BookingCreate
from services.booking_service import BookingService
from services.booking_store import BookingStore


# ============================================================================
# CORE FIXTURES
# ============================================================================

@pytest.fixture
def store() -> BookingStore:
    """Empty booking store."""
    return BookingStore()


@pytest.fixture
def service(store) -> BookingService:
    """Service over an empty store with default pagination."""
    return BookingService(store)


@pytest.fixture
def client():
    """
    Test client with the app lifespan running.
    Each test gets a fresh store seeded with the two sample bookings.
    """
    from main import app

    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# SAMPLE DATA FIXTURES
# ============================================================================

@pytest.fixture
def valid_payload() -> BookingCreate:
    """Minimal valid create payload."""
    return BookingCreate(
        check_in_date="2025-01-01",
        check_out_date="2025-01-02",
        guests=1,
        price=0
    )


@pytest.fixture
def make_booking():
    """Factory for stored booking records."""
    def _make(booking_id: str, **overrides) -> Booking:
        fields = {
            "id": booking_id,
            "check_in_date": "2025-06-01",
            "check_out_date": "2025-06-04",
            "guests": 2,
            "price": 300.0,
            "status": "confirmed",
        }
        fields.update(overrides)
        return Booking(**fields)

    return _make


@pytest.fixture
def wire_payload() -> dict:
    """Create payload as a client sends it."""
    return {
        "checkInDate": "2025-03-01",
        "checkOutDate": "2025-03-05",
        "guests": 3,
        "price": 720.5
    }
