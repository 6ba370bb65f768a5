"""
Bookings Router
Version: 1.0.0

Maps HTTP verbs and paths onto BookingService operations.
Handlers are plain `def` so FastAPI runs them on its thread pool.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, status

from schemas import Booking, BookingCreate, BookingUpdate, ErrorResponse
from services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["bookings"])

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}


def get_booking_service(request: Request) -> BookingService:
    # Built in main.py lifespan
    return request.app.state.booking_service


def existing_booking_for(operation: str):
    """
    Dependency that rejects an unknown id with 404.

    Dependencies are solved before body fields are validated, so a
    missing booking wins over a bad payload.
    """
    def check(booking_id: str, service: BookingService = Depends(get_booking_service)) -> None:
        service.ensure_exists(booking_id, operation)

    return check


@router.post(
    "",
    response_model=Booking,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST
)
def create_booking(
    payload: BookingCreate,
    service: BookingService = Depends(get_booking_service)
):
    return service.create(payload)


@router.get("", response_model=List[Booking])
def list_bookings(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    service: BookingService = Depends(get_booking_service)
):
    """Insertion-ordered page of bookings. Bad limit/offset values fall back to defaults."""
    return service.list(limit, offset)


@router.get("/{booking_id}", response_model=Booking, responses=NOT_FOUND)
def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service)
):
    return service.get(booking_id)


@router.put(
    "/{booking_id}",
    response_model=Booking,
    responses={**NOT_FOUND, **BAD_REQUEST},
    dependencies=[Depends(existing_booking_for("replace"))]
)
def replace_booking(
    booking_id: str,
    payload: BookingCreate,
    service: BookingService = Depends(get_booking_service)
):
    """Full replace. Status is kept from the stored booking."""
    return service.replace(booking_id, payload)


@router.patch(
    "/{booking_id}",
    response_model=Booking,
    responses={**NOT_FOUND, **BAD_REQUEST},
    dependencies=[Depends(existing_booking_for("patch"))]
)
def update_booking(
    booking_id: str,
    payload: BookingUpdate,
    service: BookingService = Depends(get_booking_service)
):
    return service.patch(booking_id, payload)


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND
)
def delete_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service)
):
    service.delete(booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{booking_id}/cancel", response_model=Booking, responses=NOT_FOUND)
def cancel_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service)
):
    return service.cancel(booking_id)
