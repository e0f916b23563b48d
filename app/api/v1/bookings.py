from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.identity import get_current_user_id
from app.api.v1.schemas import BookingSchema, ResourceSchema
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.resource_directory import ResourceDirectoryPort
from app.application.use_cases.availability import AvailabilityMatcher
from app.application.utils.time_slots import is_known_time_slot, normalize_time_slot
from app.domain.entities.booking import Booking
from app.wiring.dependencies import get_availability_matcher, get_booking_store, get_resource_directory

router = APIRouter(prefix="/api")


@router.get("/bookings", response_model=list[BookingSchema])
def bookings_by_date(
    booking_date: date = Query(..., alias="date"),
    _user_id: str = Depends(get_current_user_id),
    store: BookingStorePort = Depends(get_booking_store),
    directory: ResourceDirectoryPort = Depends(get_resource_directory),
):
    return [_to_schema(b, directory) for b in store.list_by_date(booking_date)]


@router.get("/bookings/me", response_model=list[BookingSchema])
def my_bookings(
    booking_date: date | None = Query(None, alias="date"),
    user_id: str = Depends(get_current_user_id),
    store: BookingStorePort = Depends(get_booking_store),
    directory: ResourceDirectoryPort = Depends(get_resource_directory),
):
    if booking_date is not None:
        bookings = store.list_by_date_for_user(booking_date, user_id)
    else:
        bookings = store.list_by_user(user_id)
    return [_to_schema(b, directory) for b in bookings]


@router.get("/resources/available", response_model=list[ResourceSchema])
def available_resources(
    resource_type_id: int = Query(..., alias="resourceTypeId"),
    booking_date: date = Query(..., alias="date"),
    time_slot: str = Query(..., alias="timeSlot"),
    matcher: AvailabilityMatcher = Depends(get_availability_matcher),
):
    if not is_known_time_slot(time_slot):
        raise HTTPException(status_code=400, detail=f"Unknown time slot: {time_slot}")
    resources = matcher.find_available(resource_type_id, booking_date, normalize_time_slot(time_slot))
    return [ResourceSchema(id=r.id, name=r.name, resourceTypeId=r.resource_type_id) for r in resources]


def _to_schema(booking: Booking, directory: ResourceDirectoryPort) -> BookingSchema:
    return BookingSchema(
        id=booking.id,
        date=booking.date,
        timeSlot=booking.time_slot,
        userId=booking.user_id,
        resourceTypeId=booking.resource_type_id,
        resourceTypeName=directory.get_type_name(booking.resource_type_id),
        resourceId=booking.resource_id,
    )
