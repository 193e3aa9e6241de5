"""Availability router - public slot lookup and barber schedule endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import get_current_barber
from ...database import get_db
from ...models import Availability, Barber, DayOff
from ...shared.validators import parse_iso_date
from .schemas import (
    AvailableSlotsResponse,
    DayOffCreate,
    DayOffResponse,
    WeeklyAvailabilityResponse,
    WeeklyAvailabilityUpdate,
)
from .service import AvailabilityService

router = APIRouter(prefix="/availability", tags=["Availability"])
barber_router = APIRouter(prefix="/barber", tags=["Barber Schedule"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


def _weekly_response(row: Availability) -> WeeklyAvailabilityResponse:
    return WeeklyAvailabilityResponse(
        id=row.id,
        dayOfWeek=row.day_of_week,
        startTime=row.start_time,
        endTime=row.end_time,
        isAvailable=row.is_available,
    )


def _day_off_response(day_off: DayOff) -> DayOffResponse:
    return DayOffResponse(
        id=day_off.id, barberId=day_off.barber_id, date=day_off.date, reason=day_off.reason
    )


@router.get("", response_model=AvailableSlotsResponse)
async def get_available_slots(
    barberId: Optional[int] = Query(None),
    date: Optional[str] = Query(None),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Open 30-minute slots for a barber on a date"""
    if not barberId or not date:
        raise HTTPException(status_code=400, detail="Barbero y fecha son requeridos")
    day = parse_iso_date(date)
    if not day:
        raise HTTPException(status_code=400, detail="Fecha inválida")
    slots = service.get_available_slots(barberId, day)
    return AvailableSlotsResponse(barberId=barberId, date=day, availableSlots=slots)


@barber_router.get("/availability", response_model=list[WeeklyAvailabilityResponse])
async def get_my_availability(
    barber: Barber = Depends(get_current_barber),
    service: AvailabilityService = Depends(get_availability_service),
):
    return [_weekly_response(row) for row in service.get_weekly(barber)]


@barber_router.put("/availability", response_model=list[WeeklyAvailabilityResponse])
async def set_my_availability(
    data: WeeklyAvailabilityUpdate,
    barber: Barber = Depends(get_current_barber),
    service: AvailabilityService = Depends(get_availability_service),
):
    return [_weekly_response(row) for row in service.set_weekly(barber, data)]


@barber_router.get("/days-off", response_model=list[DayOffResponse])
async def list_days_off(
    barber: Barber = Depends(get_current_barber),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Upcoming days off for the calling barber"""
    return [_day_off_response(d) for d in service.list_days_off(barber)]


@barber_router.post("/days-off", response_model=DayOffResponse, status_code=201)
async def add_day_off(
    data: DayOffCreate,
    barber: Barber = Depends(get_current_barber),
    service: AvailabilityService = Depends(get_availability_service),
):
    return _day_off_response(service.add_day_off(barber, data))


@barber_router.delete("/days-off/{day_off_id}")
async def remove_day_off(
    day_off_id: int,
    barber: Barber = Depends(get_current_barber),
    service: AvailabilityService = Depends(get_availability_service),
):
    service.remove_day_off(barber, day_off_id)
    return {"message": "Día libre eliminado"}
