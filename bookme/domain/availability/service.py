"""Availability service - open slot computation and barber schedule management"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import DAYS_OF_WEEK, Availability, Barber, DayOff
from ...shared.validators import hhmm_to_minutes, minutes_to_hhmm
from .repository import AvailabilityRepository
from .schemas import DayOffCreate, WeeklyAvailabilityUpdate

logger = logging.getLogger(__name__)

SLOT_MINUTES = 30


def day_of_week_name(day: date) -> str:
    """MONDAY..SUNDAY for a calendar date"""
    return DAYS_OF_WEEK[day.weekday()]


def generate_slots(start_time: str, end_time: str, step_minutes: int = SLOT_MINUTES) -> list[str]:
    """HH:MM slots from start (inclusive) to end (exclusive) in fixed steps"""
    slots = []
    current = hhmm_to_minutes(start_time)
    end = hhmm_to_minutes(end_time)
    while current < end:
        slots.append(minutes_to_hhmm(current))
        current += step_minutes
    return slots


class AvailabilityService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()

    def get_available_slots(self, barber_id: int, day: date) -> list[str]:
        """
        Open slots for a barber on a date.

        Empty when the weekday has no schedule row, the row is marked
        unavailable, or the barber declared that date a day off. Otherwise
        the 30-minute grid minus times held by PENDING/CONFIRMED bookings.
        """
        weekly = self.repo.get_weekly_row(self.db, barber_id, day_of_week_name(day))
        if not weekly or not weekly.is_available:
            return []

        if self.repo.get_day_off(self.db, barber_id, day):
            logger.debug(f"Barber {barber_id} is off on {day}")
            return []

        booked = self.repo.get_booked_times(self.db, barber_id, day)
        return [slot for slot in generate_slots(weekly.start_time, weekly.end_time) if slot not in booked]

    # ------------------------------------------------------------------
    # Barber self-service schedule
    # ------------------------------------------------------------------

    def get_weekly(self, barber: Barber) -> list[Availability]:
        rows = self.repo.list_weekly(self.db, barber.id)
        return sorted(rows, key=lambda row: DAYS_OF_WEEK.index(row.day_of_week))

    def set_weekly(self, barber: Barber, data: WeeklyAvailabilityUpdate) -> list[Availability]:
        for item in data.availability:
            self.repo.upsert_weekly(
                self.db,
                barber.id,
                item.dayOfWeek,
                item.startTime,
                item.endTime,
                item.isAvailable,
            )
        self.db.commit()
        logger.info(f"✅ Weekly availability updated for barber {barber.id}")
        return self.get_weekly(barber)

    def list_days_off(self, barber: Barber, today: Optional[date] = None) -> list[DayOff]:
        return self.repo.list_days_off(self.db, barber.id, today or date.today())

    def add_day_off(self, barber: Barber, data: DayOffCreate) -> DayOff:
        if self.repo.get_day_off(self.db, barber.id, data.date):
            raise HTTPException(status_code=409, detail="Ya existe un día libre para esta fecha")
        try:
            return self.repo.create_day_off(self.db, barber.id, data.date, data.reason)
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Ya existe un día libre para esta fecha")

    def remove_day_off(self, barber: Barber, day_off_id: int) -> None:
        day_off = self.repo.get_day_off_by_id(self.db, day_off_id)
        if not day_off:
            raise HTTPException(status_code=404, detail="Día libre no encontrado")
        if day_off.barber_id != barber.id:
            raise HTTPException(status_code=403, detail="Sin permisos")
        self.repo.delete_day_off(self.db, day_off)
