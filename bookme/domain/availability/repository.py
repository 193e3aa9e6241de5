"""Availability repository - weekly schedules, days off and booked times"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus, Availability, Barber, DayOff


class AvailabilityRepository:
    @staticmethod
    def get_barber(db: Session, barber_id: int) -> Optional[Barber]:
        return db.query(Barber).filter(Barber.id == barber_id).first()

    @staticmethod
    def get_weekly_row(db: Session, barber_id: int, day_of_week: str) -> Optional[Availability]:
        return (
            db.query(Availability)
            .filter(Availability.barber_id == barber_id, Availability.day_of_week == day_of_week)
            .first()
        )

    @staticmethod
    def list_weekly(db: Session, barber_id: int) -> list[Availability]:
        return db.query(Availability).filter(Availability.barber_id == barber_id).all()

    @staticmethod
    def upsert_weekly(
        db: Session,
        barber_id: int,
        day_of_week: str,
        start_time: str,
        end_time: str,
        is_available: bool,
    ) -> Availability:
        row = AvailabilityRepository.get_weekly_row(db, barber_id, day_of_week)
        if row is None:
            row = Availability(barber_id=barber_id, day_of_week=day_of_week)
            db.add(row)
        row.start_time = start_time
        row.end_time = end_time
        row.is_available = is_available
        return row

    @staticmethod
    def get_day_off(db: Session, barber_id: int, day: date) -> Optional[DayOff]:
        return (
            db.query(DayOff).filter(DayOff.barber_id == barber_id, DayOff.date == day).first()
        )

    @staticmethod
    def get_day_off_by_id(db: Session, day_off_id: int) -> Optional[DayOff]:
        return db.query(DayOff).filter(DayOff.id == day_off_id).first()

    @staticmethod
    def list_days_off(db: Session, barber_id: int, from_date: date) -> list[DayOff]:
        return (
            db.query(DayOff)
            .filter(DayOff.barber_id == barber_id, DayOff.date >= from_date)
            .order_by(DayOff.date.asc())
            .all()
        )

    @staticmethod
    def create_day_off(db: Session, barber_id: int, day: date, reason: Optional[str]) -> DayOff:
        day_off = DayOff(barber_id=barber_id, date=day, reason=reason)
        db.add(day_off)
        db.commit()
        db.refresh(day_off)
        return day_off

    @staticmethod
    def delete_day_off(db: Session, day_off: DayOff) -> None:
        db.delete(day_off)
        db.commit()

    @staticmethod
    def get_booked_times(db: Session, barber_id: int, day: date) -> set[str]:
        """Times held by PENDING/CONFIRMED appointments for the barber on that date"""
        rows = (
            db.query(Appointment.time)
            .filter(
                Appointment.barber_id == barber_id,
                Appointment.date == day,
                Appointment.status.in_(AppointmentStatus.ACTIVE),
            )
            .all()
        )
        return {row.time for row in rows}
