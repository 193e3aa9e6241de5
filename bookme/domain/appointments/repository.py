"""Appointment repository - Database operations for appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus, Barber, Service


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_id(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_barber(db: Session, barber_id: int) -> Optional[Barber]:
        return db.query(Barber).filter(Barber.id == barber_id).first()

    @staticmethod
    def get_service(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def find_active_conflict(
        db: Session,
        barber_id: int,
        day: date,
        time: str,
        exclude_id: Optional[int] = None,
    ) -> Optional[Appointment]:
        """A PENDING/CONFIRMED appointment already holding the slot"""
        query = db.query(Appointment).filter(
            Appointment.barber_id == barber_id,
            Appointment.date == day,
            Appointment.time == time,
            Appointment.status.in_(AppointmentStatus.ACTIVE),
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.first()

    @staticmethod
    def list_appointments(
        db: Session,
        client_id: Optional[int] = None,
        barber_id: Optional[int] = None,
        statuses: Optional[tuple[str, ...]] = None,
        from_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[Appointment]:
        query = db.query(Appointment)
        if client_id is not None:
            query = query.filter(Appointment.client_id == client_id)
        if barber_id is not None:
            query = query.filter(Appointment.barber_id == barber_id)
        if statuses:
            query = query.filter(Appointment.status.in_(statuses))
        if from_date is not None:
            query = query.filter(Appointment.date >= from_date)
        query = query.order_by(Appointment.date.desc(), Appointment.time.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def add(db: Session, appointment: Appointment) -> Appointment:
        """Stage a new appointment (caller commits)"""
        db.add(appointment)
        db.flush()
        return appointment
