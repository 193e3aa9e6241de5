"""Barber repository"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, Barber, Review, User


class BarberRepository:
    @staticmethod
    def get_by_id(db: Session, barber_id: int) -> Optional[Barber]:
        return db.query(Barber).filter(Barber.id == barber_id).first()

    @staticmethod
    def list_barbers(db: Session, include_inactive: bool = False) -> list[Barber]:
        query = db.query(Barber)
        if not include_inactive:
            query = query.filter(Barber.is_active.is_(True))
        return query.order_by(Barber.created_at.asc(), Barber.id.asc()).all()

    @staticmethod
    def get_rating_stats(db: Session, barber_ids: list[int]) -> dict[int, tuple[float, int]]:
        """barber_id -> (average rating, review count)"""
        if not barber_ids:
            return {}
        rows = (
            db.query(Review.barber_id, func.avg(Review.rating), func.count(Review.id))
            .filter(Review.barber_id.in_(barber_ids))
            .group_by(Review.barber_id)
            .all()
        )
        return {barber_id: (float(avg or 0), count) for barber_id, avg, count in rows}

    @staticmethod
    def get_appointment_counts(db: Session, barber_ids: list[int]) -> dict[int, int]:
        if not barber_ids:
            return {}
        rows = (
            db.query(Appointment.barber_id, func.count(Appointment.id))
            .filter(Appointment.barber_id.in_(barber_ids))
            .group_by(Appointment.barber_id)
            .all()
        )
        return dict(rows)

    @staticmethod
    def email_exists(db: Session, email: str) -> bool:
        return db.query(User.id).filter(User.email == email).first() is not None
