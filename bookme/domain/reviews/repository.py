"""Review repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Review


class ReviewRepository:
    @staticmethod
    def get_by_id(db: Session, review_id: int) -> Optional[Review]:
        return db.query(Review).filter(Review.id == review_id).first()

    @staticmethod
    def get_by_appointment(db: Session, appointment_id: int) -> Optional[Review]:
        return db.query(Review).filter(Review.appointment_id == appointment_id).first()

    @staticmethod
    def get_appointment(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def list_reviews(db: Session, barber_id: Optional[int] = None) -> list[Review]:
        query = db.query(Review)
        if barber_id is not None:
            query = query.filter(Review.barber_id == barber_id)
        return query.order_by(Review.created_at.desc(), Review.id.desc()).all()
