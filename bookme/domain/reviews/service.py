"""Review service"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import AppointmentStatus, Review, User
from .repository import ReviewRepository
from .schemas import ReviewCreate, ReviewResponseUpdate

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "Ya dejaste una reseña para esta cita"


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()

    def list_reviews(self, barber_id: Optional[int] = None) -> list[Review]:
        return self.repo.list_reviews(self.db, barber_id)

    def get_review(self, review_id: int) -> Review:
        review = self.repo.get_by_id(self.db, review_id)
        if not review:
            raise HTTPException(status_code=404, detail="Reseña no encontrada")
        return review

    def create_review(self, client: User, data: ReviewCreate) -> Review:
        """One review per completed appointment, written by its client"""
        if not data.appointmentId or data.rating is None:
            raise HTTPException(status_code=400, detail="Cita y calificación son requeridos")
        if not 1 <= data.rating <= 5:
            raise HTTPException(status_code=400, detail="La calificación debe estar entre 1 y 5")

        appointment = self.repo.get_appointment(self.db, data.appointmentId)
        if not appointment:
            raise HTTPException(status_code=404, detail="Cita no encontrada")
        if appointment.client_id != client.id:
            raise HTTPException(status_code=403, detail="Sin permisos")
        if appointment.status != AppointmentStatus.COMPLETED:
            raise HTTPException(status_code=400, detail="Solo puedes dejar reseñas de citas completadas")
        if self.repo.get_by_appointment(self.db, appointment.id):
            raise HTTPException(status_code=409, detail=DUPLICATE_REVIEW_MESSAGE)

        review = Review(
            appointment_id=appointment.id,
            client_id=client.id,
            barber_id=appointment.barber_id,
            rating=data.rating,
            comment=data.comment or None,
        )
        try:
            self.db.add(review)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(status_code=409, detail=DUPLICATE_REVIEW_MESSAGE)
        self.db.refresh(review)
        logger.info(f"⭐ Review {review.id} ({review.rating}/5) for barber {review.barber_id}")
        return review

    def respond(self, review_id: int, data: ReviewResponseUpdate) -> Review:
        review = self.get_review(review_id)
        text = (data.adminResponse or "").strip()
        review.admin_response = text or None
        review.admin_responded_at = datetime.now() if text else None
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete_review(self, review_id: int) -> None:
        review = self.get_review(review_id)
        self.db.delete(review)
        self.db.commit()
        logger.info(f"🗑️ Review {review_id} deleted")
