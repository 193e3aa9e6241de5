"""Review schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ReviewCreate(BaseModel):
    appointmentId: Optional[int] = None
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewResponseUpdate(BaseModel):
    """Admin reply; null or empty clears it"""

    adminResponse: Optional[str] = None


class ReviewClient(BaseModel):
    id: int
    name: Optional[str] = None
    image: Optional[str] = None


class ReviewResponse(BaseModel):
    id: int
    appointmentId: int
    clientId: int
    barberId: int
    rating: int
    comment: Optional[str] = None
    adminResponse: Optional[str] = None
    adminRespondedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    client: Optional[ReviewClient] = None
    serviceName: Optional[str] = None

    @classmethod
    def from_model(cls, review) -> "ReviewResponse":
        client = review.client
        appointment = review.appointment
        return cls(
            id=review.id,
            appointmentId=review.appointment_id,
            clientId=review.client_id,
            barberId=review.barber_id,
            rating=review.rating,
            comment=review.comment,
            adminResponse=review.admin_response,
            adminRespondedAt=review.admin_responded_at,
            createdAt=review.created_at,
            client=ReviewClient(id=client.id, name=client.name, image=client.image) if client else None,
            serviceName=appointment.service.name if appointment and appointment.service else None,
        )


class ReviewEnvelope(BaseModel):
    review: ReviewResponse


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]
