"""Review router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import User
from .schemas import ReviewCreate, ReviewEnvelope, ReviewListResponse, ReviewResponse, ReviewResponseUpdate
from .service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.get("", response_model=ReviewListResponse)
async def list_reviews(
    barberId: Optional[int] = Query(None),
    service: ReviewService = Depends(get_review_service),
):
    return ReviewListResponse(reviews=[ReviewResponse.from_model(r) for r in service.list_reviews(barberId)])


@router.post("", response_model=ReviewEnvelope, status_code=201)
async def create_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return ReviewEnvelope(review=ReviewResponse.from_model(service.create_review(current_user, data)))


@router.get("/{review_id}", response_model=ReviewEnvelope)
async def get_review(review_id: int, service: ReviewService = Depends(get_review_service)):
    return ReviewEnvelope(review=ReviewResponse.from_model(service.get_review(review_id)))


@router.patch("/{review_id}", response_model=ReviewEnvelope)
async def respond_to_review(
    review_id: int,
    data: ReviewResponseUpdate,
    _admin: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service),
):
    return ReviewEnvelope(review=ReviewResponse.from_model(service.respond(review_id, data)))


@router.delete("/{review_id}")
async def delete_review(
    review_id: int,
    _admin: User = Depends(require_admin),
    service: ReviewService = Depends(get_review_service),
):
    service.delete_review(review_id)
    return {"message": "Reseña eliminada exitosamente"}
