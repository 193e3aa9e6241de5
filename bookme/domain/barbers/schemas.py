"""Barber domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

Gender = Literal["MALE", "FEMALE", "UNISEX"]


class BarberSocialFields(BaseModel):
    facebookUrl: Optional[str] = None
    instagramUrl: Optional[str] = None
    twitterUrl: Optional[str] = None
    tiktokUrl: Optional[str] = None
    youtubeUrl: Optional[str] = None
    whatsappUrl: Optional[str] = None
    zelleEmail: Optional[str] = None
    zellePhone: Optional[str] = None
    cashappTag: Optional[str] = None


class BarberCreate(BarberSocialFields):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    specialties: list[str] = []
    hourlyRate: Optional[float] = None
    profileImage: Optional[str] = None
    gender: Gender = "UNISEX"

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if v else v


class BarberUpdate(BarberSocialFields):
    name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    specialties: Optional[list[str]] = None
    hourlyRate: Optional[float] = None
    profileImage: Optional[str] = None
    gender: Optional[Gender] = None
    isActive: Optional[bool] = None


class BarberUser(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    image: Optional[str] = None


class BarberResponse(BarberSocialFields):
    id: int
    userId: int
    bio: Optional[str] = None
    specialties: list[str] = []
    hourlyRate: Optional[float] = None
    profileImage: Optional[str] = None
    gender: Optional[str] = None
    isActive: bool
    avgRating: float = 0
    totalReviews: int = 0
    totalAppointments: int = 0
    createdAt: Optional[datetime] = None
    user: Optional[BarberUser] = None

    @classmethod
    def from_model(cls, barber, avg_rating: float = 0, total_reviews: int = 0, total_appointments: int = 0):
        user = barber.user
        return cls(
            id=barber.id,
            userId=barber.user_id,
            bio=barber.bio,
            specialties=barber.specialties or [],
            hourlyRate=barber.hourly_rate,
            profileImage=barber.profile_image,
            gender=barber.gender,
            isActive=barber.is_active,
            facebookUrl=barber.facebook_url,
            instagramUrl=barber.instagram_url,
            twitterUrl=barber.twitter_url,
            tiktokUrl=barber.tiktok_url,
            youtubeUrl=barber.youtube_url,
            whatsappUrl=barber.whatsapp_url,
            zelleEmail=barber.zelle_email,
            zellePhone=barber.zelle_phone,
            cashappTag=barber.cashapp_tag,
            avgRating=avg_rating,
            totalReviews=total_reviews,
            totalAppointments=total_appointments,
            createdAt=barber.created_at,
            user=BarberUser(id=user.id, name=user.name, email=user.email, phone=user.phone, image=user.image)
            if user
            else None,
        )


class BarberEnvelope(BaseModel):
    barber: BarberResponse


class BarberListResponse(BaseModel):
    barbers: list[BarberResponse]
