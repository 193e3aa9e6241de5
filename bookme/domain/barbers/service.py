"""Barber service - profiles, ratings and admin management"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Barber, Role, User
from ...security_utils import MIN_PASSWORD_LENGTH, hash_password
from .repository import BarberRepository
from .schemas import BarberCreate, BarberResponse, BarberUpdate

logger = logging.getLogger(__name__)

# camelCase payload field -> Barber column
PROFILE_FIELDS = {
    "bio": "bio",
    "specialties": "specialties",
    "hourlyRate": "hourly_rate",
    "profileImage": "profile_image",
    "gender": "gender",
    "facebookUrl": "facebook_url",
    "instagramUrl": "instagram_url",
    "twitterUrl": "twitter_url",
    "tiktokUrl": "tiktok_url",
    "youtubeUrl": "youtube_url",
    "whatsappUrl": "whatsapp_url",
    "zelleEmail": "zelle_email",
    "zellePhone": "zelle_phone",
    "cashappTag": "cashapp_tag",
}


class BarberService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = BarberRepository()

    def _with_stats(self, barbers: list[Barber]) -> list[BarberResponse]:
        ids = [b.id for b in barbers]
        ratings = self.repo.get_rating_stats(self.db, ids)
        appointments = self.repo.get_appointment_counts(self.db, ids)
        responses = []
        for barber in barbers:
            avg, total = ratings.get(barber.id, (0.0, 0))
            responses.append(
                BarberResponse.from_model(
                    barber,
                    avg_rating=round(avg, 1),
                    total_reviews=total,
                    total_appointments=appointments.get(barber.id, 0),
                )
            )
        return responses

    def list_barbers(self, include_inactive: bool = False) -> list[BarberResponse]:
        return self._with_stats(self.repo.list_barbers(self.db, include_inactive))

    def get_barber(self, barber_id: int) -> Barber:
        barber = self.repo.get_by_id(self.db, barber_id)
        if not barber:
            raise HTTPException(status_code=404, detail="Barbero no encontrado")
        return barber

    def get_barber_response(self, barber_id: int) -> BarberResponse:
        return self._with_stats([self.get_barber(barber_id)])[0]

    def create_barber(self, data: BarberCreate) -> Barber:
        """Create the BARBER user account and its profile together"""
        if not data.name or not data.email:
            raise HTTPException(status_code=400, detail="Nombre y email son requeridos")
        if not data.password:
            raise HTTPException(status_code=400, detail="La contraseña es requerida")
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres",
            )
        if self.repo.email_exists(self.db, data.email):
            raise HTTPException(status_code=400, detail="Un usuario con este email ya existe")

        user = User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            phone=data.phone or None,
            role=Role.BARBER,
        )
        barber = Barber(user=user)
        payload = data.model_dump()
        for field, column in PROFILE_FIELDS.items():
            setattr(barber, column, payload.get(field))
        self.db.add(barber)
        self.db.commit()
        self.db.refresh(barber)
        logger.info(f"✅ Barber {barber.id} created for {user.email}")
        return barber

    def update_barber(self, barber_id: int, actor: User, data: BarberUpdate) -> Barber:
        barber = self.get_barber(barber_id)
        is_admin = actor.role == Role.ADMIN
        if not is_admin and barber.user_id != actor.id:
            raise HTTPException(status_code=403, detail="Sin permisos")

        updates = data.model_dump(exclude_unset=True)
        if "isActive" in updates:
            if not is_admin:
                raise HTTPException(status_code=403, detail="Sin permisos")
            barber.is_active = updates["isActive"]
        if updates.get("name"):
            barber.user.name = updates["name"]
        if "phone" in updates:
            barber.user.phone = updates["phone"] or None
        for field, column in PROFILE_FIELDS.items():
            if field in updates:
                setattr(barber, column, updates[field])

        self.db.commit()
        self.db.refresh(barber)
        return barber

    def deactivate_barber(self, barber_id: int) -> Barber:
        """Soft delete: the barber keeps its history but stops being bookable"""
        barber = self.get_barber(barber_id)
        barber.is_active = False
        self.db.commit()
        self.db.refresh(barber)
        logger.info(f"🗑️ Barber {barber.id} deactivated")
        return barber

    def set_profile_image(self, barber: Barber, url: str) -> Barber:
        barber.profile_image = url
        self.db.commit()
        self.db.refresh(barber)
        return barber
