"""Barber router"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user, require_admin
from ...database import get_db
from ...models import Role, User
from ...services.storage_service import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE, public_url, upload_file
from .schemas import BarberCreate, BarberEnvelope, BarberListResponse, BarberResponse, BarberUpdate
from .service import BarberService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/barbers", tags=["Barbers"])


def get_barber_service(db: Session = Depends(get_db)) -> BarberService:
    return BarberService(db)


@router.get("", response_model=BarberListResponse)
async def list_barbers(
    all: bool = Query(False),
    current_user: Optional[User] = Depends(get_optional_user),
    service: BarberService = Depends(get_barber_service),
):
    """Active barbers with ratings; admins may ask for inactive ones too"""
    include_inactive = all and current_user is not None and current_user.role == Role.ADMIN
    return BarberListResponse(barbers=service.list_barbers(include_inactive))


@router.get("/{barber_id}", response_model=BarberEnvelope)
async def get_barber(barber_id: int, service: BarberService = Depends(get_barber_service)):
    return BarberEnvelope(barber=service.get_barber_response(barber_id))


@router.post("", response_model=BarberEnvelope, status_code=201)
async def create_barber(
    data: BarberCreate,
    _admin: User = Depends(require_admin),
    service: BarberService = Depends(get_barber_service),
):
    barber = service.create_barber(data)
    return BarberEnvelope(barber=BarberResponse.from_model(barber))


@router.patch("/{barber_id}", response_model=BarberEnvelope)
async def update_barber(
    barber_id: int,
    data: BarberUpdate,
    current_user: User = Depends(get_current_user),
    service: BarberService = Depends(get_barber_service),
):
    service.update_barber(barber_id, current_user, data)
    return BarberEnvelope(barber=service.get_barber_response(barber_id))


@router.delete("/{barber_id}")
async def deactivate_barber(
    barber_id: int,
    _admin: User = Depends(require_admin),
    service: BarberService = Depends(get_barber_service),
):
    barber = service.deactivate_barber(barber_id)
    return {"message": "Barbero desactivado exitosamente", "barber": BarberResponse.from_model(barber)}


@router.post("/{barber_id}/image", response_model=BarberEnvelope)
async def upload_barber_image(
    barber_id: int,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    service: BarberService = Depends(get_barber_service),
):
    """Upload a profile picture to public storage"""
    barber = service.get_barber(barber_id)
    if current_user.role != Role.ADMIN and barber.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Sin permisos")
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Tipo de archivo no permitido")

    content = await file.read()
    if len(content) > MAX_IMAGE_SIZE:
        raise HTTPException(status_code=400, detail="La imagen es demasiado grande")

    key = upload_file(content, file.filename, file.content_type, is_public=True)
    service.set_profile_image(barber, public_url(key))
    return BarberEnvelope(barber=service.get_barber_response(barber_id))
