"""Appointment router - FastAPI endpoints for the booking lifecycle"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...auth import get_current_barber, get_current_user
from ...database import get_db
from ...models import Barber, User
from ...services.calendar_service import appointment_ics, google_calendar_url
from ..settings.router import get_shop_settings
from ..settings.schemas import ShopSettings
from .schemas import (
    AppointmentCreate,
    AppointmentEnvelope,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentUpdate,
    AppointmentUpdateResult,
    MarkPaidRequest,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("", response_model=AppointmentListResponse)
async def list_appointments(
    status: Optional[str] = Query(None),
    barberId: Optional[int] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Appointments visible to the caller, newest date first"""
    appointments = service.list_for_user(current_user, status=status, barber_id=barberId, limit=limit)
    return AppointmentListResponse(appointments=[AppointmentResponse.from_model(a) for a in appointments])


@router.post("", response_model=AppointmentEnvelope, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.create_appointment(current_user, data)
    return AppointmentEnvelope(appointment=AppointmentResponse.from_model(appointment))


@router.get("/{appointment_id}", response_model=AppointmentEnvelope)
async def get_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.get_for_participant(appointment_id, current_user)
    return AppointmentEnvelope(appointment=AppointmentResponse.from_model(appointment))


@router.patch("/{appointment_id}", response_model=AppointmentUpdateResult)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    current_user: User = Depends(get_current_user),
    shop: ShopSettings = Depends(get_shop_settings),
    service: AppointmentService = Depends(get_appointment_service),
):
    """
    Patch an appointment.

    Side effects (the invoice on completion) are reported next to the
    appointment and never fail the request.
    """
    appointment, side_effects = service.update_appointment(appointment_id, current_user, data, shop)
    return AppointmentUpdateResult(
        appointment=AppointmentResponse.from_model(appointment), sideEffects=side_effects
    )


@router.delete("/{appointment_id}")
async def cancel_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    service.cancel_appointment(appointment_id, current_user)
    return {"message": "Cita cancelada exitosamente"}


@router.patch("/{appointment_id}/mark-paid", response_model=AppointmentEnvelope)
async def mark_appointment_paid(
    appointment_id: int,
    data: MarkPaidRequest,
    barber: Barber = Depends(get_current_barber),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.mark_paid(appointment_id, barber, data)
    return AppointmentEnvelope(appointment=AppointmentResponse.from_model(appointment))


@router.get("/{appointment_id}/calendar")
async def export_appointment_calendar(
    appointment_id: int,
    format: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    shop: ShopSettings = Depends(get_shop_settings),
    service: AppointmentService = Depends(get_appointment_service),
):
    """.ics download, or a Google Calendar link with ?format=google"""
    appointment = service.get_for_participant(appointment_id, current_user)
    location = shop.address or None

    if format == "google":
        return {"url": google_calendar_url(appointment, location)}

    return Response(
        content=appointment_ics(appointment, location),
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="cita-{appointment.id}.ics"'},
    )
