"""Appointment service - booking, updates, cancellation and completion"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus, Barber, PaymentStatus, Role, User
from ...shared.results import SideEffectResult
from ...shared.validators import parse_iso_date, validate_hhmm
from ..invoices.service import InvoiceService
from ..settings.schemas import ShopSettings
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate, MarkPaidRequest

logger = logging.getLogger(__name__)

CANCELLATION_NOTICE = timedelta(hours=24)
DEFAULT_CANCELLATION_REASON = "Cancelado por el usuario"

MISSING_FIELDS_MESSAGE = "Barbero, servicio, fecha y hora son requeridos"
SLOT_TAKEN_MESSAGE = "Este horario ya está reservado"
NOT_FOUND_MESSAGE = "Cita no encontrada"
LATE_CANCELLATION_MESSAGE = (
    "No se puede cancelar la cita. Debe cancelarse con al menos 24 horas de anticipación."
)

# Fields a client may send when patching their own appointment
CLIENT_EDITABLE_FIELDS = {"status", "cancellationReason"}


def can_cancel(appointment: Appointment, now: Optional[datetime] = None) -> bool:
    """True when the appointment starts at least 24 hours after `now`"""
    now = now or datetime.now()
    return appointment.starts_at - now >= CANCELLATION_NOTICE


def reset_reminder_flags(appointment: Appointment) -> None:
    appointment.notification_24h_sent = False
    appointment.notification_12h_sent = False
    appointment.notification_2h_sent = False
    appointment.notification_30m_sent = False


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _barber_for_user(self, user: User) -> Optional[Barber]:
        return user.barber if user.role == Role.BARBER else None

    def list_for_user(
        self,
        user: User,
        status: Optional[str] = None,
        barber_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Appointment]:
        """Role-scoped listing; status 'upcoming' means PENDING/CONFIRMED from today on"""
        client_id = None
        scoped_barber_id = barber_id
        if user.role == Role.CLIENT:
            client_id = user.id
        elif user.role == Role.BARBER:
            barber = self._barber_for_user(user)
            scoped_barber_id = barber.id if barber else -1

        statuses = None
        from_date = None
        if status == "upcoming":
            statuses = AppointmentStatus.ACTIVE
            from_date = datetime.now().date()
        elif status:
            statuses = (status,)

        return self.repo.list_appointments(
            self.db,
            client_id=client_id,
            barber_id=scoped_barber_id,
            statuses=statuses,
            from_date=from_date,
            limit=limit,
        )

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
        return appointment

    def is_participant(self, appointment: Appointment, user: User) -> bool:
        if user.role == Role.ADMIN or appointment.client_id == user.id:
            return True
        return bool(appointment.barber and appointment.barber.user_id == user.id)

    def get_for_participant(self, appointment_id: int, user: User) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        if not self.is_participant(appointment, user):
            raise HTTPException(status_code=403, detail="Sin permisos")
        return appointment

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_appointment(
        self,
        client: User,
        data: AppointmentCreate,
        status: str = AppointmentStatus.PENDING,
    ) -> Appointment:
        """
        Book a slot for `client`.

        The conflict check and the insert share one transaction, and the
        partial unique index on active slots catches a concurrent booking
        that slipped past the check.
        """
        if not data.barberId or not data.serviceId or not data.date or not data.time:
            raise HTTPException(status_code=400, detail=MISSING_FIELDS_MESSAGE)

        day = parse_iso_date(data.date)
        if not day:
            raise HTTPException(status_code=400, detail="Fecha inválida")
        try:
            time = validate_hhmm(data.time)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if not self.repo.get_barber(self.db, data.barberId):
            raise HTTPException(status_code=404, detail="Barbero no encontrado")
        if not self.repo.get_service(self.db, data.serviceId):
            raise HTTPException(status_code=404, detail="Servicio no encontrado")

        if self.repo.find_active_conflict(self.db, data.barberId, day, time):
            raise HTTPException(status_code=409, detail=SLOT_TAKEN_MESSAGE)

        appointment = Appointment(
            client_id=client.id,
            barber_id=data.barberId,
            service_id=data.serviceId,
            date=day,
            time=time,
            payment_method=data.paymentMethod or None,
            payment_reference=data.paymentReference or None,
            notes=data.notes or None,
            status=status,
        )
        try:
            self.repo.add(self.db, appointment)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent booking rejected for barber {data.barberId} at {day} {time}")
            raise HTTPException(status_code=409, detail=SLOT_TAKEN_MESSAGE)

        self.db.refresh(appointment)
        logger.info(f"✅ Appointment {appointment.id} booked ({status}) for {day} {time}")
        return appointment

    # ------------------------------------------------------------------
    # Update / cancel
    # ------------------------------------------------------------------

    def update_appointment(
        self,
        appointment_id: int,
        actor: User,
        data: AppointmentUpdate,
        shop: ShopSettings,
        now: Optional[datetime] = None,
    ) -> tuple[Appointment, list[SideEffectResult]]:
        """
        Patch an appointment.

        CANCELLED enforces the 24-hour rule for non-admins and stamps the
        cancellation. COMPLETED creates the client invoice inside a savepoint
        of the same transaction; an invoice failure is reported as a side
        effect and never blocks the status change. Moving the date or time
        re-checks the slot and re-arms the reminder flags.
        """
        now = now or datetime.now()
        appointment = self.get_appointment(appointment_id)
        if not self.is_participant(appointment, actor):
            raise HTTPException(status_code=403, detail="Sin permisos")

        updates = data.model_dump(exclude_unset=True)
        new_status = updates.get("status")

        if actor.role == Role.CLIENT and (
            set(updates) - CLIENT_EDITABLE_FIELDS or new_status not in (None, AppointmentStatus.CANCELLED)
        ):
            raise HTTPException(status_code=403, detail="Sin permisos")

        if new_status == AppointmentStatus.CANCELLED:
            if actor.role != Role.ADMIN and not can_cancel(appointment, now):
                raise HTTPException(status_code=400, detail=LATE_CANCELLATION_MESSAGE)
            appointment.cancelled_at = now
            appointment.cancellation_reason = (
                updates.get("cancellationReason") or DEFAULT_CANCELLATION_REASON
            )
        elif "cancellationReason" in updates:
            appointment.cancellation_reason = updates["cancellationReason"]

        previous_slot = (appointment.date, appointment.time)
        previous_status = appointment.status
        if updates.get("date"):
            day = parse_iso_date(updates["date"])
            if not day:
                raise HTTPException(status_code=400, detail="Fecha inválida")
            appointment.date = day
        if updates.get("time"):
            try:
                appointment.time = validate_hhmm(updates["time"])
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        if new_status:
            appointment.status = new_status

        rescheduled = (appointment.date, appointment.time) != previous_slot
        if rescheduled:
            reset_reminder_flags(appointment)

        reactivated = previous_status not in AppointmentStatus.ACTIVE
        if appointment.status in AppointmentStatus.ACTIVE and (rescheduled or reactivated):
            conflict = self.repo.find_active_conflict(
                self.db, appointment.barber_id, appointment.date, appointment.time, exclude_id=appointment.id
            )
            if conflict:
                self.db.rollback()
                raise HTTPException(status_code=409, detail=SLOT_TAKEN_MESSAGE)

        for field, column in (
            ("notes", "notes"),
            ("paymentStatus", "payment_status"),
            ("paymentMethod", "payment_method"),
            ("paymentReference", "payment_reference"),
        ):
            if field in updates:
                setattr(appointment, column, updates[field])

        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(status_code=409, detail=SLOT_TAKEN_MESSAGE)

        side_effects: list[SideEffectResult] = []
        if new_status == AppointmentStatus.COMPLETED:
            side_effects.append(InvoiceService(self.db).create_for_appointment(appointment, shop, now))

        self.db.commit()
        self.db.refresh(appointment)
        logger.info(f"✅ Appointment {appointment.id} updated (status={appointment.status})")
        return appointment, side_effects

    def cancel_appointment(self, appointment_id: int, actor: User, now: Optional[datetime] = None) -> Appointment:
        """Soft delete: mark CANCELLED, never remove the row"""
        now = now or datetime.now()
        appointment = self.get_appointment(appointment_id)
        if not self.is_participant(appointment, actor):
            raise HTTPException(status_code=403, detail="Sin permisos")

        if actor.role != Role.ADMIN and not can_cancel(appointment, now):
            raise HTTPException(status_code=400, detail=LATE_CANCELLATION_MESSAGE)

        appointment.status = AppointmentStatus.CANCELLED
        appointment.cancelled_at = now
        appointment.cancellation_reason = DEFAULT_CANCELLATION_REASON
        self.db.commit()
        self.db.refresh(appointment)
        logger.info(f"🗑️ Appointment {appointment.id} cancelled by user {actor.id}")
        return appointment

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    def mark_paid(self, appointment_id: int, barber: Barber, data: MarkPaidRequest) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        if appointment.barber_id != barber.id:
            raise HTTPException(status_code=403, detail="Sin permisos")
        if appointment.status != AppointmentStatus.COMPLETED:
            raise HTTPException(
                status_code=400, detail="Solo se pueden marcar como pagadas las citas completadas"
            )

        appointment.payment_status = PaymentStatus.PAID
        appointment.payment_method = data.paymentMethod
        appointment.payment_reference = data.paymentReference
        self.db.commit()
        self.db.refresh(appointment)
        logger.info(f"💵 Appointment {appointment.id} marked paid via {data.paymentMethod}")
        return appointment
