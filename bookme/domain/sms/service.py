"""SMS reminder service - admin-triggered batch texts for upcoming and finished appointments"""

import logging
from datetime import datetime, timedelta
from typing import NamedTuple, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment
from ...services.twilio_service import send_sms
from ..reminders.repository import ReminderRepository
from ..reminders.service import format_spanish_date
from .repository import SmsRepository
from .schemas import SmsBatchResult, SmsDelivery

logger = logging.getLogger(__name__)

THANK_YOU_LOOKBACK = timedelta(days=1)
NO_PHONE_MESSAGE = "Cliente no tiene número de teléfono"


class SmsWindow(NamedTuple):
    lead: timedelta
    tolerance: timedelta
    flag: str


SMS_WINDOWS = {
    "24h": SmsWindow(timedelta(hours=24), timedelta(hours=1), "notification_24h_sent"),
    "2h": SmsWindow(timedelta(hours=2), timedelta(minutes=30), "notification_2h_sent"),
}


def _names(appointment: Appointment) -> tuple[str, str]:
    service_name = appointment.service.name if appointment.service else "tu servicio"
    barber_user = appointment.barber.user if appointment.barber else None
    return service_name, (barber_user.name if barber_user else None) or "tu barbero"


def build_sms_body(kind: str, appointment: Appointment) -> str:
    service_name, barber_name = _names(appointment)
    if kind == "24h":
        day = format_spanish_date(appointment.date).rsplit(" de ", 1)[0]
        return (
            f"Recordatorio: Tu cita de {service_name} con {barber_name} es mañana "
            f"{day} a las {appointment.time}. ¡Te esperamos!"
        )
    if kind == "2h":
        return f"¡Tu cita es en 2 horas! {service_name} con {barber_name} a las {appointment.time}. ¡Nos vemos pronto!"
    return (
        f"¡Gracias por visitarnos! Esperamos que hayas disfrutado tu {service_name} "
        f"con {barber_name}. ¡Vuelve pronto!"
    )


class SmsReminderService:
    def __init__(self, db: Session):
        self.db = db

    def candidates(self, kind: str, now: datetime) -> list[Appointment]:
        if kind == "thank_you":
            return SmsRepository.recently_completed(self.db, now - THANK_YOU_LOOKBACK)

        window = SMS_WINDOWS.get(kind)
        if window is None:
            raise HTTPException(status_code=400, detail="Tipo de notificación inválido")
        low = now + window.lead - window.tolerance
        high = now + window.lead + window.tolerance
        rows = ReminderRepository.get_window_candidates(self.db, window.flag, low.date(), high.date())
        return [a for a in rows if low <= a.starts_at <= high]

    async def send_batch(self, kind: str, now: Optional[datetime] = None) -> SmsBatchResult:
        """
        Text every matching client once.

        The appointment flag is only set when Twilio accepts the message, so
        failed sends are retried on the next run.
        """
        now = now or datetime.now()
        appointments = self.candidates(kind, now)
        flag = "thank_you_sent" if kind == "thank_you" else SMS_WINDOWS[kind].flag
        results: list[SmsDelivery] = []

        for appointment in appointments:
            phone = appointment.client.phone if appointment.client else None
            if not phone:
                results.append(SmsDelivery(appointmentId=appointment.id, success=False, error=NO_PHONE_MESSAGE))
                continue

            outcome = await send_sms(phone, build_sms_body(kind, appointment))
            if outcome.ok:
                setattr(appointment, flag, True)
                self.db.commit()
            results.append(SmsDelivery(appointmentId=appointment.id, success=outcome.ok, error=outcome.error))

        successful = sum(1 for r in results if r.success)
        failed = len(results) - successful
        logger.info(f"📱 SMS batch '{kind}': {successful} sent, {failed} failed")
        return SmsBatchResult(
            message=f"SMS enviados: {successful} exitosos, {failed} fallidos",
            total=len(appointments),
            successful=successful,
            failed=failed,
            results=results,
        )
