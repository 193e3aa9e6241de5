"""
Staged appointment reminders

A stateless batch run: every invocation scans the four lookahead windows
and the same-day thank-you list. Per-appointment boolean flags are the only
state, so each window fires at most once per appointment.
"""

import logging
from datetime import date, datetime, timedelta
from typing import NamedTuple, Optional

from sqlalchemy.orm import Session

from ...email_service import send_reminder_email, send_thank_you_email
from ...models import Appointment
from ...services.notification_service import send_notification
from ...shared.results import SideEffectResult
from ..notifications.repository import NotificationRepository, NotificationType
from .repository import ReminderRepository
from .schemas import NotificationRunResult

logger = logging.getLogger(__name__)


class LookaheadWindow(NamedTuple):
    key: str
    lead: timedelta
    tolerance: timedelta
    flag: str
    counter: str
    push_title: str
    phrase: str


WINDOWS = (
    LookaheadWindow(
        "24h", timedelta(hours=24), timedelta(hours=1), "notification_24h_sent", "reminders24h",
        "⏰ Recordatorio de Cita", "mañana",
    ),
    LookaheadWindow(
        "12h", timedelta(hours=12), timedelta(hours=1), "notification_12h_sent", "reminders12h",
        "⏰ Recordatorio de Cita", "en 12 horas",
    ),
    LookaheadWindow(
        "2h", timedelta(hours=2), timedelta(minutes=30), "notification_2h_sent", "reminders2h",
        "⏰ ¡Cita Próxima!", "en 2 horas",
    ),
    LookaheadWindow(
        "30m", timedelta(minutes=30), timedelta(minutes=15), "notification_30m_sent", "reminders30m",
        "🚨 ¡Cita en 30 minutos!", "en 30 minutos",
    ),
)

SPANISH_WEEKDAYS = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")
SPANISH_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def format_spanish_date(day: date) -> str:
    """e.g. 'lunes, 10 de junio de 2024'"""
    return f"{SPANISH_WEEKDAYS[day.weekday()]}, {day.day} de {SPANISH_MONTHS[day.month - 1]} de {day.year}"


def in_window(appointment: Appointment, target: datetime, tolerance: timedelta) -> bool:
    return target <= appointment.starts_at <= target + tolerance


class NotificationSchedulerService:
    """Runs one pass of reminder and thank-you dispatch"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReminderRepository()

    def _collect(
        self, result: NotificationRunResult, outcome: dict, appointment: Appointment, label: str, recipient: str
    ) -> None:
        if outcome["email_sent"]:
            result.sent += 1
        if outcome["email_error"]:
            result.failures.append(
                SideEffectResult.failure(
                    "email", outcome["email_error"], appointmentId=appointment.id, kind=label, recipient=recipient
                )
            )
        if outcome["push_error"]:
            result.failures.append(
                SideEffectResult.failure(
                    "push", outcome["push_error"], appointmentId=appointment.id, kind=label, recipient=recipient
                )
            )

    async def _remind(self, appointment: Appointment, window: LookaheadWindow, result: NotificationRunResult) -> None:
        client = appointment.client
        barber_user = appointment.barber.user if appointment.barber else None
        client_name = (client.name if client else None) or "Cliente"
        barber_name = (barber_user.name if barber_user else None) or "Barbero"
        service_name = appointment.service.name if appointment.service else "Servicio"
        day = format_spanish_date(appointment.date)
        push_data = {"appointmentId": appointment.id}

        if client:
            outcome = await send_notification(
                self.db,
                user_id=client.id,
                email=client.email,
                recipient_name=client_name,
                notification_type=f"reminder_{window.key}",
                email_func=send_reminder_email,
                email_kwargs={
                    "window": window.key,
                    "recipient_name": client_name,
                    "other_name": barber_name,
                    "service_name": service_name,
                    "date": day,
                    "time": appointment.time,
                    "recipient_is_barber": False,
                },
                push_title=window.push_title,
                push_body=f"Tu cita con {barber_name} es {window.phrase} ({appointment.time})",
                push_data=push_data,
            )
            self._collect(result, outcome, appointment, window.key, "client")
            NotificationRepository.create(
                self.db,
                user_id=client.id,
                type=NotificationType.APPOINTMENT_REMINDER,
                title=window.push_title,
                message=f"Tu cita de {service_name} con {barber_name} es {window.phrase} ({appointment.time})",
                link="/dashboard/cliente",
            )

        if barber_user:
            outcome = await send_notification(
                self.db,
                user_id=barber_user.id,
                email=barber_user.email,
                recipient_name=barber_name,
                notification_type=f"reminder_{window.key}",
                email_func=send_reminder_email,
                email_kwargs={
                    "window": window.key,
                    "recipient_name": barber_name,
                    "other_name": client_name,
                    "service_name": service_name,
                    "date": day,
                    "time": appointment.time,
                    "recipient_is_barber": True,
                },
                push_title=window.push_title,
                push_body=f"Cita con {client_name} {window.phrase} ({appointment.time})",
                push_data=push_data,
            )
            self._collect(result, outcome, appointment, window.key, "barber")

    async def _thank(self, appointment: Appointment, result: NotificationRunResult) -> None:
        client = appointment.client
        if not client:
            return
        barber_user = appointment.barber.user if appointment.barber else None
        client_name = client.name or "Cliente"
        outcome = await send_notification(
            self.db,
            user_id=client.id,
            email=client.email,
            recipient_name=client_name,
            notification_type="thank_you",
            email_func=send_thank_you_email,
            email_kwargs={
                "client_name": client_name,
                "barber_name": (barber_user.name if barber_user else None) or "Barbero",
                "service_name": appointment.service.name if appointment.service else "Servicio",
            },
            push_title="💈 ¡Gracias por tu visita!",
            push_body="Esperamos verte pronto. ¡Déjanos tu reseña!",
            push_data={"appointmentId": appointment.id},
        )
        self._collect(result, outcome, appointment, "thank_you", "client")

    async def process(self, now: Optional[datetime] = None) -> NotificationRunResult:
        """
        One scheduler pass.

        Each window's flag is set after dispatch regardless of delivery
        outcome, and committed per appointment, giving at-most-once sends.
        """
        now = now or datetime.now()
        result = NotificationRunResult()

        for window in WINDOWS:
            target = now + window.lead
            candidates = self.repo.get_window_candidates(
                self.db, window.flag, target.date(), (target + window.tolerance).date()
            )
            for appointment in candidates:
                if not in_window(appointment, target, window.tolerance):
                    continue
                await self._remind(appointment, window, result)
                setattr(appointment, window.flag, True)
                self.db.commit()
                setattr(result, window.counter, getattr(result, window.counter) + 1)
            logger.info(f"⏰ {window.key} reminders processed: {getattr(result, window.counter)}")

        for appointment in self.repo.get_thank_you_candidates(self.db, now.date()):
            await self._thank(appointment, result)
            appointment.thank_you_sent = True
            self.db.commit()
            result.thankYou += 1

        if result.failures:
            logger.warning(f"⚠️ Notification run finished with {len(result.failures)} delivery failures")
        logger.info(
            f"✅ Notification run complete: {result.sent} sent "
            f"(24h={result.reminders24h}, 12h={result.reminders12h}, 2h={result.reminders2h}, "
            f"30m={result.reminders30m}, thankYou={result.thankYou})"
        )
        return result
