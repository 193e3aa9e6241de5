"""Reminder repository - candidate appointment queries for the scheduler"""

from datetime import date

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus


class ReminderRepository:
    @staticmethod
    def get_window_candidates(db: Session, flag_column: str, first_day: date, last_day: date) -> list[Appointment]:
        """
        Active appointments dated between two days whose flag is still unset.

        The exact start-time bounds are applied by the caller, since start
        time is stored as a separate HH:MM string.
        """
        flag = getattr(Appointment, flag_column)
        return (
            db.query(Appointment)
            .filter(
                Appointment.status.in_(AppointmentStatus.ACTIVE),
                Appointment.date >= first_day,
                Appointment.date <= last_day,
                flag.is_(False),
            )
            .order_by(Appointment.date, Appointment.time)
            .all()
        )

    @staticmethod
    def get_thank_you_candidates(db: Session, day: date) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.status == AppointmentStatus.COMPLETED,
                Appointment.date == day,
                Appointment.thank_you_sent.is_(False),
            )
            .all()
        )
