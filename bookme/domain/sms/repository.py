"""SMS repository - appointments due for a text"""

from datetime import datetime

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus


class SmsRepository:
    @staticmethod
    def recently_completed(db: Session, since: datetime) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.status == AppointmentStatus.COMPLETED,
                Appointment.updated_at >= since,
                Appointment.thank_you_sent.is_(False),
            )
            .order_by(Appointment.updated_at)
            .all()
        )
