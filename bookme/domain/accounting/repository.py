"""Accounting repository - ledger queries and aggregates"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus, Barber, PaymentStatus, Review, Role, Service, User
from ...models_invoice import BarberPayment, BarberPaymentStatus, Expense, ManualPayment


class AccountingRepository:
    """Repository for accounting database operations"""

    # Expenses

    @staticmethod
    def get_expense(db: Session, expense_id: int) -> Optional[Expense]:
        return db.query(Expense).filter(Expense.id == expense_id).first()

    @staticmethod
    def list_expenses(
        db: Session,
        category: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[Expense]:
        query = db.query(Expense)
        if category:
            query = query.filter(Expense.category == category)
        if start:
            query = query.filter(Expense.date >= start)
        if end:
            query = query.filter(Expense.date <= end)
        return query.order_by(Expense.date.desc(), Expense.id.desc()).all()

    @staticmethod
    def expenses_by_category(db: Session, start: Optional[date] = None, end: Optional[date] = None):
        query = db.query(Expense.category, func.sum(Expense.amount))
        if start:
            query = query.filter(Expense.date >= start)
        if end:
            query = query.filter(Expense.date <= end)
        return query.group_by(Expense.category).all()

    # Barber payments

    @staticmethod
    def get_barber(db: Session, barber_id: int) -> Optional[Barber]:
        return db.query(Barber).filter(Barber.id == barber_id).first()

    @staticmethod
    def get_barber_payment(db: Session, payment_id: int) -> Optional[BarberPayment]:
        return db.query(BarberPayment).filter(BarberPayment.id == payment_id).first()

    @staticmethod
    def list_barber_payments(
        db: Session, barber_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[BarberPayment]:
        query = db.query(BarberPayment)
        if barber_id is not None:
            query = query.filter(BarberPayment.barber_id == barber_id)
        if status:
            query = query.filter(BarberPayment.status == status)
        return query.order_by(BarberPayment.week_start.desc(), BarberPayment.id.desc()).all()

    @staticmethod
    def paid_barber_payments(
        db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[BarberPayment]:
        query = db.query(BarberPayment).filter(BarberPayment.status == BarberPaymentStatus.PAID)
        if start:
            query = query.filter(BarberPayment.paid_at >= start)
        if end:
            query = query.filter(BarberPayment.paid_at <= end)
        return query.all()

    @staticmethod
    def outstanding_barber_payments(db: Session) -> list[BarberPayment]:
        return (
            db.query(BarberPayment)
            .filter(BarberPayment.status.in_((BarberPaymentStatus.PENDING, BarberPaymentStatus.OVERDUE)))
            .all()
        )

    # Manual payments

    @staticmethod
    def list_manual_payments(
        db: Session, barber_id: int, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[ManualPayment]:
        query = db.query(ManualPayment).filter(ManualPayment.barber_id == barber_id)
        if start:
            query = query.filter(ManualPayment.date >= start)
        if end:
            query = query.filter(ManualPayment.date <= end)
        return query.order_by(ManualPayment.date.desc()).all()

    # Appointments and reviews

    @staticmethod
    def paid_completed_appointments(
        db: Session, barber_id: Optional[int], start: date, end: date
    ) -> list[Appointment]:
        query = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.COMPLETED,
            Appointment.payment_status == PaymentStatus.PAID,
            Appointment.date >= start,
            Appointment.date <= end,
        )
        if barber_id is not None:
            query = query.filter(Appointment.barber_id == barber_id)
        return query.order_by(Appointment.date.desc(), Appointment.time.desc()).all()

    @staticmethod
    def count_appointments(db: Session, barber_id: Optional[int] = None, statuses: Optional[tuple] = None) -> int:
        query = db.query(Appointment)
        if barber_id is not None:
            query = query.filter(Appointment.barber_id == barber_id)
        if statuses:
            query = query.filter(Appointment.status.in_(statuses))
        return query.count()

    @staticmethod
    def completed_appointments(db: Session, barber_id: Optional[int] = None) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.status == AppointmentStatus.COMPLETED)
        if barber_id is not None:
            query = query.filter(Appointment.barber_id == barber_id)
        return query.all()

    @staticmethod
    def count_unique_clients(db: Session, barber_id: Optional[int] = None) -> int:
        query = db.query(func.count(func.distinct(Appointment.client_id)))
        if barber_id is not None:
            query = query.filter(Appointment.barber_id == barber_id)
        return query.scalar() or 0

    @staticmethod
    def rating_stats(db: Session, barber_id: Optional[int] = None) -> tuple[float, int]:
        query = db.query(func.avg(Review.rating), func.count(Review.id))
        if barber_id is not None:
            query = query.filter(Review.barber_id == barber_id)
        avg, count = query.one()
        return float(avg or 0), count or 0

    # Analytics

    @staticmethod
    def count_appointments_between(db: Session, start: date, end: date) -> int:
        return db.query(Appointment).filter(Appointment.date >= start, Appointment.date <= end).count()

    @staticmethod
    def active_services(db: Session) -> list[Service]:
        return db.query(Service).filter(Service.is_active.is_(True)).all()

    @staticmethod
    def active_barbers(db: Session) -> list[Barber]:
        return db.query(Barber).filter(Barber.is_active.is_(True)).all()

    @staticmethod
    def count_clients(db: Session, joined_from: Optional[datetime] = None, joined_to: Optional[datetime] = None) -> int:
        query = db.query(User).filter(User.role == Role.CLIENT)
        if joined_from:
            query = query.filter(User.created_at >= joined_from)
        if joined_to:
            query = query.filter(User.created_at <= joined_to)
        return query.count()
