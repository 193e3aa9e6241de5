"""
Accounting service
Expenses, barber payroll (with invoices), manual payments, earnings, stats and analytics
"""

import logging
from calendar import monthrange
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import AppointmentStatus, Barber, Role, User
from ...models_invoice import EXPENSE_CATEGORIES, BarberPayment, BarberPaymentStatus, Expense, ManualPayment
from ...shared.results import SideEffectResult
from ...shared.validators import parse_iso_date
from ..invoices.service import InvoiceService
from ..settings.schemas import ShopSettings
from .repository import AccountingRepository
from .schemas import (
    AccountingSummary,
    AdminEarningsResponse,
    AdminEarningsSummary,
    Analytics,
    AppointmentAnalytics,
    BarberEarnings,
    BarberPaymentCreate,
    BarberPaymentUpdate,
    CategoryTotal,
    ClientAnalytics,
    DateRange,
    EarningsPayment,
    EarningsResponse,
    EarningsSummary,
    EarningsTransaction,
    ExpenseCreate,
    ExpenseUpdate,
    ManualPaymentCreate,
    MethodTotal,
    MonthlyRevenue,
    MonthlyTotal,
    PeakHour,
    RevenueAnalytics,
    ReviewAnalytics,
    Stats,
    TopBarber,
    TopService,
)

logger = logging.getLogger(__name__)

TREND_MONTHS = 6
RECENT_PAYMENTS_LIMIT = 10
RECENT_TRANSACTIONS_LIMIT = 20
ANALYTICS_TOP = 5


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def months_ago(moment: datetime, months: int) -> datetime:
    """Same day-of-month `months` earlier, clamped to the month length"""
    year, month = moment.year, moment.month - months
    while month <= 0:
        month += 12
        year -= 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def month_bounds(moment: datetime) -> tuple[datetime, datetime]:
    first = moment.date().replace(day=1)
    last = first.replace(day=monthrange(first.year, first.month)[1])
    return datetime.combine(first, time.min), end_of_day(last)


def monthly_buckets(entries: list[tuple[datetime, float]]) -> list[MonthlyTotal]:
    totals: dict[str, float] = defaultdict(float)
    for moment, amount in entries:
        totals[moment.strftime("%Y-%m")] += amount
    return [MonthlyTotal(month=month, total=round(total, 2)) for month, total in sorted(totals.items())]


def period_range(period: str, now: datetime, start: Optional[str], end: Optional[str]) -> tuple[str, datetime, datetime]:
    """Resolve week (Monday-based) / month / custom, falling back to the current week"""
    today = now.date()
    if period == "month":
        first = today.replace(day=1)
        last = today.replace(day=monthrange(today.year, today.month)[1])
        return period, datetime.combine(first, time.min), end_of_day(last)

    if period == "custom":
        start_day, end_day = parse_iso_date(start), parse_iso_date(end)
        if start_day and end_day:
            return period, datetime.combine(start_day, time.min), end_of_day(end_day)

    monday = today - timedelta(days=today.weekday())
    return "week", datetime.combine(monday, time.min), end_of_day(monday + timedelta(days=6))


class AccountingService:
    """Service layer for shop accounting"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountingRepository()

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def get_summary(
        self, start_date: Optional[str] = None, end_date: Optional[str] = None, now: Optional[datetime] = None
    ) -> AccountingSummary:
        now = now or datetime.now()
        start_day, end_day = parse_iso_date(start_date), parse_iso_date(end_date)
        start_dt = datetime.combine(start_day, time.min) if start_day else None
        end_dt = end_of_day(end_day) if end_day else None

        income = sum(p.amount for p in self.repo.paid_barber_payments(self.db, start_dt, end_dt))
        outstanding = self.repo.outstanding_barber_payments(self.db)
        expenses = self.repo.list_expenses(self.db, start=start_day, end=end_day)
        total_expenses = sum(e.amount for e in expenses)

        trend_start = months_ago(now, TREND_MONTHS)
        monthly_income = monthly_buckets(
            [(p.paid_at, p.amount) for p in self.repo.paid_barber_payments(self.db, trend_start, None)]
        )
        monthly_expenses = monthly_buckets(
            [
                (datetime.combine(e.date, time.min), e.amount)
                for e in self.repo.list_expenses(self.db, start=trend_start.date())
            ]
        )

        return AccountingSummary(
            totalIncome=round(income, 2),
            totalExpenses=round(total_expenses, 2),
            balance=round(income - total_expenses, 2),
            totalPending=round(sum(p.amount for p in outstanding), 2),
            pendingPaymentsCount=len(outstanding),
            expensesByCategory=[
                CategoryTotal(category=category, total=round(total or 0, 2))
                for category, total in self.repo.expenses_by_category(self.db, start_day, end_day)
            ],
            monthlyIncome=monthly_income,
            monthlyExpenses=monthly_expenses,
        )

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def list_expenses(
        self, category: Optional[str] = None, start_date: Optional[str] = None, end_date: Optional[str] = None
    ) -> list[Expense]:
        return self.repo.list_expenses(
            self.db, category, parse_iso_date(start_date), parse_iso_date(end_date)
        )

    @staticmethod
    def _validate_expense(category: Optional[str], custom_category: Optional[str], amount: Optional[float]) -> None:
        if category not in EXPENSE_CATEGORIES:
            raise HTTPException(status_code=400, detail="Categoría inválida")
        if category == "OTHER" and not (custom_category or "").strip():
            raise HTTPException(
                status_code=400, detail='Categoría personalizada requerida cuando se selecciona "Otros"'
            )
        if amount is None or amount <= 0:
            raise HTTPException(status_code=400, detail="El monto debe ser mayor que 0")

    def create_expense(self, data: ExpenseCreate) -> Expense:
        if not data.category or data.amount is None or not data.date or not data.description:
            raise HTTPException(status_code=400, detail="Faltan campos requeridos")
        self._validate_expense(data.category, data.customCategory, data.amount)
        day = parse_iso_date(data.date)
        if not day:
            raise HTTPException(status_code=400, detail="Fecha inválida")

        expense = Expense(
            category=data.category,
            custom_category=data.customCategory.strip() if data.category == "OTHER" else None,
            amount=data.amount,
            description=data.description,
            date=day,
            notes=data.notes,
        )
        self.db.add(expense)
        self.db.commit()
        self.db.refresh(expense)
        logger.info(f"💸 Expense {expense.id} recorded: {expense.category} {expense.amount}")
        return expense

    def get_expense(self, expense_id: int) -> Expense:
        expense = self.repo.get_expense(self.db, expense_id)
        if not expense:
            raise HTTPException(status_code=404, detail="Gasto no encontrado")
        return expense

    def update_expense(self, expense_id: int, data: ExpenseUpdate) -> Expense:
        expense = self.get_expense(expense_id)
        updates = data.model_dump(exclude_unset=True)

        category = updates.get("category", expense.category)
        custom_category = updates.get("customCategory", expense.custom_category)
        amount = updates.get("amount", expense.amount)
        self._validate_expense(category, custom_category, amount)

        if "date" in updates:
            day = parse_iso_date(updates["date"])
            if not day:
                raise HTTPException(status_code=400, detail="Fecha inválida")
            expense.date = day
        if "description" in updates:
            if not updates["description"]:
                raise HTTPException(status_code=400, detail="La descripción es requerida")
            expense.description = updates["description"]
        if "notes" in updates:
            expense.notes = updates["notes"]

        expense.category = category
        expense.custom_category = custom_category if category == "OTHER" else None
        expense.amount = amount
        self.db.commit()
        self.db.refresh(expense)
        return expense

    def delete_expense(self, expense_id: int) -> None:
        self.db.delete(self.get_expense(expense_id))
        self.db.commit()

    # ------------------------------------------------------------------
    # Barber payments
    # ------------------------------------------------------------------

    def list_barber_payments(self, barber_id: Optional[int] = None, status: Optional[str] = None):
        return self.repo.list_barber_payments(self.db, barber_id, status)

    def get_barber_payment(self, payment_id: int) -> BarberPayment:
        payment = self.repo.get_barber_payment(self.db, payment_id)
        if not payment:
            raise HTTPException(status_code=404, detail="Pago no encontrado")
        return payment

    def create_barber_payment(
        self, data: BarberPaymentCreate, shop: ShopSettings, now: Optional[datetime] = None
    ) -> tuple[BarberPayment, list[SideEffectResult]]:
        """
        Record a payroll entry and issue its BARBER_PAYMENT invoice.

        The invoice goes through the same savepoint path as appointment
        invoices; its failure is reported, not raised.
        """
        now = now or datetime.now()
        if not data.barberId or data.amount is None or not data.weekStart or not data.weekEnd:
            raise HTTPException(status_code=400, detail="Faltan campos requeridos")
        if data.amount <= 0:
            raise HTTPException(status_code=400, detail="El monto debe ser mayor que 0")
        week_start, week_end = parse_iso_date(data.weekStart), parse_iso_date(data.weekEnd)
        if not week_start or not week_end or week_start > week_end:
            raise HTTPException(status_code=400, detail="Rango de semana inválido")
        if not self.repo.get_barber(self.db, data.barberId):
            raise HTTPException(status_code=404, detail="Barbero no encontrado")

        payment = BarberPayment(
            barber_id=data.barberId,
            amount=data.amount,
            week_start=week_start,
            week_end=week_end,
            status=data.status,
            notes=data.notes,
            paid_at=now if data.status == BarberPaymentStatus.PAID else None,
        )
        self.db.add(payment)
        self.db.flush()

        side_effects = [InvoiceService(self.db).create_for_barber_payment(payment, shop, now)]
        self.db.commit()
        self.db.refresh(payment)
        logger.info(f"✅ Barber payment {payment.id} recorded for barber {payment.barber_id}")
        return payment, side_effects

    def update_barber_payment(
        self, payment_id: int, data: BarberPaymentUpdate, now: Optional[datetime] = None
    ) -> BarberPayment:
        now = now or datetime.now()
        payment = self.get_barber_payment(payment_id)
        updates = data.model_dump(exclude_unset=True)

        if "amount" in updates:
            if updates["amount"] is None or updates["amount"] <= 0:
                raise HTTPException(status_code=400, detail="El monto debe ser mayor que 0")
            payment.amount = updates["amount"]
        if "notes" in updates:
            payment.notes = updates["notes"]
        if updates.get("status"):
            payment.status = updates["status"]
            payment.paid_at = now if payment.status == BarberPaymentStatus.PAID else None
            if payment.invoice:
                payment.invoice.is_paid = payment.status == BarberPaymentStatus.PAID
                payment.invoice.paid_at = payment.paid_at

        self.db.commit()
        self.db.refresh(payment)
        return payment

    def delete_barber_payment(self, payment_id: int) -> None:
        """Invoices are permanent records, so an issued one is detached rather than deleted"""
        payment = self.get_barber_payment(payment_id)
        if payment.invoice:
            payment.invoice.barber_payment_id = None
        self.db.delete(payment)
        self.db.commit()

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self, user: User, barber_id: Optional[int] = None) -> Stats:
        if user.role == Role.BARBER:
            barber_id = user.barber.id if user.barber else -1

        completed = self.repo.completed_appointments(self.db, barber_id)
        revenue = sum(a.service.price for a in completed if a.service)
        avg_rating, total_reviews = self.repo.rating_stats(self.db, barber_id)
        return Stats(
            totalAppointments=self.repo.count_appointments(self.db, barber_id),
            completedAppointments=len(completed),
            pendingAppointments=self.repo.count_appointments(self.db, barber_id, AppointmentStatus.ACTIVE),
            totalRevenue=round(revenue, 2),
            avgRating=round(avg_rating, 1),
            totalReviews=total_reviews,
            totalClients=self.repo.count_unique_clients(self.db, barber_id),
        )

    def get_analytics(self, now: Optional[datetime] = None) -> Analytics:
        """Shop-wide dashboard: revenue trend, top services and barbers, peak hours"""
        now = now or datetime.now()
        month_start, month_end = month_bounds(now)
        last_start, last_end = month_bounds(months_ago(now, 1))

        completed = self.repo.completed_appointments(self.db)

        def revenue_between(start: datetime, end: datetime) -> float:
            return sum(
                a.service.price for a in completed if a.service and start.date() <= a.date <= end.date()
            )

        current_revenue = revenue_between(month_start, month_end)
        last_revenue = revenue_between(last_start, last_end)
        by_month = []
        for offset in range(TREND_MONTHS - 1, -1, -1):
            start, end = month_bounds(months_ago(now, offset))
            by_month.append(MonthlyRevenue(month=start.strftime("%b %Y"), amount=round(revenue_between(start, end), 2)))

        bookings: dict[int, int] = defaultdict(int)
        barber_revenue: dict[int, float] = defaultdict(float)
        barber_bookings: dict[int, int] = defaultdict(int)
        hours: dict[str, int] = defaultdict(int)
        for appointment in completed:
            bookings[appointment.service_id] += 1
            barber_bookings[appointment.barber_id] += 1
            barber_revenue[appointment.barber_id] += appointment.service.price if appointment.service else 0
            hours[f"{appointment.time.split(':')[0]}:00"] += 1

        top_services = sorted(
            (
                TopService(
                    id=s.id,
                    name=s.name,
                    price=s.price,
                    bookings=bookings[s.id],
                    revenue=round(s.price * bookings[s.id], 2),
                )
                for s in self.repo.active_services(self.db)
            ),
            key=lambda s: s.bookings,
            reverse=True,
        )[:ANALYTICS_TOP]

        top_barbers = []
        for barber in self.repo.active_barbers(self.db):
            rating, reviews = self.repo.rating_stats(self.db, barber.id)
            top_barbers.append(
                TopBarber(
                    id=barber.id,
                    name=(barber.user.name if barber.user else None) or "Unknown",
                    appointments=barber_bookings[barber.id],
                    reviews=reviews,
                    rating=round(rating, 1),
                    revenue=round(barber_revenue[barber.id], 2),
                )
            )
        top_barbers.sort(key=lambda b: b.appointments, reverse=True)

        avg_rating, total_reviews = self.repo.rating_stats(self.db)
        peak_hours = sorted(hours.items(), key=lambda item: item[1], reverse=True)[:ANALYTICS_TOP]

        return Analytics(
            revenue=RevenueAnalytics(
                total=round(sum(a.service.price for a in completed if a.service), 2),
                currentMonth=round(current_revenue, 2),
                lastMonth=round(last_revenue, 2),
                growth=round((current_revenue - last_revenue) / last_revenue * 100, 2) if last_revenue else 0,
                byMonth=by_month,
            ),
            appointments=AppointmentAnalytics(
                total=self.repo.count_appointments(self.db),
                completed=len(completed),
                pending=self.repo.count_appointments(self.db, statuses=(AppointmentStatus.PENDING,)),
                cancelled=self.repo.count_appointments(self.db, statuses=(AppointmentStatus.CANCELLED,)),
                currentMonth=self.repo.count_appointments_between(self.db, month_start.date(), month_end.date()),
            ),
            services={"top": top_services},
            barbers={"top": top_barbers[:ANALYTICS_TOP]},
            clients=ClientAnalytics(
                total=self.repo.count_clients(self.db),
                newThisMonth=self.repo.count_clients(self.db, month_start, month_end),
            ),
            reviews=ReviewAnalytics(total=total_reviews, averageRating=round(avg_rating, 1)),
            peakHours=[PeakHour(time=hour, count=count) for hour, count in peak_hours],
        )

    def get_admin_earnings(
        self,
        period: str = "week",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        barber_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AdminEarningsResponse:
        """Paid completed appointments across barbers, grouped per barber"""
        now = now or datetime.now()
        period, start, end = period_range(period, now, start_date, end_date)
        appointments = self.repo.paid_completed_appointments(self.db, barber_id, start.date(), end.date())

        per_barber: dict[int, BarberEarnings] = {}
        transactions: list[EarningsTransaction] = []
        for appointment in appointments:
            price = appointment.service.price if appointment.service else 0
            barber_user = appointment.barber.user if appointment.barber else None
            barber_name = (barber_user.name if barber_user else None) or "Barbero"
            entry = per_barber.setdefault(
                appointment.barber_id,
                BarberEarnings(
                    barberId=appointment.barber_id,
                    barberName=barber_name,
                    barberEmail=barber_user.email if barber_user else None,
                ),
            )
            entry.totalEarnings += price
            entry.totalClients += 1
            method = entry.byPaymentMethod.setdefault(appointment.payment_method or "CASH", MethodTotal())
            method.count += 1
            method.total += price

            client = appointment.client
            transactions.append(
                EarningsTransaction(
                    id=appointment.id,
                    barberName=barber_name,
                    clientName=(client.name or client.email) if client else "Cliente",
                    serviceName=appointment.service.name if appointment.service else "Servicio",
                    amount=price,
                    paymentMethod=appointment.payment_method,
                    date=appointment.date,
                    time=appointment.time,
                )
            )

        barbers = list(per_barber.values())
        for entry in barbers:
            entry.totalEarnings = round(entry.totalEarnings, 2)

        return AdminEarningsResponse(
            period=period,
            dateRange=DateRange(start=start, end=end),
            summary=AdminEarningsSummary(
                totalEarnings=round(sum(b.totalEarnings for b in barbers), 2),
                totalClients=len(appointments),
                totalBarbers=len(barbers),
            ),
            barbers=barbers,
            recentTransactions=transactions[:RECENT_TRANSACTIONS_LIMIT],
        )


class EarningsService:
    """A barber's own earnings: paid completed appointments plus manual payments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountingRepository()

    def get_earnings(
        self,
        barber: Barber,
        period: str = "week",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> EarningsResponse:
        now = now or datetime.now()
        period, start, end = period_range(period, now, start_date, end_date)

        appointments = self.repo.paid_completed_appointments(self.db, barber.id, start.date(), end.date())
        manual = self.repo.list_manual_payments(self.db, barber.id, start, end)

        by_method: dict[str, MethodTotal] = {}
        payments: list[EarningsPayment] = []

        for appointment in appointments:
            price = appointment.service.price if appointment.service else 0
            method = appointment.payment_method or "CASH"
            entry = by_method.setdefault(method, MethodTotal())
            entry.count += 1
            entry.total += price
            client = appointment.client
            payments.append(
                EarningsPayment(
                    id=appointment.id,
                    type="appointment",
                    clientName=(client.name or client.email) if client else "Cliente",
                    serviceName=appointment.service.name if appointment.service else "Servicio",
                    amount=price,
                    paymentMethod=appointment.payment_method,
                    date=appointment.starts_at,
                    time=appointment.time,
                )
            )

        for payment in manual:
            entry = by_method.setdefault(payment.payment_method, MethodTotal())
            entry.count += 1
            entry.total += payment.amount
            payments.append(
                EarningsPayment(
                    id=payment.id,
                    type="manual",
                    clientName=payment.client_name or "Cliente no registrado",
                    serviceName=payment.description or "Pago manual",
                    amount=payment.amount,
                    paymentMethod=payment.payment_method,
                    date=payment.date,
                )
            )

        total = sum(p.amount for p in payments)
        clients = len(payments)
        payments.sort(key=lambda p: p.date, reverse=True)

        return EarningsResponse(
            period=period,
            dateRange=DateRange(start=start, end=end),
            summary=EarningsSummary(
                totalEarnings=round(total, 2),
                totalClients=clients,
                averagePerClient=round(total / clients, 2) if clients else 0,
            ),
            byPaymentMethod=by_method,
            recentPayments=payments[:RECENT_PAYMENTS_LIMIT],
        )

    def list_manual_payments(self, barber: Barber) -> list[ManualPayment]:
        return self.repo.list_manual_payments(self.db, barber.id)

    def create_manual_payment(self, barber: Barber, data: ManualPaymentCreate) -> ManualPayment:
        if data.amount is None or data.amount <= 0:
            raise HTTPException(status_code=400, detail="Monto inválido")
        if not data.paymentMethod:
            raise HTTPException(status_code=400, detail="Método de pago requerido")

        payment = ManualPayment(
            barber_id=barber.id,
            amount=data.amount,
            payment_method=data.paymentMethod,
            description=data.description,
            client_name=data.clientName,
            date=data.date or datetime.now(),
        )
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        logger.info(f"💵 Manual payment {payment.id} recorded by barber {barber.id}")
        return payment
