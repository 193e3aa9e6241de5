"""Accounting schemas - expenses, barber payroll, manual payments and reports"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel

from ...shared.results import SideEffectResult

ExpenseCategory = Literal["RENT", "UTILITIES", "SUPPLIES", "SALARIES", "MARKETING", "MAINTENANCE", "OTHER"]
BarberPaymentStatusLiteral = Literal["PENDING", "PAID", "OVERDUE"]


# ============================================================================
# Expenses
# ============================================================================


class ExpenseCreate(BaseModel):
    category: Optional[ExpenseCategory] = None
    customCategory: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD
    notes: Optional[str] = None


class ExpenseUpdate(BaseModel):
    category: Optional[ExpenseCategory] = None
    customCategory: Optional[str] = None
    amount: Optional[float] = None
    description: Optional[str] = None
    date: Optional[str] = None
    notes: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: int
    category: str
    customCategory: Optional[str] = None
    amount: float
    description: str
    date: date
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, expense) -> "ExpenseResponse":
        return cls(
            id=expense.id,
            category=expense.category,
            customCategory=expense.custom_category,
            amount=expense.amount,
            description=expense.description,
            date=expense.date,
            notes=expense.notes,
            createdAt=expense.created_at,
        )


# ============================================================================
# Barber payments (payroll)
# ============================================================================


class BarberPaymentCreate(BaseModel):
    barberId: Optional[int] = None
    amount: Optional[float] = None
    weekStart: Optional[str] = None
    weekEnd: Optional[str] = None
    status: BarberPaymentStatusLiteral = "PENDING"
    notes: Optional[str] = None


class BarberPaymentUpdate(BaseModel):
    amount: Optional[float] = None
    status: Optional[BarberPaymentStatusLiteral] = None
    notes: Optional[str] = None


class BarberPaymentResponse(BaseModel):
    id: int
    barberId: int
    barberName: Optional[str] = None
    amount: float
    weekStart: date
    weekEnd: date
    status: str
    notes: Optional[str] = None
    paidAt: Optional[datetime] = None
    invoiceNumber: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, payment) -> "BarberPaymentResponse":
        barber = payment.barber
        return cls(
            id=payment.id,
            barberId=payment.barber_id,
            barberName=barber.user.name if barber and barber.user else None,
            amount=payment.amount,
            weekStart=payment.week_start,
            weekEnd=payment.week_end,
            status=payment.status,
            notes=payment.notes,
            paidAt=payment.paid_at,
            invoiceNumber=payment.invoice.invoice_number if payment.invoice else None,
            createdAt=payment.created_at,
        )


class BarberPaymentResult(BaseModel):
    payment: BarberPaymentResponse
    sideEffects: list[SideEffectResult] = []


# ============================================================================
# Manual payments
# ============================================================================


class ManualPaymentCreate(BaseModel):
    amount: Optional[float] = None
    paymentMethod: Optional[str] = None
    description: Optional[str] = None
    clientName: Optional[str] = None
    date: Optional[datetime] = None


class ManualPaymentResponse(BaseModel):
    id: int
    barberId: int
    amount: float
    paymentMethod: str
    description: Optional[str] = None
    clientName: Optional[str] = None
    date: datetime

    @classmethod
    def from_model(cls, payment) -> "ManualPaymentResponse":
        return cls(
            id=payment.id,
            barberId=payment.barber_id,
            amount=payment.amount,
            paymentMethod=payment.payment_method,
            description=payment.description,
            clientName=payment.client_name,
            date=payment.date,
        )


# ============================================================================
# Reports
# ============================================================================


class CategoryTotal(BaseModel):
    category: str
    total: float


class MonthlyTotal(BaseModel):
    month: str  # YYYY-MM
    total: float


class AccountingSummary(BaseModel):
    totalIncome: float
    totalExpenses: float
    balance: float
    totalPending: float
    pendingPaymentsCount: int
    expensesByCategory: list[CategoryTotal]
    monthlyIncome: list[MonthlyTotal]
    monthlyExpenses: list[MonthlyTotal]


class Stats(BaseModel):
    totalAppointments: int
    completedAppointments: int
    pendingAppointments: int
    totalRevenue: float
    avgRating: float
    totalReviews: int
    totalClients: int


class StatsResponse(BaseModel):
    stats: Stats


class EarningsSummary(BaseModel):
    totalEarnings: float
    totalClients: int
    averagePerClient: float


class MethodTotal(BaseModel):
    count: int = 0
    total: float = 0


class EarningsPayment(BaseModel):
    id: int
    type: Literal["appointment", "manual"]
    clientName: str
    serviceName: str
    amount: float
    paymentMethod: Optional[str] = None
    date: datetime
    time: str = ""


class DateRange(BaseModel):
    start: datetime
    end: datetime


class EarningsResponse(BaseModel):
    period: str
    dateRange: DateRange
    summary: EarningsSummary
    byPaymentMethod: dict[str, MethodTotal]
    recentPayments: list[EarningsPayment]


# ============================================================================
# Admin earnings (all barbers)
# ============================================================================


class AdminEarningsSummary(BaseModel):
    totalEarnings: float
    totalClients: int
    totalBarbers: int


class BarberEarnings(BaseModel):
    barberId: int
    barberName: str
    barberEmail: Optional[str] = None
    totalEarnings: float = 0
    totalClients: int = 0
    byPaymentMethod: dict[str, MethodTotal] = {}


class EarningsTransaction(BaseModel):
    id: int
    barberName: str
    clientName: str
    serviceName: str
    amount: float
    paymentMethod: Optional[str] = None
    date: date
    time: str


class AdminEarningsResponse(BaseModel):
    period: str
    dateRange: DateRange
    summary: AdminEarningsSummary
    barbers: list[BarberEarnings]
    recentTransactions: list[EarningsTransaction]


# ============================================================================
# Analytics dashboard
# ============================================================================


class MonthlyRevenue(BaseModel):
    month: str  # "Jun 2030"
    amount: float


class RevenueAnalytics(BaseModel):
    total: float
    currentMonth: float
    lastMonth: float
    growth: float
    byMonth: list[MonthlyRevenue]


class AppointmentAnalytics(BaseModel):
    total: int
    completed: int
    pending: int
    cancelled: int
    currentMonth: int


class TopService(BaseModel):
    id: int
    name: str
    price: float
    bookings: int
    revenue: float


class TopBarber(BaseModel):
    id: int
    name: str
    appointments: int
    reviews: int
    rating: float
    revenue: float


class ClientAnalytics(BaseModel):
    total: int
    newThisMonth: int


class ReviewAnalytics(BaseModel):
    total: int
    averageRating: float


class PeakHour(BaseModel):
    time: str
    count: int


class Analytics(BaseModel):
    revenue: RevenueAnalytics
    appointments: AppointmentAnalytics
    services: dict[str, list[TopService]]
    barbers: dict[str, list[TopBarber]]
    clients: ClientAnalytics
    reviews: ReviewAnalytics
    peakHours: list[PeakHour]
