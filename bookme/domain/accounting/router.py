"""Accounting router - admin ledger, stats, analytics and earnings"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_barber, require_admin, require_roles
from ...database import get_db
from ...models import Barber, Role, User
from ..settings.router import get_shop_settings
from ..settings.schemas import ShopSettings
from .schemas import (
    AccountingSummary,
    AdminEarningsResponse,
    Analytics,
    BarberPaymentCreate,
    BarberPaymentResponse,
    BarberPaymentResult,
    BarberPaymentUpdate,
    EarningsResponse,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    ManualPaymentCreate,
    ManualPaymentResponse,
    StatsResponse,
)
from .service import AccountingService, EarningsService

router = APIRouter(tags=["Accounting"])
earnings_router = APIRouter(prefix="/barber", tags=["Earnings"])


def get_accounting_service(db: Session = Depends(get_db)) -> AccountingService:
    return AccountingService(db)


def get_earnings_service(db: Session = Depends(get_db)) -> EarningsService:
    return EarningsService(db)


@router.get("/accounting/summary", response_model=AccountingSummary)
async def accounting_summary(
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    return service.get_summary(startDate, endDate)


# ============================================================================
# Expenses
# ============================================================================


@router.get("/expenses", response_model=list[ExpenseResponse])
async def list_expenses(
    category: Optional[str] = Query(None),
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    return [ExpenseResponse.from_model(e) for e in service.list_expenses(category, startDate, endDate)]


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    data: ExpenseCreate,
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    return ExpenseResponse.from_model(service.create_expense(data))


@router.patch("/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    return ExpenseResponse.from_model(service.update_expense(expense_id, data))


@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: int,
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    service.delete_expense(expense_id)
    return {"message": "Gasto eliminado exitosamente"}


# ============================================================================
# Barber payments
# ============================================================================


@router.get("/barber-payments", response_model=list[BarberPaymentResponse])
async def list_barber_payments(
    barberId: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    return [BarberPaymentResponse.from_model(p) for p in service.list_barber_payments(barberId, status)]


@router.post("/barber-payments", response_model=BarberPaymentResult, status_code=201)
async def create_barber_payment(
    data: BarberPaymentCreate,
    _admin: User = Depends(require_admin),
    shop: ShopSettings = Depends(get_shop_settings),
    service: AccountingService = Depends(get_accounting_service),
):
    """Record a payroll entry; invoice creation is reported in sideEffects"""
    payment, side_effects = service.create_barber_payment(data, shop)
    return BarberPaymentResult(payment=BarberPaymentResponse.from_model(payment), sideEffects=side_effects)


@router.patch("/barber-payments/{payment_id}", response_model=BarberPaymentResponse)
async def update_barber_payment(
    payment_id: int,
    data: BarberPaymentUpdate,
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    return BarberPaymentResponse.from_model(service.update_barber_payment(payment_id, data))


@router.delete("/barber-payments/{payment_id}")
async def delete_barber_payment(
    payment_id: int,
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    service.delete_barber_payment(payment_id)
    return {"message": "Pago eliminado exitosamente"}


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    barberId: Optional[int] = Query(None),
    current_user: User = Depends(require_roles(Role.BARBER, Role.ADMIN)),
    service: AccountingService = Depends(get_accounting_service),
):
    return StatsResponse(stats=service.get_stats(current_user, barberId))


@router.get("/stats/analytics", response_model=Analytics)
async def get_analytics(
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    return service.get_analytics()


@router.get("/admin/earnings", response_model=AdminEarningsResponse)
async def get_admin_earnings(
    period: str = Query("week"),
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    barberId: Optional[int] = Query(None),
    _admin: User = Depends(require_admin),
    service: AccountingService = Depends(get_accounting_service),
):
    """Earnings of every barber (or one, with barberId) over the period"""
    return service.get_admin_earnings(period, startDate, endDate, barberId)


# ============================================================================
# Barber earnings and manual payments
# ============================================================================


@earnings_router.get("/earnings", response_model=EarningsResponse)
async def get_earnings(
    period: str = Query("week"),
    startDate: Optional[str] = Query(None),
    endDate: Optional[str] = Query(None),
    barber: Barber = Depends(get_current_barber),
    service: EarningsService = Depends(get_earnings_service),
):
    return service.get_earnings(barber, period, startDate, endDate)


@earnings_router.get("/manual-payments", response_model=list[ManualPaymentResponse])
async def list_manual_payments(
    barber: Barber = Depends(get_current_barber),
    service: EarningsService = Depends(get_earnings_service),
):
    return [ManualPaymentResponse.from_model(p) for p in service.list_manual_payments(barber)]


@earnings_router.post("/manual-payments", response_model=ManualPaymentResponse, status_code=201)
async def create_manual_payment(
    data: ManualPaymentCreate,
    barber: Barber = Depends(get_current_barber),
    service: EarningsService = Depends(get_earnings_service),
):
    return ManualPaymentResponse.from_model(service.create_manual_payment(barber, data))
