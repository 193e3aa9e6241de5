"""Invoice router - FastAPI endpoints for invoices"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import User
from ..settings.router import get_shop_settings
from ..settings.schemas import ShopSettings
from .schemas import (
    InvoiceCreate,
    InvoiceItemTemplateCreate,
    InvoiceItemTemplateResponse,
    InvoiceResponse,
    InvoiceUpdate,
)
from .service import InvoiceItemService, InvoiceService

router = APIRouter(prefix="/invoices", tags=["Invoices"])
items_router = APIRouter(prefix="/invoice-items", tags=["Invoices"])


def get_invoice_service(db: Session = Depends(get_db)) -> InvoiceService:
    """Dependency injection for InvoiceService"""
    return InvoiceService(db)


def get_item_service(db: Session = Depends(get_db)) -> InvoiceItemService:
    return InvoiceItemService(db)


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    type: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Admins see every invoice; everyone else only their own"""
    return [InvoiceResponse.from_model(i) for i in service.list_for_user(current_user, type)]


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    data: InvoiceCreate,
    _admin: User = Depends(require_admin),
    shop: ShopSettings = Depends(get_shop_settings),
    service: InvoiceService = Depends(get_invoice_service),
):
    return InvoiceResponse.from_model(service.create_manual(data, shop))


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    current_user: User = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    return InvoiceResponse.from_model(service.get_for_user(invoice_id, current_user))


@router.patch("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    _admin: User = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return InvoiceResponse.from_model(service.update(invoice_id, data))


@router.post("/{invoice_id}/send")
async def send_invoice(
    invoice_id: int,
    _admin: User = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Email the invoice to its recipient"""
    result = await service.send(invoice_id)
    return {"sent": result.ok, "sideEffects": [result]}


# ============================================================================
# Item templates
# ============================================================================


@items_router.get("", response_model=list[InvoiceItemTemplateResponse])
async def list_invoice_items(
    _admin: User = Depends(require_admin),
    service: InvoiceItemService = Depends(get_item_service),
):
    return [InvoiceItemTemplateResponse.from_model(i) for i in service.list_items()]


@items_router.post("", response_model=InvoiceItemTemplateResponse, status_code=201)
async def create_invoice_item(
    data: InvoiceItemTemplateCreate,
    _admin: User = Depends(require_admin),
    service: InvoiceItemService = Depends(get_item_service),
):
    return InvoiceItemTemplateResponse.from_model(service.create_item(data))


@items_router.delete("/{item_id}")
async def delete_invoice_item(
    item_id: int,
    _admin: User = Depends(require_admin),
    service: InvoiceItemService = Depends(get_item_service),
):
    service.delete_item(item_id)
    return {"success": True}
