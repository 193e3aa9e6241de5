"""Invoice service - numbering, automatic invoices and manual invoice management"""

import logging
from datetime import datetime
from typing import Callable, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...email_service import send_invoice_email
from ...models import Appointment, Role, User
from ...models_invoice import BarberPayment, Invoice, InvoiceItemTemplate, InvoiceType
from ...shared.results import SideEffectResult
from ..settings.schemas import ShopSettings
from .repository import InvoiceRepository
from .schemas import InvoiceCreate, InvoiceItemTemplateCreate, InvoiceUpdate

logger = logging.getLogger(__name__)

# Attempts at inserting with a fresh number after a unique-constraint collision
MAX_NUMBER_ATTEMPTS = 3


def format_invoice_number(year: int, sequence: int) -> str:
    return f"INV-{year}-{sequence:04d}"


class InvoiceService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = InvoiceRepository()

    # ------------------------------------------------------------------
    # Numbering
    # ------------------------------------------------------------------

    def next_invoice_number(self, year: Optional[int] = None) -> str:
        """INV-{year}-{seq}: one past the highest number issued that year"""
        year = year or datetime.now().year
        last = self.repo.get_last_number(self.db, f"INV-{year}-")
        sequence = 1
        if last:
            sequence = int(last.split("-")[2]) + 1
        return format_invoice_number(year, sequence)

    def _insert_numbered(self, build: Callable[[str], Invoice], year: Optional[int] = None) -> Invoice:
        """
        Insert an invoice inside a SAVEPOINT, renumbering on collision.

        Only the savepoint is rolled back on failure, so whatever the caller
        already changed in the surrounding transaction is kept.
        """
        last_error: Optional[Exception] = None
        for attempt in range(1, MAX_NUMBER_ATTEMPTS + 1):
            try:
                with self.db.begin_nested():
                    invoice = build(self.next_invoice_number(year))
                    self.repo.add(self.db, invoice)
                return invoice
            except IntegrityError as e:
                last_error = e
                logger.warning(f"⚠️ Invoice number collision (attempt {attempt}/{MAX_NUMBER_ATTEMPTS})")
        raise last_error

    # ------------------------------------------------------------------
    # Automatic invoices (side effects of other operations)
    # ------------------------------------------------------------------

    def create_for_appointment(
        self, appointment: Appointment, shop: ShopSettings, now: Optional[datetime] = None
    ) -> SideEffectResult:
        """
        Paid CLIENT_SERVICE invoice for a completed appointment.

        Idempotent: an existing invoice for the appointment is reported, not
        duplicated. Never raises; the caller commits.
        """
        now = now or datetime.now()
        try:
            existing = self.repo.get_by_appointment(self.db, appointment.id)
            if existing:
                return SideEffectResult.skipped("invoice", f"exists:{existing.invoice_number}")

            client = appointment.client
            service = appointment.service
            barber_name = appointment.barber.user.name if appointment.barber.user else "Barbero"

            def build(number: str) -> Invoice:
                return Invoice(
                    invoice_number=number,
                    type=InvoiceType.CLIENT_SERVICE,
                    appointment_id=appointment.id,
                    issuer_name=shop.shopName,
                    issuer_address=shop.address or "",
                    issuer_phone=shop.phone or "",
                    issuer_email=shop.email or "",
                    recipient_id=client.id,
                    recipient_name=client.name or "Sin nombre",
                    recipient_email=client.email,
                    recipient_phone=client.phone or "",
                    amount=service.price,
                    description=f"Servicio: {service.name} - Barbero: {barber_name}",
                    items=[
                        {
                            "description": service.name,
                            "quantity": 1,
                            "unitPrice": service.price,
                            "total": service.price,
                        }
                    ],
                    is_paid=True,
                    paid_at=now,
                    issue_date=now,
                )

            invoice = self._insert_numbered(build, now.year)
            logger.info(f"✅ Invoice {invoice.invoice_number} created for appointment {appointment.id}")
            return SideEffectResult.success("invoice", invoiceNumber=invoice.invoice_number)
        except Exception as e:
            logger.error(f"❌ Error creating invoice for completed appointment {appointment.id}: {e}")
            return SideEffectResult.failure("invoice", str(e))

    def create_for_barber_payment(
        self, payment: BarberPayment, shop: ShopSettings, now: Optional[datetime] = None
    ) -> SideEffectResult:
        """BARBER_PAYMENT invoice issued to the barber for a payroll entry. Never raises."""
        now = now or datetime.now()
        try:
            existing = self.repo.get_by_barber_payment(self.db, payment.id)
            if existing:
                return SideEffectResult.skipped("invoice", f"exists:{existing.invoice_number}")

            barber_user = payment.barber.user
            period = f"{payment.week_start.isoformat()} - {payment.week_end.isoformat()}"
            description = f"Pago semanal {period}"

            def build(number: str) -> Invoice:
                return Invoice(
                    invoice_number=number,
                    type=InvoiceType.BARBER_PAYMENT,
                    barber_payment_id=payment.id,
                    issuer_name=shop.shopName,
                    issuer_address=shop.address or "",
                    issuer_phone=shop.phone or "",
                    issuer_email=shop.email or "",
                    recipient_id=barber_user.id,
                    recipient_name=barber_user.name or "Sin nombre",
                    recipient_email=barber_user.email,
                    recipient_phone=barber_user.phone or "",
                    amount=payment.amount,
                    description=description,
                    items=[
                        {
                            "description": description,
                            "quantity": 1,
                            "unitPrice": payment.amount,
                            "total": payment.amount,
                        }
                    ],
                    is_paid=payment.status == "PAID",
                    paid_at=payment.paid_at,
                    issue_date=now,
                )

            invoice = self._insert_numbered(build, now.year)
            logger.info(f"✅ Invoice {invoice.invoice_number} created for barber payment {payment.id}")
            return SideEffectResult.success("invoice", invoiceNumber=invoice.invoice_number)
        except Exception as e:
            logger.error(f"❌ Error creating invoice for barber payment {payment.id}: {e}")
            return SideEffectResult.failure("invoice", str(e))

    # ------------------------------------------------------------------
    # Manual invoice management
    # ------------------------------------------------------------------

    def create_manual(self, data: InvoiceCreate, shop: ShopSettings) -> Invoice:
        if not data.type or not data.amount:
            raise HTTPException(status_code=400, detail="Faltan campos requeridos")
        if not data.recipientId and (not data.recipientName or not data.recipientEmail):
            raise HTTPException(
                status_code=400, detail="Se requiere recipientId o recipientName/recipientEmail"
            )

        recipient_name = data.recipientName
        recipient_email = data.recipientEmail
        recipient_phone = data.recipientPhone or ""
        if data.recipientId:
            recipient = self.db.query(User).filter(User.id == data.recipientId).first()
            if not recipient:
                raise HTTPException(status_code=404, detail="Destinatario no encontrado")
            recipient_name = recipient.name or "Sin nombre"
            recipient_email = recipient.email
            recipient_phone = recipient.phone or ""

        items = [item.model_dump() for item in data.items] or [
            {
                "description": data.description or "Servicio",
                "quantity": 1,
                "unitPrice": data.amount,
                "total": data.amount,
            }
        ]

        def build(number: str) -> Invoice:
            return Invoice(
                invoice_number=number,
                type=data.type,
                appointment_id=data.appointmentId,
                barber_payment_id=data.barberPaymentId,
                issuer_name=shop.shopName,
                issuer_address=shop.address or "",
                issuer_phone=shop.phone or "",
                issuer_email=shop.email or "",
                recipient_id=data.recipientId,
                recipient_name=recipient_name,
                recipient_email=recipient_email,
                recipient_phone=recipient_phone,
                amount=data.amount,
                description=data.description,
                items=items,
                due_date=data.dueDate,
            )

        try:
            invoice = self._insert_numbered(build)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Ya existe una factura para este registro")
        self.db.refresh(invoice)
        logger.info(f"✅ Manual invoice {invoice.invoice_number} created")
        return invoice

    def list_for_user(self, user: User, invoice_type: Optional[str] = None) -> list[Invoice]:
        recipient_id = None if user.role == Role.ADMIN else user.id
        return self.repo.list_invoices(self.db, recipient_id, invoice_type)

    def get_for_user(self, invoice_id: int, user: User) -> Invoice:
        invoice = self.repo.get_by_id(self.db, invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Factura no encontrada")
        if user.role != Role.ADMIN and invoice.recipient_id != user.id:
            raise HTTPException(status_code=403, detail="Sin permisos")
        return invoice

    def update(self, invoice_id: int, data: InvoiceUpdate) -> Invoice:
        invoice = self.repo.get_by_id(self.db, invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Factura no encontrada")
        if data.isPaid is not None:
            invoice.is_paid = data.isPaid
            invoice.paid_at = datetime.now() if data.isPaid else None
        if data.dueDate is not None:
            invoice.due_date = data.dueDate
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    async def send(self, invoice_id: int) -> SideEffectResult:
        invoice = self.repo.get_by_id(self.db, invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Factura no encontrada")
        try:
            await send_invoice_email(invoice)
            return SideEffectResult.success("email", to=invoice.recipient_email)
        except Exception as e:
            logger.error(f"❌ Failed to send invoice {invoice.invoice_number}: {e}")
            return SideEffectResult.failure("email", str(e))


class InvoiceItemService:
    """Saved line items admins pick from when writing invoices"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InvoiceRepository()

    def list_items(self) -> list[InvoiceItemTemplate]:
        return self.repo.list_item_templates(self.db)

    def create_item(self, data: InvoiceItemTemplateCreate) -> InvoiceItemTemplate:
        description = (data.description or "").strip()
        if not description:
            raise HTTPException(status_code=400, detail="La descripción es requerida")
        if data.price is None or data.price <= 0:
            raise HTTPException(status_code=400, detail="El precio debe ser mayor a 0")

        item = InvoiceItemTemplate(description=description, price=data.price)
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_item(self, item_id: int) -> None:
        item = self.repo.get_item_template(self.db, item_id)
        if not item:
            raise HTTPException(status_code=404, detail="Ítem no encontrado")
        self.db.delete(item)
        self.db.commit()
