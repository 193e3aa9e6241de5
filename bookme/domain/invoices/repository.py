"""Invoice repository - Database operations for invoices"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models_invoice import Invoice, InvoiceItemTemplate


class InvoiceRepository:
    @staticmethod
    def get_by_id(db: Session, invoice_id: int) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.id == invoice_id).first()

    @staticmethod
    def get_by_appointment(db: Session, appointment_id: int) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.appointment_id == appointment_id).first()

    @staticmethod
    def get_by_barber_payment(db: Session, barber_payment_id: int) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.barber_payment_id == barber_payment_id).first()

    @staticmethod
    def get_last_number(db: Session, prefix: str) -> Optional[str]:
        """Highest invoice number with the prefix; longer numbers sort after shorter ones"""
        row = (
            db.query(Invoice.invoice_number)
            .filter(Invoice.invoice_number.like(f"{prefix}%"))
            .order_by(func.length(Invoice.invoice_number).desc(), Invoice.invoice_number.desc())
            .first()
        )
        return row.invoice_number if row else None

    @staticmethod
    def list_invoices(
        db: Session, recipient_id: Optional[int] = None, invoice_type: Optional[str] = None
    ) -> list[Invoice]:
        query = db.query(Invoice)
        if recipient_id is not None:
            query = query.filter(Invoice.recipient_id == recipient_id)
        if invoice_type:
            query = query.filter(Invoice.type == invoice_type)
        return query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).all()

    @staticmethod
    def add(db: Session, invoice: Invoice) -> Invoice:
        """Stage an invoice in the current transaction (caller commits)"""
        db.add(invoice)
        db.flush()
        return invoice

    # Item templates

    @staticmethod
    def list_item_templates(db: Session) -> list[InvoiceItemTemplate]:
        return db.query(InvoiceItemTemplate).order_by(InvoiceItemTemplate.description.asc()).all()

    @staticmethod
    def get_item_template(db: Session, item_id: int) -> Optional[InvoiceItemTemplate]:
        return db.query(InvoiceItemTemplate).filter(InvoiceItemTemplate.id == item_id).first()
