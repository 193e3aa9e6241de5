"""Invoice domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator


class InvoiceItem(BaseModel):
    description: str
    quantity: float = 1
    unitPrice: float
    total: float


class InvoiceCreate(BaseModel):
    """Schema for creating a manual invoice"""

    type: Optional[Literal["CLIENT_SERVICE", "BARBER_PAYMENT"]] = None
    amount: Optional[float] = None
    recipientId: Optional[int] = None
    recipientName: Optional[str] = None
    recipientEmail: Optional[str] = None
    recipientPhone: Optional[str] = None
    appointmentId: Optional[int] = None
    barberPaymentId: Optional[int] = None
    description: Optional[str] = None
    items: list[InvoiceItem] = []
    dueDate: Optional[datetime] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if v is not None and v <= 0:
            raise ValueError("El monto debe ser mayor a 0")
        return v


class InvoiceUpdate(BaseModel):
    isPaid: Optional[bool] = None
    dueDate: Optional[datetime] = None


class InvoiceResponse(BaseModel):
    id: int
    invoiceNumber: str
    type: str
    appointmentId: Optional[int] = None
    barberPaymentId: Optional[int] = None
    issuerName: str
    issuerAddress: Optional[str] = None
    issuerPhone: Optional[str] = None
    issuerEmail: Optional[str] = None
    recipientId: Optional[int] = None
    recipientName: str
    recipientEmail: str
    recipientPhone: Optional[str] = None
    amount: float
    description: Optional[str] = None
    items: list[InvoiceItem] = []
    isPaid: bool
    paidAt: Optional[datetime] = None
    issueDate: Optional[datetime] = None
    dueDate: Optional[datetime] = None

    @classmethod
    def from_model(cls, invoice) -> "InvoiceResponse":
        return cls(
            id=invoice.id,
            invoiceNumber=invoice.invoice_number,
            type=invoice.type,
            appointmentId=invoice.appointment_id,
            barberPaymentId=invoice.barber_payment_id,
            issuerName=invoice.issuer_name,
            issuerAddress=invoice.issuer_address,
            issuerPhone=invoice.issuer_phone,
            issuerEmail=invoice.issuer_email,
            recipientId=invoice.recipient_id,
            recipientName=invoice.recipient_name,
            recipientEmail=invoice.recipient_email,
            recipientPhone=invoice.recipient_phone,
            amount=invoice.amount,
            description=invoice.description,
            items=invoice.items or [],
            isPaid=invoice.is_paid,
            paidAt=invoice.paid_at,
            issueDate=invoice.issue_date,
            dueDate=invoice.due_date,
        )


class InvoiceItemTemplateCreate(BaseModel):
    description: Optional[str] = None
    price: Optional[float] = None


class InvoiceItemTemplateResponse(BaseModel):
    id: int
    description: str
    price: float
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, item) -> "InvoiceItemTemplateResponse":
        return cls(id=item.id, description=item.description, price=item.price, createdAt=item.created_at)
