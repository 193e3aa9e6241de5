"""
Invoice, payroll and expense models for shop accounting
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .database import Base


class InvoiceType:
    CLIENT_SERVICE = "CLIENT_SERVICE"
    BARBER_PAYMENT = "BARBER_PAYMENT"


class BarberPaymentStatus:
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


EXPENSE_CATEGORIES = (
    "RENT",
    "UTILITIES",
    "SUPPLIES",
    "SALARIES",
    "MARKETING",
    "MAINTENANCE",
    "OTHER",
)


class Invoice(Base):
    """Immutable billing record; only the paid state changes after creation"""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)
    type = Column(String(30), nullable=False)  # CLIENT_SERVICE, BARBER_PAYMENT

    appointment_id = Column(Integer, ForeignKey("appointments.id"), unique=True, nullable=True)
    barber_payment_id = Column(
        Integer, ForeignKey("barber_payments.id"), unique=True, nullable=True
    )

    # Issuer snapshot (shop settings at issue time)
    issuer_name = Column(String(255), nullable=False)
    issuer_address = Column(String(500), default="")
    issuer_phone = Column(String(50), default="")
    issuer_email = Column(String(255), default="")

    # Recipient snapshot
    recipient_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    recipient_name = Column(String(255), nullable=False)
    recipient_email = Column(String(255), nullable=False)
    recipient_phone = Column(String(50), default="")

    amount = Column(Float, nullable=False)
    description = Column(Text, nullable=True)
    items = Column(JSON, default=list)  # [{description, quantity, unitPrice, total}]

    is_paid = Column(Boolean, default=False, nullable=False)
    paid_at = Column(DateTime, nullable=True)
    issue_date = Column(DateTime, default=datetime.now)
    due_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    appointment = relationship("Appointment")
    barber_payment = relationship("BarberPayment", back_populates="invoice")
    recipient = relationship("User")


class BarberPayment(Base):
    """Weekly payroll entry owed to a barber"""

    __tablename__ = "barber_payments"

    id = Column(Integer, primary_key=True, index=True)
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    week_start = Column(Date, nullable=False)
    week_end = Column(Date, nullable=False)
    status = Column(String(20), default=BarberPaymentStatus.PENDING, nullable=False)
    notes = Column(Text, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    barber = relationship("Barber")
    invoice = relationship("Invoice", back_populates="barber_payment", uselist=False)


class ManualPayment(Base):
    """Walk-in payment recorded by a barber outside the booking flow"""

    __tablename__ = "manual_payments"

    id = Column(Integer, primary_key=True, index=True)
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(50), nullable=False)
    description = Column(String(500), nullable=True)
    client_name = Column(String(255), nullable=True)
    date = Column(DateTime, default=datetime.now, nullable=False)
    created_at = Column(DateTime, default=datetime.now)


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(30), nullable=False)
    custom_category = Column(String(100), nullable=True)  # required when category is OTHER
    amount = Column(Float, nullable=False)
    description = Column(String(500), nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class InvoiceItemTemplate(Base):
    """Reusable line item offered when an admin writes a manual invoice"""

    __tablename__ = "invoice_item_templates"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(500), nullable=False)
    price = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
