"""Appointment domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel

from ...shared.results import SideEffectResult

AppointmentStatusLiteral = Literal["PENDING", "CONFIRMED", "COMPLETED", "CANCELLED", "NO_SHOW"]
PaymentStatusLiteral = Literal["PENDING", "PAID", "REFUNDED"]


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment; required fields are checked by the service"""

    barberId: Optional[int] = None
    serviceId: Optional[int] = None
    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM
    paymentMethod: Optional[str] = None
    paymentReference: Optional[str] = None
    notes: Optional[str] = None


class AppointmentUpdate(BaseModel):
    """Partial update; only the fields sent are applied"""

    status: Optional[AppointmentStatusLiteral] = None
    date: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = None
    paymentStatus: Optional[PaymentStatusLiteral] = None
    paymentMethod: Optional[str] = None
    paymentReference: Optional[str] = None
    cancellationReason: Optional[str] = None


class MarkPaidRequest(BaseModel):
    paymentMethod: str = "CASH"
    paymentReference: Optional[str] = None


class AppointmentClient(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    image: Optional[str] = None


class AppointmentBarber(BaseModel):
    id: int
    userId: int
    name: Optional[str] = None
    image: Optional[str] = None


class AppointmentServiceInfo(BaseModel):
    id: int
    name: str
    price: float
    duration: int


class AppointmentResponse(BaseModel):
    id: int
    clientId: int
    barberId: int
    serviceId: int
    date: date
    time: str
    status: str
    paymentStatus: str
    paymentMethod: Optional[str] = None
    paymentReference: Optional[str] = None
    notes: Optional[str] = None
    cancelledAt: Optional[datetime] = None
    cancellationReason: Optional[str] = None
    notification24hSent: bool
    notification12hSent: bool
    notification2hSent: bool
    notification30mSent: bool
    thankYouSent: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    client: Optional[AppointmentClient] = None
    barber: Optional[AppointmentBarber] = None
    service: Optional[AppointmentServiceInfo] = None

    @classmethod
    def from_model(cls, appointment) -> "AppointmentResponse":
        client = appointment.client
        barber = appointment.barber
        service = appointment.service
        return cls(
            id=appointment.id,
            clientId=appointment.client_id,
            barberId=appointment.barber_id,
            serviceId=appointment.service_id,
            date=appointment.date,
            time=appointment.time,
            status=appointment.status,
            paymentStatus=appointment.payment_status,
            paymentMethod=appointment.payment_method,
            paymentReference=appointment.payment_reference,
            notes=appointment.notes,
            cancelledAt=appointment.cancelled_at,
            cancellationReason=appointment.cancellation_reason,
            notification24hSent=appointment.notification_24h_sent,
            notification12hSent=appointment.notification_12h_sent,
            notification2hSent=appointment.notification_2h_sent,
            notification30mSent=appointment.notification_30m_sent,
            thankYouSent=appointment.thank_you_sent,
            createdAt=appointment.created_at,
            updatedAt=appointment.updated_at,
            client=AppointmentClient(
                id=client.id, name=client.name, email=client.email, phone=client.phone, image=client.image
            )
            if client
            else None,
            barber=AppointmentBarber(
                id=barber.id,
                userId=barber.user_id,
                name=barber.user.name if barber.user else None,
                image=barber.profile_image,
            )
            if barber
            else None,
            service=AppointmentServiceInfo(
                id=service.id, name=service.name, price=service.price, duration=service.duration
            )
            if service
            else None,
        )


class AppointmentEnvelope(BaseModel):
    appointment: AppointmentResponse


class AppointmentListResponse(BaseModel):
    appointments: list[AppointmentResponse]


class AppointmentUpdateResult(BaseModel):
    """Primary outcome (the appointment) kept apart from side-effect outcomes"""

    appointment: AppointmentResponse
    sideEffects: list[SideEffectResult] = []
