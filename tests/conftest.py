"""Shared test fixtures and helpers."""

from datetime import date, datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bookme.database import Base, enable_sqlite_savepoints, get_db
from bookme.domain.settings.schemas import ShopSettings
from bookme.domain.settings.service import reset_shop_settings
from bookme.main import app
from bookme.models import (
    Appointment,
    AppointmentStatus,
    Availability,
    Barber,
    PaymentStatus,
    Role,
    Service,
    User,
)
from bookme.security_utils import create_access_token, hash_password

DEFAULT_PASSWORD = "secreto123"


@pytest.fixture
def engine():
    test_engine = enable_sqlite_savepoints(
        create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    reset_shop_settings()
    # no context manager: the lifespan would touch the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_shop_settings()


@pytest.fixture
def shop():
    return ShopSettings(shopName="Barbería Central", address="Calle 8 #123", phone="555-0100", email="hola@central.test")


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_user(
    db,
    email: str = "cliente@test.com",
    name: str = "Cliente Prueba",
    role: str = Role.CLIENT,
    phone: Optional[str] = None,
    password: str = DEFAULT_PASSWORD,
    is_active: bool = True,
) -> User:
    user = User(
        email=email,
        name=name,
        role=role,
        phone=phone,
        password=hash_password(password),
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_barber(db, email: str = "barbero@test.com", name: str = "Barbero Prueba", **kwargs) -> Barber:
    user = make_user(db, email=email, name=name, role=Role.BARBER)
    barber = Barber(user_id=user.id, bio=kwargs.get("bio"), specialties=kwargs.get("specialties", ["fade"]))
    db.add(barber)
    db.commit()
    db.refresh(barber)
    return barber


def make_service(db, name: str = "Corte Clásico", price: float = 25.0, duration: int = 30, is_active: bool = True):
    service = Service(name=name, price=price, duration=duration, is_active=is_active)
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def make_availability(
    db,
    barber: Barber,
    day_of_week: str = "MONDAY",
    start_time: str = "09:00",
    end_time: str = "12:00",
    is_available: bool = True,
) -> Availability:
    row = Availability(
        barber_id=barber.id,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        is_available=is_available,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def make_appointment(
    db,
    client: User,
    barber: Barber,
    service: Service,
    day: date = date(2030, 6, 10),
    time: str = "10:00",
    status: str = AppointmentStatus.PENDING,
    payment_status: str = PaymentStatus.PENDING,
    payment_method: Optional[str] = None,
    **flags,
) -> Appointment:
    appointment = Appointment(
        client_id=client.id,
        barber_id=barber.id,
        service_id=service.id,
        date=day,
        time=time,
        status=status,
        payment_status=payment_status,
        payment_method=payment_method,
        **flags,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def auth_headers(user: User) -> dict:
    barber_id = user.barber.id if user.barber else None
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role, barber_id)}"}


def at(day: date, hhmm: str) -> datetime:
    hours, minutes = (int(part) for part in hhmm.split(":"))
    return datetime(day.year, day.month, day.day, hours, minutes)
