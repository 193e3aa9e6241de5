"""Tests for Twilio SMS delivery and the admin SMS batches."""

import asyncio
from datetime import date, datetime, timedelta

import pytest

from bookme.domain.sms import router as sms_router
from bookme.domain.sms import service as sms_service
from bookme.domain.sms.service import SmsReminderService, build_sms_body
from bookme.models import AppointmentStatus, Role
from bookme.services import twilio_service
from bookme.shared.results import SideEffectResult
from bookme.shared.validators import to_e164
from tests.conftest import at, auth_headers, make_appointment, make_barber, make_service, make_user

MONDAY = date(2030, 6, 10)


class FakeTwilio:
    def __init__(self, reject: tuple = ()):
        self.sent = []
        self.reject = reject

    async def __call__(self, to_phone, message_body):
        self.sent.append((to_phone, message_body))
        if to_phone in self.reject:
            return SideEffectResult.failure("sms", "Número no válido")
        return SideEffectResult.success("sms", sid=f"SM{len(self.sent)}", status="queued")


@pytest.fixture
def twilio(monkeypatch):
    fake = FakeTwilio()
    monkeypatch.setattr(sms_service, "send_sms", fake)
    return fake


@pytest.fixture
def booked(db):
    barber = make_barber(db, name="Pedro")
    client = make_user(db, phone="(555) 123-4567")
    service = make_service(db, name="Corte y Barba")
    return make_appointment(db, client, barber, service, day=MONDAY, time="10:00")


class TestPhoneNormalization:
    def test_ten_digit_numbers_get_country_code(self):
        assert to_e164("(555) 123-4567") == "+15551234567"

    def test_plus_prefixed_numbers_are_kept(self):
        assert to_e164("+52 55 1234 5678") == "+525512345678"

    def test_invalid(self):
        assert to_e164("123") is None
        assert to_e164(None) is None


class TestTwilioClient:
    def test_placeholder_credentials_are_not_configured(self, monkeypatch):
        monkeypatch.setattr(twilio_service, "TWILIO_ACCOUNT_SID", "placeholder-twilio-account-sid")
        monkeypatch.setattr(twilio_service, "TWILIO_AUTH_TOKEN", "token")

        assert not twilio_service.is_twilio_configured()

    def test_unconfigured_send_fails_without_raising(self, monkeypatch):
        monkeypatch.setattr(twilio_service, "TWILIO_ACCOUNT_SID", None)

        result = asyncio.run(twilio_service.send_sms("5551234567", "Hola"))

        assert not result.ok
        assert result.error == "Twilio no está configurado"

    def test_invalid_phone_is_reported(self, monkeypatch):
        monkeypatch.setattr(twilio_service, "TWILIO_ACCOUNT_SID", "AC123")
        monkeypatch.setattr(twilio_service, "TWILIO_AUTH_TOKEN", "token")
        monkeypatch.setattr(twilio_service, "TWILIO_PHONE_NUMBER", "+15550000000")

        result = asyncio.run(twilio_service.send_sms("12", "Hola"))

        assert result.error == "Formato de número de teléfono inválido"


class TestMessageBodies:
    def test_24h_body(self, db, booked):
        body = build_sms_body("24h", booked)

        assert body == (
            "Recordatorio: Tu cita de Corte y Barba con Pedro es mañana lunes, 10 de junio a las 10:00. ¡Te esperamos!"
        )

    def test_thank_you_body(self, db, booked):
        assert "¡Gracias por visitarnos!" in build_sms_body("thank_you", booked)


class TestSmsBatches:
    """Each window sets its flag only after Twilio accepts the message."""

    def test_24h_batch_sets_flag_on_success(self, db, twilio, booked):
        now = at(MONDAY, "10:00") - timedelta(hours=24, minutes=20)

        first = asyncio.run(SmsReminderService(db).send_batch("24h", now))
        second = asyncio.run(SmsReminderService(db).send_batch("24h", now))

        assert first.successful == 1
        assert first.message == "SMS enviados: 1 exitosos, 0 fallidos"
        assert second.total == 0
        assert twilio.sent[0][0] == "(555) 123-4567"
        db.refresh(booked)
        assert booked.notification_24h_sent is True

    def test_2h_window_has_half_hour_tolerance(self, db, twilio, booked):
        service = SmsReminderService(db)

        assert service.candidates("2h", at(MONDAY, "08:25")) == [booked]
        assert service.candidates("2h", at(MONDAY, "07:25")) == []

    def test_missing_phone_is_a_failure(self, db, twilio):
        barber = make_barber(db)
        client = make_user(db, phone=None)
        appointment = make_appointment(db, client, barber, make_service(db), day=MONDAY, time="10:00")

        result = asyncio.run(SmsReminderService(db).send_batch("2h", at(MONDAY, "08:00")))

        assert result.failed == 1
        assert result.results[0].error == "Cliente no tiene número de teléfono"
        assert twilio.sent == []
        db.refresh(appointment)
        assert appointment.notification_2h_sent is False

    def test_rejected_send_leaves_flag_unset(self, db, monkeypatch, booked):
        monkeypatch.setattr(sms_service, "send_sms", FakeTwilio(reject=("(555) 123-4567",)))

        result = asyncio.run(SmsReminderService(db).send_batch("2h", at(MONDAY, "08:00")))

        assert result.failed == 1
        db.refresh(booked)
        assert booked.notification_2h_sent is False

    def test_thank_you_for_recently_completed(self, db, twilio, booked):
        booked.status = AppointmentStatus.COMPLETED
        db.commit()

        result = asyncio.run(SmsReminderService(db).send_batch("thank_you", datetime.now()))

        assert result.successful == 1
        db.refresh(booked)
        assert booked.thank_you_sent is True


class TestSmsEndpoints:
    @pytest.fixture
    def admin(self, db):
        return make_user(db, email="admin@test.com", role=Role.ADMIN)

    def test_unconfigured_twilio_is_unavailable(self, client, db, admin, monkeypatch):
        monkeypatch.setattr(sms_router, "is_twilio_configured", lambda: False)

        response = client.post("/sms/appointments", json={"type": "24h"}, headers=auth_headers(admin))

        assert response.status_code == 503

    def test_batch_endpoint(self, client, db, admin, twilio, monkeypatch):
        monkeypatch.setattr(sms_router, "is_twilio_configured", lambda: True)

        response = client.post("/sms/appointments", json={"type": "2h"}, headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_single_sms_requires_fields(self, client, db, admin, monkeypatch):
        monkeypatch.setattr(sms_router, "is_twilio_configured", lambda: True)

        response = client.post("/sms/send", json={"to": "5551234567"}, headers=auth_headers(admin))

        assert response.status_code == 400

    def test_single_sms_failure_is_bad_gateway(self, client, db, admin, monkeypatch):
        monkeypatch.setattr(sms_router, "is_twilio_configured", lambda: True)
        monkeypatch.setattr(sms_router, "send_sms", FakeTwilio(reject=("5551234567",)))

        response = client.post(
            "/sms/send", json={"to": "5551234567", "message": "Hola"}, headers=auth_headers(admin)
        )

        assert response.status_code == 502

    def test_single_sms_success(self, client, db, admin, monkeypatch):
        monkeypatch.setattr(sms_router, "is_twilio_configured", lambda: True)
        monkeypatch.setattr(sms_router, "send_sms", FakeTwilio())

        response = client.post(
            "/sms/send", json={"to": "5551234567", "message": "Hola"}, headers=auth_headers(admin)
        )

        assert response.json() == {"success": True, "message": "SMS enviado exitosamente", "sid": "SM1"}

    def test_clients_cannot_send(self, client, db, monkeypatch):
        monkeypatch.setattr(sms_router, "is_twilio_configured", lambda: True)
        user = make_user(db)

        response = client.post("/sms/send", json={"to": "1", "message": "x"}, headers=auth_headers(user))

        assert response.status_code == 403
