"""Tests for the staged reminder scheduler."""

import asyncio
from datetime import date, timedelta

import pytest

from bookme.domain.reminders import service as reminders_service
from bookme.domain.reminders.service import NotificationSchedulerService, format_spanish_date
from bookme.models import AppointmentStatus, Notification, Role
from tests.conftest import at, auth_headers, make_appointment, make_barber, make_service, make_user

MONDAY = date(2030, 6, 10)


class FakeDispatcher:
    """Stands in for send_notification and records every dispatch"""

    def __init__(self, fail_for: tuple = ()):
        self.calls = []
        self.fail_for = fail_for

    async def __call__(self, db, user_id, email, recipient_name, notification_type, **kwargs):
        self.calls.append({"user_id": user_id, "email": email, "type": notification_type})
        if email in self.fail_for:
            return {"email_sent": False, "push_sent": False, "email_error": "smtp down", "push_error": None}
        return {"email_sent": True, "push_sent": False, "email_error": None, "push_error": None}


@pytest.fixture
def dispatcher(monkeypatch):
    fake = FakeDispatcher()
    monkeypatch.setattr(reminders_service, "send_notification", fake)
    return fake


@pytest.fixture
def booked(db):
    barber = make_barber(db)
    client = make_user(db)
    service = make_service(db)
    appointment = make_appointment(db, client, barber, service, day=MONDAY, time="10:00")
    return appointment


def run(db, now):
    return asyncio.run(NotificationSchedulerService(db).process(now=now))


class TestSpanishDate:
    def test_format(self):
        assert format_spanish_date(MONDAY) == "lunes, 10 de junio de 2030"


class TestReminderWindows:
    def test_24h_window_fires_once(self, db, dispatcher, booked):
        now = at(MONDAY, "10:00") - timedelta(hours=24, minutes=10)

        first = run(db, now)
        second = run(db, now)

        assert first.reminders24h == 1
        assert first.reminders12h == 0
        assert first.sent == 2
        assert {call["type"] for call in dispatcher.calls} == {"reminder_24h"}
        assert second.reminders24h == 0
        db.refresh(booked)
        assert booked.notification_24h_sent is True
        assert booked.notification_2h_sent is False

    def test_12h_window_includes_its_upper_bound(self, db, dispatcher, booked):
        # start == now + 12h + tolerance
        result = run(db, at(MONDAY, "10:00") - timedelta(hours=13))

        assert result.reminders12h == 1
        assert result.reminders24h == 0
        assert {call["type"] for call in dispatcher.calls} == {"reminder_12h"}
        db.refresh(booked)
        assert booked.notification_12h_sent is True

    def test_12h_window_closes_just_past_its_tolerance(self, db, dispatcher, booked):
        result = run(db, at(MONDAY, "10:00") - timedelta(hours=13, minutes=1))

        assert result.reminders12h == 0
        assert dispatcher.calls == []

    def test_reminder_creates_feed_entry_for_client(self, db, dispatcher, booked):
        run(db, at(MONDAY, "10:00") - timedelta(hours=2, minutes=10))

        notifications = db.query(Notification).all()
        assert len(notifications) == 1
        assert notifications[0].user_id == booked.client_id
        assert notifications[0].type == "APPOINTMENT_REMINDER"

    def test_outside_every_window_nothing_is_sent(self, db, dispatcher, booked):
        result = run(db, at(MONDAY, "10:00") - timedelta(hours=6))

        assert result.sent == 0
        assert dispatcher.calls == []

    def test_cancelled_appointments_are_skipped(self, db, dispatcher, booked):
        booked.status = AppointmentStatus.CANCELLED
        db.commit()

        result = run(db, at(MONDAY, "10:00") - timedelta(minutes=40))

        assert result.reminders30m == 0
        assert dispatcher.calls == []

    def test_delivery_failure_is_reported_and_flag_still_set(self, db, monkeypatch, booked):
        fake = FakeDispatcher(fail_for=("cliente@test.com",))
        monkeypatch.setattr(reminders_service, "send_notification", fake)

        result = run(db, at(MONDAY, "10:00") - timedelta(minutes=40))

        assert result.reminders30m == 1
        assert result.sent == 1
        assert len(result.failures) == 1
        assert result.failures[0].name == "email"
        assert result.failures[0].detail["recipient"] == "client"
        db.refresh(booked)
        assert booked.notification_30m_sent is True


class TestThankYou:
    def test_completed_today_gets_one_thank_you(self, db, dispatcher, booked):
        booked.status = AppointmentStatus.COMPLETED
        db.commit()

        first = run(db, at(MONDAY, "18:00"))
        second = run(db, at(MONDAY, "19:00"))

        assert first.thankYou == 1
        assert second.thankYou == 0
        assert [call["type"] for call in dispatcher.calls] == ["thank_you"]
        db.refresh(booked)
        assert booked.thank_you_sent is True


class TestProcessEndpoint:
    def test_anonymous_callers_are_rejected(self, client):
        assert client.post("/notifications/process").status_code == 401

    def test_admin_can_trigger_a_run(self, client, db, dispatcher):
        admin = make_user(db, email="admin@test.com", role=Role.ADMIN)

        response = client.post("/notifications/process", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["success"] is True
