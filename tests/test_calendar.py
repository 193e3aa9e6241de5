"""Tests for iCalendar export helpers."""

from datetime import datetime, timezone

from bookme.services.calendar_service import PRODID, build_ics, escape_ics_text, format_utc

START = datetime(2030, 6, 10, 15, 0, tzinfo=timezone.utc)
END = datetime(2030, 6, 10, 15, 30, tzinfo=timezone.utc)


def test_escape_ics_text():
    assert escape_ics_text("Corte, barba; y\\o\r\nlavado") == "Corte\\, barba\\; y\\\\o\\nlavado"


def test_format_utc():
    assert format_utc(START) == "20300610T150000Z"


class TestBuildIcs:
    def test_minimal_event(self):
        ics = build_ics("Corte - BookMe", START, END, now=START)
        lines = ics.split("\r\n")

        assert lines[0] == "BEGIN:VCALENDAR"
        assert lines[-1] == "END:VCALENDAR"
        assert f"PRODID:{PRODID}" in lines
        assert "DTSTART:20300610T150000Z" in lines
        assert "DTEND:20300610T153000Z" in lines
        assert "TRIGGER:-PT30M" in lines
        assert not any(line.startswith("LOCATION:") for line in lines)
        assert not any(line.startswith("ORGANIZER:") for line in lines)

    def test_optional_fields(self):
        ics = build_ics(
            "Corte",
            START,
            END,
            description="Cita con Pedro.\nTraer referencia",
            location="Calle 8, #123",
            organizer_email="pedro@test.com",
            attendee_email="ana@test.com",
        )

        assert "DESCRIPTION:Cita con Pedro.\\nTraer referencia" in ics
        assert "LOCATION:Calle 8\\, #123" in ics
        assert "ORGANIZER:mailto:pedro@test.com" in ics
        assert "ATTENDEE:mailto:ana@test.com" in ics

    def test_uid_is_unique_per_export(self):
        first = build_ics("Corte", START, END)
        second = build_ics("Corte", START, END)

        uid = [line for line in first.split("\r\n") if line.startswith("UID:")][0]
        assert uid.endswith("@bookme.app")
        assert uid not in second
