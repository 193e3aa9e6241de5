"""Tests for open-slot computation and barber schedule management."""

from datetime import date

from bookme.domain.availability.service import AvailabilityService, day_of_week_name, generate_slots
from bookme.models import AppointmentStatus, DayOff
from tests.conftest import auth_headers, make_appointment, make_availability, make_barber, make_service, make_user

MONDAY = date(2030, 6, 10)
TUESDAY = date(2030, 6, 11)


class TestSlotGrid:
    def test_half_hour_grid_excludes_end(self):
        assert generate_slots("09:00", "12:00") == ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]

    def test_empty_when_start_equals_end(self):
        assert generate_slots("09:00", "09:00") == []

    def test_day_of_week_name(self):
        assert day_of_week_name(MONDAY) == "MONDAY"
        assert day_of_week_name(date(2030, 6, 16)) == "SUNDAY"


class TestAvailableSlots:
    """Weekly schedule minus active bookings, suppressed by days off."""

    def test_booked_pending_slot_is_removed(self, db):
        barber = make_barber(db)
        client = make_user(db)
        service = make_service(db)
        make_availability(db, barber, "MONDAY", "09:00", "12:00")
        make_appointment(db, client, barber, service, day=MONDAY, time="10:00")

        slots = AvailabilityService(db).get_available_slots(barber.id, MONDAY)

        assert slots == ["09:00", "09:30", "10:30", "11:00", "11:30"]

    def test_cancelled_and_completed_bookings_free_the_slot(self, db):
        barber = make_barber(db)
        client = make_user(db)
        service = make_service(db)
        make_availability(db, barber, "MONDAY", "09:00", "10:00")
        make_appointment(db, client, barber, service, day=MONDAY, time="09:00", status=AppointmentStatus.CANCELLED)
        make_appointment(db, client, barber, service, day=MONDAY, time="09:30", status=AppointmentStatus.COMPLETED)

        assert AvailabilityService(db).get_available_slots(barber.id, MONDAY) == ["09:00", "09:30"]

    def test_no_schedule_row_means_no_slots(self, db):
        barber = make_barber(db)
        make_availability(db, barber, "MONDAY")

        assert AvailabilityService(db).get_available_slots(barber.id, TUESDAY) == []

    def test_unavailable_day_means_no_slots(self, db):
        barber = make_barber(db)
        make_availability(db, barber, "MONDAY", is_available=False)

        assert AvailabilityService(db).get_available_slots(barber.id, MONDAY) == []

    def test_day_off_suppresses_all_slots(self, db):
        barber = make_barber(db)
        make_availability(db, barber, "MONDAY")
        db.add(DayOff(barber_id=barber.id, date=MONDAY, reason="Vacaciones"))
        db.commit()

        assert AvailabilityService(db).get_available_slots(barber.id, MONDAY) == []

    def test_other_barbers_bookings_do_not_interfere(self, db):
        barber = make_barber(db)
        other = make_barber(db, email="otro@test.com")
        client = make_user(db)
        service = make_service(db)
        make_availability(db, barber, "MONDAY", "09:00", "10:00")
        make_appointment(db, client, other, service, day=MONDAY, time="09:00")

        assert AvailabilityService(db).get_available_slots(barber.id, MONDAY) == ["09:00", "09:30"]


class TestAvailabilityEndpoints:
    def test_public_slot_lookup(self, client, db):
        barber = make_barber(db)
        make_availability(db, barber, "MONDAY", "09:00", "10:00")

        response = client.get("/availability", params={"barberId": barber.id, "date": "2030-06-10"})

        assert response.status_code == 200
        body = response.json()
        assert body["availableSlots"] == ["09:00", "09:30"]
        assert body["date"] == "2030-06-10"

    def test_missing_parameters_are_rejected(self, client):
        assert client.get("/availability").status_code == 400
        assert client.get("/availability", params={"barberId": 1, "date": "junio"}).status_code == 400

    def test_barber_sets_weekly_schedule(self, client, db):
        barber = make_barber(db)

        response = client.put(
            "/barber/availability",
            json={
                "availability": [
                    {"dayOfWeek": "TUESDAY", "startTime": "10:00", "endTime": "14:00"},
                    {"dayOfWeek": "MONDAY", "startTime": "09:00", "endTime": "13:00", "isAvailable": False},
                ]
            },
            headers=auth_headers(barber.user),
        )

        assert response.status_code == 200
        assert [row["dayOfWeek"] for row in response.json()] == ["MONDAY", "TUESDAY"]
        assert AvailabilityService(db).get_available_slots(barber.id, MONDAY) == []
        assert AvailabilityService(db).get_available_slots(barber.id, TUESDAY)[0] == "10:00"

    def test_inverted_range_is_rejected(self, client, db):
        barber = make_barber(db)

        response = client.put(
            "/barber/availability",
            json={"availability": [{"dayOfWeek": "MONDAY", "startTime": "12:00", "endTime": "09:00"}]},
            headers=auth_headers(barber.user),
        )

        assert response.status_code == 422

    def test_duplicate_day_off_conflicts(self, client, db):
        barber = make_barber(db)
        headers = auth_headers(barber.user)

        first = client.post("/barber/days-off", json={"date": "2030-06-10", "reason": "Viaje"}, headers=headers)
        second = client.post("/barber/days-off", json={"date": "2030-06-10"}, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 409

    def test_clients_cannot_edit_schedules(self, client, db):
        user = make_user(db)

        response = client.get("/barber/availability", headers=auth_headers(user))

        assert response.status_code == 403
