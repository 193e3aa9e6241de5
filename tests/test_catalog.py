"""Tests for the service catalog, barber profiles and shop settings."""

import pytest

from bookme.domain.barbers import router as barbers_router
from bookme.domain.settings.service import SettingsService
from bookme.models import AppointmentStatus, Review, Role, User
from tests.conftest import auth_headers, make_appointment, make_barber, make_service, make_user


@pytest.fixture
def admin(db):
    return make_user(db, email="admin@test.com", name="Admin", role=Role.ADMIN)


class TestServiceCatalog:
    def test_public_listing_hides_inactive(self, client, db):
        make_service(db, name="Corte")
        make_service(db, name="Tinte", is_active=False)

        response = client.get("/services")

        assert [s["name"] for s in response.json()["services"]] == ["Corte"]

    def test_inactive_listing_is_admin_only(self, client, db, admin):
        make_service(db, name="Tinte", is_active=False)

        anonymous = client.get("/services", params={"all": True})
        as_admin = client.get("/services", params={"all": True}, headers=auth_headers(admin))

        assert anonymous.status_code == 403
        assert [s["name"] for s in as_admin.json()["services"]] == ["Tinte"]

    def test_admin_creates_service(self, client, db, admin):
        response = client.post(
            "/services",
            json={"name": "  Afeitado  ", "price": 15, "duration": 20},
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        service = response.json()["service"]
        assert service["name"] == "Afeitado"
        assert service["gender"] == "UNISEX"
        assert service["isActive"] is True

    def test_price_must_be_positive(self, client, db, admin):
        response = client.post(
            "/services", json={"name": "Gratis", "price": 0, "duration": 20}, headers=auth_headers(admin)
        )

        assert response.status_code == 422
        assert "El precio debe ser mayor que 0" in response.json()["detail"][0]["msg"]

    def test_update_and_soft_delete(self, client, db, admin):
        service = make_service(db)
        headers = auth_headers(admin)

        updated = client.patch(f"/services/{service.id}", json={"price": 30}, headers=headers)
        deleted = client.delete(f"/services/{service.id}", headers=headers)

        assert updated.json()["service"]["price"] == 30.0
        assert deleted.json()["message"] == "Servicio desactivado exitosamente"
        db.refresh(service)
        assert service.is_active is False

    def test_blank_name_update_is_rejected(self, client, db, admin):
        service = make_service(db)

        response = client.patch(f"/services/{service.id}", json={"name": "  "}, headers=auth_headers(admin))

        assert response.status_code == 400

    def test_unknown_service(self, client):
        assert client.get("/services/999").status_code == 404


class TestBarbers:
    def test_admin_creates_barber_with_account(self, client, db, admin):
        response = client.post(
            "/barbers",
            json={
                "name": "Pedro",
                "email": "PEDRO@test.com",
                "password": "secreto123",
                "specialties": ["fade", "barba"],
                "instagramUrl": "https://instagram.com/pedro",
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        barber = response.json()["barber"]
        assert barber["user"]["email"] == "pedro@test.com"
        assert barber["specialties"] == ["fade", "barba"]
        assert barber["instagramUrl"] == "https://instagram.com/pedro"
        assert db.query(User).filter(User.email == "pedro@test.com").one().role == "BARBER"

    def test_duplicate_email(self, client, db, admin):
        make_user(db, email="pedro@test.com")

        response = client.post(
            "/barbers",
            json={"name": "Pedro", "email": "pedro@test.com", "password": "secreto123"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400

    def test_listing_includes_rating_stats(self, client, db):
        barber = make_barber(db)
        ana = make_user(db, email="ana@test.com")
        luis = make_user(db, email="luis@test.com")
        service = make_service(db)
        first = make_appointment(db, ana, barber, service, time="09:00", status=AppointmentStatus.COMPLETED)
        second = make_appointment(db, luis, barber, service, time="10:00", status=AppointmentStatus.COMPLETED)
        db.add_all(
            [
                Review(appointment_id=first.id, client_id=ana.id, barber_id=barber.id, rating=5),
                Review(appointment_id=second.id, client_id=luis.id, barber_id=barber.id, rating=4),
            ]
        )
        db.commit()

        listed = client.get("/barbers").json()["barbers"][0]

        assert listed["avgRating"] == 4.5
        assert listed["totalReviews"] == 2
        assert listed["totalAppointments"] == 2

    def test_barber_edits_own_profile_but_not_active_flag(self, client, db):
        barber = make_barber(db)
        headers = auth_headers(barber.user)

        ok = client.patch(f"/barbers/{barber.id}", json={"bio": "10 años de experiencia"}, headers=headers)
        forbidden = client.patch(f"/barbers/{barber.id}", json={"isActive": False}, headers=headers)

        assert ok.json()["barber"]["bio"] == "10 años de experiencia"
        assert forbidden.status_code == 403

    def test_other_barber_cannot_edit(self, client, db):
        barber = make_barber(db)
        other = make_barber(db, email="otro@test.com")

        response = client.patch(f"/barbers/{barber.id}", json={"bio": "x"}, headers=auth_headers(other.user))

        assert response.status_code == 403

    def test_deactivated_barber_leaves_public_listing(self, client, db, admin):
        barber = make_barber(db)

        client.delete(f"/barbers/{barber.id}", headers=auth_headers(admin))

        assert client.get("/barbers").json()["barbers"] == []
        assert len(client.get("/barbers", params={"all": True}, headers=auth_headers(admin)).json()["barbers"]) == 1

    def test_profile_image_upload(self, client, db, monkeypatch):
        barber = make_barber(db)
        monkeypatch.setattr(barbers_router, "upload_file", lambda content, name, ctype, is_public: f"public/{name}")
        monkeypatch.setattr(barbers_router, "public_url", lambda key: f"https://cdn.test/{key}")

        response = client.post(
            f"/barbers/{barber.id}/image",
            files={"file": ("me.jpg", b"\xff\xd8\xff", "image/jpeg")},
            headers=auth_headers(barber.user),
        )

        assert response.json()["barber"]["profileImage"] == "https://cdn.test/public/me.jpg"


class TestShopSettings:
    def test_defaults_without_row(self, client):
        assert client.get("/settings").json()["shopName"] == "BookMe"

    def test_admin_update_refreshes_snapshot(self, client, db, admin):
        response = client.put(
            "/settings", json={"shopName": "Barbería Central", "phone": "555-0100"}, headers=auth_headers(admin)
        )

        assert response.json()["shopName"] == "Barbería Central"
        assert SettingsService(db).current().phone == "555-0100"

    def test_empty_name_keeps_previous(self, client, db, admin):
        client.put("/settings", json={"shopName": "Central"}, headers=auth_headers(admin))

        response = client.put("/settings", json={"shopName": "", "address": "Calle 8"}, headers=auth_headers(admin))

        assert response.json()["shopName"] == "Central"
        assert response.json()["address"] == "Calle 8"

    def test_clients_cannot_update(self, client, db):
        user = make_user(db)

        assert client.put("/settings", json={"shopName": "X"}, headers=auth_headers(user)).status_code == 403
