"""Tests for client reviews and admin responses."""

import pytest

from bookme.models import AppointmentStatus, Review, Role
from tests.conftest import auth_headers, make_appointment, make_barber, make_service, make_user


@pytest.fixture
def completed(db):
    barber = make_barber(db)
    client = make_user(db)
    return make_appointment(db, client, barber, make_service(db), status=AppointmentStatus.COMPLETED)


def post_review(client, user, **body):
    return client.post("/reviews", json=body, headers=auth_headers(user))


class TestCreateReview:
    def test_client_reviews_completed_appointment(self, client, db, completed):
        response = post_review(client, completed.client, appointmentId=completed.id, rating=5, comment="Excelente")

        assert response.status_code == 201
        review = response.json()["review"]
        assert review["rating"] == 5
        assert review["barberId"] == completed.barber_id
        assert review["clientId"] == completed.client_id

    def test_missing_fields(self, client, db, completed):
        response = post_review(client, completed.client, appointmentId=completed.id)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cita y calificación son requeridos"

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, client, db, completed, rating):
        response = post_review(client, completed.client, appointmentId=completed.id, rating=rating)

        assert response.status_code == 400

    def test_unknown_appointment(self, client, db, completed):
        assert post_review(client, completed.client, appointmentId=999, rating=4).status_code == 404

    def test_only_the_client_may_review(self, client, db, completed):
        stranger = make_user(db, email="otro@test.com")

        assert post_review(client, stranger, appointmentId=completed.id, rating=4).status_code == 403

    def test_appointment_must_be_completed(self, client, db):
        user = make_user(db)
        pending = make_appointment(db, user, make_barber(db), make_service(db))

        response = post_review(client, user, appointmentId=pending.id, rating=4)

        assert response.status_code == 400
        assert response.json()["detail"] == "Solo puedes dejar reseñas de citas completadas"

    def test_one_review_per_appointment(self, client, db, completed):
        post_review(client, completed.client, appointmentId=completed.id, rating=4)

        response = post_review(client, completed.client, appointmentId=completed.id, rating=2)

        assert response.status_code == 409
        assert response.json()["detail"] == "Ya dejaste una reseña para esta cita"
        assert db.query(Review).count() == 1


class TestAdminModeration:
    @pytest.fixture
    def review(self, db, completed):
        row = Review(
            appointment_id=completed.id,
            client_id=completed.client_id,
            barber_id=completed.barber_id,
            rating=3,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    @pytest.fixture
    def admin(self, db):
        return make_user(db, email="admin@test.com", role=Role.ADMIN)

    def test_admin_response_and_clearing(self, client, db, review, admin):
        headers = auth_headers(admin)

        answered = client.patch(f"/reviews/{review.id}", json={"adminResponse": " ¡Gracias! "}, headers=headers)
        cleared = client.patch(f"/reviews/{review.id}", json={"adminResponse": ""}, headers=headers)

        assert answered.json()["review"]["adminResponse"] == "¡Gracias!"
        assert answered.json()["review"]["adminRespondedAt"] is not None
        assert cleared.json()["review"]["adminResponse"] is None
        assert cleared.json()["review"]["adminRespondedAt"] is None

    def test_clients_cannot_respond(self, client, db, review, completed):
        response = client.patch(
            f"/reviews/{review.id}", json={"adminResponse": "x"}, headers=auth_headers(completed.client)
        )

        assert response.status_code == 403

    def test_delete(self, client, db, review, admin):
        response = client.delete(f"/reviews/{review.id}", headers=auth_headers(admin))

        assert response.json()["message"] == "Reseña eliminada exitosamente"
        assert client.get(f"/reviews/{review.id}").status_code == 404

    def test_listing_by_barber(self, client, db, review):
        other = make_barber(db, email="otro@test.com")

        mine = client.get("/reviews", params={"barberId": review.barber_id}).json()["reviews"]
        theirs = client.get("/reviews", params={"barberId": other.id}).json()["reviews"]

        assert [r["id"] for r in mine] == [review.id]
        assert theirs == []
