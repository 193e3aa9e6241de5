"""Tests for the showcase gallery: curation, likes and uploads."""

import pytest

from bookme.domain.gallery import router as gallery_router
from bookme.models import GalleryImage, GalleryLike, Role
from tests.conftest import auth_headers, make_barber, make_user

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def admin(db):
    return make_user(db, email="admin@test.com", name="Admin", role=Role.ADMIN)


@pytest.fixture
def storage(monkeypatch):
    """In-memory stand-in for the bucket"""
    state = {"uploaded": [], "deleted": [], "delete_ok": True}

    def fake_upload(content, filename, content_type=None, is_public=False):
        key = f"public/uploads/{filename}"
        state["uploaded"].append({"key": key, "public": is_public})
        return key

    def fake_delete(key):
        state["deleted"].append(key)
        return state["delete_ok"]

    monkeypatch.setattr(gallery_router, "upload_file", fake_upload)
    monkeypatch.setattr(gallery_router, "delete_file", fake_delete)
    monkeypatch.setattr(gallery_router, "object_url", lambda key, is_public: f"https://cdn.test/{key}")
    return state


def make_image(db, title="Fade", order=0, is_active=True, gender=None, tags=None, barber=None) -> GalleryImage:
    image = GalleryImage(
        cloud_storage_path=f"public/uploads/{title}.png",
        title=title,
        order=order,
        is_active=is_active,
        gender=gender,
        tags=tags or [],
        barber_id=barber.id if barber else None,
    )
    db.add(image)
    db.commit()
    db.refresh(image)
    return image


class TestListing:
    def test_active_images_in_display_order(self, client, db, storage):
        make_image(db, title="Segunda", order=2)
        make_image(db, title="Primera", order=1)
        make_image(db, title="Oculta", order=0, is_active=False)

        body = client.get("/gallery").json()

        assert [i["title"] for i in body] == ["Primera", "Segunda"]
        assert body[0]["imageUrl"] == "https://cdn.test/public/uploads/Primera.png"
        assert body[0]["likes"] == 0

    def test_hidden_images_are_admin_only(self, client, db, admin, storage):
        make_image(db, title="Oculta", is_active=False)

        anonymous = client.get("/gallery", params={"includeInactive": True})
        as_admin = client.get("/gallery", params={"includeInactive": True}, headers=auth_headers(admin))

        assert anonymous.json() == []
        assert [i["title"] for i in as_admin.json()] == ["Oculta"]

    def test_gender_and_tag_filters(self, client, db, storage):
        make_image(db, title="Fade", gender="MALE", tags=["fade", "corto"])
        make_image(db, title="Balayage", gender="FEMALE", tags=["color"])
        make_image(db, title="Barba", gender="MALE", tags=["barba"])

        by_gender = client.get("/gallery", params={"gender": "MALE"}).json()
        by_tag = client.get("/gallery", params={"tag": "fade"}).json()

        assert {i["title"] for i in by_gender} == {"Fade", "Barba"}
        assert [i["title"] for i in by_tag] == ["Fade"]

    def test_credits_the_barber(self, client, db, storage):
        barber = make_barber(db, name="Pedro")
        make_image(db, barber=barber)

        assert client.get("/gallery").json()[0]["barber"]["name"] == "Pedro"


class TestCuration:
    def test_admin_adds_image(self, client, db, admin, storage):
        response = client.post(
            "/gallery",
            json={"cloudStoragePath": "public/uploads/fade.png", "title": " Fade ", "tags": ["fade"]},
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        image = response.json()
        assert image["title"] == "Fade"
        assert image["isActive"] is True
        assert image["isPublic"] is True
        assert image["order"] == 0

    @pytest.mark.parametrize("body", [{"title": "Fade"}, {"cloudStoragePath": "public/uploads/x.png"}])
    def test_path_and_title_are_required(self, client, db, admin, storage, body):
        response = client.post("/gallery", json=body, headers=auth_headers(admin))

        assert response.status_code == 400
        assert db.query(GalleryImage).count() == 0

    def test_clients_cannot_curate(self, client, db, storage):
        user = make_user(db)
        image = make_image(db)

        created = client.post(
            "/gallery", json={"cloudStoragePath": "k", "title": "x"}, headers=auth_headers(user)
        )
        deleted = client.delete(f"/gallery/{image.id}", headers=auth_headers(user))

        assert created.status_code == 403
        assert deleted.status_code == 403

    def test_partial_update(self, client, db, admin, storage):
        image = make_image(db, title="Fade", order=3)

        response = client.put(
            f"/gallery/{image.id}", json={"isActive": False, "order": 1}, headers=auth_headers(admin)
        )

        assert response.json()["title"] == "Fade"
        assert response.json()["order"] == 1
        assert response.json()["isActive"] is False

    def test_delete_removes_row_and_object(self, client, db, admin, storage):
        image = make_image(db, title="Fade")

        response = client.delete(f"/gallery/{image.id}", headers=auth_headers(admin))

        assert response.json() == {"success": True}
        assert storage["deleted"] == ["public/uploads/Fade.png"]
        assert db.query(GalleryImage).count() == 0

    def test_storage_failure_does_not_block_delete(self, client, db, admin, storage):
        storage["delete_ok"] = False
        image = make_image(db)

        response = client.delete(f"/gallery/{image.id}", headers=auth_headers(admin))

        assert response.status_code == 200
        assert db.query(GalleryImage).count() == 0

    def test_delete_unknown(self, client, db, admin, storage):
        response = client.delete("/gallery/999", headers=auth_headers(admin))

        assert response.status_code == 404
        assert response.json()["detail"] == "Imagen no encontrada"


class TestUpload:
    def test_admin_uploads_public_image(self, client, db, admin, storage):
        response = client.post(
            "/gallery/upload-image",
            files={"file": ("fade.png", PNG_BYTES, "image/png")},
            headers=auth_headers(admin),
        )

        assert response.json() == {
            "success": True,
            "url": "https://cdn.test/public/uploads/fade.png",
            "cloudStoragePath": "public/uploads/fade.png",
        }
        assert storage["uploaded"][0]["public"] is True

    def test_non_image_is_rejected(self, client, db, admin, storage):
        response = client.post(
            "/gallery/upload-image",
            files={"file": ("notas.txt", b"hola", "text/plain")},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "El archivo debe ser una imagen"
        assert storage["uploaded"] == []

    def test_oversized_image_is_rejected(self, client, db, admin, storage, monkeypatch):
        monkeypatch.setattr(gallery_router, "MAX_PHOTO_SIZE", 16)

        response = client.post(
            "/gallery/upload-image",
            files={"file": ("fade.png", PNG_BYTES, "image/png")},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "La imagen no debe superar los 5MB"


class TestLikes:
    def test_like_toggles(self, client, db, storage):
        user = make_user(db)
        image = make_image(db)
        headers = auth_headers(user)

        liked = client.post(f"/gallery/{image.id}/like", headers=headers).json()
        status = client.get(f"/gallery/{image.id}/like", headers=headers).json()
        unliked = client.post(f"/gallery/{image.id}/like", headers=headers).json()

        assert liked == {"liked": True, "likes": 1, "message": "Like agregado"}
        assert status == {"liked": True}
        assert unliked == {"liked": False, "likes": 0, "message": "Like eliminado"}
        assert db.query(GalleryLike).count() == 0

    def test_likes_are_counted_per_user(self, client, db, storage):
        image = make_image(db)
        ana = make_user(db, email="ana@test.com")
        luis = make_user(db, email="luis@test.com")

        client.post(f"/gallery/{image.id}/like", headers=auth_headers(ana))
        response = client.post(f"/gallery/{image.id}/like", headers=auth_headers(luis))

        assert response.json()["likes"] == 2
        assert client.get("/gallery").json()[0]["likes"] == 2

    def test_anonymous_status_is_not_liked(self, client, db, storage):
        image = make_image(db)

        assert client.get(f"/gallery/{image.id}/like").json() == {"liked": False}

    def test_liking_requires_login(self, client, db, storage):
        image = make_image(db)

        assert client.post(f"/gallery/{image.id}/like").status_code in (401, 403)

    def test_unknown_image(self, client, db, storage):
        user = make_user(db)

        assert client.post("/gallery/999/like", headers=auth_headers(user)).status_code == 404
