"""Tests for the social feed: posts, moderation, likes and comments."""

import pytest

from bookme.domain.social import router as social_router
from bookme.domain.social.repository import PostStatus
from bookme.domain.social.service import SocialService, parse_hashtags
from bookme.models import Comment, Notification, Post, Role
from tests.conftest import auth_headers, make_barber, make_user

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def uploads(monkeypatch):
    """Replace object storage with an in-memory record of uploaded keys"""
    stored = []

    def fake_upload(content, filename, content_type=None, is_public=False):
        key = f"public/uploads/{len(stored)}-{filename}"
        stored.append({"key": key, "size": len(content), "public": is_public})
        return key

    monkeypatch.setattr(social_router, "upload_file", fake_upload)
    monkeypatch.setattr(social_router, "public_url", lambda key: f"https://cdn.test/{key}")
    return stored


def make_post(db, author, status=PostStatus.APPROVED, caption="Fade limpio") -> Post:
    post = Post(
        author_id=author.id,
        author_type=author.role,
        caption=caption,
        image_url="https://cdn.test/x.png",
        hashtags=["fade"],
        status=status,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


class TestHashtags:
    def test_split_strip_lowercase_dedupe(self):
        assert parse_hashtags("#Fade, #barba corte  #fade") == ["fade", "barba", "corte"]

    def test_empty(self):
        assert parse_hashtags(None) == []
        assert parse_hashtags("  ") == []


class TestCreatePost:
    def test_barber_posts_are_published_immediately(self, client, db, uploads):
        barber = make_barber(db)

        response = client.post(
            "/posts",
            files={"image": ("corte.png", PNG_BYTES, "image/png")},
            data={"caption": "Degradado", "hashtags": "#fade #skin"},
            headers=auth_headers(barber.user),
        )

        assert response.status_code == 201
        post = response.json()["post"]
        assert post["status"] == "APPROVED"
        assert post["authorType"] == "BARBER"
        assert post["barberId"] == barber.id
        assert post["hashtags"] == ["fade", "skin"]
        assert post["imageUrl"] == "https://cdn.test/public/uploads/0-corte.png"
        assert uploads[0]["public"] is True

    def test_client_posts_wait_for_moderation(self, client, db, uploads):
        user = make_user(db)

        response = client.post(
            "/posts", files={"image": ("yo.png", PNG_BYTES, "image/png")}, headers=auth_headers(user)
        )

        assert response.json()["post"]["status"] == "PENDING"

    def test_non_image_upload_is_rejected(self, client, db, uploads):
        user = make_user(db)

        response = client.post(
            "/posts", files={"image": ("doc.pdf", b"%PDF-1.4", "application/pdf")}, headers=auth_headers(user)
        )

        assert response.status_code == 400
        assert uploads == []


class TestFeedVisibility:
    def test_public_feed_only_shows_approved(self, client, db):
        author = make_user(db)
        approved = make_post(db, author)
        make_post(db, author, status=PostStatus.PENDING)

        response = client.get("/posts")

        assert [p["id"] for p in response.json()["posts"]] == [approved.id]

    def test_admin_sees_pending_queue(self, client, db):
        author = make_user(db)
        admin = make_user(db, email="admin@test.com", role=Role.ADMIN)
        pending = make_post(db, author, status=PostStatus.PENDING)
        make_post(db, author)

        response = client.get("/posts", params={"status": "PENDING"}, headers=auth_headers(admin))

        assert [p["id"] for p in response.json()["posts"]] == [pending.id]

    def test_mine_requires_authentication(self, client):
        assert client.get("/posts", params={"mine": True}).status_code == 401

    def test_pending_post_hidden_from_strangers(self, client, db):
        author = make_user(db)
        post = make_post(db, author, status=PostStatus.PENDING)

        anonymous = client.get(f"/posts/{post.id}")
        own = client.get(f"/posts/{post.id}", headers=auth_headers(author))

        assert anonymous.status_code == 404
        assert own.status_code == 200

    def test_viewing_counts(self, client, db):
        post = make_post(db, make_user(db))

        client.get(f"/posts/{post.id}")
        response = client.get(f"/posts/{post.id}")

        assert response.json()["post"]["viewCount"] == 2


class TestEditAndDelete:
    def test_only_author_can_edit(self, client, db):
        author = make_user(db)
        other = make_user(db, email="otro@test.com")
        post = make_post(db, author)

        forbidden = client.patch(f"/posts/{post.id}", json={"caption": "hack"}, headers=auth_headers(other))
        ok = client.patch(
            f"/posts/{post.id}", json={"caption": "Nuevo", "hashtags": ["#Barba"]}, headers=auth_headers(author)
        )

        assert forbidden.status_code == 403
        assert ok.json()["post"]["caption"] == "Nuevo"
        assert ok.json()["post"]["hashtags"] == ["barba"]

    def test_admin_can_delete_any_post(self, client, db):
        post = make_post(db, make_user(db))
        admin = make_user(db, email="admin@test.com", role=Role.ADMIN)

        response = client.delete(f"/posts/{post.id}", headers=auth_headers(admin))

        assert response.status_code == 200
        assert db.query(Post).count() == 0


class TestModeration:
    def test_approval_notifies_author(self, client, db):
        author = make_user(db)
        admin = make_user(db, email="admin@test.com", role=Role.ADMIN)
        post = make_post(db, author, status=PostStatus.PENDING)

        response = client.patch(f"/posts/{post.id}/approve", json={"action": "approve"}, headers=auth_headers(admin))

        assert response.json()["post"]["status"] == "APPROVED"
        notification = db.query(Notification).one()
        assert notification.user_id == author.id
        assert notification.type == "POST_APPROVED"
        assert notification.actor_id == admin.id

    def test_rejection(self, client, db):
        author = make_user(db)
        admin = make_user(db, email="admin@test.com", role=Role.ADMIN)
        post = make_post(db, author, status=PostStatus.PENDING)

        response = client.patch(f"/posts/{post.id}/approve", json={"action": "reject"}, headers=auth_headers(admin))

        assert response.json()["post"]["status"] == "REJECTED"
        assert db.query(Notification).one().type == "POST_REJECTED"

    def test_clients_cannot_moderate(self, client, db):
        author = make_user(db)
        post = make_post(db, author, status=PostStatus.PENDING)

        response = client.patch(f"/posts/{post.id}/approve", json={"action": "approve"}, headers=auth_headers(author))

        assert response.status_code == 403


class TestLikes:
    def test_like_toggles(self, client, db):
        author = make_user(db)
        fan = make_user(db, email="fan@test.com", name="Fan")
        post = make_post(db, author)
        headers = auth_headers(fan)

        liked = client.post(f"/posts/{post.id}/like", headers=headers).json()
        unliked = client.post(f"/posts/{post.id}/like", headers=headers).json()

        assert liked == {"liked": True, "likesCount": 1}
        assert unliked == {"liked": False, "likesCount": 0}
        notification = db.query(Notification).one()
        assert notification.type == "POST_LIKE"
        assert notification.message == "A Fan le gustó tu publicación"

    def test_liking_own_post_does_not_notify(self, db):
        author = make_user(db)
        post = make_post(db, author)

        liked, count = SocialService(db).toggle_like(post.id, author)

        assert liked is True
        assert count == 1
        assert db.query(Notification).count() == 0

    def test_liked_by_me_flag(self, client, db):
        author = make_user(db)
        fan = make_user(db, email="fan@test.com")
        post = make_post(db, author)
        client.post(f"/posts/{post.id}/like", headers=auth_headers(fan))

        as_fan = client.get(f"/posts/{post.id}", headers=auth_headers(fan)).json()["post"]
        as_author = client.get(f"/posts/{post.id}", headers=auth_headers(author)).json()["post"]

        assert as_fan["likedByMe"] is True
        assert as_author["likedByMe"] is False


class TestComments:
    def test_comment_notifies_post_author(self, client, db):
        author = make_user(db)
        commenter = make_user(db, email="c@test.com", name="Carlos")
        post = make_post(db, author)

        response = client.post(
            "/comments", json={"postId": post.id, "content": "  Excelente  "}, headers=auth_headers(commenter)
        )

        assert response.status_code == 201
        assert response.json()["comment"]["content"] == "Excelente"
        notification = db.query(Notification).one()
        assert notification.type == "POST_COMMENT"
        assert notification.user_id == author.id
        assert notification.comment_id == response.json()["comment"]["id"]

    def test_reply_notifies_parent_author(self, client, db):
        author = make_user(db)
        first = make_user(db, email="first@test.com")
        second = make_user(db, email="second@test.com", name="Beto")
        post = make_post(db, author)
        parent = Comment(post_id=post.id, author_id=first.id, content="Hola")
        db.add(parent)
        db.commit()

        client.post(
            "/comments",
            json={"postId": post.id, "content": "Gracias", "parentId": parent.id},
            headers=auth_headers(second),
        )

        notification = db.query(Notification).one()
        assert notification.type == "COMMENT_REPLY"
        assert notification.user_id == first.id
        assert notification.message == "Beto respondió a tu comentario"

    def test_parent_from_another_post_is_rejected(self, client, db):
        author = make_user(db)
        post = make_post(db, author)
        other_post = make_post(db, author)
        foreign = Comment(post_id=other_post.id, author_id=author.id, content="Otro")
        db.add(foreign)
        db.commit()

        response = client.post(
            "/comments",
            json={"postId": post.id, "content": "Hola", "parentId": foreign.id},
            headers=auth_headers(author),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Comentario padre inválido"

    def test_commenting_on_own_post_is_silent(self, client, db):
        author = make_user(db)
        post = make_post(db, author)

        client.post("/comments", json={"postId": post.id, "content": "Gracias"}, headers=auth_headers(author))

        assert db.query(Notification).count() == 0

    def test_listing_requires_post_id(self, client, db):
        post = make_post(db, make_user(db))
        db.add(Comment(post_id=post.id, author_id=post.author_id, content="Primero"))
        db.commit()

        assert client.get("/comments").status_code == 400
        assert [c["content"] for c in client.get("/comments", params={"postId": post.id}).json()["comments"]] == [
            "Primero"
        ]

    def test_empty_comment_is_rejected(self, client, db):
        user = make_user(db)
        post = make_post(db, user)

        response = client.post("/comments", json={"postId": post.id, "content": "   "}, headers=auth_headers(user))

        assert response.status_code == 400
