"""Tests for the in-app notification feed and Web Push delivery."""

from types import SimpleNamespace

import pytest
from pywebpush import WebPushException

from bookme.domain.notifications import router as notifications_router
from bookme.domain.notifications.service import notify_user
from bookme.models import Notification, PushSubscription, Role
from bookme.services import push_service
from bookme.services.push_service import send_push_to_user
from tests.conftest import auth_headers, make_user

SUBSCRIPTION = {
    "endpoint": "https://push.example.com/send/abc",
    "keys": {"p256dh": "BPublicKey", "auth": "secret"},
}


def add_notification(db, user, is_read=False, title="Nueva cita") -> Notification:
    notification = Notification(
        user_id=user.id, type="NEW_APPOINTMENT", title=title, message="Tienes una cita", is_read=is_read
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def add_subscription(db, user, endpoint=SUBSCRIPTION["endpoint"]) -> PushSubscription:
    subscription = PushSubscription(user_id=user.id, endpoint=endpoint, p256dh="BPublicKey", auth="secret")
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    return subscription


class TestFeed:
    def test_lists_own_notifications_with_unread_count(self, client, db):
        user = make_user(db)
        other = make_user(db, email="otro@test.com")
        add_notification(db, user)
        add_notification(db, user, is_read=True)
        add_notification(db, other)

        body = client.get("/notifications", headers=auth_headers(user)).json()

        assert len(body["notifications"]) == 2
        assert body["unreadCount"] == 1

    def test_mark_read(self, client, db):
        user = make_user(db)
        notification = add_notification(db, user)

        response = client.patch(f"/notifications/{notification.id}/read", headers=auth_headers(user))

        assert response.json()["isRead"] is True

    def test_mark_read_of_someone_else(self, client, db):
        owner = make_user(db)
        other = make_user(db, email="otro@test.com")
        notification = add_notification(db, owner)

        response = client.patch(f"/notifications/{notification.id}/read", headers=auth_headers(other))

        assert response.status_code == 403

    def test_mark_read_unknown(self, client, db):
        user = make_user(db)

        response = client.patch("/notifications/999/read", headers=auth_headers(user))

        assert response.status_code == 404
        assert response.json()["detail"] == "Notificación no encontrada"

    def test_mark_all_read(self, client, db):
        user = make_user(db)
        add_notification(db, user)
        add_notification(db, user)
        add_notification(db, user, is_read=True)

        response = client.patch("/notifications/read-all", headers=auth_headers(user))

        assert response.json() == {"updated": 2}
        assert client.get("/notifications", headers=auth_headers(user)).json()["unreadCount"] == 0

    def test_users_are_not_notified_of_their_own_actions(self, db):
        user = make_user(db)

        assert notify_user(db, user.id, "POST_LIKE", "Like", "x", actor_id=user.id) is None


class TestPushSubscriptions:
    def test_public_key_unavailable_without_vapid(self, client, monkeypatch):
        monkeypatch.setattr(notifications_router, "VAPID_PUBLIC_KEY", "")

        assert client.get("/push/public-key").status_code == 503

    def test_public_key(self, client, monkeypatch):
        monkeypatch.setattr(notifications_router, "VAPID_PUBLIC_KEY", "BPub")

        assert client.get("/push/public-key").json() == {"publicKey": "BPub"}

    def test_subscribe_upserts_by_endpoint(self, client, db):
        first = make_user(db)
        second = make_user(db, email="otro@test.com")

        created = client.post("/push/subscribe", json=SUBSCRIPTION, headers=auth_headers(first))
        moved = client.post("/push/subscribe", json=SUBSCRIPTION, headers=auth_headers(second))

        assert created.status_code == 201
        assert moved.json()["id"] == created.json()["id"]
        assert db.query(PushSubscription).one().user_id == second.id

    def test_unsubscribe_only_own_endpoint(self, client, db):
        owner = make_user(db)
        other = make_user(db, email="otro@test.com")
        add_subscription(db, owner)
        params = {"endpoint": SUBSCRIPTION["endpoint"]}

        foreign = client.delete("/push/subscribe", params=params, headers=auth_headers(other))
        own = client.delete("/push/subscribe", params=params, headers=auth_headers(owner))

        assert foreign.json() == {"success": False}
        assert own.json() == {"success": True}
        assert db.query(PushSubscription).count() == 0

    def test_admin_send_is_skipped_without_vapid(self, client, db, monkeypatch):
        monkeypatch.setattr(push_service, "VAPID_PRIVATE_KEY", "")
        admin = make_user(db, email="admin@test.com", role=Role.ADMIN)
        target = make_user(db)

        response = client.post(
            "/push/send", json={"userId": target.id, "title": "Hola", "body": "Prueba"}, headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert response.json()["sideEffects"][0]["detail"] == {"skipped": "not_configured"}


class TestPushDelivery:
    """Fan-out to every browser subscription; dead endpoints are pruned."""

    @pytest.fixture
    def configured(self, monkeypatch):
        monkeypatch.setattr(push_service, "VAPID_PRIVATE_KEY", "private-key")

    def test_no_subscriptions_is_skipped(self, db, configured):
        user = make_user(db)

        result = send_push_to_user(db, user.id, "Hola", "Prueba")

        assert result.ok
        assert result.detail == {"skipped": "no_subscriptions"}

    def test_delivers_to_every_subscription(self, db, configured, monkeypatch):
        user = make_user(db)
        add_subscription(db, user, endpoint="https://push.example.com/a")
        add_subscription(db, user, endpoint="https://push.example.com/b")
        calls = []
        monkeypatch.setattr(push_service, "webpush", lambda **kwargs: calls.append(kwargs))

        result = send_push_to_user(db, user.id, "Hola", "Prueba", {"url": "/appointments"})

        assert result.ok
        assert result.detail == {"delivered": 2, "failed": 0}
        assert calls[0]["vapid_private_key"] == "private-key"
        assert '"url": "/appointments"' in calls[0]["data"]

    @pytest.mark.parametrize("status_code", [404, 410])
    def test_expired_subscription_is_removed(self, db, configured, monkeypatch, status_code):
        user = make_user(db)
        add_subscription(db, user)

        def gone(**kwargs):
            raise WebPushException("Gone", response=SimpleNamespace(status_code=status_code))

        monkeypatch.setattr(push_service, "webpush", gone)

        result = send_push_to_user(db, user.id, "Hola", "Prueba")

        assert not result.ok
        assert db.query(PushSubscription).count() == 0

    def test_transient_failure_keeps_subscription(self, db, configured, monkeypatch):
        user = make_user(db)
        add_subscription(db, user)

        def unavailable(**kwargs):
            raise WebPushException("Unavailable", response=SimpleNamespace(status_code=503))

        monkeypatch.setattr(push_service, "webpush", unavailable)

        result = send_push_to_user(db, user.id, "Hola", "Prueba")

        assert not result.ok
        assert db.query(PushSubscription).count() == 1
