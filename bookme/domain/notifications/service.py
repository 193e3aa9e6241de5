"""Notification service - in-app feed and push subscription management"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Notification, PushSubscription, User
from ...services.push_service import send_push_to_user
from ...shared.results import SideEffectResult
from .repository import NotificationRepository
from .schemas import PushSubscriptionRequest

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def list_for_user(self, user: User) -> tuple[list[Notification], int]:
        return self.repo.list_for_user(self.db, user.id), self.repo.count_unread(self.db, user.id)

    def mark_read(self, notification_id: int, user: User) -> Notification:
        notification = self.repo.get_by_id(self.db, notification_id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notificación no encontrada")
        if notification.user_id != user.id:
            raise HTTPException(status_code=403, detail="Sin permisos")
        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_read(self, user: User) -> int:
        updated = self.repo.mark_all_read(self.db, user.id)
        self.db.commit()
        return updated

    def subscribe(self, user: User, data: PushSubscriptionRequest) -> PushSubscription:
        """Upsert by endpoint; a browser re-subscribing moves the endpoint to the caller"""
        subscription = self.repo.get_subscription(self.db, data.endpoint)
        if subscription:
            subscription.user_id = user.id
            subscription.p256dh = data.keys.p256dh
            subscription.auth = data.keys.auth
        else:
            subscription = PushSubscription(
                user_id=user.id, endpoint=data.endpoint, p256dh=data.keys.p256dh, auth=data.keys.auth
            )
            self.db.add(subscription)
        self.db.commit()
        self.db.refresh(subscription)
        logger.info(f"🔔 Push subscription saved for user {user.id}")
        return subscription

    def unsubscribe(self, user: User, endpoint: str) -> bool:
        deleted = self.repo.delete_subscription(self.db, endpoint, user.id)
        self.db.commit()
        return bool(deleted)


def notify_user(
    db: Session,
    user_id: int,
    type: str,
    title: str,
    message: str,
    link: Optional[str] = None,
    actor_id: Optional[int] = None,
    post_id: Optional[int] = None,
    comment_id: Optional[int] = None,
) -> Optional[Notification]:
    """Stage an in-app notification; users are never notified about their own actions"""
    if actor_id is not None and actor_id == user_id:
        return None
    return NotificationRepository.create(
        db, user_id, type, title, message, link=link, post_id=post_id, comment_id=comment_id, actor_id=actor_id
    )


def push_notification(db: Session, notification: Optional[Notification]) -> Optional[SideEffectResult]:
    """Mirror a committed in-app notification to the user's browsers"""
    if notification is None:
        return None
    result = send_push_to_user(
        db, notification.user_id, notification.title, notification.message, {"url": notification.link or "/"}
    )
    if not result.ok:
        logger.warning(f"⚠️ Push for notification {notification.id} failed: {result.error}")
    return result
