"""Notification repository - in-app feed entries and push subscriptions"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Notification, PushSubscription


class NotificationType:
    POST_APPROVED = "POST_APPROVED"
    POST_REJECTED = "POST_REJECTED"
    POST_LIKE = "POST_LIKE"
    POST_COMMENT = "POST_COMMENT"
    COMMENT_REPLY = "COMMENT_REPLY"
    APPOINTMENT_REMINDER = "APPOINTMENT_REMINDER"
    NEW_MESSAGE = "NEW_MESSAGE"


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def create(
        db: Session,
        user_id: int,
        type: str,
        title: str,
        message: str,
        link: Optional[str] = None,
        post_id: Optional[int] = None,
        comment_id: Optional[int] = None,
        actor_id: Optional[int] = None,
    ) -> Notification:
        """Stage a notification (caller commits)"""
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            link=link,
            post_id=post_id,
            comment_id=comment_id,
            actor_id=actor_id,
        )
        db.add(notification)
        return notification

    @staticmethod
    def list_for_user(db: Session, user_id: int, limit: int = 50) -> list[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_unread(db: Session, user_id: int) -> int:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .count()
        )

    @staticmethod
    def get_by_id(db: Session, notification_id: int) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    @staticmethod
    def mark_all_read(db: Session, user_id: int) -> int:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )

    # Push subscriptions

    @staticmethod
    def get_subscription(db: Session, endpoint: str) -> Optional[PushSubscription]:
        return db.query(PushSubscription).filter(PushSubscription.endpoint == endpoint).first()

    @staticmethod
    def delete_subscription(db: Session, endpoint: str, user_id: int) -> int:
        return (
            db.query(PushSubscription)
            .filter(PushSubscription.endpoint == endpoint, PushSubscription.user_id == user_id)
            .delete(synchronize_session=False)
        )
