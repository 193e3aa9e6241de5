"""Notification schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    link: Optional[str] = None
    postId: Optional[int] = None
    commentId: Optional[int] = None
    actorId: Optional[int] = None
    isRead: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            link=notification.link,
            postId=notification.post_id,
            commentId=notification.comment_id,
            actorId=notification.actor_id,
            isRead=notification.is_read,
            createdAt=notification.created_at,
        )


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unreadCount: int


class PushKeys(BaseModel):
    p256dh: str
    auth: str


class PushSubscriptionRequest(BaseModel):
    """Browser PushSubscription.toJSON() payload"""

    endpoint: str
    keys: PushKeys
