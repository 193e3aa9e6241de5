"""Notification router - in-app feed and Web Push subscriptions"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...config import VAPID_PUBLIC_KEY
from ...database import get_db
from ...models import User
from ...services.push_service import send_push_to_user
from .schemas import NotificationListResponse, NotificationResponse, PushSubscriptionRequest
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])
push_router = APIRouter(prefix="/push", tags=["Push"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Latest 50 notifications plus the unread count"""
    notifications, unread = service.list_for_user(current_user)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_model(n) for n in notifications], unreadCount=unread
    )


@router.patch("/read-all")
async def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return {"updated": service.mark_all_read(current_user)}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return NotificationResponse.from_model(service.mark_read(notification_id, current_user))


# ----------------------------------------------------------------------
# Web Push
# ----------------------------------------------------------------------


class PushSendRequest(BaseModel):
    userId: int
    title: str
    body: str
    data: Optional[dict] = None


@push_router.get("/public-key")
async def get_vapid_public_key():
    if not VAPID_PUBLIC_KEY:
        raise HTTPException(status_code=503, detail="Notificaciones push no configuradas")
    return {"publicKey": VAPID_PUBLIC_KEY}


@push_router.post("/subscribe", status_code=201)
async def subscribe(
    data: PushSubscriptionRequest,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    subscription = service.subscribe(current_user, data)
    return {"success": True, "id": subscription.id}


@push_router.delete("/subscribe")
async def unsubscribe(
    endpoint: str = Query(...),
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return {"success": service.unsubscribe(current_user, endpoint)}


@push_router.post("/send")
async def send_push(
    data: PushSendRequest,
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Admin-triggered push to one user"""
    result = send_push_to_user(db, data.userId, data.title, data.body, data.data)
    return {"success": result.ok, "sideEffects": [result]}
