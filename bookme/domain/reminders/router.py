"""Reminder router - on-demand trigger for the notification scheduler"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ...auth import get_optional_user
from ...config import CRON_SECRET
from ...database import get_db
from ...models import Role, User
from .schemas import NotificationRunResult
from .service import NotificationSchedulerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_scheduler_service(db: Session = Depends(get_db)) -> NotificationSchedulerService:
    return NotificationSchedulerService(db)


async def authorize_scheduler_call(
    x_cron_secret: Optional[str] = Header(None),
    current_user: Optional[User] = Depends(get_optional_user),
) -> None:
    """Admin bearer token or the shared cron secret"""
    if CRON_SECRET and x_cron_secret and hmac.compare_digest(x_cron_secret, CRON_SECRET):
        return
    if current_user and current_user.role == Role.ADMIN:
        return
    logger.warning("⚠️ Rejected notification run: no admin token or cron secret")
    raise HTTPException(status_code=401, detail="No autorizado")


@router.post("/process", response_model=NotificationRunResult)
async def process_notifications(
    _authorized: None = Depends(authorize_scheduler_call),
    service: NotificationSchedulerService = Depends(get_scheduler_service),
):
    return await service.process()
