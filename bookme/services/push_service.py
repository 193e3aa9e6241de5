"""
Web Push Service
Delivers notifications to every browser subscription a user registered
"""

import json
import logging
from typing import Optional

from pywebpush import WebPushException, webpush
from sqlalchemy.orm import Session

from ..config import VAPID_PRIVATE_KEY, VAPID_SUBJECT
from ..models import PushSubscription
from ..shared.results import SideEffectResult

logger = logging.getLogger(__name__)

# Push service answers meaning the subscription is gone for good
EXPIRED_STATUS_CODES = (404, 410)


def is_push_configured() -> bool:
    return bool(VAPID_PRIVATE_KEY)


def send_push_to_user(
    db: Session,
    user_id: int,
    title: str,
    body: str,
    data: Optional[dict] = None,
) -> SideEffectResult:
    """
    Push a notification to all of a user's subscriptions.

    Expired subscriptions are deleted. Failures are reported in the result,
    never raised.
    """
    if not is_push_configured():
        logger.debug("Push not configured - VAPID_PRIVATE_KEY missing")
        return SideEffectResult.skipped("push", "not_configured")

    subscriptions = db.query(PushSubscription).filter(PushSubscription.user_id == user_id).all()
    if not subscriptions:
        return SideEffectResult.skipped("push", "no_subscriptions")

    payload = json.dumps(
        {
            "title": title,
            "body": body,
            "icon": "/icon-192.png",
            "badge": "/icon-96.png",
            "data": data or {},
        }
    )

    delivered = 0
    errors = []
    for sub in subscriptions:
        try:
            webpush(
                subscription_info={"endpoint": sub.endpoint, "keys": {"p256dh": sub.p256dh, "auth": sub.auth}},
                data=payload,
                vapid_private_key=VAPID_PRIVATE_KEY,
                vapid_claims={"sub": VAPID_SUBJECT},
            )
            delivered += 1
        except WebPushException as e:
            status_code = e.response.status_code if e.response is not None else None
            if status_code in EXPIRED_STATUS_CODES:
                logger.info(f"🗑️ Removing expired push subscription {sub.id} for user {user_id}")
                db.delete(sub)
                db.commit()
            else:
                logger.error(f"❌ Push delivery failed for subscription {sub.id}: {e}")
            errors.append(str(e))
        except Exception as e:
            logger.error(f"❌ Push delivery error for subscription {sub.id}: {e}")
            errors.append(str(e))

    if delivered:
        logger.info(f"🔔 Push sent to user {user_id} ({delivered}/{len(subscriptions)} subscriptions)")
        return SideEffectResult.success("push", delivered=delivered, failed=len(errors))
    return SideEffectResult.failure("push", "; ".join(errors) or "No delivery")
