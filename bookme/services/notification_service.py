"""
Unified Notification Service
Fans a single event out to email and push so both channels fire from the same source
"""

import logging
from typing import Awaitable, Callable, Optional

from sqlalchemy.orm import Session

from .push_service import send_push_to_user

logger = logging.getLogger(__name__)


async def send_notification(
    db: Session,
    user_id: Optional[int],
    email: Optional[str],
    recipient_name: str,
    notification_type: str,
    email_func: Callable[..., Awaitable[dict]],
    email_kwargs: dict,
    push_title: Optional[str] = None,
    push_body: Optional[str] = None,
    push_data: Optional[dict] = None,
) -> dict:
    """
    Unified notification sender that handles both email and push

    Args:
        db: Database session
        user_id: Recipient user ID (push subscriptions are looked up by it)
        email: Recipient email address
        recipient_name: Recipient name for logging
        notification_type: Type of notification (for logging)
        email_func: Email function to call
        email_kwargs: Kwargs for email function (``to`` is filled in)
        push_title: Push title; no push is attempted when omitted
        push_body: Push body text
        push_data: Extra push payload data

    Returns:
        Dict with email_sent and push_sent status
    """
    result = {"email_sent": False, "push_sent": False, "email_error": None, "push_error": None}

    if email:
        try:
            logger.info(f"📧 Sending {notification_type} email to {email}")
            await email_func(to=email, **email_kwargs)
            result["email_sent"] = True
            logger.info(f"✅ {notification_type} email sent successfully to {email}")
        except Exception as e:
            result["email_error"] = str(e)
            logger.error(f"❌ Failed to send {notification_type} email to {email}: {e}")
    else:
        logger.debug(f"⚠️ No email address for {notification_type} notification to {recipient_name}")

    if user_id and push_title:
        push = send_push_to_user(db, user_id, push_title, push_body or "", push_data)
        result["push_sent"] = push.ok and not (push.detail or {}).get("skipped")
        result["push_error"] = push.error

    return result
