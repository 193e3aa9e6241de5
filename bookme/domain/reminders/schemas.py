"""Reminder run schemas"""

from pydantic import BaseModel

from ...shared.results import SideEffectResult


class NotificationRunResult(BaseModel):
    """Outcome of one scheduler run"""

    success: bool = True
    sent: int = 0
    reminders24h: int = 0
    reminders12h: int = 0
    reminders2h: int = 0
    reminders30m: int = 0
    thankYou: int = 0
    failures: list[SideEffectResult] = []
