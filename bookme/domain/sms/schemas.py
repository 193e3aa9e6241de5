"""SMS schemas"""

from typing import Literal, Optional

from pydantic import BaseModel


class SmsAppointmentsRequest(BaseModel):
    type: Literal["24h", "2h", "thank_you"]


class SmsDelivery(BaseModel):
    appointmentId: int
    success: bool
    error: Optional[str] = None


class SmsBatchResult(BaseModel):
    success: bool = True
    message: str
    total: int
    successful: int
    failed: int
    results: list[SmsDelivery]


class SmsSendRequest(BaseModel):
    to: Optional[str] = None
    message: Optional[str] = None


class SmsSendResult(BaseModel):
    success: bool
    message: str
    sid: Optional[str] = None
