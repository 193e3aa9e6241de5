"""Direct message schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class MessageCreate(BaseModel):
    recipientId: Optional[int] = None
    subject: Optional[str] = None
    content: Optional[str] = None


class MessageParticipant(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    role: str


def _participant(user) -> Optional[MessageParticipant]:
    if user is None:
        return None
    return MessageParticipant(id=user.id, name=user.name, email=user.email, role=user.role)


class MessageResponse(BaseModel):
    id: int
    sender: Optional[MessageParticipant] = None
    recipient: Optional[MessageParticipant] = None
    subject: Optional[str] = None
    content: str
    isRead: bool
    readAt: Optional[datetime] = None
    hasAttachment: bool = False
    attachmentName: Optional[str] = None
    attachmentType: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, message) -> "MessageResponse":
        return cls(
            id=message.id,
            sender=_participant(message.sender),
            recipient=_participant(message.recipient),
            subject=message.subject,
            content=message.content,
            isRead=message.is_read,
            readAt=message.read_at,
            hasAttachment=bool(message.attachment_path),
            attachmentName=message.attachment_name,
            attachmentType=message.attachment_type,
            createdAt=message.created_at,
        )


class MessageEnvelope(BaseModel):
    message: MessageResponse


class MessageListResponse(BaseModel):
    messages: list[MessageResponse]
    unreadCount: int
