"""Message service - direct messages between users, with optional private attachment"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Message, User
from ..notifications.repository import NotificationType
from ..notifications.service import notify_user, push_notification
from .repository import MessageRepository
from .schemas import MessageCreate

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = MessageRepository()

    def list_messages(self, user: User, box: str = "received") -> tuple[list[Message], int]:
        if box == "sent":
            messages = self.repo.list_sent(self.db, user.id)
        else:
            messages = self.repo.list_received(self.db, user.id)
        return messages, self.repo.count_unread(self.db, user.id)

    def validate_new_message(self, data: MessageCreate) -> User:
        """Check required fields and resolve the recipient before anything is uploaded"""
        if not data.recipientId or not (data.content or "").strip():
            raise HTTPException(status_code=400, detail="Destinatario y contenido son requeridos")
        recipient = self.repo.get_user(self.db, data.recipientId)
        if not recipient:
            raise HTTPException(status_code=404, detail="Destinatario no encontrado")
        return recipient

    def send_message(
        self,
        sender: User,
        data: MessageCreate,
        attachment_path: Optional[str] = None,
        attachment_name: Optional[str] = None,
        attachment_type: Optional[str] = None,
    ) -> Message:
        recipient = self.validate_new_message(data)
        message = Message(
            sender_id=sender.id,
            recipient_id=recipient.id,
            subject=(data.subject or "").strip() or None,
            content=data.content.strip(),
            attachment_path=attachment_path,
            attachment_name=attachment_name,
            attachment_type=attachment_type,
        )
        self.db.add(message)
        self.db.flush()

        notification = notify_user(
            self.db,
            recipient.id,
            NotificationType.NEW_MESSAGE,
            "Nuevo mensaje",
            f"{sender.name or sender.email} te envió un mensaje",
            link="/messages",
            actor_id=sender.id,
        )
        self.db.commit()
        self.db.refresh(message)
        push_notification(self.db, notification)
        logger.info(f"✉️ Message {message.id} sent from user {sender.id} to user {recipient.id}")
        return message

    def get_for_participant(self, message_id: int, user: User) -> Message:
        message = self.repo.get_by_id(self.db, message_id)
        if not message:
            raise HTTPException(status_code=404, detail="Mensaje no encontrado")
        if user.id not in (message.sender_id, message.recipient_id):
            raise HTTPException(status_code=403, detail="Sin permisos")
        return message

    def mark_read(self, message_id: int, user: User) -> Message:
        message = self.repo.get_by_id(self.db, message_id)
        if not message:
            raise HTTPException(status_code=404, detail="Mensaje no encontrado")
        if message.recipient_id != user.id:
            raise HTTPException(status_code=403, detail="Sin permisos")
        if not message.is_read:
            message.is_read = True
            message.read_at = datetime.now()
            self.db.commit()
            self.db.refresh(message)
        return message
