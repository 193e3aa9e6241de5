"""Message repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Message, User


class MessageRepository:
    @staticmethod
    def get_by_id(db: Session, message_id: int) -> Optional[Message]:
        return db.query(Message).filter(Message.id == message_id).first()

    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def list_received(db: Session, user_id: int) -> list[Message]:
        return (
            db.query(Message)
            .filter(Message.recipient_id == user_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .all()
        )

    @staticmethod
    def list_sent(db: Session, user_id: int) -> list[Message]:
        return (
            db.query(Message)
            .filter(Message.sender_id == user_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .all()
        )

    @staticmethod
    def count_unread(db: Session, user_id: int) -> int:
        return db.query(Message).filter(Message.recipient_id == user_id, Message.is_read.is_(False)).count()
