"""User repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def add(db: Session, user: User) -> User:
        db.add(user)
        db.flush()
        return user
