"""User service - signup, credentials login and profile management"""

import logging
import re

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Role, User
from ...security_utils import MIN_PASSWORD_LENGTH, create_access_token, hash_password, verify_password
from .repository import UserRepository
from .schemas import LoginRequest, PasswordChange, ProfileUpdate, SignupRequest

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_TOO_SHORT = f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres"


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.role, user.barber.id if user.barber else None)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def signup(self, data: SignupRequest) -> User:
        if not data.email or not data.password or not data.name:
            raise HTTPException(status_code=400, detail="Email, contraseña y nombre son requeridos")
        if not EMAIL_PATTERN.match(data.email):
            raise HTTPException(status_code=400, detail="Formato de email inválido")
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(status_code=400, detail=PASSWORD_TOO_SHORT)
        if self.repo.get_by_email(self.db, data.email):
            raise HTTPException(status_code=400, detail="El usuario ya existe")

        user = User(
            name=data.name.strip(),
            email=data.email,
            password=hash_password(data.password),
            phone=data.phone or None,
            role=Role.CLIENT,
        )
        self.repo.add(self.db, user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"✅ New client account {user.id} ({user.email})")
        return user

    def login(self, data: LoginRequest) -> tuple[User, str]:
        user = self.repo.get_by_email(self.db, data.email)
        if not user or not verify_password(data.password, user.password):
            logger.warning(f"⚠️ Failed login for {data.email}")
            raise HTTPException(status_code=401, detail="Credenciales inválidas")
        if not user.is_active:
            raise HTTPException(status_code=403, detail="Cuenta desactivada")
        return user, issue_token(user)

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        updates = data.model_dump(exclude_unset=True)
        if not updates:
            raise HTTPException(status_code=400, detail="No hay cambios para actualizar")

        if "name" in updates:
            if not updates["name"] or not updates["name"].strip():
                raise HTTPException(status_code=400, detail="El nombre no puede estar vacío")
            user.name = updates["name"].strip()

        if "email" in updates:
            email = (updates["email"] or "").strip().lower()
            if not EMAIL_PATTERN.match(email):
                raise HTTPException(status_code=400, detail="Formato de email inválido")
            existing = self.repo.get_by_email(self.db, email)
            if existing and existing.id != user.id:
                raise HTTPException(status_code=400, detail="El email ya está en uso")
            user.email = email

        if "phone" in updates:
            user.phone = updates["phone"] or None

        self.db.commit()
        self.db.refresh(user)
        return user

    def change_password(self, user: User, data: PasswordChange) -> None:
        if not data.currentPassword or not data.newPassword:
            raise HTTPException(status_code=400, detail="Todos los campos son obligatorios")
        if len(data.newPassword) < MIN_PASSWORD_LENGTH:
            raise HTTPException(status_code=400, detail=PASSWORD_TOO_SHORT)
        if not verify_password(data.currentPassword, user.password):
            raise HTTPException(status_code=400, detail="La contraseña actual es incorrecta")

        user.password = hash_password(data.newPassword)
        self.db.commit()
        logger.info(f"🔑 Password changed for user {user.id}")

    def set_avatar(self, user: User, image_url: str) -> User:
        user.image = image_url
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"🖼️ Avatar updated for user {user.id}")
        return user
