import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import Barber, Role, User
from .security_utils import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def _user_from_token(token: str, db: Session) -> Optional[User]:
    claims = decode_access_token(token)
    if not claims or not claims.get("sub"):
        return None
    try:
        user_id = int(claims["sub"])
    except (TypeError, ValueError):
        return None
    return db.query(User).filter(User.id == user_id).first()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user or fail with 401/403"""
    user = _user_from_token(credentials.credentials, db)
    if not user:
        raise HTTPException(status_code=401, detail="No autorizado")
    if not user.is_active:
        logger.warning(f"⚠️ Disabled account attempted access: user {user.id}")
        raise HTTPException(status_code=403, detail="Cuenta desactivada")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but anonymous callers get None"""
    if not credentials:
        return None
    user = _user_from_token(credentials.credentials, db)
    if user and user.is_active:
        return user
    return None


def require_roles(*roles: str):
    """Build a dependency that only admits the given roles"""

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(status_code=403, detail="Sin permisos")
        return current_user

    return checker


require_admin = require_roles(Role.ADMIN)
require_barber = require_roles(Role.BARBER)


async def get_current_barber(
    current_user: User = Depends(require_barber),
    db: Session = Depends(get_db),
) -> Barber:
    """Barber profile of the calling barber"""
    barber = db.query(Barber).filter(Barber.user_id == current_user.id).first()
    if not barber:
        raise HTTPException(status_code=404, detail="Barbero no encontrado")
    return barber
