"""Settings router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from .schemas import SettingsUpdate, ShopSettings
from .service import SettingsService

router = APIRouter(prefix="/settings", tags=["Settings"])


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_shop_settings(service: SettingsService = Depends(get_settings_service)) -> ShopSettings:
    """Dependency handing the shop settings snapshot to invoice creation"""
    return service.current()


@router.get("", response_model=ShopSettings)
async def get_settings(service: SettingsService = Depends(get_settings_service)):
    return service.current()


@router.put("", response_model=ShopSettings)
async def update_settings(
    data: SettingsUpdate,
    _admin: User = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    return service.update(data)
