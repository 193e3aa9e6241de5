"""Settings service - loads and refreshes the shop settings snapshot"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Settings
from .repository import FIELD_MAP, SettingsRepository
from .schemas import SettingsUpdate, ShopSettings

logger = logging.getLogger(__name__)

# Process-wide snapshot, set by initialize_shop_settings() at start-up
_shop_settings: Optional[ShopSettings] = None


def to_shop_settings(row: Optional[Settings]) -> ShopSettings:
    if row is None:
        return ShopSettings()
    return ShopSettings(
        **{field: getattr(row, column) for field, column in FIELD_MAP.items()}
    )


def initialize_shop_settings(db: Session) -> ShopSettings:
    """Ensure the settings row exists and cache its snapshot"""
    global _shop_settings
    row = SettingsRepository.get(db)
    if row is None:
        row = SettingsRepository.create_default(db)
        logger.info("✅ Created default shop settings")
    _shop_settings = to_shop_settings(row)
    return _shop_settings


def reset_shop_settings() -> None:
    global _shop_settings
    _shop_settings = None


class SettingsService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SettingsRepository()

    def current(self) -> ShopSettings:
        """Cached snapshot, or a read-only load when start-up has not run"""
        if _shop_settings is not None:
            return _shop_settings
        return to_shop_settings(self.repo.get(self.db))

    def update(self, data: SettingsUpdate) -> ShopSettings:
        global _shop_settings
        row = self.repo.get(self.db) or self.repo.create_default(self.db)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("shopName") == "":
            updates.pop("shopName")
        row = self.repo.update(self.db, row, **updates)
        _shop_settings = to_shop_settings(row)
        logger.info("✅ Shop settings updated")
        return _shop_settings
