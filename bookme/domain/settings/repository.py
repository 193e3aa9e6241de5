"""Settings repository - the single shop settings row"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Settings

# ShopSettings field -> Settings column
FIELD_MAP = {
    "shopName": "shop_name",
    "address": "address",
    "phone": "phone",
    "email": "email",
    "latitude": "latitude",
    "longitude": "longitude",
    "facebook": "facebook",
    "instagram": "instagram",
    "twitter": "twitter",
    "tiktok": "tiktok",
    "youtube": "youtube",
    "whatsapp": "whatsapp",
}


class SettingsRepository:
    @staticmethod
    def get(db: Session) -> Optional[Settings]:
        return db.query(Settings).order_by(Settings.id.asc()).first()

    @staticmethod
    def create_default(db: Session) -> Settings:
        settings = Settings(shop_name="BookMe", address="", phone="", email="")
        db.add(settings)
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, settings: Settings, **updates) -> Settings:
        for key, value in updates.items():
            setattr(settings, FIELD_MAP[key], value)
        db.commit()
        db.refresh(settings)
        return settings
