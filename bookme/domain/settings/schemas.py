"""Settings domain schemas"""

from typing import Optional

from pydantic import BaseModel


class ShopSettings(BaseModel):
    """Shop identity snapshot handed to invoice creation"""

    shopName: str = "BookMe"
    address: str = ""
    phone: str = ""
    email: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    tiktok: Optional[str] = None
    youtube: Optional[str] = None
    whatsapp: Optional[str] = None


class SettingsUpdate(BaseModel):
    shopName: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    tiktok: Optional[str] = None
    youtube: Optional[str] = None
    whatsapp: Optional[str] = None
