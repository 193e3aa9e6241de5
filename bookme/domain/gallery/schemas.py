"""Gallery schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

Gender = Literal["MALE", "FEMALE", "UNISEX"]


class GalleryImageCreate(BaseModel):
    cloudStoragePath: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    gender: Optional[Gender] = None
    tags: list[str] = []
    barberId: Optional[int] = None


class GalleryImageUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    order: Optional[int] = None
    isActive: Optional[bool] = None
    gender: Optional[Gender] = None
    tags: Optional[list[str]] = None


class GalleryBarber(BaseModel):
    id: int
    name: Optional[str] = None
    image: Optional[str] = None


class GalleryImageResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    order: int
    isActive: bool
    isPublic: bool
    gender: Optional[str] = None
    tags: list[str] = []
    likes: int
    imageUrl: str
    cloudStoragePath: str
    barber: Optional[GalleryBarber] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, image, image_url: str) -> "GalleryImageResponse":
        barber = image.barber
        return cls(
            id=image.id,
            title=image.title,
            description=image.description,
            order=image.order or 0,
            isActive=image.is_active,
            isPublic=image.is_public,
            gender=image.gender,
            tags=image.tags or [],
            likes=len(image.likes),
            imageUrl=image_url,
            cloudStoragePath=image.cloud_storage_path,
            barber=GalleryBarber(id=barber.id, name=barber.user.name, image=barber.user.image)
            if barber and barber.user
            else None,
            createdAt=image.created_at,
        )


class GalleryLikeResult(BaseModel):
    liked: bool
    likes: int
    message: str


class GalleryLikeStatus(BaseModel):
    liked: bool


class GalleryUploadResult(BaseModel):
    success: bool = True
    url: str
    cloudStoragePath: str
