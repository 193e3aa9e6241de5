"""
Gallery service
Admin-curated showcase images with per-user likes
"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import GalleryImage, GalleryLike, User
from .repository import GalleryRepository
from .schemas import GalleryImageCreate, GalleryImageUpdate

logger = logging.getLogger(__name__)


class GalleryService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = GalleryRepository()

    def list_images(
        self, include_inactive: bool = False, gender: Optional[str] = None, tag: Optional[str] = None
    ) -> list[GalleryImage]:
        images = self.repo.list_images(self.db, include_inactive, gender)
        if tag:
            images = [image for image in images if tag in (image.tags or [])]
        return images

    def get_image(self, image_id: int) -> GalleryImage:
        image = self.repo.get_image(self.db, image_id)
        if not image:
            raise HTTPException(status_code=404, detail="Imagen no encontrada")
        return image

    def create_image(self, data: GalleryImageCreate) -> GalleryImage:
        if not data.cloudStoragePath or not (data.title or "").strip():
            raise HTTPException(status_code=400, detail="cloudStoragePath y title son requeridos")

        image = GalleryImage(
            cloud_storage_path=data.cloudStoragePath,
            title=data.title.strip(),
            description=data.description or None,
            order=data.order or 0,
            gender=data.gender,
            tags=data.tags,
            barber_id=data.barberId,
            is_public=True,
            is_active=True,
        )
        self.db.add(image)
        self.db.commit()
        self.db.refresh(image)
        logger.info(f"🖼️ Gallery image {image.id} added: {image.title}")
        return image

    def update_image(self, image_id: int, data: GalleryImageUpdate) -> GalleryImage:
        image = self.get_image(image_id)
        updates = data.model_dump(exclude_unset=True)

        if "title" in updates:
            if not (updates["title"] or "").strip():
                raise HTTPException(status_code=400, detail="El título es requerido")
            image.title = updates["title"].strip()
        if "description" in updates:
            image.description = updates["description"] or None
        if updates.get("order") is not None:
            image.order = updates["order"]
        if updates.get("isActive") is not None:
            image.is_active = updates["isActive"]
        if "gender" in updates:
            image.gender = updates["gender"]
        if updates.get("tags") is not None:
            image.tags = updates["tags"]

        self.db.commit()
        self.db.refresh(image)
        return image

    def delete_image(self, image_id: int) -> str:
        """Remove the row and return its storage key for the caller to clean up"""
        image = self.get_image(image_id)
        key = image.cloud_storage_path
        self.db.delete(image)
        self.db.commit()
        logger.info(f"🗑️ Gallery image {image_id} deleted")
        return key

    def toggle_like(self, image_id: int, user: User) -> tuple[bool, int]:
        image = self.get_image(image_id)
        existing = self.repo.get_like(self.db, image.id, user.id)

        if existing:
            self.db.delete(existing)
            liked = False
        else:
            self.db.add(GalleryLike(image_id=image.id, user_id=user.id))
            liked = True

        try:
            self.db.commit()
        except IntegrityError:
            # concurrent double-tap already stored the like
            self.db.rollback()
            liked = True

        return liked, self.repo.count_likes(self.db, image.id)

    def is_liked(self, image_id: int, user: Optional[User]) -> bool:
        if user is None:
            return False
        return self.repo.get_like(self.db, image_id, user.id) is not None
