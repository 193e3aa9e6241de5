"""Gallery repository - showcase images and their likes"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import GalleryImage, GalleryLike


class GalleryRepository:
    @staticmethod
    def get_image(db: Session, image_id: int) -> Optional[GalleryImage]:
        return db.query(GalleryImage).filter(GalleryImage.id == image_id).first()

    @staticmethod
    def list_images(db: Session, include_inactive: bool = False, gender: Optional[str] = None) -> list[GalleryImage]:
        query = db.query(GalleryImage)
        if not include_inactive:
            query = query.filter(GalleryImage.is_active.is_(True))
        if gender:
            query = query.filter(GalleryImage.gender == gender)
        return query.order_by(GalleryImage.order.asc(), GalleryImage.created_at.desc(), GalleryImage.id.desc()).all()

    @staticmethod
    def get_like(db: Session, image_id: int, user_id: int) -> Optional[GalleryLike]:
        return (
            db.query(GalleryLike)
            .filter(GalleryLike.image_id == image_id, GalleryLike.user_id == user_id)
            .first()
        )

    @staticmethod
    def count_likes(db: Session, image_id: int) -> int:
        return db.query(GalleryLike).filter(GalleryLike.image_id == image_id).count()
