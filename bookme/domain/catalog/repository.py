"""Service catalog repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service


class CatalogRepository:
    @staticmethod
    def get_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def list_services(db: Session, include_inactive: bool = False) -> list[Service]:
        query = db.query(Service)
        if not include_inactive:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.price.asc(), Service.id.asc()).all()
