"""Service catalog - the haircuts and treatments clients can book"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Service
from .repository import CatalogRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)

FIELD_MAP = {
    "name": "name",
    "description": "description",
    "price": "price",
    "duration": "duration",
    "image": "image",
    "gender": "gender",
    "isActive": "is_active",
}


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    def list_services(self, include_inactive: bool = False) -> list[Service]:
        return self.repo.list_services(self.db, include_inactive)

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_by_id(self.db, service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Servicio no encontrado")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        service = Service(
            name=data.name,
            description=data.description,
            price=data.price,
            duration=data.duration,
            image=data.image,
            gender=data.gender,
        )
        self.db.add(service)
        self.db.commit()
        self.db.refresh(service)
        logger.info(f"✅ Service {service.id} '{service.name}' created")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.get_service(service_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if field == "name" and not (value or "").strip():
                raise HTTPException(status_code=400, detail="El nombre es requerido")
            setattr(service, FIELD_MAP[field], value)
        self.db.commit()
        self.db.refresh(service)
        return service

    def deactivate_service(self, service_id: int) -> Service:
        service = self.get_service(service_id)
        service.is_active = False
        self.db.commit()
        self.db.refresh(service)
        logger.info(f"🗑️ Service {service.id} deactivated")
        return service
