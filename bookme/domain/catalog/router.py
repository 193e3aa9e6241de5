"""Service catalog router"""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_optional_user, require_admin
from ...database import get_db
from ...models import Role, User
from ...services.storage_service import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE, public_url, upload_file
from .schemas import ServiceCreate, ServiceEnvelope, ServiceListResponse, ServiceResponse, ServiceUpdate
from .service import CatalogService

router = APIRouter(prefix="/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


@router.get("", response_model=ServiceListResponse)
async def list_services(
    all: bool = Query(False),
    current_user: Optional[User] = Depends(get_optional_user),
    service: CatalogService = Depends(get_catalog_service),
):
    if all and (current_user is None or current_user.role != Role.ADMIN):
        raise HTTPException(status_code=403, detail="Sin permisos")
    services = service.list_services(include_inactive=all)
    return ServiceListResponse(services=[ServiceResponse.from_model(s) for s in services])


@router.get("/{service_id}", response_model=ServiceEnvelope)
async def get_service(service_id: int, service: CatalogService = Depends(get_catalog_service)):
    return ServiceEnvelope(service=ServiceResponse.from_model(service.get_service(service_id)))


@router.post("", response_model=ServiceEnvelope, status_code=201)
async def create_service(
    data: ServiceCreate,
    _admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return ServiceEnvelope(service=ServiceResponse.from_model(service.create_service(data)))


@router.patch("/{service_id}", response_model=ServiceEnvelope)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    _admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return ServiceEnvelope(service=ServiceResponse.from_model(service.update_service(service_id, data)))


@router.delete("/{service_id}")
async def deactivate_service(
    service_id: int,
    _admin: User = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    service.deactivate_service(service_id)
    return {"message": "Servicio desactivado exitosamente"}


@router.post("/upload-image")
async def upload_service_image(file: UploadFile = File(...), _admin: User = Depends(require_admin)):
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Tipo de archivo no permitido")
    content = await file.read()
    if len(content) > MAX_IMAGE_SIZE:
        raise HTTPException(status_code=400, detail="La imagen es demasiado grande")
    key = upload_file(content, file.filename, file.content_type, is_public=True)
    return {"url": public_url(key), "cloudStoragePath": key}
