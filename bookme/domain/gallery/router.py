"""Gallery router"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user, require_admin
from ...database import get_db
from ...models import Role, User
from ...services.storage_service import ALLOWED_IMAGE_TYPES, MAX_PHOTO_SIZE, delete_file, object_url, upload_file
from .schemas import (
    GalleryImageCreate,
    GalleryImageResponse,
    GalleryImageUpdate,
    GalleryLikeResult,
    GalleryLikeStatus,
    GalleryUploadResult,
)
from .service import GalleryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gallery", tags=["Gallery"])


def get_gallery_service(db: Session = Depends(get_db)) -> GalleryService:
    return GalleryService(db)


def to_response(image) -> GalleryImageResponse:
    return GalleryImageResponse.from_model(image, object_url(image.cloud_storage_path, image.is_public))


@router.get("", response_model=list[GalleryImageResponse])
async def list_gallery(
    includeInactive: bool = Query(False),
    gender: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    service: GalleryService = Depends(get_gallery_service),
):
    """Active images by display order; admins may include hidden ones"""
    include_inactive = includeInactive and current_user is not None and current_user.role == Role.ADMIN
    return [to_response(image) for image in service.list_images(include_inactive, gender, tag)]


@router.post("", response_model=GalleryImageResponse, status_code=201)
async def create_gallery_image(
    data: GalleryImageCreate,
    _admin: User = Depends(require_admin),
    service: GalleryService = Depends(get_gallery_service),
):
    return to_response(service.create_image(data))


@router.post("/upload-image", response_model=GalleryUploadResult)
async def upload_gallery_image(
    file: UploadFile = File(...),
    _admin: User = Depends(require_admin),
):
    """Store a photo publicly; the returned path is then passed to POST /gallery"""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="El archivo debe ser una imagen")
    content = await file.read()
    if len(content) > MAX_PHOTO_SIZE:
        raise HTTPException(status_code=400, detail="La imagen no debe superar los 5MB")

    key = upload_file(content, file.filename, file.content_type, is_public=True)
    return GalleryUploadResult(url=object_url(key, True), cloudStoragePath=key)


@router.put("/{image_id}", response_model=GalleryImageResponse)
async def update_gallery_image(
    image_id: int,
    data: GalleryImageUpdate,
    _admin: User = Depends(require_admin),
    service: GalleryService = Depends(get_gallery_service),
):
    return to_response(service.update_image(image_id, data))


@router.delete("/{image_id}")
async def delete_gallery_image(
    image_id: int,
    _admin: User = Depends(require_admin),
    service: GalleryService = Depends(get_gallery_service),
):
    key = service.delete_image(image_id)
    # a stale object in the bucket does not block the delete
    if not delete_file(key):
        logger.warning(f"⚠️ Gallery image {image_id} removed but {key} is still in storage")
    return {"success": True}


@router.post("/{image_id}/like", response_model=GalleryLikeResult)
async def toggle_gallery_like(
    image_id: int,
    current_user: User = Depends(get_current_user),
    service: GalleryService = Depends(get_gallery_service),
):
    liked, likes = service.toggle_like(image_id, current_user)
    return GalleryLikeResult(liked=liked, likes=likes, message="Like agregado" if liked else "Like eliminado")


@router.get("/{image_id}/like", response_model=GalleryLikeStatus)
async def gallery_like_status(
    image_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    service: GalleryService = Depends(get_gallery_service),
):
    return GalleryLikeStatus(liked=service.is_liked(image_id, current_user))
