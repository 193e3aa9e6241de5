"""Social feed router - posts and comments"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user, require_admin
from ...database import get_db
from ...models import User
from ...services.storage_service import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE, public_url, upload_file
from .schemas import (
    CommentCreate,
    CommentEnvelope,
    CommentListResponse,
    CommentResponse,
    LikeResult,
    PostEnvelope,
    PostListResponse,
    PostModeration,
    PostResponse,
    PostUpdate,
)
from .service import SocialService

router = APIRouter(prefix="/posts", tags=["Social"])
comments_router = APIRouter(prefix="/comments", tags=["Social"])


def get_social_service(db: Session = Depends(get_db)) -> SocialService:
    return SocialService(db)


def _viewer_id(user: Optional[User]) -> Optional[int]:
    return user.id if user else None


@router.get("", response_model=PostListResponse)
async def list_posts(
    status: Optional[str] = Query(None),
    mine: bool = Query(False),
    current_user: Optional[User] = Depends(get_optional_user),
    service: SocialService = Depends(get_social_service),
):
    posts = service.list_posts(current_user, status, mine)
    return PostListResponse(posts=[PostResponse.from_model(p, _viewer_id(current_user)) for p in posts])


@router.get("/{post_id}", response_model=PostEnvelope)
async def get_post(
    post_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    service: SocialService = Depends(get_social_service),
):
    post = service.view_post(post_id, current_user)
    return PostEnvelope(post=PostResponse.from_model(post, _viewer_id(current_user)))


@router.post("", response_model=PostEnvelope, status_code=201)
async def create_post(
    image: UploadFile = File(...),
    caption: Optional[str] = Form(None),
    hashtags: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    """Upload an image post; clients' posts wait for moderation"""
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="Tipo de archivo no permitido")
    content = await image.read()
    if len(content) > MAX_IMAGE_SIZE:
        raise HTTPException(status_code=400, detail="La imagen es demasiado grande")

    key = upload_file(content, image.filename, image.content_type, is_public=True)
    post = service.create_post(current_user, key, public_url(key), caption, hashtags)
    return PostEnvelope(post=PostResponse.from_model(post, current_user.id))


@router.patch("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: int,
    data: PostUpdate,
    current_user: User = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    post = service.update_post(post_id, current_user, data)
    return PostEnvelope(post=PostResponse.from_model(post, current_user.id))


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    current_user: User = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    service.delete_post(post_id, current_user)
    return {"message": "Publicación eliminada exitosamente"}


@router.patch("/{post_id}/approve", response_model=PostEnvelope)
async def moderate_post(
    post_id: int,
    data: PostModeration,
    admin: User = Depends(require_admin),
    service: SocialService = Depends(get_social_service),
):
    post = service.moderate_post(post_id, admin, data.action)
    return PostEnvelope(post=PostResponse.from_model(post, admin.id))


@router.post("/{post_id}/like", response_model=LikeResult)
async def toggle_like(
    post_id: int,
    current_user: User = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    liked, count = service.toggle_like(post_id, current_user)
    return LikeResult(liked=liked, likesCount=count)


@comments_router.get("", response_model=CommentListResponse)
async def list_comments(
    postId: Optional[int] = Query(None),
    service: SocialService = Depends(get_social_service),
):
    return CommentListResponse(comments=[CommentResponse.from_model(c) for c in service.list_comments(postId)])


@comments_router.post("", response_model=CommentEnvelope, status_code=201)
async def create_comment(
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    service: SocialService = Depends(get_social_service),
):
    return CommentEnvelope(comment=CommentResponse.from_model(service.create_comment(current_user, data)))
