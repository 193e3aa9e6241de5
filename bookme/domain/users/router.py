"""Auth and profile router"""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...services.storage_service import ALLOWED_IMAGE_TYPES, MAX_PHOTO_SIZE, public_url, upload_file
from .schemas import (
    AvatarResponse,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from .service import UserService, issue_token

router = APIRouter(prefix="/auth", tags=["Auth"])
profile_router = APIRouter(prefix="/user", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(data: SignupRequest, service: UserService = Depends(get_user_service)):
    """Register a client account and sign it in"""
    user = service.signup(data)
    return TokenResponse(accessToken=issue_token(user), user=UserResponse.from_model(user))


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, service: UserService = Depends(get_user_service)):
    user, token = service.login(data)
    return TokenResponse(accessToken=token, user=UserResponse.from_model(user))


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse.from_model(current_user)


@profile_router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_model(service.update_profile(current_user, data))


@profile_router.put("/profile/password")
async def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    service.change_password(current_user, data)
    return {"message": "Contraseña actualizada exitosamente"}


@profile_router.post("/profile/image", response_model=AvatarResponse)
async def upload_avatar(
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Replace the account's avatar with a public upload"""
    if image is None:
        raise HTTPException(status_code=400, detail="No se proporcionó ninguna imagen")
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail="El archivo debe ser una imagen")
    content = await image.read()
    if len(content) > MAX_PHOTO_SIZE:
        raise HTTPException(status_code=400, detail="La imagen no debe superar los 5MB")

    key = upload_file(content, image.filename, image.content_type, is_public=True)
    user = service.set_avatar(current_user, public_url(key))
    return AvatarResponse(imageUrl=user.image)
