import logging
import uuid
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import configs
from vidtube.core.container import Container
from vidtube.core.db import get_db
from vidtube.core.dependencies import get_current_user
from vidtube.core.exceptions import ApiError
from vidtube.models.orm.user import User
from vidtube.repository import user_repo
from vidtube.schemas.base_schema import ApiResponse
from vidtube.schemas.user_schema import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    UpdateAccountRequest,
)
from vidtube.services.storage_service import StorageService, to_media_ref
from vidtube.services.upload_service import save_upload_to_temp
from vidtube.utils.jwt import decode_refresh_token

logger = logging.getLogger(__name__)

router = APIRouter()

PRIVATE_FIELDS = ("password", "refreshToken")


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    for key, value in (("accessToken", access_token), ("refreshToken", refresh_token)):
        response.set_cookie(key, value, httponly=True, secure=configs.COOKIE_SECURE)


def _clear_auth_cookies(response: Response) -> None:
    for key in ("accessToken", "refreshToken"):
        response.delete_cookie(key, httponly=True, secure=configs.COOKIE_SECURE)


async def _issue_tokens(db: AsyncSession, user: User) -> tuple[str, str]:
    """Sign a fresh token pair and persist the refresh token for rotation."""
    access_token = user.generate_access_token()
    refresh_token = user.generate_refresh_token()

    user.refresh_token = refresh_token
    await user_repo.save_user(db, user)

    return access_token, refresh_token


@router.post("/register", status_code=status.HTTP_201_CREATED)
@inject
async def register_user(
    fullname: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    coverImage: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(Provide[Container.storage_service]),
):
    logger.info("[REGISTER] username=%s email=%s", username, email)

    if any(not field or not field.strip() for field in (fullname, email, username, password)):
        raise ApiError(400, "All fields are required")

    existing = await user_repo.get_user_by_username_or_email(db, username=username, email=email)
    if existing:
        raise ApiError(409, "User with email or username already exists")

    if avatar is None:
        raise ApiError(400, "Avatar file is required")

    uploaded_avatar = await storage.upload(await save_upload_to_temp(avatar))
    uploaded_cover = await storage.upload(await save_upload_to_temp(coverImage))

    if not uploaded_avatar:
        raise ApiError(500, "Something went wrong while uploading the avatar")

    try:
        user = await user_repo.create_user(
            db,
            username=username,
            email=email,
            fullname=fullname,
            password=password,
            avatar=to_media_ref(uploaded_avatar),
            cover_image=to_media_ref(uploaded_cover) if uploaded_cover else None,
        )
    except IntegrityError:
        # lost a race with a concurrent registration of the same username or email
        await db.rollback()
        logger.warning("[REGISTER] duplicate on insert username=%s email=%s", username, email)
        raise ApiError(409, "User with email or username already exists")

    return ApiResponse(
        statusCode=status.HTTP_201_CREATED,
        data=user.remove_fields(PRIVATE_FIELDS),
        message="User registered successfully",
    )


@router.post("/login")
async def login_user(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    if not payload.username and not payload.email:
        raise ApiError(400, "username or email is required")

    user = await user_repo.get_user_by_username_or_email(db, username=payload.username, email=payload.email)
    if not user:
        raise ApiError(404, "User does not exist")

    if not user.is_password_correct(payload.password):
        raise ApiError(401, "Invalid user credentials")

    access_token, refresh_token = await _issue_tokens(db, user)
    _set_auth_cookies(response, access_token, refresh_token)
    logger.info("[LOGIN] user_id=%s", user.id)

    return ApiResponse(
        statusCode=200,
        data={
            "user": user.remove_fields(PRIVATE_FIELDS),
            "accessToken": access_token,
            "refreshToken": refresh_token,
        },
        message="User logged in successfully",
    )


@router.post("/logout")
async def logout_user(
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    current_user.refresh_token = None
    await user_repo.save_user(db, current_user)
    _clear_auth_cookies(response)

    return ApiResponse(statusCode=200, data={}, message="User logged out")


@router.post("/refresh-token")
async def refresh_access_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    incoming = request.cookies.get("refreshToken") or (payload.refreshToken if payload else None)
    if not incoming:
        raise ApiError(401, "Unauthorized request")

    try:
        decoded = decode_refresh_token(incoming)
        user_id = uuid.UUID(str(decoded.get("_id")))
    except (JWTError, ValueError):
        raise ApiError(401, "Invalid refresh token")

    user = await user_repo.get_user_by_id(db, user_id)
    if not user:
        raise ApiError(401, "Invalid refresh token")

    if incoming != user.refresh_token:
        raise ApiError(401, "Refresh token is expired or used")

    access_token, refresh_token = await _issue_tokens(db, user)
    _set_auth_cookies(response, access_token, refresh_token)

    return ApiResponse(
        statusCode=200,
        data={"accessToken": access_token, "refreshToken": refresh_token},
        message="Access token refreshed",
    )


@router.post("/change-password")
async def change_current_password(
    payload: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    logger.info("[CHANGE_PASSWORD] user_id=%s", current_user.id)

    if not current_user.is_password_correct(payload.oldPassword):
        raise ApiError(400, "Invalid old password")

    current_user.password = payload.newPassword
    await user_repo.save_user(db, current_user)

    return ApiResponse(statusCode=200, data={}, message="Password changed successfully")


@router.get("/current-user")
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    return ApiResponse(
        statusCode=200,
        data=current_user.remove_fields(PRIVATE_FIELDS),
        message="Current user fetched successfully",
    )


@router.patch("/update-account")
async def update_account_details(
    payload: UpdateAccountRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not payload.fullname or not payload.email:
        raise ApiError(400, "All fields are required")

    owner = await user_repo.get_user_by_email(db, payload.email)
    if owner and owner.id != current_user.id:
        raise ApiError(409, "Email is already in use")

    current_user.fullname = payload.fullname
    current_user.email = payload.email
    await user_repo.save_user(db, current_user)

    return ApiResponse(
        statusCode=200,
        data=current_user.remove_fields(PRIVATE_FIELDS),
        message="Account details updated successfully",
    )


async def _replace_user_image(
    db: AsyncSession,
    storage: StorageService,
    user: User,
    file: Optional[UploadFile],
    attribute: str,
    label: str,
) -> User:
    local_path = await save_upload_to_temp(file)
    if not local_path:
        raise ApiError(400, f"{label} file is missing")

    uploaded = await storage.upload(local_path)
    if not uploaded:
        raise ApiError(500, f"Error while uploading the {label.lower()}")

    old_ref = getattr(user, attribute) or {}
    setattr(user, attribute, to_media_ref(uploaded))
    await user_repo.save_user(db, user)

    if old_ref.get("publicId") and not await storage.delete(old_ref["publicId"]):
        logger.warning("[%s] old asset %s was not removed", label.upper(), old_ref["publicId"])

    return user


@router.patch("/avatar")
@inject
async def update_user_avatar(
    avatar: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(Provide[Container.storage_service]),
):
    user = await _replace_user_image(db, storage, current_user, avatar, "avatar", "Avatar")
    return ApiResponse(
        statusCode=200,
        data=user.remove_fields(PRIVATE_FIELDS),
        message="Avatar updated successfully",
    )


@router.patch("/cover-image")
@inject
async def update_user_cover_image(
    coverImage: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: StorageService = Depends(Provide[Container.storage_service]),
):
    user = await _replace_user_image(db, storage, current_user, coverImage, "cover_image", "Cover image")
    return ApiResponse(
        statusCode=200,
        data=user.remove_fields(PRIVATE_FIELDS),
        message="Cover image updated successfully",
    )


@router.get("/c/{username}")
async def get_user_channel_profile(
    username: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    channel = await user_repo.get_channel_profile(db, username, viewer_id=current_user.id)
    if not channel:
        raise ApiError(404, "Channel does not exist")

    return ApiResponse(statusCode=200, data=channel, message="User channel fetched successfully")


@router.get("/history")
async def get_watch_history(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    history = await user_repo.get_watch_history(db, current_user.id)
    return ApiResponse(statusCode=200, data=history, message="Watch history fetched successfully")
