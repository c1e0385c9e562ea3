# app/api/endpoints/auth.py
from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_current_user
from app.core.errors import UnauthorizedError
from app.core.security import create_access_token
from app.db.session import get_db
from app.models.users import User
from app.schemas.auth import LoginRequest, LoginResponse
from app.schemas.user import UserCreate, UserRead, UserResponse
from app.services import users as user_service

router = APIRouter(tags=["auth"])


# === 註冊（開放） ===
@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await user_service.create_user(db, payload)
    return UserResponse(user=UserRead.model_validate(user))


# === 登入 ===
@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    使用者登入，簽發 Access Token。
    帳號不存在與密碼錯誤回同樣的 401，避免帳號探測。
    """
    user = await user_service.authenticate(db, payload.email, payload.password)
    if user is None:
        logger.info("Login failed for {}", payload.email.strip().lower())
        raise UnauthorizedError("Invalid credentials")

    token = create_access_token(user.id)
    logger.info("Login succeeded: {}", user.id)
    return LoginResponse(token=token, user=UserRead.model_validate(user))


# === 目前登入者 ===
@router.get("/me", response_model=UserResponse)
async def read_me(current_user: User = Depends(get_current_user)):
    return UserResponse(user=UserRead.model_validate(current_user))
