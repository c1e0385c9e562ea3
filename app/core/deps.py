# app/core/deps.py
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from app.core.security import decode_access_token
from app.db.session import get_db
from app.models.posts import Post
from app.models.users import User
from app.services import posts as post_service
from app.services import users as user_service


# auto_error=False：缺 header 時由下方回傳統一格式的 401
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def get_current_user_id(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
) -> str:
    """
    Auth Gate：
      1️⃣ 讀 Authorization: Bearer <token>（缺少 / 格式錯誤 → 401）
      2️⃣ 驗證簽章與 exp（失敗 → 401）
      3️⃣ 把 user id 掛到 request.state
    不查 DB，純 stateless 驗證。
    """
    if not token:
        if request.headers.get("Authorization"):
            raise UnauthorizedError("Malformed authorization header")
        raise UnauthorizedError("Missing authorization header")

    try:
        payload = decode_access_token(token)
    except UnauthorizedError as exc:
        # 只記錄原因，不記錄 token 內容
        logger.debug("Rejected bearer token on {}: {}", request.url.path, exc.detail)
        raise

    user_id = str(payload["sub"])
    request.state.user_id = user_id
    return user_id


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    """需要完整 User 的路由使用；token 有效但帳號已不存在 → 401"""
    user = await user_service.get_user_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError("User no longer exists")
    return user


async def get_owned_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Post:
    """
    Ownership Gate（必須在 Auth Gate 之後）：
      - 找不到貼文 → 404
      - 作者不是呼叫者 → 403
    """
    post = await post_service.get_post(db, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if post.author_id != user_id:
        logger.info("Ownership denied: user {} on post {}", user_id, post_id)
        raise ForbiddenError("You are not the author of this post")
    return post
