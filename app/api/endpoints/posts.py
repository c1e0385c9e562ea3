# app/api/endpoints/posts.py
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.deps import get_current_user, get_current_user_id, get_owned_post
from app.core.errors import NotFoundError
from app.db.session import get_db
from app.models.posts import Post
from app.models.users import User
from app.schemas.post import (
    MessageResponse,
    PostCreate,
    PostPage,
    PostRead,
    PostResponse,
    PostUpdate,
)
from app.services import posts as post_service

router = APIRouter(tags=["posts"])


# === 公開讀取 ===
@router.get("/post", response_model=PostPage, summary="List posts (paginated)")
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PAGE_SIZE_DEFAULT, ge=1, le=settings.PAGE_SIZE_MAX),
    sort: Optional[str] = Query(None, description="例如 -createdAt、title"),
    author: Optional[str] = Query(None, description="只列出此作者的貼文"),
    db: AsyncSession = Depends(get_db),
):
    posts, total = await post_service.list_posts(db, page, limit, sort, author_id=author)
    return PostPage(
        posts=[PostRead.model_validate(p) for p in posts],
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if total else 0,
    )


@router.get("/post/{post_id}", response_model=PostResponse, summary="Get a single post")
async def read_post(post_id: str, db: AsyncSession = Depends(get_db)):
    post = await post_service.get_post(db, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return PostResponse(post=PostRead.model_validate(post))


# === 需要登入 ===
@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.create_post(db, current_user.id, payload)
    return PostResponse(post=PostRead.model_validate(post))


# === 需要登入 + 作者本人 ===
@router.put("/posts/{post_id}", response_model=PostResponse)
async def update_post(
    payload: PostUpdate,
    post: Post = Depends(get_owned_post),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    updated = await post_service.update_post(db, post.id, user_id, payload)
    return PostResponse(post=PostRead.model_validate(updated))


@router.delete("/posts/{post_id}", response_model=MessageResponse)
async def delete_post(
    post: Post = Depends(get_owned_post),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await post_service.delete_post(db, post.id, user_id)
    return MessageResponse(message="Post deleted")
