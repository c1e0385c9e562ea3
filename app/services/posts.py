# app/services/posts.py
from typing import Dict, List, Optional, Tuple

from loguru import logger
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.models.posts import Post
from app.models.users import User  # noqa: F401  # 確保 relationship 能解析
from app.schemas.post import PostCreate, PostUpdate

# 對外排序鍵 → 欄位（camelCase 與 snake_case 皆可）
SORT_FIELDS: Dict[str, object] = {
    "createdAt": Post.created_at,
    "created_at": Post.created_at,
    "updatedAt": Post.updated_at,
    "updated_at": Post.updated_at,
    "title": Post.title,
}
DEFAULT_SORT = "-createdAt"


def parse_sort(sort: Optional[str]):
    """'-createdAt' → created_at DESC；未知欄位拋 ValidationError"""
    sort = (sort or DEFAULT_SORT).strip()
    descending = sort.startswith("-")
    key = sort.lstrip("-+")
    column = SORT_FIELDS.get(key)
    if column is None:
        raise ValidationError(f"Unsupported sort field: {key}")
    if descending:
        return [column.desc(), Post.id.desc()]
    return [column.asc(), Post.id.asc()]


async def list_posts(
    db: AsyncSession,
    page: int,
    limit: int,
    sort: Optional[str] = None,
    author_id: Optional[str] = None,
) -> Tuple[List[Post], int]:
    order_by = parse_sort(sort)

    stmt = select(Post).options(selectinload(Post.author))
    count_stmt = select(func.count()).select_from(Post)
    if author_id:
        stmt = stmt.where(Post.author_id == author_id)
        count_stmt = count_stmt.where(Post.author_id == author_id)

    total = (await db.execute(count_stmt)).scalar_one()
    result = await db.execute(
        stmt.order_by(*order_by).offset((page - 1) * limit).limit(limit)
    )
    return list(result.scalars().all()), int(total)


async def get_post(db: AsyncSession, post_id: str) -> Optional[Post]:
    return await db.get(Post, post_id, options=[selectinload(Post.author)])


async def _reload(db: AsyncSession, post_id: str) -> Optional[Post]:
    return await db.get(
        Post, post_id, options=[selectinload(Post.author)], populate_existing=True
    )


async def create_post(db: AsyncSession, author_id: str, payload: PostCreate) -> Post:
    post = Post(title=payload.title, content=payload.content, author_id=author_id)
    db.add(post)
    await db.commit()
    logger.info("Post created: {} by {}", post.id, author_id)
    return await _reload(db, post.id)


async def _raise_write_miss(db: AsyncSession, post_id: str) -> None:
    """條件式寫入沒有命中：重新讀取判斷是 404 還是 403"""
    exists = (await db.execute(select(Post.id).where(Post.id == post_id))).scalar_one_or_none()
    if exists is None:
        raise NotFoundError("Post not found")
    raise ForbiddenError("You are not the author of this post")


async def update_post(db: AsyncSession, post_id: str, author_id: str, payload: PostUpdate) -> Post:
    """
    單一條件式寫入（WHERE id AND author_id），
    ownership 檢查與更新之間不會有競態。
    """
    values = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not values:
        raise ValidationError("Nothing to update")

    stmt = (
        update(Post)
        .where(Post.id == post_id, Post.author_id == author_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        await db.rollback()
        await _raise_write_miss(db, post_id)
    await db.commit()
    logger.info("Post updated: {} by {}", post_id, author_id)
    return await _reload(db, post_id)


async def delete_post(db: AsyncSession, post_id: str, author_id: str) -> None:
    stmt = (
        delete(Post)
        .where(Post.id == post_id, Post.author_id == author_id)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    if result.rowcount == 0:
        await db.rollback()
        await _raise_write_miss(db, post_id)
    await db.commit()
    logger.info("Post deleted: {} by {}", post_id, author_id)
