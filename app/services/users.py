# app/services/users.py
from typing import Optional

from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.errors import ConflictError
from app.core.security import hash_password, verify_password
from app.models.users import User
from app.schemas.user import UserCreate


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    return await db.get(User, user_id)


def _conflict_for(existing: User, payload: UserCreate) -> ConflictError:
    if existing.email == payload.email:
        return ConflictError("Email already exists")
    return ConflictError("Phone already exists")


async def create_user(db: AsyncSession, payload: UserCreate) -> User:
    """
    建立使用者（密碼先雜湊）。
    email / phone 重複時拋 ConflictError；同時註冊的競態由 DB unique constraint 擋下。
    """
    result = await db.execute(
        select(User).where(or_(User.email == payload.email, User.phone == payload.phone))
    )
    existing = result.scalars().first()
    if existing is not None:
        raise _conflict_for(existing, payload)

    # bcrypt 很慢，丟到 threadpool 只阻塞這個請求
    password_hash = await run_in_threadpool(hash_password, payload.password)
    user = User(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        password_hash=password_hash,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Signup conflict on commit for {}", payload.email)
        raise ConflictError("Email or phone already exists")
    await db.refresh(user)
    logger.info("User created: {}", user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """帳密正確回傳 User，否則 None（不區分帳號不存在或密碼錯誤）"""
    user = await get_user_by_email(db, email)
    if user is None:
        return None
    ok = await run_in_threadpool(verify_password, password, user.password_hash)
    return user if ok else None
