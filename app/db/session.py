# app/db/session.py
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.config import settings

# ---- Engine ----
DATABASE_URL = settings.DATABASE_URL
echo_flag = str(getattr(settings, "DB_ECHO", "false")).lower() in {"1", "true", "yes"}

if DATABASE_URL.startswith("sqlite"):
    # SQLite（測試）不共用連線，避免跨事件圈重用
    engine = create_async_engine(DATABASE_URL, echo=echo_flag, poolclass=NullPool)
else:
    # pool_pre_ping 讓連線池自我檢查
    engine = create_async_engine(DATABASE_URL, echo=echo_flag, pool_pre_ping=True)

# ---- Session factory ----
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---- Dependency ----
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 依賴：每個請求一個 AsyncSession，完成後總是關閉。
    """
    async with AsyncSessionLocal() as session:
        yield session
