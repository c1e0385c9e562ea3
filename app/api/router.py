# app/api/router.py
from fastapi import APIRouter

from .endpoints import auth, health, posts

api_router = APIRouter()

# 健康檢查（/health, /readyz）
api_router.include_router(health.router)

# 註冊 / 登入
api_router.include_router(auth.router, prefix="/auth")

# 貼文：讀取走 /api/post，寫入走 /api/posts
api_router.include_router(posts.router, prefix="/api")
