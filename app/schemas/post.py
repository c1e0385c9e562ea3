# app/schemas/post.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.user import AuthorRead


class PostCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=25)
    content: str = Field(..., min_length=1)


class PostUpdate(BaseModel):
    # 作者不可變更：未列出的欄位（包含 author）一律忽略
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=25)
    content: Optional[str] = Field(None, min_length=1)


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    author: AuthorRead
    created_at: datetime
    updated_at: datetime


class PostResponse(BaseModel):
    success: bool = True
    post: PostRead


class PostPage(BaseModel):
    success: bool = True
    posts: List[PostRead]
    page: int
    limit: int
    total: int
    total_pages: int


class MessageResponse(BaseModel):
    success: bool = True
    message: str
