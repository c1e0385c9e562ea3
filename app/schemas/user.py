# app/schemas/user.py
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

# 可選 +，之後 10–15 位數字
PHONE_PATTERN = r"^\+?[0-9]{10,15}$"

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=25)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN)]


class UserCreate(BaseModel):
    name: Name
    email: EmailStr
    phone: Phone
    # 密碼原樣保留（不去空白），僅用於建立帳號，不會在輸出 schema 中出現
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def _strip_email(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: EmailStr
    phone: str
    created_at: datetime


class AuthorRead(BaseModel):
    """貼文內嵌的作者資訊（不含電話）"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: EmailStr


class UserResponse(BaseModel):
    success: bool = True
    user: UserRead
