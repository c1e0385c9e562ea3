from pydantic import BaseModel

from app.schemas.user import UserRead


class LoginRequest(BaseModel):
    # 登入時不驗 email 格式，錯誤一律回 401
    email: str
    password: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    user: UserRead
