# app/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.core.errors import InvalidTokenError, TokenExpiredError

# === Password Hashing ===
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",
    # 若密碼超過 72 bytes，不拋錯
    bcrypt__truncate_error=False,
)

ACCESS_TOKEN_TYPE = "access"


BCRYPT_MAX_BYTES = 72


def _sanitize_password(p: str) -> bytes:
    # bcrypt 只吃前 72 bytes（UTF-8 編碼後），多位元組字元以 byte 計
    return p.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    return pwd_context.hash(_sanitize_password(plain))


def verify_password(plain: str, password_hash: str) -> bool:
    if not plain or not password_hash:
        return False
    try:
        return pwd_context.verify(_sanitize_password(plain), password_hash)
    except ValueError:
        # 資料庫內的 hash 格式無法辨識
        return False


# === JWT Helpers ===
def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _exp(minutes: int) -> datetime:
    return _now_utc() + timedelta(minutes=minutes)


def _encode(claims: Dict[str, Any], key: str) -> str:
    return jwt.encode(claims, key, algorithm=settings.JWT_ALGORITHM)


def _decode(token: str, key: str) -> Dict[str, Any]:
    return jwt.decode(token, key, algorithms=[settings.JWT_ALGORITHM])


# === Issue ===
def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """
    簽發 Access Token（sub, type=access, iat, exp）。
    expires_minutes 未指定時使用 ACCESS_TOKEN_EXPIRE_MINUTES；可傳負值產生已過期 token。
    """
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    claims = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "iat": int(_now_utc().timestamp()),
        "exp": _exp(minutes),
    }
    return _encode(claims, settings.SECRET_KEY)


# === Verify / Decode ===
def decode_access_token(token: str) -> Dict[str, Any]:
    """
    驗證簽章與 exp，回傳 claims（至少含 sub）。
      - 過期：TokenExpiredError
      - 簽章錯誤 / 格式錯誤 / type 不符 / 缺 sub：InvalidTokenError
    """
    if not token:
        raise InvalidTokenError()
    try:
        payload = _decode(token, settings.SECRET_KEY)
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError("Invalid token type")
    if not payload.get("sub"):
        raise InvalidTokenError("Invalid token payload")
    return payload
