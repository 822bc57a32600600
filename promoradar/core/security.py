"""
密码哈希与JWT令牌
"""

from datetime import timedelta
from typing import Any, Dict

import bcrypt
import jwt

from promoradar.core.config import settings
from promoradar.core.exceptions import AuthenticationException
from promoradar.core.timezone import utcnow


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # 库里存的不是合法的bcrypt哈希
        return False


def create_access_token(user_id: int, email: str, is_admin: bool) -> str:
    """签发访问令牌，有效期由 jwt_expire_minutes 决定"""
    now = utcnow()
    payload = {
        "userId": user_id,
        "email": email,
        "isAdmin": is_admin,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    校验并解析访问令牌

    Raises:
        AuthenticationException: 令牌过期、签名错误或缺少用户信息
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationException("登录已过期，请重新登录")
    except jwt.InvalidTokenError:
        raise AuthenticationException("无效的访问令牌")

    if not isinstance(payload.get("userId"), int):
        raise AuthenticationException("无效的访问令牌")
    return payload
