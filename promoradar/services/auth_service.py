"""
注册与登录
"""

import logging

from promoradar.core.exceptions import AuthenticationException, ConflictException
from promoradar.core.security import create_access_token, hash_password, verify_password
from promoradar.models.user import AuthResponse, LoginRequest, SignupRequest
from promoradar.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """认证服务"""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    def _auth_response(self, db_user) -> AuthResponse:
        user = self.user_repo.to_model(db_user)
        token = create_access_token(user.user_id, user.email, user.is_admin)
        return AuthResponse(token=token, user=user)

    async def signup(self, payload: SignupRequest) -> AuthResponse:
        if await self.user_repo.get_by_email(payload.email):
            raise ConflictException("该邮箱已注册")

        db_user = await self.user_repo.create(
            username=payload.username.strip(),
            email=payload.email,
            password_hash=hash_password(payload.password),
            is_admin=False
        )
        logger.info(f"用户注册成功 user_id={db_user.user_id}")
        return self._auth_response(db_user)

    async def login(self, payload: LoginRequest) -> AuthResponse:
        db_user = await self.user_repo.get_by_email(payload.email)
        if not db_user or not verify_password(payload.password, db_user.password_hash):
            raise AuthenticationException("邮箱或密码错误")
        return self._auth_response(db_user)
