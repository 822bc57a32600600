"""
用户数据库操作层
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promoradar.models.user import User
from promoradar.models.database.user_db import UserDB


class UserRepository:
    """用户数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> Optional[UserDB]:
        result = await self.db.execute(select(UserDB).where(UserDB.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[UserDB]:
        """邮箱大小写不敏感"""
        result = await self.db.execute(
            select(UserDB).where(UserDB.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def create(self, username: str, email: str, password_hash: str, is_admin: bool = False) -> UserDB:
        user = UserDB(
            username=username,
            email=email.strip().lower(),
            password_hash=password_hash,
            is_admin=is_admin
        )
        self.db.add(user)
        await self.db.flush()  # 获取生成的ID
        return user

    async def set_admin_flag(self, user: UserDB, is_admin: bool) -> UserDB:
        user.is_admin = is_admin
        await self.db.flush()
        return user

    def to_model(self, db_user: UserDB) -> User:
        return User(
            user_id=db_user.user_id,
            username=db_user.username,
            email=db_user.email,
            is_admin=bool(db_user.is_admin),
            created_at=db_user.created_at
        )
