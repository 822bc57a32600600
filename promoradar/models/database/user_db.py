"""
用户与收藏数据库模型
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey
from promoradar.core.database import Base
from promoradar.core.timezone import utcnow


class UserDB(Base):
    """用户表"""

    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True, comment="用户ID")
    username = Column(String(50), nullable=False, comment="用户名")
    email = Column(String(255), nullable=False, unique=True, index=True, comment="邮箱（小写保存）")
    password_hash = Column(String(255), nullable=False, comment="bcrypt密码哈希")
    is_admin = Column(Boolean, nullable=False, default=False, comment="是否为品牌管理员")
    created_at = Column(DateTime(timezone=True), default=utcnow, comment="创建时间")

    __table_args__ = (
        {'comment': '用户表'}
    )


class FavoriteBrandDB(Base):
    """品牌关注表"""

    __tablename__ = "favorite_brands"

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True, comment="用户ID")
    brand_name = Column(String(100), primary_key=True, comment="品牌名称")
    created_at = Column(DateTime(timezone=True), default=utcnow, comment="关注时间")

    __table_args__ = (
        {'comment': '用户关注品牌表'}
    )


class FavoritePromotionDB(Base):
    """活动收藏表"""

    __tablename__ = "favorite_promotions"

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True, comment="用户ID")
    promo_id = Column(Integer, ForeignKey("promotions.promo_id"), primary_key=True, comment="活动ID")
    created_at = Column(DateTime(timezone=True), default=utcnow, comment="收藏时间")

    __table_args__ = (
        {'comment': '用户收藏活动表'}
    )
