"""
领取记录数据库模型
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index
from promoradar.core.database import Base
from promoradar.core.timezone import utcnow


class PromotionUsageDB(Base):
    """
    领取记录表
    每次领取插入一行，次数和最近领取时间都由聚合得出
    """

    __tablename__ = "promotion_usage"

    usage_id = Column(Integer, primary_key=True, autoincrement=True, comment="记录ID")
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, comment="用户ID")
    promo_id = Column(Integer, ForeignKey("promotions.promo_id"), nullable=False, comment="活动ID")
    used_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, comment="领取时间（UTC）")

    __table_args__ = (
        Index("ix_promotion_usage_promo_used_at", "promo_id", "used_at"),
        Index("ix_promotion_usage_user_promo", "user_id", "promo_id"),
        {'comment': '活动领取记录表'}
    )
