"""
优惠活动数据库模型
"""

from sqlalchemy import Column, String, Integer, Text, Boolean, DateTime, ForeignKey
from promoradar.core.database import Base
from promoradar.core.timezone import utcnow


class PromotionDB(Base):
    """优惠活动表"""

    __tablename__ = "promotions"

    promo_id = Column(Integer, primary_key=True, autoincrement=True, comment="活动ID")
    brand_name = Column(String(100), ForeignKey("brands.brand_name"), nullable=False, index=True, comment="品牌代号")
    title = Column(String(200), nullable=False, comment="活动标题")
    description = Column(Text, default="", comment="活动描述")
    promo_type = Column(String(30), nullable=False, comment="优惠类型")
    event_tag = Column(String(30), nullable=False, comment="活动标签")

    # 有效期 [start, end)
    start_datetime = Column(DateTime(timezone=True), nullable=False, index=True, comment="开始时间")
    end_datetime = Column(DateTime(timezone=True), nullable=False, index=True, comment="结束时间")

    stacking_rule = Column(String(30), comment="叠加规则")
    need_membership = Column(Boolean, nullable=False, default=False, comment="是否需要会员")
    need_code = Column(Boolean, nullable=False, default=False, comment="是否需要优惠码")

    # 名额限制
    per_user_limit = Column(Integer, nullable=False, default=0, comment="单用户上限，0为不限")
    global_quota = Column(Integer, comment="总名额，空为不限")
    daily_quota = Column(Integer, comment="每日名额，空为不限")

    creator_id = Column(Integer, ForeignKey("users.user_id"), comment="创建人")
    status = Column(String(20), nullable=False, default="Draft", index=True, comment="活动状态")
    last_updated = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, comment="更新时间")

    __table_args__ = (
        {'comment': '优惠活动表'}
    )


class PromotionStoreExclusionDB(Base):
    """活动不适用门市表"""

    __tablename__ = "promotion_store_exclusions"

    promo_id = Column(Integer, ForeignKey("promotions.promo_id"), primary_key=True, comment="活动ID")
    store_id = Column(Integer, ForeignKey("stores.store_id"), primary_key=True, comment="门市ID")
    reason = Column(String(200), comment="不适用原因")

    __table_args__ = (
        {'comment': '活动不适用门市表'}
    )
