"""
品牌数据库模型
"""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from promoradar.core.database import Base
from promoradar.core.timezone import utcnow


class BrandDB(Base):
    """品牌表，主键为标准化后的品牌代号"""

    __tablename__ = "brands"

    brand_name = Column(String(100), primary_key=True, comment="品牌代号（去空白小写）")
    display_name = Column(String(200), nullable=False, comment="显示名称")
    category = Column(String(100), comment="主分类")
    logo_url = Column(String(500), comment="Logo地址")
    primary_color = Column(String(20), default="#4B5563", comment="主色")
    secondary_color = Column(String(20), comment="辅色")
    text_color = Column(String(20), default="#111827", comment="文字颜色")
    created_at = Column(DateTime(timezone=True), default=utcnow, comment="创建时间")

    __table_args__ = (
        {'comment': '品牌信息表'}
    )


class BrandCategoryDB(Base):
    """品牌分类表，一个品牌可属于多个分类"""

    __tablename__ = "brand_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    brand_name = Column(String(100), ForeignKey("brands.brand_name"), nullable=False, index=True, comment="品牌代号")
    category = Column(String(100), nullable=False, comment="分类")

    __table_args__ = (
        UniqueConstraint("brand_name", "category", name="uq_brand_category"),
        {'comment': '品牌分类表'}
    )


class AdminBrandDB(Base):
    """品牌管理员表"""

    __tablename__ = "admin_brands"

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True, comment="管理员用户ID")
    brand_name = Column(String(100), primary_key=True, comment="品牌代号")
    created_at = Column(DateTime(timezone=True), default=utcnow, comment="授权时间")

    __table_args__ = (
        {'comment': '品牌管理员表'}
    )
