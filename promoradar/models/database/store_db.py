"""
门市数据库模型
"""

from sqlalchemy import Column, String, Integer, Float, Boolean, ForeignKey
from promoradar.core.database import Base


class StoreDB(Base):
    """门市表"""

    __tablename__ = "stores"

    store_id = Column(Integer, primary_key=True, autoincrement=True, comment="门市ID")
    brand_name = Column(String(100), ForeignKey("brands.brand_name"), nullable=False, index=True, comment="品牌代号")
    name = Column(String(200), nullable=False, comment="门市名称")
    address = Column(String(500), default="", comment="地址")
    lat = Column(Float, comment="纬度")
    lng = Column(Float, comment="经度")
    region = Column(String(100), index=True, comment="区域")
    is_active = Column(Boolean, nullable=False, default=True, comment="是否营业")

    __table_args__ = (
        {'comment': '门市信息表'}
    )
